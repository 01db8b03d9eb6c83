### Copyright 2014, MTA SZTAKI, www.sztaki.hu
###
### Licensed under the Apache License, Version 2.0 (the "License");
### you may not use this file except in compliance with the License.
### You may obtain a copy of the License at
###
###    http://www.apache.org/licenses/LICENSE-2.0
###
### Unless required by applicable law or agreed to in writing, software
### distributed under the License is distributed on an "AS IS" BASIS,
### WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
### See the License for the specific language governing permissions and
### limitations under the License.

""" Legacy platform table

The last resort of resolution for resource types that are not forced to be
resolved dynamically. The table is data (``legacy_platforms.yaml``): adding
a platform or a version threshold does not require a code change.

Example::

    platforms:
        debian:
            default:
                service: service.debian
            ">= 6.0":
                service: service.insserv
"""

__all__ = ['LegacyPlatformTable']

import logging
from converge.exceptions import ConfigurationError
from converge.platform.version import VersionConstraint, PlatformVersion
from converge.util import rel_to_file
from converge.util.config import load_yaml

log = logging.getLogger('converge.platform.legacy')

DEFAULT_TABLE = rel_to_file('legacy_platforms.yaml', __file__)

class PlatformEntry(object):
    """
    The mappings of a single platform: a default mapping, and an ordered
    list of ``(constraint, mapping)`` rules.
    """
    def __init__(self, name, data):
        self.name = name
        if not isinstance(data, dict):
            raise ConfigurationError(
                'Invalid legacy platform entry', name, data)
        self.default = dict(data.get('default') or dict())
        self.rules = [(VersionConstraint(k), dict(v or dict()))
                      for k, v in data.items() if k != 'default']

    def mapping_for(self, version):
        """
        The mapping applicable to the given platform version; rules matching
        later override earlier ones.
        """
        mapping = dict(self.default)
        for constraint, rule in self.rules:
            if constraint.matches(version):
                log.debug('Platform %r version %s matches %s',
                          self.name, version, constraint)
                mapping.update(rule)
        return mapping

class LegacyPlatformTable(object):
    """
    Platform and version indexed mapping from resource type to provider
    variant identifier.

    :param dict table: The parsed table, see :meth:`load`.
    """
    def __init__(self, table):
        table = table or dict()
        self.default = dict(table.get('default') or dict())
        self.platforms = dict(
            (name, PlatformEntry(name, data))
            for name, data in (table.get('platforms') or dict()).items())

    @classmethod
    def load(cls, source=None):
        """
        Load the table from YAML.

        :param source: A file name or stream; by default the packaged table.
        """
        source = source or DEFAULT_TABLE
        log.debug('Loading legacy platform table from %r', source)
        return cls(load_yaml(source))

    def mapping_for(self, facts):
        """
        The complete resource type to provider mapping of a host.

        :type facts: :class:`~converge.facts.HostFacts`
        """
        mapping = dict(self.default)
        try:
            version = PlatformVersion(facts.platform_version)
        except ValueError:
            version = None

        for key in (facts.platform_family, facts.platform):
            entry = self.platforms.get(key)
            if entry is not None:
                mapping.update(entry.mapping_for(version))
        return mapping

    def provider_for(self, resource_type, facts):
        """
        Look up the provider of a resource type.

        :return: The identifier of the provider variant, or :data:`None` if
            the table has no mapping.
        """
        provider_id = self.mapping_for(facts).get(resource_type)
        log.debug('Legacy provider for %r on %r: %r',
                  resource_type, facts, provider_id)
        return provider_id

    def provider_ids(self):
        """Every provider identifier the table refers to."""
        ids = set(self.default.values())
        for entry in self.platforms.values():
            ids.update(entry.default.values())
            for _, rule in entry.rules:
                ids.update(rule.values())
        return ids
