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

""" Descriptions of hosts and resources

Both are immutable snapshots: the resolver only reads them, and the same
instances can be shared by concurrent resolve calls.

.. autoclass:: HostFacts
    :members:

.. autoclass:: ResourceDeclaration
    :members:
"""

__all__ = ['HostFacts', 'ResourceDeclaration']

import collections
import types
from converge.util.config import load_yaml

IDENTITY_KEYS = ('os', 'platform', 'platform_family', 'platform_version')

_HostFactsBase = collections.namedtuple(
    '_HostFactsBase', IDENTITY_KEYS + ('attributes',))

class HostFacts(_HostFactsBase):
    """
    Platform identity of a host, as gathered by the node inventory.

    Besides the identity fields, arbitrary attributes (e.g. ``kernel``,
    ``machine``) can be looked up with ``facts[key]``, which is how
    capability predicates should access them.

    :param str os: Operating system (``linux``, ``freebsd``, ``windows``...).
    :param str platform: The distribution (``ubuntu``, ``centos``...).
    :param str platform_family: Family of the distribution (``debian``,
        ``rhel``...).
    :param str platform_version: Version of the distribution, as a string.
    :param dict attributes: Any other facts.
    """
    __slots__ = ()

    def __new__(cls, os, platform=None, platform_family=None,
                platform_version=None, attributes=None):
        return super(HostFacts, cls).__new__(
            cls, os, platform, platform_family,
            None if platform_version is None else str(platform_version),
            types.MappingProxyType(dict(attributes or dict())))

    @classmethod
    def from_dict(cls, data):
        """
        Create facts from an inventory dictionary. Keys other than the
        identity keys become attributes.
        """
        attributes = dict((k, v) for k, v in data.items()
                          if k not in IDENTITY_KEYS)
        return cls(attributes=attributes,
                   **dict((k, data.get(k)) for k in IDENTITY_KEYS))

    @classmethod
    def load(cls, source):
        """Create facts from a YAML inventory document."""
        return cls.from_dict(load_yaml(source) or dict())

    def __getitem__(self, key):
        if isinstance(key, (int, slice)):
            return super(HostFacts, self).__getitem__(key)
        if key in IDENTITY_KEYS:
            return getattr(self, key)
        return self.attributes[key]

    def get(self, key, default=None):
        try:
            value = self[key]
        except KeyError:
            return default
        return default if value is None else value

    def to_dict(self):
        data = dict(self.attributes)
        data.update((k, getattr(self, k)) for k in IDENTITY_KEYS)
        return data

    def __repr__(self):
        return 'HostFacts({0}/{1}/{2} {3})'.format(
            self.os, self.platform_family, self.platform,
            self.platform_version)

class ResourceDeclaration(object):
    """
    A declared resource, as seen by the resolver.

    :param str resource_type: The type tag of the resource (``service``,
        ``file``, ``package``...).
    :param str name: The name of the resource.
    :param str action: The default action.
    :param provider: Explicit provider override. Either a
        :class:`~converge.provider.Provider` sub-class, or the identifier of
        a registered provider variant.
    :param run_context: Opaque context handed over to the provider when it
        is constructed.
    :param dict attributes: Other resource attributes. ``service_name`` is
        used by service resources; it defaults to ``name``.
    """
    __slots__ = ('_resource_type', '_name', '_action', '_provider',
                 '_run_context', '_attributes')

    def __init__(self, resource_type, name, action=None, provider=None,
                 run_context=None, attributes=None):
        self._resource_type = resource_type
        self._name = name
        self._action = action
        self._provider = provider
        self._run_context = run_context
        self._attributes = types.MappingProxyType(dict(attributes or dict()))

    @property
    def resource_type(self):
        return self._resource_type
    @property
    def name(self):
        return self._name
    @property
    def action(self):
        return self._action
    @property
    def provider(self):
        return self._provider
    @property
    def run_context(self):
        return self._run_context
    @property
    def attributes(self):
        return self._attributes
    @property
    def service_name(self):
        return self._attributes.get('service_name', self._name)

    def __str__(self):
        return '{0}[{1}]'.format(self.resource_type, self.name)

    def __repr__(self):
        return '<ResourceDeclaration {0} action={1!r} provider={2!r}>'.format(
            self, self.action, self.provider)
