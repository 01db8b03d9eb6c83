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

""" YAML based configuration

A configuration is a YAML mapping whose top-level keys are accessible as
attributes::

    cfg = DefaultYAMLConfig('resolver.yaml')
    logging.config.dictConfig(cfg.logging)
    timeout = cfg.probe['command_timeout']

:class:`DefaultYAMLConfig` merges the given configuration over the packaged
defaults (``default.yaml``), so a configuration file needs to contain only
the settings it changes.
"""

__all__ = ['load_yaml', 'YAMLConfig', 'DefaultYAMLConfig']

import io
import logging
from ruamel.yaml import YAML, YAMLError
from converge.exceptions import ConfigurationError
from converge.util import rel_to_file, deep_merge

log = logging.getLogger('converge.util.config')

DEFAULT_CONFIG = rel_to_file('default.yaml')

def load_yaml(source):
    """
    Parse a YAML document.

    :param source: A file name, an open stream, or the YAML text itself
        (a string containing a newline).
    :raise ConfigurationError: if the document cannot be read or parsed.
    """
    yaml = YAML(typ='safe')
    try:
        if hasattr(source, 'read'):
            return yaml.load(source)
        elif '\n' in source:
            return yaml.load(io.StringIO(source))
        with open(source) as f:
            return yaml.load(f)
    except (IOError, OSError) as ex:
        raise ConfigurationError('Cannot read YAML file', source, str(ex))
    except YAMLError as ex:
        raise ConfigurationError('Invalid YAML document', str(ex))

class YAMLConfig(object):
    """
    Configuration read from YAML.

    :param source: See :func:`load_yaml`. If :data:`None`, only the defaults
        are used.
    :param dict defaults: Settings used where ``source`` does not specify
        them.
    """
    def __init__(self, source=None, defaults=None):
        data = load_yaml(source) if source is not None else None
        if data is None:
            data = dict()
        if not isinstance(data, dict):
            raise ConfigurationError(
                'Configuration must be a mapping', type(data).__name__)
        self._data = deep_merge(defaults or dict(), data)

    def __getattr__(self, key):
        if key.startswith('_'):
            raise AttributeError(key)
        try:
            return self._data[key]
        except KeyError:
            raise AttributeError(key)

    def __contains__(self, key):
        return key in self._data

    def get(self, key, default=None):
        return self._data.get(key, default)

    def to_dict(self):
        return dict(self._data)

    def __repr__(self):
        return '{0}({1!r})'.format(self.__class__.__name__, self._data)

class DefaultYAMLConfig(YAMLConfig):
    """:class:`YAMLConfig` over the packaged default configuration."""
    def __init__(self, source=None):
        defaults = load_yaml(DEFAULT_CONFIG)
        log.debug('Loading configuration from %r', source)
        super(DefaultYAMLConfig, self).__init__(source, defaults)
