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

""" Static fallback table

Resource types whose correct provider is too platform-dependent to hardcode
(services and files) are always resolved dynamically. If dynamic resolution
finds no provider for them, this table supplies a single default, so that
why-run and error reporting still have a provider to talk about.
"""

__all__ = ['StaticFallbackTable', 'FORCE_DYNAMIC_RESOLUTION', 'STATIC_PROVIDERS']

import logging
from converge.exceptions import ConfigurationError

log = logging.getLogger('converge.platform.default_providers')

FORCE_DYNAMIC_RESOLUTION = ('service', 'file')

# Entirely static; services are handled by the subsystem prober.
STATIC_PROVIDERS = {
    'bash': 'script',
    'csh': 'script',
    'directory': 'directory',
    'erl_call': 'erl_call',
    'execute': 'execute',
    'file': 'file',
    'http_request': 'http_request',
    'link': 'link',
    'log': 'log',
    'perl': 'script',
    'python': 'script',
    'remote_directory': 'remote_directory',
    'route': 'route',
    'ruby': 'script',
    'ruby_block': 'ruby_block',
    'script': 'script',
    'template': 'template',
    'whyrun_safe_ruby_block': 'whyrun_safe_ruby_block',
}

class StaticFallbackTable(object):
    """
    Resource type to provider mapping.

    :param prober: Supplies the best-guess service provider.
    :type prober: :class:`~converge.platform.service_helpers.SubsystemProber`
    """
    def __init__(self, prober):
        self.prober = prober

    @property
    def resource_types(self):
        return sorted(set(STATIC_PROVIDERS) | set(['service']))

    def provider_for(self, resource_type, facts):
        """
        The default provider of a resource type.

        :return: A provider variant identifier.
        :raise ConfigurationError: if the table has no entry for the type;
            this is a registration bug, never a property of the host.
        """
        if resource_type == 'service':
            provider_id = self.prober.provider_for(facts)
        else:
            try:
                provider_id = STATIC_PROVIDERS[resource_type]
            except KeyError:
                raise ConfigurationError(
                    'No default provider for resource type', resource_type)
        log.debug('Default provider for %r: %r', resource_type, provider_id)
        return provider_id
