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

""" Service providers

On Linux several service-management subsystems can coexist, so the service
variants compete with each other. Their ``handles`` predicates consult the
subsystem probe, and the more specific variants replace the generic ones:

- A plain init script is handled by ``service.init``, which is replaced by
  the distribution-specific SysV managers (``debian``, ``invokercd``,
  ``insserv``, ``redhat``).
- ``service.insserv`` replaces the other SysV managers.
- ``service.upstart`` handles a service only if it has an upstart job, and
  then replaces every SysV manager.
- ``service.systemd`` handles a service only if systemd has a unit for it,
  and then replaces all of the above.

On the other operating systems there is a single candidate.
"""

__all__ = ['ServiceProvider', 'InitService', 'DebianService',
           'InvokercdService', 'InsservService', 'RedhatService',
           'UpstartService', 'SystemdService', 'FreebsdService',
           'MacosxService', 'SolarisService', 'WindowsService',
           'GentooService']

from converge.provider import \
    Provider, catalog, os_is, installed, configured, all_of, any_of

SYSV = ['service.init', 'service.debian', 'service.invokercd',
        'service.insserv', 'service.redhat']

class ServiceProvider(Provider):
    """Base of the service providers."""

    @property
    def service_name(self):
        return self.new_resource.service_name

@catalog.provider('service.init',
                  implements=['service'],
                  enabled=os_is('linux'),
                  handles=configured('initd'))
class InitService(ServiceProvider):
    """Generic SysV init scripts."""

@catalog.provider('service.debian',
                  implements=['service'],
                  enabled=os_is('linux'),
                  handles=installed('debian'),
                  replaces=['service.init', 'service.invokercd'])
class DebianService(InitService):
    """Init scripts enabled through ``update-rc.d``."""

@catalog.provider('service.invokercd',
                  implements=['service'],
                  enabled=os_is('linux'),
                  handles=all_of(installed('invokercd'), configured('initd')),
                  replaces=['service.init'])
class InvokercdService(InitService):
    """Init scripts started through ``invoke-rc.d``."""

@catalog.provider('service.insserv',
                  implements=['service'],
                  enabled=os_is('linux'),
                  handles=installed('insserv'),
                  replaces=['service.init', 'service.debian',
                            'service.invokercd', 'service.redhat'])
class InsservService(InitService):
    """Init scripts ordered by ``insserv``."""

@catalog.provider('service.redhat',
                  implements=['service'],
                  enabled=os_is('linux'),
                  handles=installed('redhat'),
                  replaces=['service.init'])
class RedhatService(InitService):
    """Init scripts enabled through ``chkconfig``."""

@catalog.provider('service.upstart',
                  implements=['service'],
                  enabled=os_is('linux'),
                  handles=all_of(installed('upstart'), configured('upstart')),
                  replaces=SYSV)
class UpstartService(ServiceProvider):
    """Upstart jobs."""

@catalog.provider('service.systemd',
                  implements=['service'],
                  enabled=os_is('linux'),
                  handles=all_of(installed('systemd'), configured('systemd')),
                  replaces=SYSV + ['service.upstart'])
class SystemdService(ServiceProvider):
    """Systemd units."""

@catalog.provider('service.freebsd',
                  implements=['service'],
                  enabled=os_is('freebsd', 'netbsd'),
                  handles=any_of(configured('etc_rcd'),
                                 configured('usr_local_etc_rcd')))
class FreebsdService(InitService):
    """BSD rc.d scripts."""

@catalog.provider('service.macosx',
                  implements=['service'],
                  enabled=os_is('darwin'))
class MacosxService(ServiceProvider):
    """launchd jobs."""

@catalog.provider('service.solaris',
                  implements=['service'],
                  enabled=os_is('solaris2'))
class SolarisService(ServiceProvider):
    """SMF services."""

@catalog.provider('service.windows',
                  implements=['service'],
                  enabled=os_is('windows'))
class WindowsService(ServiceProvider):
    """Windows services."""

# Only reachable through the legacy platform table.
@catalog.provider('service.gentoo')
class GentooService(InitService):
    """OpenRC scripts."""
