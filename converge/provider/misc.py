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

""" Platform specific providers of the legacy platform table

None of these take part in dynamic resolution; they are selected by the
legacy platform table (or by an explicit override).
"""

from converge.provider import Provider, catalog

@catalog.provider('http_request')
class HttpRequestProvider(Provider):
    pass

@catalog.provider('log')
class LogProvider(Provider):
    """Writes a message to the run log."""

@catalog.provider('route')
class RouteProvider(Provider):
    pass

@catalog.provider('ifconfig.default')
class IfconfigProvider(Provider):
    pass

@catalog.provider('env.windows')
class WindowsEnvProvider(Provider):
    """Environment variables in the Windows registry."""

#
# Packages
#

class PackageProvider(Provider):
    """Base of the package managers."""

    @property
    def package_name(self):
        return self.new_resource.attributes.get('package_name',
                                                self.new_resource.name)

@catalog.provider('package.apt')
class AptPackage(PackageProvider):
    pass

@catalog.provider('package.yum')
class YumPackage(PackageProvider):
    pass

@catalog.provider('package.zypper')
class ZypperPackage(PackageProvider):
    pass

@catalog.provider('package.pacman')
class PacmanPackage(PackageProvider):
    pass

@catalog.provider('package.portage')
class PortagePackage(PackageProvider):
    pass

@catalog.provider('package.homebrew')
class HomebrewPackage(PackageProvider):
    pass

@catalog.provider('package.freebsd')
class FreebsdPackage(PackageProvider):
    pass

@catalog.provider('package.solaris')
class SolarisPackage(PackageProvider):
    pass

@catalog.provider('package.windows')
class WindowsPackage(PackageProvider):
    """MSI packages."""

#
# Cron
#

@catalog.provider('cron.default')
class CronProvider(Provider):
    pass

@catalog.provider('cron.solaris')
class SolarisCronProvider(CronProvider):
    pass

#
# Users and groups
#

@catalog.provider('user.useradd')
class UseraddUser(Provider):
    pass

@catalog.provider('user.dscl')
class DsclUser(Provider):
    pass

@catalog.provider('user.pw')
class PwUser(Provider):
    pass

@catalog.provider('user.windows')
class WindowsUser(Provider):
    pass

@catalog.provider('group.groupadd')
class GroupaddGroup(Provider):
    pass

@catalog.provider('group.gpasswd')
class GpasswdGroup(GroupaddGroup):
    pass

@catalog.provider('group.usermod')
class UsermodGroup(GroupaddGroup):
    pass

@catalog.provider('group.dscl')
class DsclGroup(Provider):
    pass

@catalog.provider('group.pw')
class PwGroup(Provider):
    pass

@catalog.provider('group.windows')
class WindowsGroup(Provider):
    pass

#
# Mounts
#

@catalog.provider('mount.mount')
class MountProvider(Provider):
    pass

@catalog.provider('mount.solaris')
class SolarisMountProvider(MountProvider):
    pass

@catalog.provider('mount.windows')
class WindowsMountProvider(Provider):
    pass
