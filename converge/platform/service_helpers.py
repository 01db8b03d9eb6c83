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

""" Service-management subsystem probing

Linux hosts may carry several mechanisms to start services (SysV init
scripts managed by ``update-rc.d`` or ``insserv``, upstart, systemd...), and a
single service may be configured for any of them. This module finds out
which of these are installed on the host (:meth:`SubsystemProber.installed_subsystems`)
and which are configured for a given service
(:meth:`SubsystemProber.configured_subsystems`).

Probes only read the filesystem and query the service manager; nothing is
cached by the prober, every call looks again. Within a single resolve call,
:class:`ProbeSession` evaluates each check at most once, and only when a
provider's capability predicate actually asks for it.

A path that does not exist is a clean negative. Any other failure (e.g. an
unreadable directory, or the service manager returning an error) is raised
as :class:`~converge.exceptions.ProbeFailure`.

.. autoclass:: SubsystemProber
    :members:

.. autoclass:: ProbeSession
    :members:
"""

__all__ = ['SubsystemProber', 'ProbeSession',
           'INSTALLED_CHECKS', 'CONFIGURED_CHECKS']

import errno
import logging
import os
import jinja2
from converge.exceptions import ProbeFailure
from converge.util import find_effective_setting
from converge.util.command import run_command, CommandError

log = logging.getLogger('converge.platform.service_helpers')
datalog = logging.getLogger('converge.data.platform.service_helpers')

# Subsystems installed on the host: (tag, paths that must all exist).
# The order of this list is the order of the tags reported.
INSTALLED_CHECKS = [
    ('debian', ['/usr/sbin/update-rc.d']),
    ('invokercd', ['/usr/sbin/invoke-rc.d']),
    ('insserv', ['/sbin/insserv']),
    # debian >= 6.0 has /etc/init but does not have upstart
    ('upstart', ['/etc/init', '/sbin/start']),
    ('redhat', ['/sbin/chkconfig']),
    ('systemd', ['/bin/systemctl']),
]

# Configuration artifacts of a single service: (tag, path template).
# Templates are rendered with ``service_name``. ``None`` stands for a check
# that queries the service manager instead of the filesystem.
CONFIGURED_CHECKS = [
    ('initd', '/etc/init.d/{{ service_name }}'),
    ('upstart', '/etc/init/{{ service_name }}.conf'),
    ('xinetd', '/etc/xinetd.d/{{ service_name }}'),
    ('etc_rcd', '/etc/rc.d/{{ service_name }}'),
    ('usr_local_etc_rcd', '/usr/local/etc/rc.d/{{ service_name }}'),
    ('systemd', None),
]

# Best-guess service provider per OS; used only when dynamic resolution
# fails for a service.
DEFAULT_SERVICE_PROVIDERS = {
    'freebsd': 'service.freebsd',
    'netbsd': 'service.freebsd',
    'mac_os_x': 'service.freebsd',
    'windows': 'service.windows',
    'solaris2': 'service.solaris',
    'linux': 'service.init',
}
FALLBACK_SERVICE_PROVIDER = 'service.init'

# Seconds to wait for the service manager, unless configured otherwise.
DEFAULT_COMMAND_TIMEOUT = 30
DEFAULT_SYSTEMCTL = '/bin/systemctl'

_installed = dict(INSTALLED_CHECKS)
_configured = dict((tag, jinja2.Template(path) if path else None)
                   for tag, path in CONFIGURED_CHECKS)

def extract_systemd_units(output, probe='systemctl'):
    """
    Extract unit names from the output of ``systemctl list-units`` or
    ``systemctl list-unit-files``.

    The first column of each non-blank line is a unit name (e.g.
    ``sshd.service``). Both the full names and the names with their type
    suffix stripped (``sshd``) are returned.

    :raise ProbeFailure: if a line does not start with a unit name.
    """
    units = list()
    for line in output.splitlines():
        fields = line.split()
        if not fields:
            continue
        # Failed units are marked with a bullet in the first column
        if fields[0] in ('\u25cf', '*'):
            fields = fields[1:]
        if not fields or '.' not in fields[0]:
            raise ProbeFailure(
                probe, 'Unexpected line in output: {0!r}'.format(line))
        units.append(fields[0])
    return units + [u.rsplit('.', 1)[0] for u in units]

class SubsystemProber(object):
    """
    Inspects the service-management subsystems of the host.

    :param str root: The root of the probed filesystem; well-known paths are
        resolved relative to it, and so is an absolute ``systemctl``. The
        executable still talks to the service manager of the running host.
    :param run_command: The command execution facility, see
        :func:`converge.util.command.run_command`.
    :param command_timeout: Seconds to wait for the service manager. 0 or
        :data:`None` means no timeout.
    :param str systemctl: The ``systemctl`` executable. An absolute path is
        resolved under ``root``; a bare name is looked up in ``PATH``.
    """
    def __init__(self, root='/', run_command=run_command,
                 command_timeout=DEFAULT_COMMAND_TIMEOUT,
                 systemctl=DEFAULT_SYSTEMCTL):
        self.root = root
        self.run_command = run_command
        self.command_timeout = command_timeout
        self.systemctl = systemctl

    @classmethod
    def from_config(cls, cfg):
        """Create a prober from the ``probe`` section of a configuration."""
        probe = cfg.get('probe') or dict()
        _, timeout = find_effective_setting(
            [('config', probe.get('command_timeout')),
             ('default', DEFAULT_COMMAND_TIMEOUT)])
        return cls(root=probe.get('root') or '/',
                   command_timeout=timeout,
                   systemctl=probe.get('systemctl') or DEFAULT_SYSTEMCTL)

    def path(self, path):
        """The absolute path of a well-known location under :attr:`root`."""
        return os.path.join(self.root, path.lstrip('/'))

    @property
    def systemctl_executable(self):
        if os.path.isabs(self.systemctl):
            return self.path(self.systemctl)
        return self.systemctl

    def exists(self, path):
        """
        Check whether a well-known path exists.

        :raise ProbeFailure: if existence cannot be decided.
        """
        real_path = self.path(path)
        try:
            os.stat(real_path)
        except OSError as ex:
            if ex.errno in (errno.ENOENT, errno.ENOTDIR):
                return False
            raise ProbeFailure(real_path, ex)
        return True

    def is_installed(self, tag):
        """Check whether a single service-management subsystem is installed."""
        return all(self.exists(p) for p in _installed[tag])

    def installed_subsystems(self):
        """
        The service-management subsystems installed on the host.

        :return: Tags from :data:`INSTALLED_CHECKS`, in declaration order.
        """
        result = [tag for tag, _ in INSTALLED_CHECKS if self.is_installed(tag)]
        log.debug('Installed service subsystems: %r', result)
        return result

    def _query_systemctl(self, argv, cancel_event):
        probe = ' '.join(argv)
        try:
            result = self.run_command(argv,
                                      timeout=self.command_timeout,
                                      cancel_event=cancel_event)
        except CommandError as ex:
            raise ProbeFailure(probe, ex)
        if result.exitstatus != 0:
            raise ProbeFailure(
                probe, 'Exited with status {0}: {1}'.format(
                    result.exitstatus, (result.stderr or '').strip()))
        datalog.debug('Output of %r:\n%s', probe, result.stdout)
        return extract_systemd_units(result.stdout, probe)

    def systemd_units(self, cancel_event=None):
        """
        Every unit known to systemd, loaded or merely installed, with and
        without type suffix.

        :raise ProbeFailure: if the service manager cannot be queried.
        """
        units = self._query_systemctl(
            [self.systemctl_executable, 'list-units', '--all',
             '--no-legend', '--no-pager', '--plain'], cancel_event)
        units += self._query_systemctl(
            [self.systemctl_executable, 'list-unit-files',
             '--no-legend', '--no-pager'], cancel_event)
        return set(units)

    def has_systemd_unit(self, service_name, cancel_event=None):
        """
        Check whether systemd has a unit for the service. Only asks the
        service manager if systemd is installed at all.
        """
        if not self.is_installed('systemd'):
            return False
        return service_name in self.systemd_units(cancel_event)

    def is_configured(self, service_name, tag, cancel_event=None):
        """
        Check whether a single kind of configuration artifact exists for the
        service.
        """
        template = _configured[tag]
        if template is None:
            return self.has_systemd_unit(service_name, cancel_event)
        return self.exists(template.render(service_name=service_name))

    def configured_subsystems(self, service_name, cancel_event=None):
        """
        The service-management subsystems configured for a service.

        :param str service_name: The name of the service.
        :param cancel_event: Aborts the query of the service manager.
        :type cancel_event: :class:`threading.Event`
        :return: Tags from :data:`CONFIGURED_CHECKS`, in declaration order.
        """
        result = [tag for tag, _ in CONFIGURED_CHECKS
                  if self.is_configured(service_name, tag, cancel_event)]
        log.debug('Service subsystems configured for %r: %r',
                  service_name, result)
        return result

    def provider_for(self, facts):
        """
        Best-guess service provider for the host, based on its OS only.

        This mapping is *only* used if dynamic resolution fails, and some
        provider has to be returned (e.g. for why-run and error messages).

        :return: A provider variant identifier.
        """
        return DEFAULT_SERVICE_PROVIDERS.get(facts.os,
                                             FALLBACK_SERVICE_PROVIDER)

class ProbeSession(object):
    """
    The view of a :class:`SubsystemProber` used during one resolve call.

    Each check is performed lazily, at most once per session. Failures are
    not cached: a failing check raises every time it is asked for.

    :param prober: The underlying prober.
    :type prober: :class:`SubsystemProber`
    :param cancel_event: Aborts in-flight service manager queries.
    :type cancel_event: :class:`threading.Event`
    """
    def __init__(self, prober, cancel_event=None):
        self.prober = prober
        self.cancel_event = cancel_event
        self._installed = dict()
        self._configured = dict()
        self._systemd_units = None

    def is_installed(self, tag):
        if tag not in self._installed:
            self._installed[tag] = self.prober.is_installed(tag)
        return self._installed[tag]

    def _has_systemd_unit(self, service_name):
        if not self.is_installed('systemd'):
            return False
        if self._systemd_units is None:
            self._systemd_units = \
                self.prober.systemd_units(self.cancel_event)
        return service_name in self._systemd_units

    def is_configured(self, service_name, tag):
        key = (service_name, tag)
        if key not in self._configured:
            if _configured[tag] is None:
                self._configured[key] = self._has_systemd_unit(service_name)
            else:
                self._configured[key] = \
                    self.prober.is_configured(service_name, tag)
        return self._configured[key]

    def installed_subsystems(self):
        return [tag for tag, _ in INSTALLED_CHECKS if self.is_installed(tag)]

    def configured_subsystems(self, service_name):
        return [tag for tag, _ in CONFIGURED_CHECKS
                if self.is_configured(service_name, tag)]
