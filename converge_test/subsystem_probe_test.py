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

import errno
import threading
import time
import unittest
from unittest import mock
from common import *
from converge.exceptions import ProbeFailure
from converge.facts import HostFacts
from converge.platform.service_helpers import \
    SubsystemProber, ProbeSession, extract_systemd_units, \
    DEFAULT_COMMAND_TIMEOUT
from converge.resolver import ProviderResolver
from converge.util.command import CommandTimeout, CommandCancelled

LIST_UNITS = """\
ntp.service              loaded active   running Network Time Service
● rsyslog.service loaded failed failed  System Logging Service
systemd-journald.socket  loaded active   running Journal Socket
"""

LIST_UNIT_FILES = """\
ssh.service                 enabled
getty@.service              static
cron.service                disabled

"""

class InstalledSubsystemsTest(unittest.TestCase):
    def setUp(self):
        self.root = FakeRoot()
        self.prober = SubsystemProber(root=self.root.root)

    def tearDown(self):
        self.root.cleanup()

    def test_nothing_installed(self):
        self.assertEqual(self.prober.installed_subsystems(), [])

    def test_declaration_order(self):
        self.root.touch('/bin/systemctl', '/sbin/insserv',
                        '/usr/sbin/invoke-rc.d', '/usr/sbin/update-rc.d')
        self.assertEqual(self.prober.installed_subsystems(),
                         ['debian', 'invokercd', 'insserv', 'systemd'])

    def test_upstart_needs_both_paths(self):
        # debian >= 6.0 has /etc/init without upstart
        self.root.touch('/etc/init/')
        self.assertEqual(self.prober.installed_subsystems(), [])
        self.root.touch('/sbin/start')
        self.assertEqual(self.prober.installed_subsystems(), ['upstart'])

    def test_redhat(self):
        self.root.touch('/sbin/chkconfig')
        self.assertEqual(self.prober.installed_subsystems(), ['redhat'])

    def test_not_cached(self):
        self.assertEqual(self.prober.installed_subsystems(), [])
        self.root.touch('/sbin/insserv')
        self.assertEqual(self.prober.installed_subsystems(), ['insserv'])

    def test_permission_denied_is_a_failure(self):
        denied = OSError(errno.EACCES, 'Permission denied')
        with mock.patch('os.stat', side_effect=denied):
            with self.assertRaises(ProbeFailure) as cm:
                self.prober.installed_subsystems()
        self.assertIn('update-rc.d', cm.exception.probe)

    def test_not_a_directory_is_absent(self):
        # /sbin is a regular file here
        self.root.touch('/sbin')
        self.assertFalse(self.prober.is_installed('insserv'))

class ConfiguredSubsystemsTest(unittest.TestCase):
    def setUp(self):
        self.root = FakeRoot()
        self.command = FakeCommand({'list-units': LIST_UNITS,
                                    'list-unit-files': LIST_UNIT_FILES})
        self.prober = SubsystemProber(root=self.root.root,
                                      run_command=self.command,
                                      command_timeout=7)

    def tearDown(self):
        self.root.cleanup()

    def test_nothing_configured(self):
        self.assertEqual(self.prober.configured_subsystems('ntp'), [])

    def test_file_conventions(self):
        self.root.touch('/etc/init.d/ntp', '/etc/init/ntp.conf',
                        '/etc/xinetd.d/ntp', '/etc/rc.d/ntp',
                        '/usr/local/etc/rc.d/ntp')
        self.assertEqual(
            self.prober.configured_subsystems('ntp'),
            ['initd', 'upstart', 'xinetd', 'etc_rcd', 'usr_local_etc_rcd'])

    def test_other_service_is_not_configured(self):
        self.root.touch('/etc/init.d/ntp', '/etc/init/ntp.conf')
        self.assertEqual(self.prober.configured_subsystems('sshd'), [])

    def test_systemd_not_queried_without_systemctl(self):
        self.root.touch('/etc/init.d/ntp')
        self.assertEqual(self.prober.configured_subsystems('ntp'), ['initd'])
        self.assertEqual(self.command.calls, [])

    def test_systemd_unit(self):
        self.root.touch('/bin/systemctl')
        self.assertEqual(self.prober.configured_subsystems('ntp'),
                         ['systemd'])
        argvs = [c[0] for c in self.command.calls]
        systemctl = self.root.path('/bin/systemctl')
        self.assertEqual(argvs[0][:2], [systemctl, 'list-units'])
        self.assertIn('--all', argvs[0])
        self.assertEqual(argvs[1][:2], [systemctl, 'list-unit-files'])
        self.assertEqual([c[1] for c in self.command.calls], [7, 7])

    def test_systemd_unit_names(self):
        self.root.touch('/bin/systemctl')
        for name in ('ntp', 'ntp.service', 'rsyslog', 'ssh', 'cron',
                     'getty@', 'systemd-journald.socket'):
            self.assertTrue(self.prober.is_configured(name, 'systemd'), name)
        for name in ('nginx', 'service', 'ntp.socket'):
            self.assertFalse(self.prober.is_configured(name, 'systemd'), name)

    def test_systemctl_failure(self):
        self.root.touch('/bin/systemctl', '/etc/init.d/ntp')
        self.command.exitstatus = 1
        with self.assertRaises(ProbeFailure) as cm:
            self.prober.configured_subsystems('ntp')
        self.assertIn('list-units', cm.exception.probe)

    def test_systemctl_timeout(self):
        self.root.touch('/bin/systemctl')
        self.command.error = CommandTimeout(['systemctl'], 7)
        with self.assertRaises(ProbeFailure) as cm:
            self.prober.configured_subsystems('ntp')
        self.assertIsInstance(cm.exception.reason, CommandTimeout)

    def test_cancel_event_is_passed(self):
        self.root.touch('/bin/systemctl')
        event = threading.Event()
        self.prober.configured_subsystems('ntp', cancel_event=event)
        self.assertTrue(all(c[2] is event for c in self.command.calls))

    def test_unexpected_output(self):
        self.root.touch('/bin/systemctl')
        self.command.outputs['list-unit-files'] = \
            'UNIT FILE STATE\n3 unit files listed.\n'
        self.assertRaises(ProbeFailure,
                          self.prober.configured_subsystems, 'ntp')

    def test_bare_systemctl_from_path(self):
        self.root.touch('/bin/systemctl')
        self.prober.systemctl = 'systemctl'
        self.prober.configured_subsystems('ntp')
        self.assertEqual([c[0][0] for c in self.command.calls],
                         ['systemctl', 'systemctl'])

    def test_default_timeout(self):
        self.root.touch('/bin/systemctl')
        prober = SubsystemProber(root=self.root.root,
                                 run_command=self.command)
        prober.configured_subsystems('ntp')
        self.assertEqual([c[1] for c in self.command.calls],
                         [DEFAULT_COMMAND_TIMEOUT] * 2)

class ServiceManagerTimeoutTest(unittest.TestCase):
    def setUp(self):
        self.root = FakeRoot()
        self.root.touch('/etc/init.d/ntp')
        self.root.script('/bin/systemctl', '#!/bin/sh\nexec sleep 10\n')

    def tearDown(self):
        self.root.cleanup()

    def test_stuck_systemctl_is_a_failure(self):
        prober = SubsystemProber(root=self.root.root, command_timeout=0.5)
        resolver = ProviderResolver(UBUNTU_1404, prober=prober)
        start = time.time()
        with self.assertRaises(ProbeFailure) as cm:
            resolver.resolve(service(), 'start')
        self.assertLess(time.time() - start, 5)
        self.assertIsInstance(cm.exception.reason, CommandTimeout)
        self.assertEqual(cm.exception.variants, ['service.systemd'])

    def test_resolver_default_timeout(self):
        resolver = ProviderResolver(UBUNTU_1404)
        self.assertEqual(resolver.prober.command_timeout,
                         DEFAULT_COMMAND_TIMEOUT)
        self.assertEqual(resolver.prober.systemctl, '/bin/systemctl')

class ExtractUnitsTest(unittest.TestCase):
    def test_suffix_stripped(self):
        units = extract_systemd_units('a.service x\nb.c.timer y\n')
        self.assertEqual(sorted(units),
                         ['a', 'a.service', 'b.c', 'b.c.timer'])

    def test_bullet(self):
        units = extract_systemd_units('* x.service loaded failed\n')
        self.assertEqual(units, ['x.service', 'x'])

    def test_empty(self):
        self.assertEqual(extract_systemd_units(''), [])

    def test_bad_line(self):
        with self.assertRaises(ProbeFailure) as cm:
            extract_systemd_units('garbage here\n', 'systemctl list-units')
        self.assertEqual(cm.exception.probe, 'systemctl list-units')

class ProbeSessionTest(unittest.TestCase):
    def setUp(self):
        self.root = FakeRoot()
        self.command = FakeCommand({'list-units': LIST_UNITS,
                                    'list-unit-files': LIST_UNIT_FILES})
        self.prober = SubsystemProber(root=self.root.root,
                                      run_command=self.command)

    def tearDown(self):
        self.root.cleanup()

    def test_systemd_queried_once(self):
        self.root.touch('/bin/systemctl', '/etc/init.d/ntp')
        session = ProbeSession(self.prober)
        self.assertTrue(session.is_configured('ntp', 'systemd'))
        self.assertTrue(session.is_configured('ssh', 'systemd'))
        self.assertEqual(session.configured_subsystems('ntp'),
                         ['initd', 'systemd'])
        self.assertEqual(len(self.command.calls), 2)

    def test_lazy(self):
        self.root.touch('/bin/systemctl', '/etc/init/ntp.conf')
        session = ProbeSession(self.prober)
        self.assertTrue(session.is_configured('ntp', 'upstart'))
        self.assertEqual(self.command.calls, [])

    def test_session_snapshot(self):
        session = ProbeSession(self.prober)
        self.assertFalse(session.is_installed('insserv'))
        self.root.touch('/sbin/insserv')
        self.assertFalse(session.is_installed('insserv'))
        self.assertTrue(ProbeSession(self.prober).is_installed('insserv'))

    def test_failure_not_cached(self):
        self.root.touch('/bin/systemctl')
        self.command.exitstatus = 3
        session = ProbeSession(self.prober)
        self.assertRaises(ProbeFailure, session.is_configured, 'ntp', 'systemd')
        self.command.exitstatus = 0
        self.assertTrue(session.is_configured('ntp', 'systemd'))

    def test_installed_subsystems(self):
        self.root.touch('/usr/sbin/update-rc.d', '/bin/systemctl')
        session = ProbeSession(self.prober)
        self.assertEqual(session.installed_subsystems(),
                         ['debian', 'systemd'])

class DefaultServiceProviderTest(unittest.TestCase):
    def test_provider_for(self):
        prober = SubsystemProber()
        expected = {
            'freebsd': 'service.freebsd',
            'netbsd': 'service.freebsd',
            'mac_os_x': 'service.freebsd',
            'windows': 'service.windows',
            'solaris2': 'service.solaris',
            'linux': 'service.init',
            'beos': 'service.init',
        }
        for os, provider_id in expected.items():
            self.assertEqual(prober.provider_for(HostFacts(os)), provider_id)

    def test_from_config(self):
        prober = SubsystemProber.from_config(cfg)
        self.assertEqual(prober.root, '/')
        self.assertEqual(prober.command_timeout, 5)
        self.assertEqual(prober.systemctl, '/bin/systemctl')

if __name__ == '__main__':
    unittest.main()
