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

import io
import os
import shutil
import tempfile
import unittest
from ruamel.yaml import YAML
from common import *
from converge.cli import main

class CLITest(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix='converge_test_')
        self.root = FakeRoot()
        self.facts = self.dump('facts.yaml', dict(
            os='linux', platform='ubuntu', platform_family='debian',
            platform_version='14.04'))
        # Keeps the logging of the test suite in place
        self.config = self.dump('config.yaml', dict(
            probe=dict(root=self.root.root, command_timeout=5),
            logging=cfg.logging))

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)
        self.root.cleanup()

    def dump(self, name, data):
        path = os.path.join(self.tmpdir, name)
        with open(path, 'w') as f:
            YAML(typ='safe').dump(data, f)
        return path

    def run_cli(self, *args, **kwargs):
        argv = ['--facts', kwargs.get('facts', self.facts),
                '--config', self.config] + list(args)
        stdout, stderr = io.StringIO(), io.StringIO()
        status = main(argv, stdout=stdout, stderr=stderr)
        error = YAML(typ='safe').load(stderr.getvalue()) \
            if stderr.getvalue() else None
        return status, stdout.getvalue(), error

    def test_dynamic(self):
        self.assertEqual(self.run_cli('file', '/etc/motd', 'create'),
                         (0, 'file\n', None))

    def test_service(self):
        self.root.touch('/sbin/insserv', '/etc/init.d/ntpd')
        status, out, _ = self.run_cli('--service-name', 'ntpd',
                                      'service', 'ntp', 'start')
        self.assertEqual((status, out), (0, 'service.insserv\n'))

    def test_service_fallback(self):
        status, out, _ = self.run_cli('service', 'ntp', 'start')
        self.assertEqual((status, out), (0, 'service.init\n'))

    def test_legacy_table(self):
        status, out, _ = self.run_cli('package', 'vim', 'install')
        self.assertEqual((status, out), (0, 'package.apt\n'))

    def test_explicit(self):
        status, out, _ = self.run_cli('--provider', 'service.upstart',
                                      'service', 'ntp', 'start')
        self.assertEqual((status, out), (0, 'service.upstart\n'))

    def test_no_provider(self):
        status, out, error = self.run_cli('widget', 'w', 'frob')
        self.assertEqual((status, out), (1, ''))
        self.assertEqual(error['kind'], 'no_provider_found')
        self.assertEqual(error['reason'], 'no legacy mapping')
        self.assertEqual(error['resource_type'], 'widget')
        self.assertEqual(error['resource_name'], 'w')
        self.assertEqual(error['action'], 'frob')

    def test_ambiguous(self):
        # update-rc.d and chkconfig side by side
        self.root.touch('/usr/sbin/update-rc.d', '/sbin/chkconfig',
                        '/etc/init.d/ntp')
        status, _, error = self.run_cli('service', 'ntp', 'start')
        self.assertEqual(status, 1)
        self.assertEqual(error['kind'], 'ambiguous_resolution')
        self.assertEqual(error['candidates'],
                         ['service.debian', 'service.redhat'])

    def test_missing_facts(self):
        status, out, error = self.run_cli(
            'file', '/etc/motd', 'create',
            facts=os.path.join(self.tmpdir, 'nonexistent.yaml'))
        self.assertEqual((status, out), (2, ''))
        self.assertEqual(error['kind'], 'configuration_error')

if __name__ == '__main__':
    unittest.main()
