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

import logging
import logging.config
import os
import shutil
import tempfile
import converge.util as util
import converge.util.config as config
from converge.facts import HostFacts, ResourceDeclaration
from converge.platform.service_helpers import SubsystemProber
from converge.util.command import CommandResult

cfg = config.DefaultYAMLConfig(util.rel_to_file('test.yaml', __file__))

logging.config.dictConfig(cfg.logging)

log = logging.getLogger('converge.unittests')

def linux_facts(platform, platform_family, platform_version):
    return HostFacts('linux', platform, platform_family, platform_version)

UBUNTU_1404 = linux_facts('ubuntu', 'debian', '14.04')
UBUNTU_1004 = linux_facts('ubuntu', 'debian', '10.04')
DEBIAN_70 = linux_facts('debian', 'debian', '7.0')
DEBIAN_40 = linux_facts('debian', 'debian', '4.0')
CENTOS_65 = linux_facts('centos', 'rhel', '6.5')
FEDORA_20 = linux_facts('fedora', 'fedora', '20')

def service(name='ntp', action='start', **kwargs):
    return ResourceDeclaration('service', name, action=action, **kwargs)

class StubProber(SubsystemProber):
    """
    Prober reporting fixed subsystems instead of looking at the host. The
    configured subsystems apply to the service named ``service_name`` only.
    """
    def __init__(self, installed=(), configured=(), service_name='ntp'):
        super(StubProber, self).__init__(root='/nonexistent')
        self.installed = list(installed)
        self.configured = list(configured)
        self.service_name = service_name
        self.calls = list()

    def is_installed(self, tag):
        self.calls.append(('is_installed', tag))
        return tag in self.installed

    def is_configured(self, service_name, tag, cancel_event=None):
        self.calls.append(('is_configured', service_name, tag))
        return service_name == self.service_name and tag in self.configured

    def systemd_units(self, cancel_event=None):
        self.calls.append(('systemd_units',))
        if 'systemd' in self.configured:
            return set([self.service_name,
                        '{0}.service'.format(self.service_name)])
        return set()

class FailingProber(SubsystemProber):
    """Prober failing the test if anything is probed."""
    def __init__(self, testcase):
        super(FailingProber, self).__init__(root='/nonexistent')
        self.testcase = testcase

    def is_installed(self, tag):
        self.testcase.fail('Probed installed subsystem {0!r}'.format(tag))

    def is_configured(self, service_name, tag, cancel_event=None):
        self.testcase.fail('Probed configured subsystem {0!r}'.format(tag))

    def systemd_units(self, cancel_event=None):
        self.testcase.fail('Queried systemd')

class FakeCommand(object):
    """
    Stands in for :func:`converge.util.command.run_command`, answering
    from a dictionary keyed by the command's sub-command (e.g.
    ``list-units``).
    """
    def __init__(self, outputs, exitstatus=0, error=None):
        self.outputs = outputs
        self.exitstatus = exitstatus
        self.error = error
        self.calls = list()

    def __call__(self, argv, timeout=None, cancel_event=None):
        self.calls.append((list(argv), timeout, cancel_event))
        if self.error is not None:
            raise self.error
        return CommandResult(self.exitstatus, self.outputs[argv[1]], '')

class FakeRoot(object):
    """A temporary directory standing in for the root filesystem."""
    def __init__(self):
        self.root = tempfile.mkdtemp(prefix='converge_test_')

    def touch(self, *paths):
        for path in paths:
            full = os.path.join(self.root, path.lstrip('/'))
            if path.endswith('/'):
                os.makedirs(full, exist_ok=True)
                continue
            os.makedirs(os.path.dirname(full), exist_ok=True)
            with open(full, 'w'):
                pass
        return self

    def script(self, path, content):
        """Create an executable file."""
        self.touch(path)
        full = self.path(path)
        with open(full, 'w') as f:
            f.write(content)
        os.chmod(full, 0o755)
        return self

    def path(self, path):
        return os.path.join(self.root, path.lstrip('/'))

    def cleanup(self):
        shutil.rmtree(self.root, ignore_errors=True)
