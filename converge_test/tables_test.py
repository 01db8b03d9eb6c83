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

import unittest
from common import *
from converge.exceptions import ConfigurationError
from converge.facts import HostFacts
from converge.platform.default_providers import \
    StaticFallbackTable, STATIC_PROVIDERS, FORCE_DYNAMIC_RESOLUTION
from converge.platform.legacy import LegacyPlatformTable
from converge.platform.version import PlatformVersion, VersionConstraint
from converge.provider import builtin_catalog

V = PlatformVersion

class PlatformVersionTest(unittest.TestCase):
    def test_numeric_ordering(self):
        self.assertLess(V('6.0'), V('10.0'))
        self.assertLess(V('9.9'), V('9.10'))
        self.assertGreater(V('10.04'), V('9.10'))
        self.assertLess(V('5.9'), V('5.11'))

    def test_missing_components_are_zero(self):
        self.assertEqual(V('7'), V('7.0'))
        self.assertEqual(V('7.0.0'), V('7'))
        self.assertEqual(hash(V('7')), hash(V('7.0.0')))
        self.assertLess(V('7'), V('7.0.1'))

    def test_suffix_ignored(self):
        self.assertEqual(V('10.0-RELEASE'), V('10.0'))
        self.assertEqual(V('2014.1'), V(2014.1))

    def test_invalid(self):
        self.assertRaises(ValueError, V, 'jessie/sid')
        self.assertRaises(ValueError, V, None)

class VersionConstraintTest(unittest.TestCase):
    def check(self, constraint, matching, not_matching):
        c = VersionConstraint(constraint)
        for v in matching:
            self.assertTrue(c.matches(v), '{0} {1}'.format(v, constraint))
        for v in not_matching:
            self.assertFalse(c.matches(v), '{0} {1}'.format(v, constraint))

    def test_operators(self):
        self.check('>= 6.0', ['6', '6.0', '7.0', '10.0'], ['5.0', '4.0'])
        self.check('> 6.0', ['6.0.1', '10'], ['6', '5.9'])
        self.check('< 10.04', ['9.10', '8.04'], ['10.04', '12.04'])
        self.check('<= 10.04', ['10.04', '8.04'], ['10.10'])
        self.check('= 5.11', ['5.11', '5.11.0'], ['5.1', '5.12'])
        self.check('!= 5.11', ['5.1'], ['5.11'])
        self.check('5.11', ['5.11'], ['5.10'])

    def test_pessimistic(self):
        self.check('~> 5.11', ['5.11', '5.12', '5.100'], ['5.10', '6.0'])
        self.check('~> 12.04.1', ['12.04.1', '12.04.9'], ['12.05', '12.04'])
        self.check('~> 5', ['5', '6', '100'], ['4.9'])

    def test_unparseable_version_never_matches(self):
        self.check('>= 0', [], [None, 'sid', ''])

    def test_invalid_constraint(self):
        for bad in ('>= ', '>> 6', '>= six', '= 1 2'):
            self.assertRaises(ConfigurationError, VersionConstraint, bad)

TABLE = dict(
    default=dict(service='service.init', cron='cron.default'),
    platforms=dict(
        debian={
            'default': dict(service='service.debian', package='package.apt'),
            '>= 6.0': dict(service='service.insserv'),
            '>= 8': dict(service='service.systemd'),
        },
        ubuntu={
            'default': dict(service='service.debian'),
        },
        weird={
            '< 2': dict(cron='cron.solaris'),
        },
    ))

class LegacyPlatformTableTest(unittest.TestCase):
    def setUp(self):
        self.table = LegacyPlatformTable(TABLE)

    def lookup(self, resource_type, platform, family, version):
        return self.table.provider_for(
            resource_type, HostFacts('linux', platform, family, version))

    def test_version_threshold(self):
        self.assertEqual(self.lookup('service', 'debian', 'debian', '5.0'),
                         'service.debian')
        self.assertEqual(self.lookup('service', 'debian', 'debian', '6.0'),
                         'service.insserv')
        # Numeric, not lexicographic: '10.0' > '6.0'
        self.assertEqual(self.lookup('service', 'debian', 'debian', '7.8'),
                         'service.insserv')

    def test_later_rules_override(self):
        self.assertEqual(self.lookup('service', 'debian', 'debian', '10.0'),
                         'service.systemd')

    def test_platform_overrides_family(self):
        self.assertEqual(self.lookup('service', 'ubuntu', 'debian', '14.04'),
                         'service.debian')
        self.assertEqual(self.lookup('package', 'ubuntu', 'debian', '14.04'),
                         'package.apt')

    def test_global_default(self):
        self.assertEqual(self.lookup('cron', 'ubuntu', 'debian', '14.04'),
                         'cron.default')
        self.assertEqual(self.lookup('service', 'plan9', 'plan9', '4'),
                         'service.init')

    def test_unparseable_version(self):
        self.assertEqual(self.lookup('service', 'debian', 'debian', 'sid'),
                         'service.debian')
        self.assertEqual(self.lookup('cron', 'weird', 'weird', None),
                         'cron.default')
        self.assertEqual(self.lookup('cron', 'weird', 'weird', '1.5'),
                         'cron.solaris')

    def test_no_mapping(self):
        self.assertIsNone(self.lookup('package', 'plan9', 'plan9', '4'))

    def test_invalid_entry(self):
        self.assertRaises(ConfigurationError, LegacyPlatformTable,
                          dict(platforms=dict(debian=['service.debian'])))

    def test_packaged_table(self):
        table = LegacyPlatformTable.load()
        facts = HostFacts('linux', 'debian', 'debian', '7.0')
        self.assertEqual(table.provider_for('service', facts),
                         'service.insserv')
        facts = HostFacts('linux', 'debian', 'debian', '5.0')
        self.assertEqual(table.provider_for('service', facts),
                         'service.debian')
        facts = HostFacts('windows', 'windows', 'windows', '6.3')
        self.assertEqual(table.provider_for('env', facts), 'env.windows')
        facts = HostFacts('linux', 'fedora', 'fedora', '20')
        self.assertEqual(table.provider_for('service', facts),
                         'service.systemd')

    def test_packaged_table_is_consistent(self):
        catalog = builtin_catalog()
        for provider_id in LegacyPlatformTable.load().provider_ids():
            self.assertIn(provider_id, catalog)

    def test_load_from_yaml(self):
        table = LegacyPlatformTable.load(
            'platforms:\n'
            '    arch:\n'
            '        default:\n'
            '            package: package.pacman\n')
        facts = HostFacts('linux', 'arch', 'arch', '2014.1')
        self.assertEqual(table.provider_for('package', facts),
                         'package.pacman')

class StaticFallbackTableTest(unittest.TestCase):
    def setUp(self):
        self.table = StaticFallbackTable(StubProber())

    def test_force_dynamic_types(self):
        self.assertEqual(FORCE_DYNAMIC_RESOLUTION, ('service', 'file'))
        for resource_type in FORCE_DYNAMIC_RESOLUTION:
            self.assertIn(resource_type, self.table.resource_types)

    def test_scripts(self):
        for interpreter in ('bash', 'csh', 'perl', 'python', 'ruby', 'script'):
            self.assertEqual(self.table.provider_for(interpreter, UBUNTU_1404),
                             'script')

    def test_service_uses_prober(self):
        facts = HostFacts('solaris2', 'omnios', 'omnios', '5.11')
        self.assertEqual(self.table.provider_for('service', facts),
                         'service.solaris')

    def test_unknown_type(self):
        self.assertRaises(ConfigurationError,
                          self.table.provider_for, 'package', UBUNTU_1404)

    def test_consistent_with_catalog(self):
        catalog = builtin_catalog()
        for provider_id in STATIC_PROVIDERS.values():
            self.assertIn(provider_id, catalog)

if __name__ == '__main__':
    unittest.main()
