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

""" Platform versions and version constraints

Platform versions are compared numerically, component by component, so
``6.0 < 10.0``. Anything after the leading dotted numbers is ignored
(``10.0-RELEASE`` is ``10.0``), and missing components count as zeros
(``7 == 7.0``).

Constraints are an operator followed by a version: ``>= 6.0``, ``< 10.04``,
``~> 5.11``. The pessimistic operator ``~> X.Y`` means ``>= X.Y`` and
``< X+1``; a bare version means equality.
"""

__all__ = ['PlatformVersion', 'VersionConstraint']

import functools
import operator
import re
from converge.exceptions import ConfigurationError

VERSION_RE = re.compile(r'^\s*v?(\d+(?:\.\d+)*)')
CONSTRAINT_RE = re.compile(r'^\s*(~>|>=|<=|!=|=|>|<)?\s*(\S+)\s*$')

@functools.total_ordering
class PlatformVersion(object):
    """
    A platform version with numeric ordering.

    :param version: The version string (numbers are accepted too).
    :raise ValueError: if ``version`` does not start with a number.
    """
    def __init__(self, version):
        self.string = str(version)
        match = VERSION_RE.match(self.string)
        if not match:
            raise ValueError('Invalid platform version', self.string)
        self.components = tuple(int(i) for i in match.group(1).split('.'))

    def _padded(self, other):
        length = max(len(self.components), len(other.components))
        pad = lambda c: c + (0,) * (length - len(c))
        return pad(self.components), pad(other.components)

    def __eq__(self, other):
        if not isinstance(other, PlatformVersion):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine == theirs

    def __lt__(self, other):
        if not isinstance(other, PlatformVersion):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine < theirs

    def __hash__(self):
        components = list(self.components)
        while len(components) > 1 and components[-1] == 0:
            components.pop()
        return hash(tuple(components))

    def __str__(self):
        return self.string

    def __repr__(self):
        return 'PlatformVersion({0!r})'.format(self.string)

def _pessimistic(version, bound):
    # ~> 5.11 allows 5.11, 5.12 ... but not 6.0; ~> 5 allows anything >= 5.
    if version < bound:
        return False
    if len(bound.components) < 2:
        return True
    prefix = bound.components[:-1]
    return version.components[:len(prefix)] == prefix

OPERATORS = {
    '=': operator.eq,
    '!=': operator.ne,
    '>': operator.gt,
    '>=': operator.ge,
    '<': operator.lt,
    '<=': operator.le,
    '~>': _pessimistic,
}

class VersionConstraint(object):
    """
    A constraint on the platform version.

    :param str constraint: E.g. ``>= 6.0``.
    :raise ConfigurationError: if the constraint cannot be parsed.
    """
    def __init__(self, constraint):
        self.string = str(constraint)
        match = CONSTRAINT_RE.match(self.string)
        if not match:
            raise ConfigurationError('Invalid version constraint', self.string)
        op, version = match.groups()
        self.operator = op or '='
        try:
            self.version = PlatformVersion(version)
        except ValueError:
            raise ConfigurationError('Invalid version constraint', self.string)

    def matches(self, version):
        """
        Decide whether ``version`` satisfies the constraint.

        :param version: A :class:`PlatformVersion` or a version string. An
            unparseable (or missing) version never matches.
        """
        if not isinstance(version, PlatformVersion):
            try:
                version = PlatformVersion(version)
            except ValueError:
                return False
        return OPERATORS[self.operator](version, self.version)

    def __str__(self):
        return '{0} {1}'.format(self.operator, self.version)

    def __repr__(self):
        return 'VersionConstraint({0!r})'.format(self.string)
