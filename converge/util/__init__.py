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

""" Miscellaneous helpers used throughout the resolver.
"""

__all__ = ['find_effective_setting', 'icoalesce', 'rel_to_file',
           'deep_merge']

import os

def icoalesce(iterable, default=None):
    """Returns the first non-None element of the iterable, or ``default``."""
    for i in iterable:
        if i is not None:
            return i
    return default

def find_effective_setting(candidates, accept_none=False):
    """
    Selects the first setting that has been specified.

    :param candidates: An iterable of ``(source, value)`` pairs, in order of
        precedence. Can be a generator, so the candidates are only evaluated
        as long as necessary.
    :param bool accept_none: If :data:`False`, it is an error if none of the
        candidates is specified.

    :return: The ``(source, value)`` pair of the effective setting.
    :raise ValueError: if no setting was specified and ``accept_none`` is
        :data:`False`.
    """
    result = icoalesce(((src, value) for (src, value) in candidates
                        if value is not None))
    if result is None:
        if accept_none:
            return None, None
        raise ValueError('No effective setting found')
    return result

def rel_to_file(relpath, basefile=None):
    """
    Path relative to the directory of a file (by default, this module's
    package).
    """
    basedir = os.path.dirname(os.path.abspath(basefile or __file__))
    return os.path.join(basedir, relpath)

def deep_merge(base, overrides):
    """
    Merges two nested dictionaries, ``overrides`` taking precedence. Neither
    of the arguments is modified.
    """
    result = dict(base)
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result
