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

""" Exceptions raised during provider resolution

Resolution errors (:class:`ResolutionError` and its sub-classes) identify
the resource that failed and carry enough structured detail
(:meth:`ResolutionError.as_dict`) to render a precise operator-facing
message. :class:`ConfigurationError` is *not* a resolution
error: it signals an inconsistency between the provider catalog and the
tables, which is a registration bug, not a property of the host.
"""

__all__ = ['ResolutionError', 'AmbiguousResolution', 'NoProviderFound',
           'ProbeFailure', 'ConfigurationError']

class ResolutionError(Exception):
    """
    Abstract base of errors that abort a single resolve call.

    :param resource: The resource being resolved.
    :type resource: :class:`~converge.facts.ResourceDeclaration`
    :param str action: The requested action.
    """
    kind = 'resolution_error'

    def __init__(self, resource=None, action=None, msg=None):
        self.resource = resource
        self.action = action
        self.msg = msg
        super(ResolutionError, self).__init__(
            msg or self.__class__.__name__, resource, action)

    def _detail(self):
        """Error-specific fields of :meth:`as_dict`."""
        return dict()

    def as_dict(self):
        """
        Structured description of the error.

        The resource is identified by its type, name and the requested action;
        the rest of the fields depend on the kind of the error.
        """
        resource = self.resource
        data = dict(
            kind=self.kind,
            message=str(self),
            resource_type=getattr(resource, 'resource_type', None),
            resource_name=getattr(resource, 'name', None),
            action=self.action,
        )
        data.update(self._detail())
        return data

    def __str__(self):
        if self.resource is None:
            return self.msg or self.__class__.__name__
        return '{0} (resource: {1}, action: {2!r})'.format(
            self.msg or self.__class__.__name__, self.resource, self.action)

class AmbiguousResolution(ResolutionError):
    """
    Two or more providers survived dynamic resolution, none of them
    replacing the others.

    :param list candidates: The identifiers of the tied provider variants.
    """
    kind = 'ambiguous_resolution'

    def __init__(self, resource, action, candidates):
        self.candidates = list(candidates)
        super(AmbiguousResolution, self).__init__(
            resource, action,
            'More than one provider can handle the resource: {0}'.format(
                ', '.join(self.candidates)))

    def _detail(self):
        return dict(candidates=list(self.candidates))

class NoProviderFound(ResolutionError):
    """
    Every resolution stage has been exhausted without finding a provider.

    :param str reason: Why the last stage failed (e.g. ``no legacy mapping``).
    """
    kind = 'no_provider_found'

    def __init__(self, resource, action, reason):
        self.reason = reason
        super(NoProviderFound, self).__init__(
            resource, action, 'No provider found: {0}'.format(reason))

    def _detail(self):
        return dict(reason=self.reason)

class ProbeFailure(ResolutionError):
    """
    A subsystem probe could not be evaluated.

    This is distinct from a negative probe result: a missing init script is
    a clean "not configured", while a failing service manager query or an
    unreadable directory is a :class:`ProbeFailure`.

    :param str probe: The probe that failed (a path or a command line).
    :param reason: Description of the failure, or the underlying exception.
    :param variants: The provider variants whose capability checks could not
        be evaluated because of this failure. Filled in by the resolver.
    """
    kind = 'probe_failure'

    def __init__(self, probe, reason, resource=None, action=None,
                 variants=()):
        self.probe = probe
        self.reason = reason
        self.variants = list(variants)
        super(ProbeFailure, self).__init__(
            resource, action,
            'Probe {0!r} failed: {1}'.format(probe, reason))

    def for_resource(self, resource, action, variants):
        """
        Copy of this failure, identifying the resource and the provider
        variants affected.
        """
        return ProbeFailure(self.probe, self.reason,
                            resource, action, variants)

    def _detail(self):
        return dict(probe=self.probe,
                    reason=str(self.reason),
                    variants=list(self.variants))

class ConfigurationError(Exception):
    """
    The provider catalog and the provider tables are inconsistent, or the
    configuration is invalid.

    These indicate a programming or packaging error, and are not meant to be
    handled by the resolver's callers.
    """
    def __init__(self, msg, *args):
        self.msg = msg
        super(ConfigurationError, self).__init__(msg, *args)

    def __str__(self):
        if len(self.args) > 1:
            return '{0}: {1}'.format(
                self.msg, ', '.join(repr(a) for a in self.args[1:]))
        return self.msg
