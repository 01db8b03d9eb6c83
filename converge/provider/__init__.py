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

""" Provider variants and their capabilities

A *provider variant* is a named implementation of one or more resource types.
Besides the class that implements it, a variant declares four capability
facets, which drive dynamic resolution:

``implements``
    The resource types the variant can converge. A variant implementing
    nothing is never a dynamic candidate; it can only be selected by an
    explicit override or by one of the static tables.
``enabled(facts)``
    Whether the variant can be used on the host at all.
``handles(resource, action, probe)``
    Whether the variant can handle this specific resource and action. This is
    where subsystem probing happens: ``probe`` is a
    :class:`~converge.platform.service_helpers.ProbeSession`.
``replaces``
    Identifiers of other variants this one supersedes when both would match.

Variants are collected in a :class:`ProviderCatalog`. Registration happens
during start-up (typically at import time, through the
:meth:`ProviderCatalog.provider` class decorator); after the catalog is
:meth:`closed <ProviderCatalog.close>`, it is immutable and can be shared by
any number of concurrent resolvers::

    @catalog.provider('service.insserv',
                      implements=['service'],
                      enabled=os_is('linux'),
                      handles=installed('insserv'),
                      replaces=['service.init', 'service.debian'])
    class InsservService(InitService):
        pass
"""

__all__ = ['Provider', 'ProviderVariant', 'ProviderCatalog',
           'os_is', 'platform_family_is', 'always', 'never',
           'installed', 'configured', 'any_of', 'all_of',
           'catalog', 'builtin_catalog', 'BUILTIN_MODULES']

import collections
import importlib
import logging
import threading
from converge.exceptions import ConfigurationError

log = logging.getLogger('converge.provider')

BUILTIN_MODULES = [
    'converge.provider.service',
    'converge.provider.file',
    'converge.provider.execute',
    'converge.provider.misc',
]

class Provider(object):
    """
    Abstract base of provider implementations.

    Converging the resource to its desired state is the job of the
    implementations; the resolver only constructs them and binds the
    requested action.

    :param resource: The resource to be converged.
    :type resource: :class:`~converge.facts.ResourceDeclaration`
    :param run_context: The execution context of the run.

    :var str provider_id: The identifier of the variant, set on
        registration.
    :var str action: The action the provider has been resolved for.
    """
    provider_id = None

    def __init__(self, resource, run_context):
        self.new_resource = resource
        self.run_context = run_context
        self.action = None

    def __repr__(self):
        return '<{0} {1} for {2} action={3!r}>'.format(
            self.__class__.__name__, self.provider_id,
            self.new_resource, self.action)

_VariantBase = collections.namedtuple(
    '_VariantBase',
    ['variant_id', 'factory', 'implements', 'enabled', 'handles', 'replaces'])

class ProviderVariant(_VariantBase):
    """
    An immutable record describing a provider variant.

    :param str variant_id: Unique identifier; the total order of variants is
        the lexicographic order of these.
    :param factory: Callable constructing the provider instance from
        ``(resource, run_context)``.
    :param implements: Resource types.
    :param enabled: ``enabled(facts) -> bool``
    :param handles: ``handles(resource, action, probe) -> bool``
    :param replaces: Identifiers of superseded variants.
    """
    __slots__ = ()

    def __new__(cls, variant_id, factory, implements=(), enabled=None,
                handles=None, replaces=()):
        return super(ProviderVariant, cls).__new__(
            cls, variant_id, factory,
            frozenset(implements),
            enabled or always,
            handles or always,
            frozenset(replaces))

    def implements_type(self, resource_type):
        return resource_type in self.implements

    def is_candidate(self, resource, facts):
        """
        Whether the variant is enabled on the host and implements the
        resource's type.
        """
        return self.implements_type(resource.resource_type) \
            and bool(self.enabled(facts))

    def instantiate(self, resource, action):
        """Construct the provider and bind the action to it."""
        provider = self.factory(resource, resource.run_context)
        provider.provider_id = self.variant_id
        provider.action = action
        return provider

    def __repr__(self):
        return '<ProviderVariant {0}>'.format(self.variant_id)

class ProviderCatalog(object):
    """
    The closed set of known provider variants.

    Variants can be registered until :meth:`close` is called; afterwards
    the catalog is read-only.
    """
    def __init__(self):
        self._variants = dict()
        self._closed = False
        self._sorted = None
        self._lock = threading.Lock()

    @property
    def closed(self):
        return self._closed

    def register(self, variant):
        """
        Add a variant to the catalog.

        :type variant: :class:`ProviderVariant`
        :raise ConfigurationError: if the catalog is closed, or the
            identifier is already registered.
        """
        with self._lock:
            if self._closed:
                raise ConfigurationError(
                    'Cannot register provider variant in a closed catalog',
                    variant.variant_id)
            if variant.variant_id in self._variants:
                raise ConfigurationError(
                    'Duplicate provider variant', variant.variant_id)
            self._variants[variant.variant_id] = variant
        log.debug('Registered provider variant %r', variant.variant_id)
        return variant

    def provider(self, variant_id, implements=(), enabled=None,
                 handles=None, replaces=()):
        """
        Class decorator registering a :class:`Provider` sub-class as a
        variant. The class itself is the variant's factory.
        """
        def decorator(cls):
            cls.provider_id = variant_id
            self.register(ProviderVariant(
                variant_id, cls, implements, enabled, handles, replaces))
            return cls
        return decorator

    def close(self):
        """
        Freeze the catalog. Every identifier in a ``replaces`` set must be
        registered by now.

        :raise ConfigurationError: on a dangling ``replaces`` reference.
        """
        with self._lock:
            if self._closed:
                return self
            for variant in self._variants.values():
                unknown = variant.replaces - set(self._variants)
                if unknown:
                    raise ConfigurationError(
                        'Provider variant replaces unknown variants',
                        variant.variant_id, sorted(unknown))
            self._sorted = tuple(
                self._variants[k] for k in sorted(self._variants))
            self._closed = True
        log.debug('Provider catalog closed with %d variants', len(self._sorted))
        return self

    def variants(self):
        """
        Every variant, ordered by identifier.

        :raise ConfigurationError: if the catalog has not been closed.
        """
        if not self._closed:
            raise ConfigurationError('Provider catalog has not been closed')
        return self._sorted

    def lookup(self, variant_id):
        """
        Look up a variant by its identifier.

        :raise ConfigurationError: if no such variant exists.
        """
        try:
            return self._variants[variant_id]
        except KeyError:
            raise ConfigurationError('Unknown provider variant', variant_id)

    def find_factory(self, factory):
        """The variant registered with the given factory, or :data:`None`."""
        for variant in self._variants.values():
            if variant.factory is factory:
                return variant
        return None

    def __contains__(self, variant_id):
        return variant_id in self._variants

    def __len__(self):
        return len(self._variants)

    def __iter__(self):
        return iter(self.variants())

#
# Predicate builders
#

def always(*args):
    return True

def never(*args):
    return False

def os_is(*names):
    """``enabled`` predicate: the host runs one of the given OSes."""
    def enabled(facts):
        return facts.os in names
    return enabled

def platform_family_is(*names):
    """``enabled`` predicate: the host belongs to a platform family."""
    def enabled(facts):
        return facts.platform_family in names
    return enabled

def installed(tag):
    """``handles`` predicate: a service subsystem is installed on the host."""
    def handles(resource, action, probe):
        return probe.is_installed(tag)
    return handles

def configured(tag):
    """
    ``handles`` predicate: the resource's service is configured for a
    subsystem.
    """
    def handles(resource, action, probe):
        return probe.is_configured(resource.service_name, tag)
    return handles

def all_of(*predicates):
    """Conjunction of ``handles`` predicates, evaluated lazily in order."""
    def handles(resource, action, probe):
        return all(p(resource, action, probe) for p in predicates)
    return handles

def any_of(*predicates):
    """Disjunction of ``handles`` predicates, evaluated lazily in order."""
    def handles(resource, action, probe):
        return any(p(resource, action, probe) for p in predicates)
    return handles

#: The catalog built-in providers register themselves in.
catalog = ProviderCatalog()

def builtin_catalog():
    """
    The catalog of the built-in providers; loads them on first use and
    closes the catalog.
    """
    if not catalog.closed:
        for module in BUILTIN_MODULES:
            importlib.import_module(module)
        catalog.close()
    return catalog
