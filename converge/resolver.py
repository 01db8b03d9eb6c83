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

""" Resolution of resources to providers

This module selects the provider that converges a declared resource on a
given host. The resolution is performed in stages, the first stage yielding
a provider wins:

1. **Explicit override.** If the resource names its provider, that provider
   is used; no capability predicate and no probe is evaluated.
2. **Dynamic resolution.** Every provider variant in the catalog (in the
   order of their identifiers) that is enabled on the host and implements
   the resource's type is asked whether it handles the resource and the
   action. Variants replaced by another handling variant are dropped. One
   survivor is the result; two or more is an
   :class:`~converge.exceptions.AmbiguousResolution`; none falls through.
3. **Fallback.** Resource types in
   :data:`~converge.platform.default_providers.FORCE_DYNAMIC_RESOLUTION` get
   the default of the :class:`static fallback table
   <converge.platform.default_providers.StaticFallbackTable>`; all others are
   looked up in the :class:`legacy platform table
   <converge.platform.legacy.LegacyPlatformTable>`.

Replacement is evaluated on one level only: the union of the ``replaces``
sets of every handling variant is removed, without computing a transitive
closure. With ``A replaces B`` and ``B replaces C``, if all three handle the
resource only ``A`` survives (``B`` still removes ``C`` although ``B`` is
itself replaced); if only ``A`` and ``C`` handle it, both survive and the
resolution is ambiguous.

The resolver holds no per-call state; one instance can serve concurrent
resolve calls.
"""

__all__ = ['ProviderResolver']

import logging
from converge.exceptions import \
    AmbiguousResolution, NoProviderFound, ProbeFailure
from converge.platform.default_providers import \
    StaticFallbackTable, FORCE_DYNAMIC_RESOLUTION
from converge.platform.legacy import LegacyPlatformTable, DEFAULT_TABLE
from converge.platform.service_helpers import SubsystemProber, ProbeSession
from converge.provider import builtin_catalog
from converge.util import find_effective_setting

log = logging.getLogger('converge.resolver')

def _ids(variants):
    return [v.variant_id for v in variants]

class ProviderResolver(object):
    """
    Resolves resources to providers on a single host.

    :param facts: The platform facts of the host.
    :type facts: :class:`~converge.facts.HostFacts`
    :param catalog: The provider variants; by default the built-in ones.
    :type catalog: :class:`~converge.provider.ProviderCatalog`
    :param prober: Inspects the service subsystems of the host.
    :type prober: :class:`~converge.platform.service_helpers.SubsystemProber`
    :param fallback_table: Default providers of the force-dynamic types.
    :param legacy_table: The legacy platform table; by default the packaged
        one.
    """
    def __init__(self, facts, catalog=None, prober=None,
                 fallback_table=None, legacy_table=None):
        self.facts = facts
        self.catalog = catalog if catalog is not None else builtin_catalog()
        self.prober = prober or SubsystemProber()
        self.fallback_table = \
            fallback_table or StaticFallbackTable(self.prober)
        self.legacy_table = legacy_table or LegacyPlatformTable.load()

    @classmethod
    def from_config(cls, facts, cfg, catalog=None):
        """
        Create a resolver as specified by a configuration.

        :type cfg: :class:`~converge.util.config.YAMLConfig`
        """
        prober = SubsystemProber.from_config(cfg)
        src, table = find_effective_setting(
            [('config', cfg.get('legacy_table')), ('packaged', DEFAULT_TABLE)])
        log.debug('Using %s legacy platform table %r', src, table)
        return cls(facts,
                   catalog=catalog,
                   prober=prober,
                   fallback_table=StaticFallbackTable(prober),
                   legacy_table=LegacyPlatformTable.load(table))

    def must_dynamically_resolve(self, resource):
        return resource.resource_type in FORCE_DYNAMIC_RESOLUTION

    def resolve(self, resource, action, cancel_event=None):
        """
        Select the provider of a resource.

        :param resource: The resource to be converged.
        :type resource: :class:`~converge.facts.ResourceDeclaration`
        :param str action: The requested action; bound to the provider.
        :param cancel_event: Aborts in-flight service manager queries.
        :type cancel_event: :class:`threading.Event`

        :return: The provider instance.
        :rtype: :class:`~converge.provider.Provider`
        :raise AmbiguousResolution: if more than one provider handles the
            resource.
        :raise NoProviderFound: if no stage yields a provider.
        :raise ProbeFailure: if a capability predicate could not be
            evaluated.
        """
        provider = self.maybe_explicit_provider(resource, action)

        if provider is None:
            provider = self.maybe_dynamic_provider_resolution(
                resource, action, cancel_event)

        if provider is None:
            if self.must_dynamically_resolve(resource):
                provider = self.maybe_default_provider(resource, action)
            else:
                provider = self.maybe_platform_lookup(resource, action)

        log.debug('Resolved %s (action %r) to %r', resource, action, provider)
        return provider

    def maybe_explicit_provider(self, resource, action):
        """
        Instantiate the provider named by the resource, if any.

        :raise NoProviderFound: if the named variant is not registered.
        """
        override = resource.provider
        if override is None:
            return None

        if isinstance(override, str):
            if override not in self.catalog:
                raise NoProviderFound(
                    resource, action,
                    'unknown explicit provider {0!r}'.format(override))
            log.debug('Using explicit provider %r for %s', override, resource)
            return self.catalog.lookup(override).instantiate(resource, action)

        variant = self.catalog.find_factory(override)
        if variant is not None:
            log.debug('Using explicit provider %r for %s',
                      variant.variant_id, resource)
            return variant.instantiate(resource, action)

        log.debug('Using unregistered provider class %r for %s',
                  override, resource)
        provider = override(resource, resource.run_context)
        provider.action = action
        return provider

    def dynamic_candidates(self, resource, action, cancel_event=None):
        """
        The provider variants surviving dynamic resolution.

        :return: The list of surviving variants, ordered by identifier.
        :raise ProbeFailure: if the ``handles`` predicate of a candidate
            could not be evaluated. The predicates of the other candidates
            are evaluated nonetheless; the failure lists every variant that
            failed.
        """
        probe = ProbeSession(self.prober, cancel_event)

        handlers = [v for v in self.catalog.variants()
                    if v.is_candidate(resource, self.facts)]
        # Which providers would work for the resource type on this host
        log.debug('Providers for generic %r resource enabled on the host: %r',
                  resource.resource_type, _ids(handlers))

        supported, failures = list(), list()
        for variant in handlers:
            try:
                if variant.handles(resource, action, probe):
                    supported.append(variant)
            except ProbeFailure as ex:
                log.debug('Cannot decide whether %r handles %s: %s',
                          variant.variant_id, resource, ex)
                failures.append((variant, ex))
        if failures:
            raise failures[0][1].for_resource(
                resource, action, _ids(v for v, _ in failures))

        # Which providers were excluded by the configuration of the host
        log.debug('Providers that support %s: %r', resource, _ids(supported))

        replaced = set()
        for variant in supported:
            replaced.update(variant.replaces)
        survivors = [v for v in supported if v.variant_id not in replaced]

        log.debug('Providers that survived replacement: %r', _ids(survivors))
        return survivors

    def maybe_dynamic_provider_resolution(self, resource, action,
                                          cancel_event=None):
        survivors = self.dynamic_candidates(resource, action, cancel_event)
        if len(survivors) >= 2:
            raise AmbiguousResolution(resource, action, _ids(survivors))
        if not survivors:
            return None
        return survivors[0].instantiate(resource, action)

    def maybe_default_provider(self, resource, action):
        """Provider from the static fallback table."""
        provider_id = self.fallback_table.provider_for(
            resource.resource_type, self.facts)
        log.debug('Falling back to default provider %r for %s',
                  provider_id, resource)
        return self.catalog.lookup(provider_id).instantiate(resource, action)

    def maybe_platform_lookup(self, resource, action):
        """
        Provider from the legacy platform table.

        :raise NoProviderFound: if the table has no mapping.
        """
        provider_id = self.legacy_table.provider_for(
            resource.resource_type, self.facts)
        if provider_id is None:
            raise NoProviderFound(resource, action, 'no legacy mapping')
        log.debug('Legacy platform table maps %s to %r', resource, provider_id)
        return self.catalog.lookup(provider_id).instantiate(resource, action)
