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

""" Provider resolution for converging declared resources

This package selects, for a declared resource (e.g. *service ntp should be
started*) on a given host, the single provider implementation responsible
for converging it. The entry point is
:meth:`converge.resolver.ProviderResolver.resolve`; everything else supplies
the facts it needs:

- :mod:`converge.facts` holds the host and resource descriptions.
- :mod:`converge.provider` is the closed catalog of provider variants and
  their capability predicates.
- :mod:`converge.platform` probes the service-management subsystems of the
  host and holds the static fallback and legacy platform tables.

.. autoclass:: converge.resolver.ProviderResolver
    :members: resolve
"""

__version__ = '1.0'
