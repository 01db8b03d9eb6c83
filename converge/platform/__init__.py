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

""" Platform facts and tables

- :mod:`~converge.platform.service_helpers` probes the service-management
  subsystems of the host.
- :mod:`~converge.platform.default_providers` is the static fallback table
  of the resource types that must be resolved dynamically.
- :mod:`~converge.platform.legacy` is the platform and version indexed
  table used for every other resource type.
"""
