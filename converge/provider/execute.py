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

""" Command and code execution providers
"""

__all__ = ['ExecuteProvider', 'ScriptProvider', 'ErlCallProvider',
           'RubyBlockProvider', 'WhyrunSafeRubyBlockProvider']

from converge.provider import Provider, catalog

@catalog.provider('execute')
class ExecuteProvider(Provider):
    """Runs a command."""

    @property
    def command(self):
        return self.new_resource.attributes.get('command',
                                                self.new_resource.name)

@catalog.provider('script')
class ScriptProvider(ExecuteProvider):
    """
    Runs a script with an interpreter. The interpreter defaults to the
    resource type (``bash``, ``python``...).
    """

    @property
    def interpreter(self):
        return self.new_resource.attributes.get(
            'interpreter', self.new_resource.resource_type)

@catalog.provider('erl_call')
class ErlCallProvider(Provider):
    pass

@catalog.provider('ruby_block')
class RubyBlockProvider(Provider):
    pass

@catalog.provider('whyrun_safe_ruby_block')
class WhyrunSafeRubyBlockProvider(RubyBlockProvider):
    pass
