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

""" Filesystem providers

These are not dynamic candidates: file-like resources are always resolved
through the static fallback table.
"""

__all__ = ['FileProvider', 'DirectoryProvider', 'TemplateProvider',
           'LinkProvider', 'RemoteDirectoryProvider']

from converge.provider import Provider, catalog

@catalog.provider('file')
class FileProvider(Provider):
    """Manages the content and mode of a single file."""

    @property
    def path(self):
        return self.new_resource.attributes.get('path', self.new_resource.name)

@catalog.provider('template')
class TemplateProvider(FileProvider):
    """A file rendered from a template."""

@catalog.provider('directory')
class DirectoryProvider(FileProvider):
    pass

@catalog.provider('remote_directory')
class RemoteDirectoryProvider(DirectoryProvider):
    """A directory tree copied from a cookbook."""

@catalog.provider('link')
class LinkProvider(Provider):
    pass
