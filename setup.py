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
#!/usr/bin/env -e python

import setuptools

setuptools.setup(
    name='Converge-Resolver',
    version='1.0',
    author='MTA SZTAKI',
    author_email='occopus@lpds.sztaki.hu',
    packages=[
        'converge',
        'converge.platform',
        'converge.provider',
        'converge.util',
    ],
    package_data={
        'converge.platform': ['legacy_platforms.yaml'],
        'converge.util': ['default.yaml'],
    },
    entry_points={
        'console_scripts': [
            'converge-resolve = converge.cli:main',
        ],
    },
    url='https://github.com/occopus',
    license='Apache License, Version 2.0',
    description='Provider resolution for declared infrastructure resources',
    python_requires='>=3.7',
    install_requires=[
        'Jinja2',
        'ruamel.yaml>=0.17',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
