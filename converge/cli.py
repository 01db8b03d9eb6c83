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

""" Command line front-end of the resolver

Resolves a single resource on the local host, using host facts read from a
YAML inventory file, and prints the identifier of the selected provider::

    converge-resolve --facts host.yaml service ntp start

Resolution errors are printed to the standard error as YAML, with the
structured details of the error.
"""

__all__ = ['main']

import argparse
import logging
import logging.config
import sys
from ruamel.yaml import YAML
from converge.exceptions import ResolutionError, ConfigurationError
from converge.facts import HostFacts, ResourceDeclaration
from converge.resolver import ProviderResolver
from converge.util.config import DefaultYAMLConfig

log = logging.getLogger('converge.cli')

def build_parser():
    parser = argparse.ArgumentParser(
        prog='converge-resolve',
        description='Select the provider of a declared resource.')
    parser.add_argument('--facts', required=True,
                        help='YAML file containing the host facts')
    parser.add_argument('--config', default=None,
                        help='YAML configuration file')
    parser.add_argument('--provider', default=None,
                        help='explicit provider variant identifier')
    parser.add_argument('--service-name', default=None,
                        help='name of the service, if different from NAME')
    parser.add_argument('resource_type', metavar='TYPE')
    parser.add_argument('name', metavar='NAME')
    parser.add_argument('action', metavar='ACTION')
    return parser

def dump_error(data, stream):
    yaml = YAML(typ='safe')
    yaml.default_flow_style = False
    yaml.dump(data, stream)

def main(argv=None, stdout=sys.stdout, stderr=sys.stderr):
    """
    Entry point of ``converge-resolve``.

    :return: The exit status: 0 on success, 1 on a resolution error, 2 on a
        configuration error.
    """
    args = build_parser().parse_args(argv)

    try:
        cfg = DefaultYAMLConfig(args.config)
        logging.config.dictConfig(cfg.logging)
        facts = HostFacts.load(args.facts)
        attributes = dict()
        if args.service_name:
            attributes['service_name'] = args.service_name
        resource = ResourceDeclaration(args.resource_type, args.name,
                                       action=args.action,
                                       provider=args.provider,
                                       attributes=attributes)
        resolver = ProviderResolver.from_config(facts, cfg)
        provider = resolver.resolve(resource, args.action)
    except ResolutionError as ex:
        log.debug('Resolution failed: %s', ex)
        dump_error(ex.as_dict(), stderr)
        return 1
    except ConfigurationError as ex:
        dump_error(dict(kind='configuration_error', message=str(ex)), stderr)
        return 2

    stdout.write('{0}\n'.format(provider.provider_id))
    return 0

if __name__ == '__main__':
    sys.exit(main())
