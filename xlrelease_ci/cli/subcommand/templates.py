#!/usr/bin/env python
# Copyright (C) 2013 XebiaLabs B.V.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

import logging
import sys

import yaml

import xlrelease_ci.cli.subcommand.base as base


logger = logging.getLogger(__name__)


class TemplatesSubCommand(base.BaseSubCommand):

    def parse_args(self, subparser):
        templates = subparser.add_parser(
            'templates',
            help="list the release templates whose title contains FILTER")

        self.parse_option_credential(templates)

        templates.add_argument(
            'title_filter',
            nargs='?',
            default='',
            metavar='FILTER',
            help="case sensitive part of the template title")
        templates.add_argument(
            '--yaml',
            action='store_true',
            dest='as_yaml',
            default=False,
            help="dump the matching templates as YAML")

    def execute(self, options, xlr_config, registry):
        xlrelease = self.resolve_server(registry, options.credential)
        templates = xlrelease.search_templates(options.title_filter)
        logger.info("Matching templates: %d", len(templates))

        if options.as_yaml:
            sys.stdout.write(yaml.safe_dump(
                [template.to_dict() for template in templates],
                default_flow_style=False))
            return

        for template in templates:
            sys.stdout.write(u"{0}\t{1}\n".format(template.id, template.title))
