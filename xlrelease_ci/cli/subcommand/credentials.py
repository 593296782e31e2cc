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

import sys

import xlrelease_ci.cli.subcommand.base as base


class CredentialsSubCommand(base.BaseSubCommand):

    def parse_args(self, subparser):
        subparser.add_parser(
            'credentials',
            help="list the names of the configured credentials")

    def execute(self, options, xlr_config, registry):
        for name in registry.credential_names():
            sys.stdout.write(name + '\n')
