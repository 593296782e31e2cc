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

import xlrelease_ci.cli.subcommand.base as base
from xlrelease_ci.notifier import load_steps


logger = logging.getLogger(__name__)


class NotifySubCommand(base.BaseSubCommand):

    def parse_args(self, subparser):
        notify = subparser.add_parser(
            'notify',
            help="create and start the releases described in a YAML file")

        notify.add_argument(
            'path',
            help="YAML file with the build step definitions, '-' for stdin")
        notify.add_argument(
            '-c', '--credential',
            dest='credential',
            default=None,
            help="use this credential for every step instead of the one "
            "each step names")

    def execute(self, options, xlr_config, registry):
        if options.path == '-':
            steps = load_steps(sys.stdin)
        else:
            steps = load_steps(options.path)
        logger.info("Number of build steps: %d", len(steps))

        # one snapshot for the whole run, later reloads do not affect it
        snapshot = registry.snapshot()
        failed = 0
        for step in steps:
            if options.credential is not None:
                step.credential = options.credential
            if not step.run(snapshot):
                failed += 1

        if failed:
            logger.error("%d of %d build step(s) failed", failed, len(steps))
            sys.exit(1)
