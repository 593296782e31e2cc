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

from stevedore import extension

from xlrelease_ci.cli.parser import create_parser
from xlrelease_ci.cli.parser import SUBCOMMAND_NAMESPACE
from xlrelease_ci.config import XLReleaseConfig
from xlrelease_ci.registry import CredentialRegistry

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger()


class XLReleaseCI(object):
    """ This is the entry point class for the `xlr-notify` command line tool.

    It can also be driven programmatically: pass the same arguments the
    command line would get and call :meth:`execute`. Tests of subcommands
    go through this class and provide their configuration as an .ini file
    fixture rather than by building configuration objects directly.
    """

    def __init__(self, args=None, **kwargs):
        if args is None:
            args = []
        self.parser = create_parser()
        self.options = self.parser.parse_args(args)

        self.xlr_config = XLReleaseConfig(self.options.conf,
                                          config_section=self.options.section,
                                          **kwargs)

        if not self.options.command:
            self.parser.error("Must specify a 'command' to be performed")

        if (self.options.log_level is not None):
            self.options.log_level = getattr(logging,
                                             self.options.log_level.upper(),
                                             logger.getEffectiveLevel())
            logger.setLevel(self.options.log_level)

        self.xlr_config.validate()

        self.registry = CredentialRegistry()
        self.registry.watch(self.xlr_config)

    def execute(self):

        extension_manager = extension.ExtensionManager(
            namespace=SUBCOMMAND_NAMESPACE,
            invoke_on_load=True,)

        ext = extension_manager[self.options.command]
        ext.obj.execute(self.options, self.xlr_config, self.registry)


def main():
    argv = sys.argv[1:]
    xlr = XLReleaseCI(argv)
    xlr.execute()


if __name__ == "__main__":
    main()
