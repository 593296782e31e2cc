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

import abc
import os


class BaseSubCommand(metaclass=abc.ABCMeta):
    """Base class for xlr-notify subcommands, intended to allow subcommands
    to be loaded as stevedore extensions by third party users.
    """
    def __init__(self):
        pass

    @abc.abstractmethod
    def parse_args(self, subparsers):
        """Define subcommand arguments.

        :param subparsers
          A sub parser object. Implementations of this method should
          create a new subcommand parser by calling
            parser = subparsers.add_parser('command-name', ...)
          This will return a new ArgumentParser object; all other arguments to
          this method will be passed to the argparse.ArgumentParser constructor
          for the returned object.
        """

    @abc.abstractmethod
    def execute(self, options, xlr_config, registry):
        """Execute subcommand behavior.

        :param options
          Parsed command line arguments.
        :param xlr_config
          XLReleaseConfig object containing final configuration from config
          files and environment variables.
        :param registry
          CredentialRegistry loaded from xlr_config.
        """

    @staticmethod
    def parse_option_credential(parser):
        """Add a '--credential' argument to given parser.
        """
        parser.add_argument(
            '-c', '--credential',
            dest='credential',
            default=os.environ.get('XLR_CREDENTIAL', None),
            help="name of the credential to use, defaults to the first one "
            "configured [XLR_CREDENTIAL]")

    @staticmethod
    def resolve_server(registry, credential=None):
        """Return the server for ``credential`` or the default credential.
        """
        snapshot = registry.snapshot()
        if credential is None:
            credential = snapshot.default_credential().name
        return snapshot.lookup(credential)
