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

# Manage XL Release configuration sources, defaults, and access.

from collections import defaultdict
import configparser
import io
import logging
import os
import re
import tempfile
from urllib.parse import urlparse

from xlrelease_ci.credentials import Credential
from xlrelease_ci.errors import XLReleaseConfigException
from xlrelease_ci import server

__all__ = [
    "XLReleaseConfig"
]

logger = logging.getLogger(__name__)

DEFAULT_CONF = """
[xlrelease]
url=http://localhost:5516/
proxy_url=
"""

CONFIG_REQUIRED_MESSAGE = ("A valid configuration file is required. "
                           "No configuration file passed.")
CREDENTIAL_SECTION = 'credential "{0}"'
CREDENTIAL_SECTION_RE = re.compile(r'^credential "(?P<name>.+)"$')


class XLReleaseConfig(object):

    def __init__(self, config_filename=None,
                 config_file_required=False,
                 config_section='xlrelease'):
        """
        Collect the global XL Release settings and the named credentials
        from an ini file, falling back to built in defaults.

        :arg str config_filename: Name of configuration file on which to base
            this config object.
        :arg bool config_file_required: Whether failure to read a config file
            raises an exception or simply logs a warning and keeps the
            default values.
        :arg str config_section: Name of the section holding the server url,
            proxy url and timeout.
        """

        config_parser = self._init_defaults()

        global_conf = '/etc/xlrelease_ci/xlrelease.ini'
        user_conf = os.path.join(os.path.expanduser('~'), '.config',
                                 'xlrelease_ci', 'xlrelease.ini')
        local_conf = os.path.join(os.path.dirname(__file__),
                                  'xlrelease.ini')
        conf = None
        if config_filename is not None:
            conf = config_filename
        else:
            if os.path.isfile(local_conf):
                conf = local_conf
            elif os.path.isfile(user_conf):
                conf = user_conf
            else:
                conf = global_conf

        self.config_filename = None
        config_fp = None
        try:
            config_fp = self._read_config_file(conf)
        except XLReleaseConfigException:
            if config_file_required:
                raise XLReleaseConfigException(CONFIG_REQUIRED_MESSAGE)
            else:
                logger.warning("Config file, {0}, not found. Using "
                               "default config values.".format(conf))

        if config_fp is not None:
            with config_fp:
                config_parser.read_file(config_fp)

        self.config_parser = config_parser

        self._section = config_section
        self._listeners = []

        self.xlrelease = defaultdict(None)
        self.credentials = []

        self._setup()

    def _init_defaults(self):
        """ Initialize default configuration values using DEFAULT_CONF
        """
        config = configparser.ConfigParser(interpolation=None)
        config.read_string(DEFAULT_CONF)
        return config

    def _read_config_file(self, config_filename):
        """ Given path to configuration file, open it for reading and
        remember it so that later saves go back to the same file.
        """
        if os.path.isfile(config_filename):
            self.config_filename = config_filename
            logger.debug("Reading config from {0}".format(config_filename))
            config_fp = io.open(config_filename, 'r', encoding='utf-8')
        else:
            raise XLReleaseConfigException(
                "A valid configuration file is required. "
                "\n{0} is not valid.".format(config_filename))

        return config_fp

    def _get_option(self, section, option, default=None):
        if not self.config_parser.has_option(section, option):
            return default
        return self.config_parser.get(section, option).strip() or default

    def _setup(self):
        config = self.config_parser

        if not config.has_section(self._section):
            raise XLReleaseConfigException(
                "Server section [{0}] not found in configuration".format(
                    self._section))

        self.xlrelease['url'] = self._get_option(self._section, 'url', '')
        self.xlrelease['proxy_url'] = self._get_option(self._section,
                                                       'proxy_url', '')

        # requests waits forever without a timeout, always keep one
        try:
            timeout = config.getfloat(self._section, 'timeout')
        except ValueError:
            raise XLReleaseConfigException(
                "XL Release timeout config is invalid")
        except configparser.NoOptionError:
            timeout = server.DEFAULT_TIMEOUT
        self.xlrelease['timeout'] = timeout

        credentials = []
        for section in config.sections():
            match = CREDENTIAL_SECTION_RE.match(section)
            if not match:
                continue
            credentials.append(Credential(
                match.group('name'),
                self._get_option(section, 'username'),
                self._get_option(section, 'password'),
                server_url=self._get_option(section, 'server_url'),
                proxy_url=self._get_option(section, 'proxy_url')))
        self.credentials = credentials
        logger.debug("Config: {0} credential(s) for {1}".format(
            len(credentials), self.xlrelease['url']))

    @staticmethod
    def _validate_url(url, label, required=False):
        if not url:
            if required:
                raise XLReleaseConfigException("{0} required.".format(label))
            return
        parsed = urlparse(url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise XLReleaseConfigException(
                "{0} is not a valid URL.".format(url))

    def validate(self):
        self._validate_url(self.xlrelease['url'], "Url")
        self._validate_url(self.xlrelease['proxy_url'], "Proxy url")

        if self.xlrelease['timeout'] <= 0:
            raise XLReleaseConfigException(
                "XL Release timeout must be a positive number of seconds")

        if not self.credentials:
            logger.info("No XL Release credentials are configured.")

        for credential in self.credentials:
            if credential.username is None or credential.password is None:
                raise XLReleaseConfigException(
                    "Credential '{0}' needs both a username and a password, "
                    "please check your configuration.".format(
                        credential.name))
            self._validate_url(
                credential.resolve_server_url(self.xlrelease['url']),
                "Url for credential '{0}'".format(credential.name),
                required=True)
            self._validate_url(credential.proxy_url, "Proxy url")

    def add_listener(self, callback):
        """Register ``callback(config)`` to run after every configure()."""
        self._listeners.append(callback)

    def configure(self, server_url, proxy_url, credentials):
        """Replace the global settings and the credential list.

        The new values are checked with validate() and, if any is invalid,
        dropped with the current settings left untouched. Otherwise they are
        written back to the file the configuration was read from, if any,
        before listeners are told about the change.
        """
        config = configparser.ConfigParser(interpolation=None)
        config.read_dict(self.config_parser)
        for section in config.sections():
            if CREDENTIAL_SECTION_RE.match(section):
                config.remove_section(section)

        config.set(self._section, 'url', server_url or '')
        config.set(self._section, 'proxy_url', proxy_url or '')
        for credential in credentials:
            section = CREDENTIAL_SECTION.format(credential.name)
            if not config.has_section(section):
                config.add_section(section)
            config.set(section, 'username', credential.username or '')
            config.set(section, 'password', credential.password or '')
            if credential.server_url:
                config.set(section, 'server_url', credential.server_url)
            if credential.proxy_url:
                config.set(section, 'proxy_url', credential.proxy_url)

        previous = self.config_parser
        self.config_parser = config
        try:
            self._setup()
            self.validate()
        except XLReleaseConfigException:
            self.config_parser = previous
            self._setup()
            raise

        if self.config_filename is not None:
            self.save()

        for listener in self._listeners:
            listener(self)

    def save(self, config_filename=None):
        filename = config_filename or self.config_filename
        if filename is None:
            raise XLReleaseConfigException(
                "No configuration file to save to.")

        buf = io.StringIO()
        self.config_parser.write(buf)

        # write to tempfile under same directory and then replace to avoid
        # leaving a truncated file behind should the process be killed
        directory = os.path.dirname(os.path.abspath(filename))
        tfile = tempfile.NamedTemporaryFile(dir=directory, delete=False)
        try:
            tfile.write(buf.getvalue().encode('utf-8'))
            tfile.flush()
            os.fsync(tfile.fileno())
        finally:
            tfile.close()
        os.replace(tfile.name, filename)

        self.config_filename = filename
        logger.debug("Config written out to '%s'" % filename)
