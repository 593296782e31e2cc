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

# Named credentials and the server coordinates resolved from them.

from collections import namedtuple

__all__ = [
    "Credential",
    "ServerConnection",
]

_MASK = '******'


class Credential(namedtuple('Credential', ['name', 'username', 'password',
                                           'server_url', 'proxy_url'])):
    """A named set of authentication details configured by an operator.

    ``server_url`` and ``proxy_url`` are optional and, when set, override the
    global defaults for every server built from this credential.
    """
    __slots__ = ()

    def __new__(cls, name, username, password, server_url=None,
                proxy_url=None):
        return super(Credential, cls).__new__(
            cls, name, username, password, server_url or None,
            proxy_url or None)

    def resolve_server_url(self, default_server_url):
        return self.server_url or default_server_url or ''

    def resolve_proxy_url(self, default_proxy_url):
        return self.proxy_url or default_proxy_url or ''

    def connection(self, default_server_url, default_proxy_url):
        return ServerConnection(
            self.resolve_server_url(default_server_url),
            self.resolve_proxy_url(default_proxy_url),
            self.username,
            self.password)

    def __repr__(self):
        return ("Credential(name=%r, username=%r, password=%r, "
                "server_url=%r, proxy_url=%r)" % (
                    self.name, self.username, _MASK, self.server_url,
                    self.proxy_url))


class ServerConnection(namedtuple('ServerConnection', ['server_url',
                                                       'proxy_url',
                                                       'username',
                                                       'password'])):
    __slots__ = ()

    def __repr__(self):
        return ("ServerConnection(server_url=%r, proxy_url=%r, username=%r, "
                "password=%r)" % (self.server_url, self.proxy_url,
                                  self.username, _MASK))
