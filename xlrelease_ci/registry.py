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

# Map credential names to ready to use XL Release servers.

import logging
import threading
from types import MappingProxyType

from xlrelease_ci.errors import CredentialNotFoundError
from xlrelease_ci.errors import EmptyRegistryError
from xlrelease_ci import server

__all__ = [
    "CredentialRegistry",
    "RegistrySnapshot",
]

logger = logging.getLogger(__name__)


class RegistrySnapshot(object):
    """One complete, immutable generation of the registry.

    A build step should take a snapshot once and use it for all of its calls,
    it will not change underneath it when the configuration is reloaded.
    """

    __slots__ = ('version', 'credentials', 'servers')

    def __init__(self, version, credentials, servers):
        self.version = version
        self.credentials = tuple(credentials)
        self.servers = MappingProxyType(dict(servers))

    def lookup(self, name):
        if name is None or name not in self.servers:
            raise CredentialNotFoundError(name)
        return self.servers[name]

    def default_credential(self):
        if not self.credentials:
            raise EmptyRegistryError(
                "No credentials defined in the system configuration")
        return self.credentials[0]

    def credential_names(self):
        return [credential.name for credential in self.credentials]

    def __len__(self):
        return len(self.servers)

    def __repr__(self):
        return "RegistrySnapshot(version=%d, names=%r)" % (
            self.version, list(self.servers))


class CredentialRegistry(object):

    def __init__(self, timeout=server.DEFAULT_TIMEOUT):
        self.timeout = timeout
        self._lock = threading.Lock()
        self._snapshot = RegistrySnapshot(0, (), {})

    def snapshot(self):
        return self._snapshot

    def reload(self, credentials, default_server_url, default_proxy_url,
               timeout=None):
        """Rebuild the whole mapping from ``credentials``.

        Credential level URLs win over the given defaults. When two
        credentials share a name the later one wins. The new mapping is
        published in a single assignment so concurrent readers see either
        the previous or the new generation, never a mix. Reloads run one at
        a time, so the timeout and servers of a generation always come from
        the same call.
        """
        credentials = tuple(credentials)
        with self._lock:
            if timeout is not None:
                self.timeout = timeout
            servers = {}
            for credential in credentials:
                if credential.name in servers:
                    logger.warning("Credential '%s' is defined more than "
                                   "once, the last definition wins",
                                   credential.name)
                servers[credential.name] = server.new_instance(
                    credential.resolve_server_url(default_server_url),
                    credential.resolve_proxy_url(default_proxy_url),
                    credential.username,
                    credential.password,
                    timeout=self.timeout)

            snapshot = RegistrySnapshot(self._snapshot.version + 1,
                                        credentials, servers)
            self._snapshot = snapshot
        logger.debug("Loaded %d XL Release credential(s), registry "
                     "version %d", len(snapshot), snapshot.version)
        return snapshot

    def reload_from_config(self, config):
        return self.reload(config.credentials,
                           config.xlrelease['url'],
                           config.xlrelease['proxy_url'],
                           timeout=config.xlrelease['timeout'])

    def watch(self, config):
        """Load from ``config`` now and after every later configure()."""
        config.add_listener(self.reload_from_config)
        return self.reload_from_config(config)

    def lookup(self, name):
        return self._snapshot.lookup(name)

    def default_credential(self):
        return self._snapshot.default_credential()

    def credential_names(self):
        return self._snapshot.credential_names()
