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

# Talk to an XL Release server over its REST API

import logging
from urllib.parse import quote
from urllib.parse import urljoin

import requests
import requests.exceptions as req_exc

from xlrelease_ci.credentials import ServerConnection
from xlrelease_ci.errors import ConnectivityError
from xlrelease_ci.errors import RemoteError
from xlrelease_ci.errors import SerializationError
from xlrelease_ci.views import CreateReleaseRequest
from xlrelease_ci.views import ReleaseTemplateView
from xlrelease_ci.views import ReleaseView

__all__ = [
    "DEFAULT_TIMEOUT",
    "XLReleaseServer",
    "new_instance",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

RELEASES = 'releases'
TEMPLATES = 'releases/templates'
START_RELEASE = 'releases/%(release_id)s/start'


def new_instance(server_url, proxy_url, username, password,
                 timeout=DEFAULT_TIMEOUT):
    return XLReleaseServer(
        ServerConnection(server_url, proxy_url, username, password),
        timeout=timeout)


class XLReleaseServer(object):
    """REST client bound to one resolved :class:`ServerConnection`.

    Every method issues exactly one blocking request on the calling thread
    and raises :class:`ConnectivityError`, :class:`RemoteError` or
    :class:`SerializationError` on failure. Nothing is retried.

    No session is shared between calls, so a single instance may be used
    from several build executions at once.
    """

    def __init__(self, connection, timeout=DEFAULT_TIMEOUT):
        self.connection = connection
        self.timeout = timeout

        server_url = connection.server_url or ''
        if server_url and not server_url.endswith('/'):
            server_url += '/'
        self.server = server_url

    def _build_url(self, format_spec, variables=None):
        if variables:
            url_path = format_spec % dict(
                (key, quote(value, safe='')) for key, value in
                variables.items())
        else:
            url_path = format_spec
        return urljoin(self.server, url_path)

    def _request_kwargs(self):
        kwargs = {
            'auth': requests.auth.HTTPBasicAuth(self.connection.username,
                                                self.connection.password),
            'headers': {'Accept': 'application/json'},
            'timeout': self.timeout,
        }
        if self.connection.proxy_url:
            kwargs['proxies'] = {'http': self.connection.proxy_url,
                                 'https': self.connection.proxy_url}
        return kwargs

    def _request(self, method, url, **kwargs):
        request_kwargs = self._request_kwargs()
        request_kwargs.update(kwargs)
        try:
            response = requests.request(method, url, **request_kwargs)
            response.raise_for_status()
        except req_exc.HTTPError as e:
            raise RemoteError(e.response.status_code, e.response.reason,
                              url, e.response.text)
        except req_exc.Timeout as e:
            raise ConnectivityError(
                "Timed out after {0}s talking to {1}: {2}".format(
                    self.timeout, url, e))
        except req_exc.RequestException as e:
            raise ConnectivityError(
                "Unable to reach XL Release at {0}: {1}".format(url, e))
        return response

    def _json(self, response):
        try:
            return response.json()
        except ValueError as e:
            raise SerializationError(
                "Invalid JSON returned by {0}: {1}".format(response.url, e))

    def get_version(self):
        return self.connection.server_url

    def check_connectivity(self):
        logger.info("Check that XL Release is running")
        url = self._build_url(RELEASES)
        response = self._request('GET', url)
        result = "GET {0} returned a response status of {1} {2}".format(
            url, response.status_code, response.reason)
        logger.info(result)
        return result

    def search_templates(self, title_filter):
        logger.info("Get all the templates")
        response = self._request('GET', self._build_url(TEMPLATES))
        data = self._json(response)
        if not isinstance(data, list):
            raise SerializationError(
                "Expected a JSON array of templates from {0}, got {1}".format(
                    response.url, type(data).__name__))

        templates = [ReleaseTemplateView.from_json(item) for item in data]
        if title_filter is not None:
            templates = [t for t in templates if title_filter in t.title]
        logger.debug("Templates matching '%s': %s", title_filter, templates)
        return templates

    def create_release(self, template_id, version, create_request=None):
        logger.info("Create a release for %s", template_id)
        if create_request is None:
            create_request = CreateReleaseRequest()
        payload = create_request.to_json(template_id, version)
        logger.debug("Release creation payload: %s", payload)

        response = self._request('POST', self._build_url(RELEASES),
                                 json=payload)
        return ReleaseView.from_json(self._json(response))

    def start_release(self, release_id):
        logger.info("Start the release for: %s", release_id)
        self._request('POST', self._build_url(
            START_RELEASE, {'release_id': release_id}))
        return True

    def __repr__(self):
        return "XLReleaseServer(%r)" % (self.connection,)
