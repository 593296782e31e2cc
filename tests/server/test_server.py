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

import requests.exceptions as req_exc

from xlrelease_ci import errors
from xlrelease_ci import server
from xlrelease_ci.views import CreateReleaseRequest
from xlrelease_ci.views import ReleaseView
from tests import base
from tests.base import mock

SERVER_URL = 'http://xlr.example.com:5516'

_templates = [
    {'id': 'Release1', 'title': 'Release A', 'status': 'TEMPLATE'},
    {'id': 'Release2', 'title': 'Other', 'status': 'TEMPLATE'},
    {'id': 'Release3', 'title': 'Bug Release', 'status': 'TEMPLATE',
     'tags': ['hotfix']},
]


@mock.patch('xlrelease_ci.server.requests.request')
class TestXLReleaseServer(base.BaseTestCase):

    def setUp(self):
        super(TestXLReleaseServer, self).setUp()
        self.xlrelease = server.new_instance(SERVER_URL, '', 'admin',
                                             'secret', timeout=10.0)

    def test_check_connectivity(self, request_mock):
        request_mock.return_value = base.make_response(200, [])

        result = self.xlrelease.check_connectivity()

        self.assertEqual(
            'GET http://xlr.example.com:5516/releases returned a response '
            'status of 200 OK', result)
        request_mock.assert_called_once_with(
            'GET', 'http://xlr.example.com:5516/releases',
            auth=mock.ANY, headers={'Accept': 'application/json'},
            timeout=10.0)
        auth = request_mock.call_args[1]['auth']
        self.assertEqual(('admin', 'secret'), (auth.username, auth.password))
        self.assertIn('Check that XL Release is running', self.logger.output)

    def test_server_url_keeps_context_path(self, request_mock):
        request_mock.return_value = base.make_response(200, [])
        xlrelease = server.new_instance('https://example.com/xlrelease', '',
                                        'admin', 'secret')

        xlrelease.check_connectivity()

        self.assertEqual('https://example.com/xlrelease/releases',
                         request_mock.call_args[0][1])
        self.assertEqual(server.DEFAULT_TIMEOUT,
                         request_mock.call_args[1]['timeout'])

    def test_proxy_is_used(self, request_mock):
        request_mock.return_value = base.make_response(200, [])
        xlrelease = server.new_instance(SERVER_URL, 'http://proxy:3128',
                                        'admin', 'secret')

        xlrelease.check_connectivity()

        self.assertEqual({'http': 'http://proxy:3128',
                          'https': 'http://proxy:3128'},
                         request_mock.call_args[1]['proxies'])

    def test_search_templates_filters_by_title(self, request_mock):
        request_mock.return_value = base.make_response(200, _templates)

        templates = self.xlrelease.search_templates('Rel')

        self.assertEqual(['Release A', 'Bug Release'],
                         [t.title for t in templates])
        self.assertEqual(['Release1', 'Release3'], [t.id for t in templates])
        self.assertEqual({'tags': ['hotfix']}, templates[1].extra)
        request_mock.assert_called_once_with(
            'GET', 'http://xlr.example.com:5516/releases/templates',
            auth=mock.ANY, headers={'Accept': 'application/json'},
            timeout=10.0)

    def test_search_templates_is_case_sensitive(self, request_mock):
        request_mock.return_value = base.make_response(200, _templates)
        self.assertEqual([], self.xlrelease.search_templates('rel'))

    def test_search_templates_empty_filter_matches_all(self, request_mock):
        request_mock.return_value = base.make_response(200, _templates)
        self.assertEqual(3, len(self.xlrelease.search_templates('')))

    def test_search_templates_none_filter_matches_all(self, request_mock):
        request_mock.return_value = base.make_response(200, _templates)
        self.assertEqual(3, len(self.xlrelease.search_templates(None)))

    def test_search_templates_not_a_list(self, request_mock):
        request_mock.return_value = base.make_response(
            200, {'id': 'Release1', 'title': 'Release A'})
        self.assertRaises(errors.SerializationError,
                          self.xlrelease.search_templates, 'Rel')

    def test_search_templates_invalid_json(self, request_mock):
        request_mock.return_value = base.make_response(200, '<html></html>')
        self.assertRaises(errors.SerializationError,
                          self.xlrelease.search_templates, 'Rel')

    def test_search_templates_missing_title(self, request_mock):
        request_mock.return_value = base.make_response(
            200, [{'id': 'Release1'}])
        self.assertRaises(errors.SerializationError,
                          self.xlrelease.search_templates, 'Rel')

    def test_create_release(self, request_mock):
        request_mock.return_value = base.make_response(
            200, {'id': 'Release42', 'title': 'Nightly 1.0',
                  'status': 'PLANNED'})
        create_request = CreateReleaseRequest(
            title='Nightly 1.0', variables={'${env}': 'test'})

        release = self.xlrelease.create_release('Release1', '1.0',
                                                create_request)

        self.assertEqual(ReleaseView('Release42', 'Nightly 1.0', 'PLANNED'),
                         release)
        request_mock.assert_called_once_with(
            'POST', 'http://xlr.example.com:5516/releases',
            auth=mock.ANY, headers={'Accept': 'application/json'},
            timeout=10.0,
            json={'templateId': 'Release1', 'version': '1.0',
                  'title': 'Nightly 1.0', 'variables': {'${env}': 'test'}})
        self.assertIn('Create a release for Release1', self.logger.output)

    def test_create_release_default_payload(self, request_mock):
        request_mock.return_value = base.make_response(200, {'id': 'R1'})

        self.xlrelease.create_release('Release1', '2.3')

        self.assertEqual({'templateId': 'Release1', 'version': '2.3',
                          'title': '2.3', 'variables': {}},
                         request_mock.call_args[1]['json'])

    def test_create_release_without_id(self, request_mock):
        request_mock.return_value = base.make_response(200, {'title': 'x'})
        self.assertRaises(errors.SerializationError,
                          self.xlrelease.create_release, 'Release1', '1.0')

    def test_create_release_numeric_id(self, request_mock):
        request_mock.return_value = base.make_response(200, {'id': 42})
        self.assertRaises(errors.SerializationError,
                          self.xlrelease.create_release, 'Release1', '1.0')

    def test_start_release(self, request_mock):
        request_mock.return_value = base.make_response(204)

        self.assertTrue(self.xlrelease.start_release('Release42'))

        request_mock.assert_called_once_with(
            'POST', 'http://xlr.example.com:5516/releases/Release42/start',
            auth=mock.ANY, headers={'Accept': 'application/json'},
            timeout=10.0)
        self.assertIn('Start the release for: Release42', self.logger.output)

    def test_start_release_quotes_id(self, request_mock):
        request_mock.return_value = base.make_response(204)

        self.xlrelease.start_release('Applications/Release42')

        self.assertEqual(
            'http://xlr.example.com:5516/releases/'
            'Applications%2FRelease42/start',
            request_mock.call_args[0][1])

    def test_get_version(self, request_mock):
        self.assertEqual(SERVER_URL, self.xlrelease.get_version())
        self.assertFalse(request_mock.called)

    def test_repr_hides_password(self, request_mock):
        self.assertNotIn('secret', repr(self.xlrelease))


_operations = [
    ('check_connectivity', ()),
    ('search_templates', ('Rel',)),
    ('create_release', ('Release1', '1.0')),
    ('start_release', ('Release1',)),
]


class TestXLReleaseServerFailures(base.BaseTestCase):
    """Every operation reports failures, none returns an empty result."""

    def setUp(self):
        super(TestXLReleaseServerFailures, self).setUp()
        self.xlrelease = server.new_instance(SERVER_URL, '', 'admin',
                                             'secret')

    def _check_all(self, exc_class, **patch_kwargs):
        raised = []
        for name, args in _operations:
            with mock.patch('xlrelease_ci.server.requests.request',
                            **patch_kwargs):
                e = self.assertRaises(exc_class,
                                      getattr(self.xlrelease, name), *args)
            raised.append(e)
        return raised

    def test_connection_refused(self):
        raised = self._check_all(
            errors.ConnectivityError,
            side_effect=req_exc.ConnectionError('Connection refused'))
        for e in raised:
            self.assertIn('Connection refused', str(e))

    def test_timeout(self):
        raised = self._check_all(
            errors.ConnectivityError,
            side_effect=req_exc.ReadTimeout('read timed out'))
        for e in raised:
            self.assertIn('Timed out after 30.0s', str(e))

    def test_server_error(self):
        raised = self._check_all(
            errors.RemoteError,
            return_value=base.make_response(500, 'boom'))
        for e in raised:
            self.assertEqual(500, e.status_code)
            self.assertIn('boom', str(e))

    def test_authentication_failure(self):
        raised = self._check_all(
            errors.RemoteError,
            return_value=base.make_response(401))
        for e in raised:
            self.assertEqual(401, e.status_code)
            self.assertIn('Possibly authentication failed', str(e))

    def test_not_found(self):
        raised = self._check_all(
            errors.RemoteError,
            return_value=base.make_response(404, 'Release not found'))
        for e in raised:
            self.assertEqual(404, e.status_code)
