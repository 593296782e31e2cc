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

# The build step: create and start a release from a template.

import io
import logging
import os
from string import Template

import yaml

from xlrelease_ci.errors import InvalidAttributeError
from xlrelease_ci.errors import MissingAttributeError
from xlrelease_ci.errors import TemplateNotFoundError
from xlrelease_ci.errors import XLReleaseException
from xlrelease_ci.views import CreateReleaseRequest

__all__ = [
    "XLReleaseNotifier",
    "load_steps",
]

logger = logging.getLogger(__name__)

STEP_KEY = 'xlrelease'
REQUIRED_ATTRIBUTES = ('credential', 'template', 'version')
OPTIONAL_ATTRIBUTES = ('verbose', 'title', 'variables')
TEXT_ATTRIBUTES = ('credential', 'template', 'version', 'title')
QUOTE_HINT = "Quote the value so it is read as text, e.g. version: '1.10'"


def expand(value, environ):
    if value is None:
        return None
    return Template(str(value)).safe_substitute(environ)


class XLReleaseNotifier(object):

    def __init__(self, credential, template, version, verbose=False,
                 title=None, variables=None):
        self.credential = credential
        self.template = template
        self.version = version
        self.verbose = verbose
        self.title = title
        self.variables = dict(variables or {})

    def _log(self, msg, *args):
        logger.log(logging.INFO if self.verbose else logging.DEBUG,
                   msg, *args)

    def perform(self, registry, environ=None):
        """Create a release from the first matching template and start it.

        ``registry`` is either a CredentialRegistry or one of its snapshots.
        Values may refer to build variables as ``$NAME`` or ``${NAME}``;
        they are looked up in ``environ``, which defaults to the process
        environment. Any failure is raised and stops the remaining calls.
        """
        if environ is None:
            environ = os.environ
        if hasattr(registry, 'snapshot'):
            registry = registry.snapshot()

        resolved_template = expand(self.template, environ)
        resolved_version = expand(self.version, environ)

        xlrelease = registry.lookup(self.credential)
        self._log("Using XL Release at %s with credential '%s'",
                  xlrelease.get_version(), self.credential)

        templates = xlrelease.search_templates(resolved_template)
        if not templates:
            raise TemplateNotFoundError(resolved_template,
                                        xlrelease.get_version())
        if len(templates) > 1:
            logger.warning("%d templates match '%s', using '%s'",
                           len(templates), resolved_template,
                           templates[0].title)
        template = templates[0]
        self._log("Found template %s", template)

        create_request = CreateReleaseRequest(
            title=expand(self.title, environ),
            variables=dict((key, expand(value, environ))
                           for key, value in self.variables.items()))
        release = xlrelease.create_release(template.id, resolved_version,
                                           create_request)
        self._log("Created release %s", release)

        xlrelease.start_release(release.id)
        logger.info("Started release %s (%s) from template '%s'",
                    release.id, resolved_version, template.title)
        return release

    def run(self, registry, environ=None):
        """Run the step and report the build outcome, True on success."""
        try:
            self.perform(registry, environ)
        except XLReleaseException as e:
            logger.error("XL Release notification failed: %s", e)
            return False
        return True

    @classmethod
    def from_dict(cls, data, step_name=STEP_KEY):
        if not isinstance(data, dict):
            raise InvalidAttributeError('definition', data,
                                        step_name=step_name)
        for key in data:
            if key not in REQUIRED_ATTRIBUTES + OPTIONAL_ATTRIBUTES:
                raise InvalidAttributeError(
                    key, data[key],
                    REQUIRED_ATTRIBUTES + OPTIONAL_ATTRIBUTES,
                    step_name=step_name)
        for key in REQUIRED_ATTRIBUTES:
            if data.get(key) is None:
                raise MissingAttributeError(key, step_name)

        # YAML turns unquoted 1.10 into the float 1.1, refuse to guess
        for key in TEXT_ATTRIBUTES:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise InvalidAttributeError(key, value, step_name=step_name,
                                            hint=QUOTE_HINT)

        variables = data.get('variables') or {}
        if not isinstance(variables, dict):
            raise InvalidAttributeError('variables', variables,
                                        step_name=step_name)
        for name, value in variables.items():
            if not isinstance(value, str):
                raise InvalidAttributeError(
                    'variables.{0}'.format(name), value,
                    step_name=step_name, hint=QUOTE_HINT)
        return cls(data['credential'], data['template'], data['version'],
                   verbose=bool(data.get('verbose', False)),
                   title=data.get('title'),
                   variables=variables)

    def __repr__(self):
        return ("XLReleaseNotifier(credential=%r, template=%r, version=%r)" %
                (self.credential, self.template, self.version))


def load_steps(source):
    """Read build steps from a YAML file name or an open stream.

    The document is a single step or a list of steps, each step optionally
    nested under an ``xlrelease`` key::

        - xlrelease:
            credential: admin
            template: Release
            version: ${BUILD_NUMBER}
    """
    if hasattr(source, 'read'):
        data = yaml.safe_load(source)
    else:
        with io.open(source, 'r', encoding='utf-8') as stream:
            data = yaml.safe_load(stream)

    if data is None:
        return []
    if not isinstance(data, list):
        data = [data]

    steps = []
    for index, item in enumerate(data):
        step_name = "{0}[{1}]".format(STEP_KEY, index)
        if isinstance(item, dict) and list(item) == [STEP_KEY]:
            item = item[STEP_KEY]
        steps.append(XLReleaseNotifier.from_dict(item, step_name))
    return steps
