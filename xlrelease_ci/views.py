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

# Read-only views of the objects returned by the XL Release REST API.

from xlrelease_ci.errors import SerializationError

__all__ = [
    "CreateReleaseRequest",
    "ReleaseFullView",
    "ReleaseTemplateView",
    "ReleaseView",
]


class ReleaseFullView(object):

    required = ('id',)

    def __init__(self, id, title=None, status=None, description=None,
                 **extra):
        self.id = id
        self.title = title
        self.status = status
        self.description = description
        self.extra = extra

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, dict):
            raise SerializationError(
                "Expected a JSON object for {0}, got {1}".format(
                    cls.__name__, type(data).__name__))
        missing = [key for key in cls.required if data.get(key) is None]
        if missing:
            raise SerializationError(
                "Missing {0} in {1} response: {2!r}".format(
                    ', '.join(missing), cls.__name__, data))
        # ids end up in request paths
        if not isinstance(data['id'], str):
            raise SerializationError(
                "{0} id must be a string: {1!r}".format(cls.__name__, data))
        fields = dict(data)
        view = cls(fields.pop('id'), fields.pop('title', None),
                   fields.pop('status', None),
                   fields.pop('description', None))
        # keep whatever else the server sent, keys may not be identifiers
        view.extra = fields
        return view

    def to_dict(self):
        data = dict(self.extra)
        data['id'] = self.id
        for key in ('title', 'status', 'description'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    def __eq__(self, other):
        if not isinstance(other, ReleaseFullView):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "{0}(id={1!r}, title={2!r}, status={3!r})".format(
            self.__class__.__name__, self.id, self.title, self.status)


class ReleaseTemplateView(ReleaseFullView):
    required = ('id', 'title')

    @classmethod
    def from_json(cls, data):
        view = super(ReleaseTemplateView, cls).from_json(data)
        if not isinstance(view.title, str):
            raise SerializationError(
                "Template title must be a string: {0!r}".format(data))
        return view


class ReleaseView(ReleaseFullView):
    pass


class CreateReleaseRequest(object):
    """Payload for ``POST /releases``.

    The template id and version are only known once the build step has
    resolved them, so they are passed to :meth:`to_json` rather than stored.
    """

    def __init__(self, title=None, variables=None, **extra):
        self.title = title
        self.variables = dict(variables or {})
        self.extra = extra

    def to_json(self, template_id, version):
        payload = dict(self.extra)
        payload.update({
            'templateId': template_id,
            'version': version,
            'title': self.title or version,
            'variables': dict(self.variables),
        })
        return payload
