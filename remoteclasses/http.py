# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

`HttpClient` exchanges `RemoteObject` data with a JSON REST service.

`HttpClient` is the default collaborator for the parts of `remoteclasses`
that talk to the service: it can be passed as the fetcher to
`RemoteObject.fetch()` and as the engine to `Query.find()`, and it saves and
deletes objects. Objects of a class name live at ``classes/<className>``
under the client's base URL, and each object at
``classes/<className>/<objectId>``.

"""

import http.client as httplib
import logging
from urllib.parse import quote, urlencode, urljoin

import httplib2
import simplejson as json


userAgent = httplib2.Http()

log = logging.getLogger('remoteclasses.http')


def encode_default(value):
    """Encodes values `simplejson` cannot encode by itself, such as
    `RemoteObject` instances assigned to untyped keys."""
    if hasattr(value, 'to_pointer'):
        return value.to_pointer()
    raise TypeError('%r is not JSON serializable' % (value,))


class HttpClient(object):

    """A client for a JSON REST service storing objects by class name.

    Parameter `base_url` is the URL under which the ``classes/`` resources
    live. Optional parameters `application_id` and `api_key` are sent in the
    `application_id_header` and `api_key_header` headers of every request.
    Optional parameter `http` is the user agent object to use; it should be
    compatible with `httplib2.Http` instances. The module's shared
    `userAgent` is used otherwise.

    """

    content_types = ('application/json',)

    application_id_header = 'x-application-id'
    api_key_header = 'x-api-key'

    # Keys the service maintains itself and rejects in request bodies.
    readonly_keys = ('objectId', 'createdAt', 'updatedAt', 'className')

    class NotFound(httplib.HTTPException):
        """An HTTPException thrown when the server reports that the requested
        resource was not found."""
        pass

    class Unauthorized(httplib.HTTPException):
        """An HTTPException thrown when the server reports that the requested
        resource is not available through an unauthenticated request.

        This exception corresponds to the HTTP status code 401.

        """
        pass

    class Forbidden(httplib.HTTPException):
        """An HTTPException thrown when the server reports that the client, as
        authenticated, is not authorized to request the requested resource.

        This exception corresponds to the HTTP status code 403.

        """
        pass

    class RequestError(httplib.HTTPException):
        """An HTTPException thrown when the server reports an error in the
        client's request.

        This exception corresponds to the HTTP status code 400.

        """
        pass

    class ServerError(httplib.HTTPException):
        """An HTTPException thrown when the server reports an unexpected error.

        This exception corresponds to the HTTP status code 500.

        """
        pass

    class BadResponse(httplib.HTTPException):
        """An HTTPException thrown when the client receives some other
        non-success HTTP response."""
        pass

    def __init__(self, base_url, application_id=None, api_key=None,
            http=None):
        if not base_url.endswith('/'):
            base_url += '/'
        self.base_url = base_url
        self.application_id = application_id
        self.api_key = api_key
        self.http = http

    def class_url(self, class_name, object_id=None):
        """Returns the URL of the collection for `class_name`, or of the
        object with `object_id` in it."""
        path = 'classes/%s' % (quote(class_name, safe=''),)
        if object_id is not None:
            path = '%s/%s' % (path, quote(object_id, safe=''))
        return urljoin(self.base_url, path)

    def get_request(self, url, method='GET', body=None, headers=None):
        """Returns the parameters for a request as a dictionary of keyword
        arguments suitable for passing to `httplib2.Http.request()`."""
        if headers is None:
            headers = {}
        headers.setdefault('accept', ', '.join(self.content_types))
        if self.application_id is not None:
            headers[self.application_id_header] = self.application_id
        if self.api_key is not None:
            headers[self.api_key_header] = self.api_key

        # Use 'uri' because httplib2.request does.
        request = dict(uri=url, method=method, headers=headers)
        if body is not None:
            headers['content-type'] = self.content_types[0]
            request['body'] = json.dumps(body, default=encode_default)
        return request

    def raise_for_response(self, url, response, content):
        """Raises exceptions corresponding to HTTP responses that carry no
        usable result.

        Override this method to customize the error handling behavior for
        your target API.

        """
        if response.status == httplib.NOT_FOUND:
            raise self.NotFound('No such resource %s' % (url,))
        if response.status == httplib.UNAUTHORIZED:
            raise self.Unauthorized('Not authorized to request %s' % (url,))
        if response.status == httplib.FORBIDDEN:
            raise self.Forbidden('Forbidden from requesting %s' % (url,))

        if response.status in (httplib.INTERNAL_SERVER_ERROR, httplib.BAD_REQUEST):
            if response.status == httplib.BAD_REQUEST:
                err_cls = self.RequestError
            else:
                err_cls = self.ServerError
            # Pull out an error if we can.
            error = None
            try:
                error = self.decode(content).get('error')
            except (ValueError, AttributeError):
                pass
            if error:
                exc = err_cls('%d %s requesting %s: %s'
                    % (response.status, response.reason, url, error))
                exc.response_error = error
                raise exc
            raise err_cls('%d %s requesting %s'
                % (response.status, response.reason, url))

        if response.status not in (httplib.OK, httplib.CREATED):
            raise self.BadResponse('Unexpected response requesting %s: %d %s'
                % (url, response.status, response.reason))

        # check that the response body was json
        content_type = response.get('content-type', '').split(';', 1)[0].strip()
        if content_type not in self.content_types:
            raise self.BadResponse(
                'Bad response requesting %s: content-type %s is not an expected type'
                % (url, response.get('content-type')))

    def decode(self, content):
        if isinstance(content, bytes):
            content = content.decode('utf-8', 'replace')
        return json.loads(content)

    def request(self, url, method='GET', body=None):
        """Makes a request and returns its decoded JSON result."""
        request = self.get_request(url, method=method, body=body)
        http = self.http
        if http is None:
            http = userAgent
        log.debug('%s %s', method, url)
        response, content = http.request(**request)
        self.raise_for_response(url, response, content)
        return self.decode(content)

    def fetch(self, class_name, object_id):
        """Returns the data of the object with `object_id` of class name
        `class_name`."""
        return self.request(self.class_url(class_name, object_id))

    def find(self, query):
        """Returns the result dictionaries of a `Query`."""
        url = self.class_url(query.class_name)
        params = query.to_params()
        if params:
            url = '%s?%s' % (url, urlencode(sorted(params.items())))
        return self.request(url).get('results', [])

    def save(self, obj):
        """Saves a `RemoteObject` to the service.

        A new object is created with a ``POST`` request and receives its
        object id from the service; an existing one is updated with ``PUT``.
        The service's response is merged into the object.

        """
        data = obj.to_dict()
        body = dict((k, v) for k, v in data.items()
            if k not in self.readonly_keys)

        if obj.is_new:
            url = self.class_url(obj.class_name)
            result = self.request(url, method='POST', body=body)
        else:
            url = self.class_url(obj.class_name, obj.object_id)
            result = self.request(url, method='PUT', body=body)

        if obj.data_available:
            data.update(result)
            obj.update_from_dict(data)
        elif result.get('objectId') is not None:
            obj.object_id = result['objectId']
        log.debug('Saved %r', obj)
        return obj

    def delete(self, obj):
        """Deletes a `RemoteObject` from the service.

        The object keeps its data but loses its object id, becoming new
        again.

        """
        if obj.is_new:
            raise ValueError('Cannot delete %r with no object id' % (obj,))
        self.request(self.class_url(obj.class_name, obj.object_id),
            method='DELETE')
        log.debug('Deleted %r, now disconnecting it', obj)
        obj.object_id = None
