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

remoteclasses materialize the objects of a remote data service as instances
of your own strongly-typed Python classes.

A remote service stores objects in collections named by a *class name*, such
as ``Game`` or ``Player``. Without any setup, `remoteclasses` represents those
objects as generic `RemoteObject` instances tagged with their class name. By
subclassing `RemoteObject` and registering the subclass for a class name, you
get instances of your class instead, wherever `remoteclasses` produces
objects of that class name: building new ones, decoding payloads from the
service, or running queries.

remoteclasses have:

* a thread-safe registry mapping class names to your classes, where the
  class registered last for a name wins

* factories for new objects and for reference-only objects that carry an
  identity but no data until they are fetched

* queries scoped to a class name, filtered by declarative predicates

* a JSON REST client through the `httplib2` library


Example
=======

    >>> from remoteclasses import RemoteObject, fields, Key, HttpClient
    >>> class Game(RemoteObject):
    ...     title = fields.Field()
    ...     score = fields.Field(default=0)
    ...
    ...     @classmethod
    ...     def remote_class_name(cls):
    ...         return 'Game'
    ...
    >>> descriptor = Game.register_subclass()
    >>> client = HttpClient('https://api.example.com/1/', application_id='app')
    >>> best = Game.query(Key('score') > 1000).order_by('-score').find(client)
    >>> [type(g).__name__ for g in best]
    ['Game', 'Game']
    >>> later = Game.without_data('abc123')
    >>> later.data_available
    False
    >>> later.fetch(client).title
    'Bughouse'


Registering at startup
======================

Register your classes explicitly while your application starts, before it
produces objects for their class names. `SubclassRegistry.register_classes()`
registers a whole list of classes at once, skipping any class marked with
`SkipAutomaticRegistration`; register those yourself with
``register_subclass()`` once your application is configured.

"""

__version__ = '1.0.0'
__author__ = 'Six Apart Ltd.'

import remoteclasses.classname
import remoteclasses.fields as fields
import remoteclasses.registry
import remoteclasses.remote
import remoteclasses.factory
import remoteclasses.predicate
import remoteclasses.query
import remoteclasses.http
from remoteclasses.classname import UsageError, SkipAutomaticRegistration
from remoteclasses.dataobject import DataObject
from remoteclasses.registry import SubclassRegistry, TypeDescriptor
from remoteclasses.remote import RemoteObject, DataUnavailable, FetchError
from remoteclasses.factory import ObjectFactory
from remoteclasses.predicate import Key, And, Or, Not
from remoteclasses.query import Query, query_for, PredicateTranslationError
from remoteclasses.http import HttpClient

__all__ = ('RemoteObject', 'DataObject', 'SubclassRegistry', 'TypeDescriptor',
    'ObjectFactory', 'Query', 'query_for', 'Key', 'And', 'Or', 'Not',
    'HttpClient', 'UsageError', 'DataUnavailable', 'FetchError',
    'PredicateTranslationError', 'SkipAutomaticRegistration', 'fields')
