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

`RemoteObject` is the generic representation of an object stored in a
collection of a remote service.

Any object the service knows about can be held in a plain `RemoteObject`
tagged with its class name, with its data reached through fields or item
access. For a typed, native interface, subclass `RemoteObject`, declare the
object's properties as fields, name the remote collection in a
``remote_class_name()`` class method, and register the class:

>>> from remoteclasses import RemoteObject, fields
>>> class Game(RemoteObject):
...     title = fields.Field()
...     score = fields.Field(default=0)
...
...     @classmethod
...     def remote_class_name(cls):
...         return 'Game'
...
>>> descriptor = Game.register_subclass()
>>> game = Game.create()
>>> game.title = 'Bughouse'

From then on, every object of class ``Game`` produced by `remoteclasses`,
whether built locally, decoded from the service, or returned by a query, is a
``Game`` instance.

"""

import logging

from remoteclasses import fields
from remoteclasses.classname import UsageError, class_name_for, participates
from remoteclasses.dataobject import DataObject
from remoteclasses.registry import SubclassRegistry


log = logging.getLogger('remoteclasses.remote')


class DataUnavailable(Exception):
    """An exception raised when reading the data of a reference-only
    `RemoteObject` that has not been fetched yet."""
    pass


class FetchError(Exception):
    """An exception representing an error requesting the data of a
    `RemoteObject` instance."""
    pass


def default_registry(registry=None):
    """Returns `registry`, or the process-wide `SubclassRegistry` if
    `registry` is `None`."""
    if registry is None:
        return SubclassRegistry.get_instance()
    return registry


class RemoteObject(DataObject):

    """An object belonging to a collection of the remote service.

    Every `RemoteObject` has a `class_name` naming its collection and an
    `object_id` identifying it there, which is `None` until the service
    assigns one on first save.

    A `RemoteObject` is either fully constructed, holding all the data it
    has, or *reference-only*, holding nothing but its identity. Reading a
    field of a reference-only instance raises `DataUnavailable`; call
    `fetch()` with a fetcher such as `remoteclasses.http.HttpClient` to
    request its data, after which `data_available` is true. Fields may be
    assigned on a reference-only instance without fetching it.

    """

    created_at = fields.Datetime(api_name='createdAt', wrapped=False)
    updated_at = fields.Datetime(api_name='updatedAt', wrapped=False)

    def __init__(self, class_name=None, **kwargs):
        """Initializes a new, empty `RemoteObject`.

        Instances of subclasses take their class name from the subclass's
        ``remote_class_name()``. Generic `RemoteObject` instances must be
        given a `class_name`.

        """
        if participates(type(self)):
            declared = class_name_for(type(self))
            if class_name is not None and class_name != declared:
                raise UsageError('Cannot make a %s instance of class %r: %s '
                    'is declared as %r' % (type(self).__name__, class_name,
                    type(self).__name__, declared))
            class_name = declared
        elif not class_name:
            raise UsageError('A %s needs a class name'
                % (type(self).__name__,))

        self.__dict__['_data_available'] = True
        self.class_name = class_name
        self.object_id = None
        super(RemoteObject, self).__init__(**kwargs)

    def _get_api_data(self):
        if not self.__dict__['_data_available']:
            raise DataUnavailable('%r has no data until it is fetched'
                % (self,))
        return self.__dict__['api_data']

    def _set_api_data(self, value):
        self.__dict__['api_data'] = value

    api_data = property(_get_api_data, _set_api_data)

    @property
    def data_available(self):
        """Whether the instance's data can be read."""
        return self.__dict__['_data_available']

    @property
    def is_new(self):
        """Whether the instance has no identity on the service yet."""
        return self.object_id is None

    @classmethod
    def statefields(cls):
        return super(RemoteObject, cls).statefields() \
            + ['class_name', 'object_id', '_data_available']

    def __eq__(self, other):
        if type(self) != type(other):
            return False
        if self.object_id is not None or other.object_id is not None:
            return (self.class_name, self.object_id) \
                == (other.class_name, other.object_id)
        if not (self.data_available and other.data_available):
            return self is other
        return super(RemoteObject, self).__eq__(other)

    def __hash__(self):
        """Hashes the instance by its class name and object id.

        Saving or deleting an instance changes its object id, and so its
        hash; don't keep instances in sets or as dictionary keys across
        those calls.

        """
        return hash((self.class_name, self.object_id))

    def __repr__(self):
        return '<%s %s objectId=%r>' % (type(self).__name__, self.class_name,
            self.object_id)

    def __getitem__(self, key):
        """Returns the raw remote value for `key`, which need not be a
        declared field."""
        return self.api_data[key]

    def __setitem__(self, key, value):
        self.api_data[key] = value

    def get(self, key, default=None):
        return self.api_data.get(key, default)

    def keys(self):
        return list(self.api_data.keys())

    def become_reference(self, object_id):
        """Empties the instance and makes it a reference to the object with
        the given object id."""
        for k in self.fields.keys():
            self.__dict__.pop(k, None)
        self.__dict__['api_data'] = {}
        self.__dict__['_data_available'] = False
        self.object_id = object_id

    def update_from_dict(self, data):
        """Fills the instance with the data of a payload from the service and
        marks its data available.

        The payload's ``objectId`` becomes the instance's identity. A
        ``className`` in the payload must match the instance's own class
        name.

        """
        if not isinstance(data, dict):
            raise TypeError('Cannot update %r from non-dictionary data source %r'
                % (self, data))
        data = dict(data)
        class_name = data.pop('className', None)
        if class_name is not None and class_name != self.class_name:
            raise TypeError('Cannot update %r from data for class %r'
                % (self, class_name))
        object_id = data.pop('objectId', None)
        if object_id is not None:
            self.object_id = object_id

        super(RemoteObject, self).update_from_dict(data)
        # Any updating from the service constitutes delivery.
        self.__dict__['_data_available'] = True

    @classmethod
    def from_dict(cls, data, registry=None):
        """Decodes a payload from the service into a new instance.

        On a class with a remote class name, the instance is of the class
        registered for that name when that is this class or a subclass of
        it, and of this class otherwise. On the generic `RemoteObject`, the
        payload's ``className`` picks the class through an `ObjectFactory`.

        """
        if not participates(cls):
            from remoteclasses.factory import ObjectFactory
            return ObjectFactory(registry).from_dict(data)

        descriptor = default_registry(registry).lookup(class_name_for(cls))
        if descriptor is not None and issubclass(descriptor.cls, cls):
            self = descriptor.new_instance()
        else:
            self = cls()
        self.update_from_dict(data)
        return self

    def to_dict(self):
        """Encodes the instance's data to a dictionary.

        For a reference-only instance, only the fields assigned locally are
        encoded.

        """
        if self.data_available:
            return super(RemoteObject, self).to_dict()
        data = {}
        for field in self.fields.values():
            value = self.__dict__.get(field.attrname)
            if value is not None:
                data[field.api_name] = field.encode(value)
        return data

    def to_pointer(self):
        """Encodes a reference to this instance."""
        if self.object_id is None:
            raise ValueError('Cannot refer to %r, which has no object id'
                % (self,))
        return {
            '__type':    'Pointer',
            'className': self.class_name,
            'objectId':  self.object_id,
        }

    def fetch(self, fetcher):
        """Requests the instance's data from the service and fills the
        instance with it.

        Parameter `fetcher` is an object with a ``fetch(class_name,
        object_id)`` method returning the object's data as a dictionary, such
        as a `remoteclasses.http.HttpClient`. Exceptions from the fetcher
        propagate to the caller and leave the instance as it was.

        """
        if self.object_id is None:
            raise FetchError('%r has no object id from which to fetch'
                % (self,))
        log.debug('Fetching %s %s', self.class_name, self.object_id)
        data = fetcher.fetch(self.class_name, self.object_id)
        self.update_from_dict(data)
        return self

    def fetch_if_needed(self, fetcher):
        """Fetches the instance's data if it is not available yet."""
        if not self.data_available:
            self.fetch(fetcher)
        return self

    @classmethod
    def register_subclass(cls, registry=None):
        """Registers this class for its remote class name.

        Once registered, every instance `remoteclasses` produces for the
        class name is an instance of this class. Optional parameter
        `registry` is the `SubclassRegistry` to register with; the
        process-wide registry is used otherwise.

        """
        return default_registry(registry).register(cls)

    @classmethod
    def registered_class(cls, registry=None):
        """Returns the class registered for this class's remote class name.

        The result is this class or one of its subclasses. If the class name
        has no registered class, or the registered class is not a subclass of
        this one, `UsageError` is raised.

        """
        name = class_name_for(cls)
        descriptor = default_registry(registry).lookup(name)
        if descriptor is None:
            raise UsageError('No class is registered for %r; call %s.'
                'register_subclass() first' % (name, cls.__name__))
        if not issubclass(descriptor.cls, cls):
            raise UsageError('Class %s registered for %r is not a subclass '
                'of %s' % (descriptor.cls.__name__, name, cls.__name__))
        return descriptor.cls

    @classmethod
    def create(cls, registry=None):
        """Returns a new instance of the class registered for this class's
        remote class name.

        Prefer ``MyClass.create()`` to ``MyClass()``: if a subclass of
        ``MyClass`` has been registered in its place, `create()` returns an
        instance of that subclass.

        """
        from remoteclasses.factory import ObjectFactory
        cls.registered_class(registry)
        return ObjectFactory(registry).create_new(class_name_for(cls))

    @classmethod
    def without_data(cls, object_id=None, registry=None):
        """Returns a reference-only instance of the class registered for
        this class's remote class name, referring to the object with the
        given object id.

        No request is made; the instance's `data_available` is false until it
        is fetched.

        """
        from remoteclasses.factory import ObjectFactory
        cls.registered_class(registry)
        return ObjectFactory(registry).create_reference_only(
            class_name_for(cls), object_id)

    @classmethod
    def query(cls, predicate=None, registry=None):
        """Returns a `Query` for objects of this class's remote class name,
        optionally filtered by `predicate`.

        See `remoteclasses.query.query_for()`.

        """
        from remoteclasses.factory import ObjectFactory
        from remoteclasses.query import query_for
        cls.registered_class(registry)
        return query_for(class_name_for(cls), predicate,
            factory=ObjectFactory(registry))
