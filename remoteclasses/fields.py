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

Fields are class attributes for `RemoteObject` subclasses that provide data
coding functionality for your properties.

Declaring a field such as ``title = fields.Field()`` on a `RemoteObject`
subclass gives the class a typed ``title`` attribute backed by the ``title``
key of the object's remote data. The `Pointer` field decodes references to
other remote objects into instances of whatever class is registered for
their class name.

"""

from datetime import datetime, timezone


class Property(object):

    """An attribute that can be installed declaratively on a `DataObject` to
    provide data encoding or loading behavior.

    """

    def install(self, attrname, cls):
        """Signals to the `Property` that it has been installed on the given
        class as an attribute with the given name.

        This implementation does nothing. Override this method to customize
        the behavior to install an attribute on DataObject classes where your
        field is declared.

        """
        pass


class Field(Property):

    """A property for encoding object attributes as dictionary values and
    decoding dictionary values into object attributes.

    Use a `Field` instance directly for attributes that are the same type as
    their dictionary values: strings, numbers, and boolean values. If your
    attribute data does need converted, use one of the `Field` subclasses
    from this module, or override `decode()` and `encode()` in a subclass of
    your own.

    """

    def __init__(self, api_name=None, default=None):
        """Sets the field's matching dictionary key and default value.

        Optional parameter `api_name` is the key of this field's matching
        value in a dictionary. If not given, the attribute name of the field
        when its class was defined is used.

        Optional parameter `default` is the value to use for this attribute
        when the dictionary to decode does not contain a value. `default` can
        be a value or a callable, which is passed the object being decoded
        into and should return the default value of the attribute.

        """
        self.api_name = api_name
        self.default  = default

    def install(self, attrname, cls):
        self.attrname = attrname
        if self.api_name is None:
            self.api_name = attrname
        self.of_cls = cls

    def __get__(self, obj, cls):
        """Returns the field's value on the given object instance, or the
        field's default value if no value for the field is available.

        Reading `obj.api_data` is what makes a reference-only `RemoteObject`
        raise `DataUnavailable` for a field that has not been set locally.

        """
        if obj is None:
            # Yield the real field instance when gotten through the class.
            return self

        if self.attrname not in obj.__dict__:
            try:
                value = obj.api_data[self.api_name]
            except KeyError:
                if callable(self.default):
                    value = self.default(obj)
                else:
                    value = self.default
            else:
                value = self.decode(value)
            # Store the value so we need decode it only once.
            obj.__dict__[self.attrname] = value

        return obj.__dict__[self.attrname]

    def __set__(self, obj, value):
        obj.__dict__[self.attrname] = value

    def __delete__(self, obj):
        # Delete both the instance and API data, so we'll get a real
        # attribute miss next time and return the field's default.
        obj.__dict__.pop(self.attrname, None)
        obj.api_data.pop(self.api_name, None)

    def decode(self, value):
        """Decodes a dictionary value into a `DataObject` attribute value."""
        return value

    def encode(self, value):
        """Encodes a `DataObject` attribute value into a dictionary value."""
        return value


class List(Field):

    """A field representing a homogeneous list of data.

    The elements of the list are decoded through another field specified when
    the `List` is declared.

    """

    def __init__(self, fld, **kwargs):
        super(List, self).__init__(**kwargs)
        self.fld = fld

    def install(self, attrname, cls):
        super(List, self).install(attrname, cls)

        # Make sure our content field knows its owner too.
        self.fld.install(attrname, cls)

    def decode(self, value):
        return [self.fld.decode(v) for v in value]

    def encode(self, value):
        return [self.fld.encode(v) for v in value]


class Dict(List):

    """A field representing a homogeneous mapping of data."""

    def decode(self, value):
        return dict((k, self.fld.decode(v)) for k, v in value.items())

    def encode(self, value):
        return dict((k, self.fld.encode(v)) for k, v in value.items())


class Object(Field):

    """A field representing a nested `DataObject` that has no identity of its
    own on the remote service.

    For references to other remote objects, use `Pointer` instead.

    """

    def __init__(self, cls, **kwargs):
        super(Object, self).__init__(**kwargs)
        self.cls = cls

    def decode(self, value):
        if value is None:
            if callable(self.default):
                return self.default()
            return self.default
        if not isinstance(value, dict):
            raise TypeError('Value to decode %r is not a dictionary for %s'
                % (value, self.cls.__name__))
        return self.cls.from_dict(value)

    def encode(self, value):
        return value.to_dict()


class Datetime(Field):

    """A field representing a timestamp.

    Timestamps are exchanged as ISO 8601 strings in UTC with millisecond
    precision, such as ``2015-03-01T12:30:00.250Z``. When `wrapped` is true
    (the default), encoded values are wrapped in the service's typed date
    form, ``{"__type": "Date", "iso": ...}``; either form is decoded.

    """

    dateformats = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")

    def __init__(self, wrapped=True, **kwargs):
        super(Datetime, self).__init__(**kwargs)
        self.wrapped = wrapped

    def decode(self, value):
        """Decodes a timestamp into a `datetime` instance with UTC tzinfo."""
        if value is None:
            if callable(self.default):
                return self.default()
            return self.default
        if isinstance(value, dict):
            if value.get('__type') != 'Date':
                raise TypeError('Value to decode %r is not a date' % (value,))
            value = value.get('iso')
        for dateformat in self.dateformats:
            try:
                when = datetime.strptime(value, dateformat)
            except (TypeError, ValueError):
                continue
            return when.replace(tzinfo=timezone.utc)
        raise TypeError('Value to decode %r is not a valid date time stamp'
            % (value,))

    def encode(self, value):
        """Encodes a `datetime` instance into a timestamp.

        Naive `datetime` instances are taken to be in UTC already.

        """
        if not isinstance(value, datetime):
            raise TypeError('Value to encode %r is not a datetime' % (value,))
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        iso = '%s.%03dZ' % (value.strftime('%Y-%m-%dT%H:%M:%S'),
            value.microsecond // 1000)
        if self.wrapped:
            return {'__type': 'Date', 'iso': iso}
        return iso


class Pointer(Field):

    """A field representing a reference to another remote object.

    Pointers are exchanged as ``{"__type": "Pointer", "className": ...,
    "objectId": ...}`` dictionaries and decode into reference-only instances
    of the class registered for their class name, or generic `RemoteObject`
    instances when no class is registered. A full object included in place of
    a pointer (``"__type": "Object"``) decodes into a fully available
    instance.

    Optional parameter `class_name` restricts the field to pointers to that
    class name. Optional parameter `registry` selects the `SubclassRegistry`
    consulted when decoding; the process-wide registry is used otherwise.

    """

    def __init__(self, class_name=None, registry=None, **kwargs):
        super(Pointer, self).__init__(**kwargs)
        self.class_name = class_name
        self.registry = registry

    def decode(self, value):
        if value is None:
            return self.default
        if not isinstance(value, dict) \
                or value.get('__type') not in ('Pointer', 'Object'):
            raise TypeError('Value to decode %r is not a pointer' % (value,))
        if self.class_name is not None \
                and value.get('className') != self.class_name:
            raise TypeError('Pointer %r does not point to a %s'
                % (value, self.class_name))

        # Imported here as factory depends on remote, which imports us.
        from remoteclasses.factory import ObjectFactory
        factory = ObjectFactory(self.registry)
        if value['__type'] == 'Object':
            data = dict(value)
            del data['__type']
            return factory.from_dict(data)
        return factory.from_pointer(value)

    def encode(self, value):
        return value.to_pointer()
