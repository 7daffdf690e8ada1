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

`ObjectFactory` produces `RemoteObject` instances of the right class for a
logical class name.

Local construction, decoding of payloads from the service, and
materialization of query results all go through an `ObjectFactory`, so an
object of a given class name is an instance of the same registered class no
matter how it was produced. Class names with no registered class produce
generic `RemoteObject` instances tagged with the class name.

"""

import logging

from remoteclasses.classname import UsageError
from remoteclasses.remote import RemoteObject, default_registry


log = logging.getLogger('remoteclasses.factory')


class ObjectFactory(object):

    """Builds instances for class names by consulting a `SubclassRegistry`.

    Optional parameter `registry` is the registry to consult; the
    process-wide registry is used when it is omitted.

    """

    def __init__(self, registry=None):
        self.registry = default_registry(registry)

    def class_for(self, name):
        """Returns the class instances of class name `name` are made of: the
        registered class, or `RemoteObject` if none is registered."""
        descriptor = self.registry.lookup(name)
        if descriptor is None:
            return RemoteObject
        return descriptor.cls

    def create_new(self, name):
        """Returns a new, empty instance for class name `name`.

        The instance is of the class registered for `name`, or a generic
        `RemoteObject` tagged with `name` if none is registered.

        """
        if not name:
            raise UsageError('Cannot create an object with no class name')
        descriptor = self.registry.lookup(name)
        if descriptor is None:
            log.debug('No class registered for %r; using RemoteObject', name)
            return RemoteObject(class_name=name)
        return descriptor.new_instance()

    def create_reference_only(self, name, object_id=None):
        """Returns a reference-only instance for class name `name`.

        The instance refers to the object with the given `object_id`, which
        may be `None` if the object's identity is not known yet. Its
        `data_available` is false until it is fetched.

        """
        obj = self.create_new(name)
        obj.become_reference(object_id)
        return obj

    def from_dict(self, data, class_name=None):
        """Decodes a payload from the service into a new instance.

        The class name is `class_name` if given, or else the ``className``
        of the payload. If neither is available, `UsageError` is raised.

        """
        if not isinstance(data, dict):
            raise TypeError('Cannot decode an object from non-dictionary data %r'
                % (data,))
        if class_name is None:
            class_name = data.get('className')
        if not class_name:
            raise UsageError('Cannot decode %r with no class name' % (data,))
        obj = self.create_new(class_name)
        obj.update_from_dict(data)
        return obj

    def from_pointer(self, data):
        """Decodes a pointer into a reference-only instance."""
        try:
            class_name = data['className']
        except (KeyError, TypeError):
            raise TypeError('Value %r is not a pointer' % (data,))
        return self.create_reference_only(class_name, data.get('objectId'))
