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

`SubclassRegistry` maps the logical class names of a remote service to the
local `RemoteObject` subclasses that represent them.

Every path that produces an instance for a class name, whether building a
new object locally, decoding a payload from the service, or materializing
query results, consults a registry (through an `ObjectFactory`) to decide
which class to instantiate. Names with no registered class fall back to the
generic `RemoteObject`.

Registration is explicit. Call ``register_subclass()`` on each of your
classes, or pass them all to `SubclassRegistry.register_classes()`, when your
application starts. Registering may also happen later, even after requests
have been made, and takes effect for every lookup made after it returns.

"""

from collections import namedtuple
import logging
import threading

from remoteclasses.classname import UsageError, class_name_for, \
    is_manual_only, participates


log = logging.getLogger('remoteclasses.registry')


class TypeDescriptor(namedtuple('TypeDescriptor',
        ('class_name', 'cls', 'factory', 'manual_only'))):

    """The registry's record of the class representing one logical class
    name.

    `factory` is a callable taking no arguments that allocates a new, empty
    instance of `cls`. `manual_only` is true when `cls` carries the
    `SkipAutomaticRegistration` marker.

    Descriptors are immutable, so a lookup racing a registration sees either
    the old descriptor or the new one, never a mix.

    """

    __slots__ = ()

    def new_instance(self):
        """Allocates an empty instance of the described class."""
        return self.factory()


class SubclassRegistry(object):

    """A thread-safe table of `TypeDescriptor` records keyed by logical class
    name.

    When two classes claim the same name, the one registered last wins. This
    is intentional: it lets an application replace a library's class with a
    more derived one, or lets tests swap in doubles. Registering the same
    class again changes nothing.

    Most applications use the process-wide registry returned by
    `SubclassRegistry.get_instance()`. Construct a registry of your own to
    keep a set of classes isolated, as the test suite does.

    """

    _instance = None
    _instance_lock = threading.Lock()

    def __init__(self):
        self._lock = threading.RLock()
        self._descriptors = {}

    @classmethod
    def get_instance(cls):
        """Returns the process-wide registry, creating it on first use."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def register(self, cls):
        """Makes `cls` the class for its logical class name.

        Returns the `TypeDescriptor` now registered for the name. Raises
        `UsageError` if `cls` declares no usable class name or is not a
        `RemoteObject` class.

        """
        # Imported here as remote imports this module.
        from remoteclasses.remote import RemoteObject

        name = class_name_for(cls)
        if not (isinstance(cls, type) and issubclass(cls, RemoteObject)):
            raise UsageError('Cannot register %r as class %r: it is not a '
                'RemoteObject class' % (cls, name))

        descriptor = TypeDescriptor(class_name=name, cls=cls, factory=cls,
            manual_only=is_manual_only(cls))

        with self._lock:
            previous = self._descriptors.get(name)
            self._descriptors[name] = descriptor

        if previous is None:
            log.debug('Registered class %s for %r', cls.__name__, name)
        elif previous.cls is not cls:
            log.debug('Class %s replaces %s for %r', cls.__name__,
                previous.cls.__name__, name)
        return descriptor

    def register_classes(self, classes):
        """Registers every class in `classes` that has not opted out of
        automatic registration.

        This is the automatic registration pass to run while your application
        starts up. Classes marked with `SkipAutomaticRegistration` and classes
        that declare no ``remote_class_name()`` are skipped; register the
        former yourself when appropriate. Classes are registered in the order
        given, so a later class claiming the same name as an earlier one wins.

        Returns the list of descriptors registered.

        """
        registered = []
        for cls in classes:
            if not participates(cls):
                continue
            if is_manual_only(cls):
                log.debug('Skipping automatic registration of %s',
                    cls.__name__)
                continue
            registered.append(self.register(cls))
        return registered

    def lookup(self, name):
        """Returns the `TypeDescriptor` registered for class name `name`, or
        `None` if no class is registered for it."""
        with self._lock:
            return self._descriptors.get(name)

    def is_registered(self, cls):
        """Returns whether `cls` is the class currently registered for its
        own logical class name.

        A class with no usable class name is never registered, so this
        returns `False` for it rather than raising `UsageError`.

        """
        if not participates(cls):
            return False
        try:
            name = class_name_for(cls)
        except UsageError:
            return False
        descriptor = self.lookup(name)
        return descriptor is not None and descriptor.cls is cls

    def names(self):
        """Returns the registered class names, sorted."""
        with self._lock:
            return sorted(self._descriptors)

    def clear(self):
        """Forgets every registration."""
        with self._lock:
            self._descriptors.clear()

    def __contains__(self, name):
        return self.lookup(name) is not None

    def __len__(self):
        with self._lock:
            return len(self._descriptors)

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.names())
