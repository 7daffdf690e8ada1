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

Resolution of the logical class names that tie local `RemoteObject`
subclasses to the collections of a remote service.

A class takes part in the subclass registry by implementing a
``remote_class_name()`` class method returning the name of its remote
collection. No name is ever guessed from the Python class name; a class that
claims participation without supplying a usable name is a programming error
and raises `UsageError`.

"""


class UsageError(Exception):
    """An exception raised when a class is used against the subclassing
    contract, such as registering a class with no remote class name or
    calling a subclass-only method on a class that is not registered.

    `UsageError` signals a programming mistake. Only
    `SubclassRegistry.is_registered()` catches it, to answer `False`.

    """
    pass


class SkipAutomaticRegistration(object):

    """Marker mixin for `RemoteObject` subclasses that may only be registered
    manually.

    Classes carrying this marker are passed over by
    `SubclassRegistry.register_classes()`, the automatic registration pass
    run at application start. Use it for classes created dynamically or
    registered conditionally, and call ``register_subclass()`` on them
    yourself once the application is configured. The marker does not change
    how `SubclassRegistry.register()` or `SubclassRegistry.lookup()` behave.

    """

    skip_automatic_registration = True


def participates(cls):
    """Returns whether `cls` supplies a ``remote_class_name()`` capability."""
    return callable(getattr(cls, 'remote_class_name', None))


def is_manual_only(cls):
    """Returns whether `cls` opted out of automatic registration."""
    return bool(getattr(cls, 'skip_automatic_registration', False))


def class_name_for(cls):
    """Returns the logical class name declared by `cls`.

    The name is whatever `cls.remote_class_name()` returns. If `cls` has no
    such method, or the method returns something other than a non-empty
    string, `UsageError` is raised.

    """
    if not participates(cls):
        raise UsageError('Class %s does not declare a remote_class_name()'
            % (getattr(cls, '__name__', cls),))

    name = cls.remote_class_name()
    if not isinstance(name, str) or not name:
        raise UsageError('Class %s declared invalid remote class name %r'
            % (cls.__name__, name))
    return name
