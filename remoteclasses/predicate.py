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

Declarative filter predicates for `remoteclasses.query`.

Predicates are built by comparing `Key` objects to values and combining the
comparisons with ``&``, ``|`` and ``~``:

>>> from remoteclasses.predicate import Key
>>> p = (Key('score') >= 100) & Key('title').is_in(['Chess', 'Go'])
>>> q = ~(Key('cheated') == True)

Predicates only describe a filter. `remoteclasses.query.translate()` turns
them into the constraints a query sends to the service, and rejects the ones
the service cannot express.

"""


class Predicate(object):

    """Base class for filter predicates."""

    def __and__(self, other):
        return And(self, other)

    def __or__(self, other):
        return Or(self, other)

    def __invert__(self):
        return Not(self)


class Comparison(Predicate):

    """A predicate comparing the value of a key with an operand.

    `operator` is one of ``==``, ``!=``, ``<``, ``<=``, ``>``, ``>=``,
    ``in``, ``not in`` or ``exists``.

    """

    operators = ('==', '!=', '<', '<=', '>', '>=', 'in', 'not in', 'exists')

    def __init__(self, key, operator, value):
        if operator not in self.operators:
            raise ValueError('Unknown comparison operator %r' % (operator,))
        self.key = key
        self.operator = operator
        self.value = value

    def __repr__(self):
        return '<Comparison %s %s %r>' % (self.key, self.operator, self.value)


class And(Predicate):

    """A predicate true when all of its predicates are true."""

    def __init__(self, *predicates):
        self.predicates = predicates

    def __repr__(self):
        return '<And %r>' % (self.predicates,)


class Or(Predicate):

    """A predicate true when any of its predicates is true."""

    def __init__(self, *predicates):
        self.predicates = predicates

    def __repr__(self):
        return '<Or %r>' % (self.predicates,)


class Not(Predicate):

    """A predicate true when its predicate is false."""

    def __init__(self, predicate):
        self.predicate = predicate

    def __repr__(self):
        return '<Not %r>' % (self.predicate,)


class Key(object):

    """A reference to a key of the objects being filtered.

    Comparing a `Key` with the usual operators yields a `Comparison`
    predicate rather than a boolean.

    """

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return 'Key(%r)' % (self.name,)

    def __eq__(self, value):
        return Comparison(self.name, '==', value)

    def __ne__(self, value):
        return Comparison(self.name, '!=', value)

    def __lt__(self, value):
        return Comparison(self.name, '<', value)

    def __le__(self, value):
        return Comparison(self.name, '<=', value)

    def __gt__(self, value):
        return Comparison(self.name, '>', value)

    def __ge__(self, value):
        return Comparison(self.name, '>=', value)

    __hash__ = None

    def is_in(self, values):
        return Comparison(self.name, 'in', list(values))

    def not_in(self, values):
        return Comparison(self.name, 'not in', list(values))

    def exists(self):
        return Comparison(self.name, 'exists', True)

    def does_not_exist(self):
        return Comparison(self.name, 'exists', False)
