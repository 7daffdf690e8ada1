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

Queries scoped to one logical class name.

A `Query` is bound to its class name for its whole life, and every result it
yields is materialized through an `ObjectFactory` with that class name. So a
query for ``Game`` objects always yields instances of the class registered
for ``Game``, or generic `RemoteObject` instances if none is.

Running a query is the job of a query engine: any object with a
``find(query)`` method returning a list of result dictionaries, such as
`remoteclasses.http.HttpClient`.

"""

from copy import deepcopy
from datetime import datetime
import logging

import simplejson as json

from remoteclasses import fields
from remoteclasses.classname import UsageError
from remoteclasses.predicate import And, Comparison, Key, Not, Or, Predicate


log = logging.getLogger('remoteclasses.query')


class PredicateTranslationError(ValueError):
    """An exception raised when a predicate uses constructs that cannot be
    expressed as query constraints.

    No query is produced for such a predicate. Rewrite it with supported
    constructs and try again.

    """
    pass


operator_codes = {
    '!=':     '$ne',
    '<':      '$lt',
    '<=':     '$lte',
    '>':      '$gt',
    '>=':     '$gte',
    'in':     '$in',
    'not in': '$nin',
}

inverse_operators = {
    '==':     '!=',
    '!=':     '==',
    '<':      '>=',
    '<=':     '>',
    '>':      '<=',
    '>=':     '<',
    'in':     'not in',
    'not in': 'in',
}

_dates = fields.Datetime()


def encode_operand(value):
    """Encodes a comparison operand as it is sent to the service."""
    # Imported here as remote imports this module through RemoteObject.query.
    from remoteclasses.remote import RemoteObject

    if isinstance(value, (Key, Predicate)):
        raise PredicateTranslationError('Cannot compare with %r; only '
            'constant operands are supported' % (value,))
    if isinstance(value, RemoteObject):
        return value.to_pointer()
    if isinstance(value, datetime):
        return _dates.encode(value)
    if isinstance(value, (list, tuple)):
        return [encode_operand(v) for v in value]
    return value


def _translate_comparison(comparison, negated=False):
    operator = comparison.operator
    if operator == 'exists':
        return {comparison.key: {'$exists': bool(comparison.value) != negated}}
    if negated:
        operator = inverse_operators[operator]

    operand = encode_operand(comparison.value)
    if operator == '==':
        return {comparison.key: operand}
    return {comparison.key: {operator_codes[operator]: operand}}


def _is_operators(constraint):
    return isinstance(constraint, dict) and bool(constraint) \
        and all(code.startswith('$') for code in constraint)


def _merge(where, constraints):
    for key, constraint in constraints.items():
        if key not in where:
            where[key] = constraint
            continue
        existing = where[key]
        if existing == constraint:
            continue
        if key == '$or' or not _is_operators(existing) \
                or not _is_operators(constraint):
            raise PredicateTranslationError('Cannot combine conflicting '
                'constraints on %r' % (key,))
        for code, operand in constraint.items():
            if code in existing and existing[code] != operand:
                raise PredicateTranslationError('Cannot combine conflicting '
                    '%s constraints on %r' % (code, key))
            existing[code] = operand
    return where


def translate(predicate):
    """Translates a predicate into a query constraint dictionary.

    Equality becomes a bare value for its key; other comparisons become
    operator dictionaries such as ``{"$gt": 5}``. `And` merges the
    constraints of its predicates, `Or` becomes an ``$or`` list, and `Not`
    inverts the single comparison it wraps.

    `PredicateTranslationError` is raised for anything else: negated
    compound predicates, comparisons between two keys, conflicting
    constraints on one key, and objects that are not predicates at all.

    """
    if isinstance(predicate, Comparison):
        return _translate_comparison(predicate)

    if isinstance(predicate, And):
        where = {}
        for p in predicate.predicates:
            _merge(where, translate(p))
        return where

    if isinstance(predicate, Or):
        if not predicate.predicates:
            raise PredicateTranslationError('Cannot translate an empty Or')
        clauses = []
        for p in predicate.predicates:
            if isinstance(p, Or):
                clauses.extend(translate(p)['$or'])
            else:
                clauses.append(translate(p))
        return {'$or': clauses}

    if isinstance(predicate, Not):
        inner = predicate.predicate
        if isinstance(inner, Not):
            return translate(inner.predicate)
        if isinstance(inner, Comparison):
            return _translate_comparison(inner, negated=True)
        raise PredicateTranslationError('Cannot translate negation of %r'
            % (inner,))

    raise PredicateTranslationError('Cannot translate unsupported predicate %r'
        % (predicate,))


class Query(object):

    """A query for the objects of one logical class name.

    Queries are immutable. `limit()`, `skip()`, `order_by()` and `include()`
    return new queries for the same class name with the option applied.

    """

    def __init__(self, class_name, where=None, predicate=None, factory=None,
            options=None):
        if not class_name:
            raise UsageError('Cannot query objects with no class name')
        if factory is None:
            # Imported here as factory imports remote, which imports us.
            from remoteclasses.factory import ObjectFactory
            factory = ObjectFactory()
        self._class_name = class_name
        self._where = dict(where or {})
        self._options = dict(options or {})
        self.predicate = predicate
        self.factory = factory

    @property
    def class_name(self):
        """The logical class name of the objects the query finds."""
        return self._class_name

    @property
    def where(self):
        """A copy of the query's constraint dictionary."""
        return deepcopy(self._where)

    def _with_option(self, name, value):
        options = dict(self._options)
        options[name] = value
        return type(self)(self._class_name, self._where, self.predicate,
            self.factory, options)

    def limit(self, count):
        return self._with_option('limit', count)

    def skip(self, count):
        return self._with_option('skip', count)

    def order_by(self, *keys):
        """Orders results by the given keys; prefix a key with ``-`` for
        descending order."""
        return self._with_option('order', keys)

    def include(self, *keys):
        """Asks for the objects pointed to by the given keys to be returned
        in full with the results."""
        return self._with_option('include', keys)

    def to_params(self):
        """Returns the query as a dictionary of request parameters."""
        params = {}
        if self._where:
            params['where'] = json.dumps(self._where, sort_keys=True)
        for name in ('limit', 'skip'):
            if name in self._options:
                params[name] = self._options[name]
        for name in ('order', 'include'):
            if self._options.get(name):
                params[name] = ','.join(self._options[name])
        return params

    def materialize(self, results):
        """Decodes result dictionaries into instances for the query's class
        name."""
        return [self.factory.from_dict(data, class_name=self._class_name)
            for data in results]

    def find(self, engine):
        """Runs the query with `engine` and returns the matching objects."""
        log.debug('Finding %s objects where %r', self._class_name, self._where)
        return self.materialize(engine.find(self))

    def first(self, engine):
        """Returns the first object matching the query, or `None`."""
        results = self.limit(1).find(engine)
        if results:
            return results[0]
        return None

    def __repr__(self):
        return '<Query %s where=%r>' % (self._class_name, self._where)


def query_for(name, predicate=None, factory=None):
    """Returns a `Query` for objects of class name `name`.

    If `predicate` is given, it is translated into the query's constraints
    with `translate()`, raising `PredicateTranslationError` if it cannot be.
    Optional parameter `factory` is the `ObjectFactory` used to materialize
    results.

    """
    where = {}
    if predicate is not None:
        where = translate(predicate)
    return Query(name, where, predicate, factory)
