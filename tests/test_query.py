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

from datetime import datetime
import unittest

import mock

from remoteclasses import fields
from remoteclasses.classname import UsageError
from remoteclasses.factory import ObjectFactory
from remoteclasses.predicate import And, Comparison, Key, Not, Or
from remoteclasses.query import PredicateTranslationError, Query, \
    query_for, translate
from remoteclasses.registry import SubclassRegistry
from remoteclasses.remote import RemoteObject


class Game(RemoteObject):
    title = fields.Field()

    @classmethod
    def remote_class_name(cls):
        return 'Game'


class TestTranslate(unittest.TestCase):

    def test_comparisons(self):
        self.assertEqual(translate(Key('title') == 'Go'), {'title': 'Go'})
        self.assertEqual(translate(Key('score') != 3), {'score': {'$ne': 3}})
        self.assertEqual(translate(Key('score') < 3), {'score': {'$lt': 3}})
        self.assertEqual(translate(Key('score') <= 3), {'score': {'$lte': 3}})
        self.assertEqual(translate(Key('score') > 3), {'score': {'$gt': 3}})
        self.assertEqual(translate(Key('score') >= 3), {'score': {'$gte': 3}})
        self.assertEqual(translate(Key('title').is_in(('Go', 'Chess'))),
            {'title': {'$in': ['Go', 'Chess']}})
        self.assertEqual(translate(Key('title').not_in(['Go'])),
            {'title': {'$nin': ['Go']}})
        self.assertEqual(translate(Key('title').exists()),
            {'title': {'$exists': True}})
        self.assertEqual(translate(Key('title').does_not_exist()),
            {'title': {'$exists': False}})

    def test_operands(self):
        game = Game()
        game.object_id = 'g1'
        self.assertEqual(translate(Key('game') == game), {'game': {
            '__type': 'Pointer', 'className': 'Game', 'objectId': 'g1'}})

        when = datetime(2015, 3, 1, 12, 30)
        self.assertEqual(translate(Key('createdAt') > when), {'createdAt': {
            '$gt': {'__type': 'Date', 'iso': '2015-03-01T12:30:00.000Z'}}})

    def test_and(self):
        p = (Key('score') > 3) & (Key('score') < 10) & (Key('title') == 'Go')
        self.assertEqual(translate(p), {
            'score': {'$gt': 3, '$lt': 10},
            'title': 'Go',
        })
        self.assertEqual(translate(And()), {})
        self.assertEqual(translate(And(Key('a') == 1, Key('a') == 1)), {'a': 1})

    def test_or(self):
        p = (Key('title') == 'Go') | (Key('score') > 3) | (Key('score') < 0)
        self.assertEqual(translate(p), {'$or': [
            {'title': 'Go'},
            {'score': {'$gt': 3}},
            {'score': {'$lt': 0}},
        ]})

        p = (Key('a') == 1) & ((Key('b') == 2) | (Key('c') == 3))
        self.assertEqual(translate(p), {
            'a': 1,
            '$or': [{'b': 2}, {'c': 3}],
        })

    def test_not(self):
        self.assertEqual(translate(~(Key('score') > 3)),
            {'score': {'$lte': 3}})
        self.assertEqual(translate(~(Key('title') == 'Go')),
            {'title': {'$ne': 'Go'}})
        self.assertEqual(translate(Not(Key('title').is_in(['Go']))),
            {'title': {'$nin': ['Go']}})
        self.assertEqual(translate(~Key('title').exists()),
            {'title': {'$exists': False}})
        self.assertEqual(translate(~~(Key('title') == 'Go')), {'title': 'Go'})

    def test_unsupported(self):
        unsupported = [
            ~((Key('a') == 1) & (Key('b') == 2)),
            ~((Key('a') == 1) | (Key('b') == 2)),
            Key('a') == Key('b'),
            Key('a') == (Key('b') == 1),
            (Key('a') == 1) & (Key('a') == 2),
            (Key('a') == 1) & (Key('a') > 0),
            (Key('a') > 1) & (Key('a') > 2),
            ((Key('a') == 1) | (Key('b') == 1)) & ((Key('c') == 1) | (Key('d') == 1)),
            Or(),
            lambda game: game.score > 3,
            'score > 3',
            {'score': 3},
        ]
        for predicate in unsupported:
            self.assertRaises(PredicateTranslationError, translate, predicate)

    def test_unknown_operator(self):
        self.assertRaises(ValueError, Comparison, 'a', '=~', 'x')


class TestQuery(unittest.TestCase):

    def setUp(self):
        self.registry = SubclassRegistry()
        self.registry.register(Game)
        self.factory = ObjectFactory(self.registry)

    def test_query_for(self):
        q = query_for('Game', factory=self.factory)
        self.assertEqual(q.class_name, 'Game')
        self.assertEqual(q.where, {})
        self.assertTrue(q.predicate is None)

        p = Key('title') == 'Go'
        q = query_for('Game', p, factory=self.factory)
        self.assertEqual(q.class_name, 'Game')
        self.assertEqual(q.where, {'title': 'Go'})
        self.assertTrue(q.predicate is p)

        q = query_for('Unregistered', Key('x') > 1, factory=self.factory)
        self.assertEqual(q.class_name, 'Unregistered')

        self.assertRaises(UsageError, query_for, '')

    def test_query_for_unsupported(self):
        self.assertRaises(PredicateTranslationError, query_for, 'Game',
            Key('a') == Key('b'), self.factory)

    def test_class_name_is_fixed(self):
        q = query_for('Game', factory=self.factory)

        def rebind():
            q.class_name = 'Player'

        self.assertRaises(AttributeError, rebind)

        refined = q.limit(5).skip(10).order_by('-score', 'title').include('owner')
        self.assertFalse(refined is q)
        self.assertEqual(refined.class_name, 'Game')
        self.assertEqual(q.to_params(), {})

    def test_where_is_a_copy(self):
        q = query_for('Game', Key('score') > 3, factory=self.factory)
        q.where['score']['$gt'] = 100
        self.assertEqual(q.where, {'score': {'$gt': 3}})

    def test_to_params(self):
        q = query_for('Game', Key('score') > 3, factory=self.factory)
        q = q.limit(5).skip(10).order_by('-score', 'title').include('owner')
        self.assertEqual(q.to_params(), {
            'where': '{"score": {"$gt": 3}}',
            'limit': 5,
            'skip': 10,
            'order': '-score,title',
            'include': 'owner',
        })

    def test_materialize(self):
        q = query_for('Game', factory=self.factory)
        games = q.materialize([
            {'objectId': 'g1', 'title': 'Go'},
            {'objectId': 'g2', 'title': 'Chess'},
        ])
        self.assertEqual([type(g) for g in games], [Game, Game])
        self.assertEqual([g.object_id for g in games], ['g1', 'g2'])
        self.assertTrue(all(g.data_available for g in games))

        q = query_for('Player', factory=self.factory)
        players = q.materialize([{'objectId': 'p1'}])
        self.assertTrue(type(players[0]) is RemoteObject)
        self.assertEqual(players[0].class_name, 'Player')

    def test_find(self):
        engine = mock.Mock()
        engine.find.return_value = [{'objectId': 'g1', 'title': 'Go'}]

        q = query_for('Game', Key('title') == 'Go', factory=self.factory)
        games = q.find(engine)

        engine.find.assert_called_once_with(q)
        self.assertEqual(len(games), 1)
        self.assertTrue(type(games[0]) is Game)
        self.assertEqual(games[0].title, 'Go')

    def test_first(self):
        engine = mock.Mock()
        engine.find.return_value = []
        q = query_for('Game', factory=self.factory)
        self.assertTrue(q.first(engine) is None)

        sent = engine.find.call_args[0][0]
        self.assertEqual(sent.to_params(), {'limit': 1})
        self.assertEqual(sent.class_name, 'Game')

        engine.find.return_value = [{'objectId': 'g1'}]
        self.assertEqual(q.first(engine).object_id, 'g1')

    def test_default_factory(self):
        q = Query('Game')
        self.assertTrue(q.factory.registry is SubclassRegistry.get_instance())


if __name__ == '__main__':
    unittest.main()
