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

import unittest

import mock

from remoteclasses import fields
from remoteclasses.classname import UsageError
from remoteclasses.factory import ObjectFactory
from remoteclasses.registry import SubclassRegistry
from remoteclasses.remote import DataUnavailable, RemoteObject


class Game(RemoteObject):
    title = fields.Field()
    score = fields.Field(default=0)

    @classmethod
    def remote_class_name(cls):
        return 'Game'


class TestObjectFactory(unittest.TestCase):

    def setUp(self):
        self.registry = SubclassRegistry()
        self.registry.register(Game)
        self.factory = ObjectFactory(self.registry)

    def test_create_new(self):
        game = self.factory.create_new('Game')
        self.assertTrue(type(game) is Game)
        self.assertEqual(game.class_name, 'Game')
        self.assertTrue(game.data_available)
        self.assertTrue(game.is_new)
        self.assertTrue(game.title is None)
        self.assertEqual(game.score, 0)

        self.assertFalse(self.factory.create_new('Game') is game)

    def test_create_new_unregistered(self):
        obj = self.factory.create_new('Unregistered')
        self.assertTrue(type(obj) is RemoteObject)
        self.assertEqual(obj.class_name, 'Unregistered')
        self.assertTrue(obj.data_available)
        obj['color'] = 'red'
        self.assertEqual(obj['color'], 'red')
        self.assertEqual(obj.to_dict(), {'color': 'red'})

    def test_create_new_without_name(self):
        self.assertRaises(UsageError, self.factory.create_new, '')
        self.assertRaises(UsageError, self.factory.create_new, None)

    def test_class_for(self):
        self.assertTrue(self.factory.class_for('Game') is Game)
        self.assertTrue(self.factory.class_for('Unregistered') is RemoteObject)

    def test_last_registration_wins(self):

        class MyGame(Game):
            pass

        self.registry.register(MyGame)
        self.assertTrue(type(self.factory.create_new('Game')) is MyGame)

        self.registry.register(Game)
        self.assertTrue(type(self.factory.create_new('Game')) is Game)

    def test_registration_after_first_use(self):
        obj = self.factory.create_new('Player')
        self.assertTrue(type(obj) is RemoteObject)

        class Player(RemoteObject):
            @classmethod
            def remote_class_name(cls):
                return 'Player'

        self.registry.register(Player)
        self.assertTrue(type(self.factory.create_new('Player')) is Player)

    def test_create_reference_only(self):
        game = self.factory.create_reference_only('Game', 'abc123')
        self.assertTrue(type(game) is Game)
        self.assertEqual(game.object_id, 'abc123')
        self.assertFalse(game.data_available)
        self.assertFalse(game.is_new)
        self.assertRaises(DataUnavailable, lambda: game.title)
        self.assertRaises(DataUnavailable, lambda: game['title'])

        fetcher = mock.Mock()
        fetcher.fetch.return_value = {
            'objectId': 'abc123',
            'title': 'Bughouse',
            'createdAt': '2015-03-01T12:30:00.250Z',
        }
        game.fetch(fetcher)

        fetcher.fetch.assert_called_once_with('Game', 'abc123')
        self.assertTrue(game.data_available)
        self.assertEqual(game.title, 'Bughouse')
        self.assertEqual(game.score, 0)
        self.assertEqual(game.created_at.year, 2015)

    def test_create_reference_only_unregistered(self):
        obj = self.factory.create_reference_only('Unregistered', 'xyz')
        self.assertTrue(type(obj) is RemoteObject)
        self.assertEqual(obj.class_name, 'Unregistered')
        self.assertFalse(obj.data_available)
        self.assertRaises(DataUnavailable, lambda: obj['anything'])

    def test_create_reference_only_without_id(self):
        game = self.factory.create_reference_only('Game')
        self.assertTrue(game.object_id is None)
        self.assertFalse(game.data_available)

    def test_from_dict(self):
        game = self.factory.from_dict({
            'className': 'Game',
            'objectId': 'abc123',
            'title': 'Bughouse',
        })
        self.assertTrue(type(game) is Game)
        self.assertEqual(game.object_id, 'abc123')
        self.assertEqual(game.title, 'Bughouse')
        self.assertTrue(game.data_available)
        self.assertTrue('className' not in game.to_dict())

        obj = self.factory.from_dict({'objectId': 'p1', 'name': 'Ann'},
            class_name='Player')
        self.assertTrue(type(obj) is RemoteObject)
        self.assertEqual(obj.class_name, 'Player')
        self.assertEqual(obj['name'], 'Ann')

    def test_from_dict_errors(self):
        self.assertRaises(UsageError, self.factory.from_dict, {'title': 'x'})
        self.assertRaises(TypeError, self.factory.from_dict, ['Game'])
        self.assertRaises(TypeError, self.factory.from_dict,
            {'className': 'Player'}, class_name='Game')

    def test_from_pointer(self):
        game = self.factory.from_pointer({
            '__type': 'Pointer',
            'className': 'Game',
            'objectId': 'abc123',
        })
        self.assertTrue(type(game) is Game)
        self.assertEqual(game.object_id, 'abc123')
        self.assertFalse(game.data_available)

        self.assertRaises(TypeError, self.factory.from_pointer, {'objectId': 'x'})
        self.assertRaises(TypeError, self.factory.from_pointer, 'Game')

    def test_default_registry(self):
        factory = ObjectFactory()
        self.assertTrue(factory.registry is SubclassRegistry.get_instance())

        # An empty registry is still the one used.
        empty = SubclassRegistry()
        self.assertTrue(ObjectFactory(empty).registry is empty)


if __name__ == '__main__':
    unittest.main()
