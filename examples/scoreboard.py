#!/usr/bin/env python

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

An example scoreboard client, implemented using remoteclasses.

Lists the best games stored in the ``Game`` class of a remote service, with
the player who holds each high score.

"""

__version__ = '1.0'
__author__ = 'Six Apart Ltd.'


from optparse import OptionParser
import logging
import sys

from remoteclasses import HttpClient, Key, RemoteObject, \
    SkipAutomaticRegistration, SubclassRegistry, fields


class Player(RemoteObject):

    name = fields.Field()
    country = fields.Field()

    @classmethod
    def remote_class_name(cls):
        return 'Player'


class Game(RemoteObject):

    title = fields.Field()
    score = fields.Field(default=0)
    holder = fields.Pointer('Player')
    played = fields.Datetime(api_name='playedAt')

    @classmethod
    def remote_class_name(cls):
        return 'Game'


class ArcadeGame(SkipAutomaticRegistration, Game):

    """Games played on a cabinet; only used with ``--arcade``."""

    cabinet = fields.Field()


def main(argv=None):
    if argv is None:
        argv = sys.argv

    parser = OptionParser(usage="%prog [options] BASE_URL")
    parser.add_option("-a", "--app", dest="app",
        help="your application id")
    parser.add_option("-k", "--key", dest="key",
        help="your REST API key")
    parser.add_option("-m", "--min-score", dest="min_score", type="int",
        default=0, help="only list games scoring at least this much")
    parser.add_option("--arcade", dest="arcade", action="store_true",
        default=False, help="decode games as arcade games")
    parser.add_option("-v", "--verbose", dest="verbose", action="store_true",
        default=False, help="log requests")
    opts, args = parser.parse_args(argv[1:])

    if len(args) != 1:
        parser.error("BASE_URL is required")
    if opts.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(message)s")

    registry = SubclassRegistry.get_instance()
    registry.register_classes([Player, Game, ArcadeGame])
    if opts.arcade:
        ArcadeGame.register_subclass()

    client = HttpClient(args[0], application_id=opts.app, api_key=opts.key)

    query = Game.query(Key('score') >= opts.min_score)
    games = query.order_by('-score').limit(10).find(client)

    if not games:
        print("No games scoring at least %d" % (opts.min_score,))
        return 0

    print("## Best games ##")
    for game in games:
        holder = game.holder
        if holder is not None:
            holder = holder.fetch_if_needed(client).name
        print("%6d  %s (%s)" % (game.score, game.title, holder or 'nobody'))

    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
