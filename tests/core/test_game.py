import unittest

from orion.game import Game
from orion.urt import Gametype


class Test_Game(unittest.TestCase):

    def test_defaults(self):
        game = Game()
        self.assertIsNone(game.mapname)
        self.assertIsNone(game.gametype)
        self.assertFalse(game.auth_enable)
        self.assertEqual(-1, game.maxclients)

    def test_reset(self):
        game = Game()
        game.mapname = 'ut4_casa'
        game.gametype = Gametype.CTF
        game.auth_enable = True
        game.maxclients = 16
        game.callvote = object()
        game.reset()
        self.assertIsNone(game.mapname)
        self.assertIsNone(game.gametype)
        self.assertFalse(game.auth_enable)
        self.assertEqual(-1, game.maxclients)
        self.assertIsNone(game.callvote)

    def test_snapshot(self):
        game = Game()
        game.mapname = 'ut4_casa'
        game.gametype = Gametype.CTF
        snapshot = game.snapshot()
        game.reset()
        self.assertEqual('ut4_casa', snapshot.mapname)
        self.assertIs(Gametype.CTF, snapshot.gametype)
        self.assertIsNone(game.mapname)

    def test_instances_do_not_share_state(self):
        a, b = Game(), Game()
        a.mapname = 'ut4_turnpike'
        self.assertIsNone(b.mapname)


if __name__ == '__main__':
    unittest.main()
