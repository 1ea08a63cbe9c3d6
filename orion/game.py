__author__ = "ThorN, Fenix"
__version__ = "2.0"


class Game:
    """
    Current state of the game server, as reported by the game log.
    """
    fs_game = None
    fs_basepath = None
    fs_homepath = None
    auth_enable = False
    auth_owners = None
    mapname = None
    mapcycle = None
    gametype = None
    minping = -1
    maxping = -1
    maxclients = -1
    maplist = None
    callvote = None

    _attributes = ('fs_game', 'fs_basepath', 'fs_homepath', 'auth_enable', 'auth_owners', 'mapname', 'mapcycle',
                   'gametype', 'minping', 'maxping', 'maxclients', 'maplist', 'callvote')

    def __init__(self):
        self.reset()

    def reset(self):
        """
        Forget everything we know about the running game.
        """
        for name in self._attributes:
            setattr(self, name, getattr(Game, name))

    def snapshot(self):
        """
        Return a copy of the current game state which later log lines won't alter.
        """
        game = Game()
        for name in self._attributes:
            setattr(game, name, getattr(self, name))
        return game

    def __repr__(self):
        return f"Game<{self.mapname}, {self.gametype}>"
