"""
Urban Terror game log parser.

The handlers shared by every game release live here. A release is described
by a `Variant` value (code tables, ordered line formats, extra handlers and
the identity resolution strategy) and plugged into `UrtParser`: adding a
release means adding a module which defines its own `variant`.
"""
import re
import sys
import time
from collections import namedtuple
from functools import partial
from traceback import extract_tb

import orion.output
from orion.clients import Client
from orion.command import Command, Prefix
from orion.events import (
    ClientBombDefusedEvent,
    ClientBombHolderEvent,
    ClientBombPlantedEvent,
    ClientConnectEvent,
    ClientDamageEvent,
    ClientDamageSelfEvent,
    ClientDamageTeamEvent,
    ClientDisconnectEvent,
    ClientFlagCapturedEvent,
    ClientFlagDroppedEvent,
    ClientFlagReturnedEvent,
    ClientGearChangeEvent,
    ClientItemPickupEvent,
    ClientJoinEvent,
    ClientKillEvent,
    ClientKillSelfEvent,
    ClientKillTeamEvent,
    ClientNameChangeEvent,
    ClientSayEvent,
    ClientSayPrivateEvent,
    ClientSayTeamEvent,
    ClientTeamChangeEvent,
    GameExitEvent,
    GameRoundStartEvent,
    GameWarmupEvent,
    TeamFlagReturnEvent,
    TeamSurvivorWinnerEvent,
)
from orion.exceptions import MissingParameter, ProgrammingError, QueueInterrupted
from orion.functions import parseInfoString, stripColors
from orion.urt import SELF_INFLICTED, Mod, Team

__author__ = 'Daniele Pantaleone'
__version__ = '2.0'

# seconds of inactivity after which a reconnection counts as a new connection
CONNECTION_INTERVAL = 3600

# name of the command a doubled prefix (ie: !!hello) is an alias for
DEFAULT_COMMAND = 'say'

Variant = namedtuple('Variant', ('name', 'tables', 'lineFormats', 'handlers', 'authenticate'))


def lineFormat(name, pattern):
    """
    Build a line format entry: the pattern is prefixed with the log timestamp.
    :param name: The name of the handler processing the matching lines
    :param pattern: The regular expression matching the line after the timestamp
    """
    return name, re.compile(r"^\s*\d+:\d+\s?" + pattern, re.IGNORECASE)


def authenticateByGuid(parser, slot, userinfo):
    """
    Identity resolution based on the client guid only.
    :return: The stored client or None
    """
    if not (guid := userinfo.get('cl_guid')):
        return None
    parser.debug("Attempt to authenticate client on slot %s [cl_guid: %s]", slot, guid)
    return parser.clients.getByGuid(guid)


class UrtParser:
    """
    Turn game log lines into events and commands.
    """

    def __init__(self, variant, clients, groups, game, console, events, commands, cancel):
        """
        Object constructor.
        :param variant: The game release Variant
        :param clients: The connected clients registry
        :param groups: The client groups registry
        :param game: The Game instance kept up to date by the parser
        :param console: The game server console
        :param events: The CancellableQueue receiving events
        :param commands: The CancellableQueue receiving commands
        :param cancel: The threading.Event signaling a shutdown request
        """
        self.variant = variant
        self.tables = variant.tables
        self.clients = clients
        self.groups = groups
        self.game = game
        self.console = console
        self.events = events
        self.commands = commands
        self.cancel = cancel
        self.log = orion.output.getLogger()

        self._handlers = {
            'BombDefused': self.onBombDefused,
            'BombHolder': self.onBombHolder,
            'BombPlanted': self.onBombPlanted,
            'ClientBegin': self.onClientBegin,
            'ClientConnect': self.onClientConnect,
            'ClientDisconnect': self.onClientDisconnect,
            'ClientUserinfo': self.onClientUserinfo,
            'ClientUserinfoChanged': self.onClientUserinfoChanged,
            'Exit': self.onExit,
            'Flag': self.onFlag,
            'FlagReturn': self.onFlagReturn,
            'Hit': self.onHit,
            'InitGame': self.onInitGame,
            'InitRound': self.onInitRound,
            'Item': self.onItem,
            'Kill': self.onKill,
            'Say': self.onSay,
            'SayTeam': self.onSayTeam,
            'SayTell': self.onSayTell,
            'ShutdownGame': self.onShutdownGame,
            'SurvivorWinner': self.onSurvivorWinner,
            'Warmup': self.onWarmup,
        }
        for name, func in variant.handlers.items():
            self._handlers[name] = partial(func, self)

        if missing := [name for name, _ in variant.lineFormats if name not in self._handlers]:
            raise ProgrammingError(f"{variant.name}: no handler for line formats {', '.join(missing)}")

    def parseLine(self, line):
        """
        Parse a log line queueing the resulting event or command.
        Lines matching no line format are ignored: a failing handler is logged and the line dropped.
        :param line: The log line to be parsed
        """
        line = line.rstrip('\r\n')
        for name, pattern in self.variant.lineFormats:
            if match := pattern.fullmatch(line):
                break
        else:
            return

        try:
            result = self._handlers[name](match)
        except Exception as e:
            self.error("Could not process %s line %r - %s %s", name, line, e, extract_tb(sys.exc_info()[2]))
            return

        if result is None:
            return
        for item in (result if isinstance(result, list) else (result,)):
            if isinstance(item, Command):
                self.queueCommand(item)
            else:
                self.queueEvent(item)

    def queueEvent(self, event):
        """
        Queue an event for processing.
        :return: True if the event has been queued, False otherwise
        """
        try:
            self.events.push(event, self.cancel)
        except QueueInterrupted as e:
            self.warning("Event %s dropped: %s", event.key, e)
            return False
        self.verbose2("Queued %s", event)
        return True

    def queueCommand(self, command):
        """
        Queue a command for processing.
        :return: True if the command has been queued, False otherwise
        """
        try:
            self.commands.push(command, self.cancel)
        except QueueInterrupted as e:
            self.warning("Command %s dropped: %s", command.handle, e)
            return False
        self.verbose2("Queued command %s issued by %s", command.handle, command.client)
        return True

    def getClient(self, slot, role='client'):
        """
        Return the client connected on the given slot, or None.
        :param slot: The slot number (as matched in the log line)
        :param role: What the client is in the line being processed (used when logging a miss)
        """
        if (client := self.clients.getBySlot(slot)) is None:
            self.debug("Could not find %s on slot %s", role, slot)
        return client

    def getAvailableTeams(self):
        """
        Return the list of teams available for the current gametype.
        The gametype is retrieved from the server if it is still unknown.
        """
        if self.game.gametype is None:
            self.game.gametype = self.tables.gametype.lookup(self.console.getCvar('g_gametype', int))
        return list(self.tables.teamsByGametype.lookup(self.game.gametype))

    def getTeamByName(self, name):
        return self.tables.teamByName.lookup(name.strip().upper())

    def parseCommand(self, client, message):
        """
        Return the command issued through the given chat message or None if it is plain chat.
        :param client: The client who wrote the message
        :param message: The chat message (already stripped)
        """
        if len(message) < 2 or (prefix := Prefix.getByChar(message[0])) is None or message[1].isspace():
            return None
        if message[1] == message[0]:
            # !!hello is a shortcut for !say hello
            message = f"{message[0]}{DEFAULT_COMMAND} {message[2:]}"
        data = message[1:].split(None, 1)
        return Command(client, prefix, data[0], data[1] if len(data) > 1 else None)

    def getSpeaker(self, match):
        """
        Return the client who wrote a chat line together with the message, or (None, None).
        Names may contain colons: the text is split after the name of the client connected on the slot.
        When the server is not dedicated the slot in chat lines may be wrong: the client is then
        looked up by its exact name, trying the shortest candidate first.
        """
        text = match['text']
        splits = [(stripColors(text[:i]), text[i + 1:]) for i, char in enumerate(text) if char == ':']
        client = self.clients.getBySlot(match['slot'])
        if client is not None:
            for name, message in splits:
                if name == client.name:
                    return client, message

        for name, message in splits:
            found = [c for c in self.clients.getList() if c.name == name]
            if len(found) == 1:
                return found[0], message
            elif found:
                self.debug("Could not find client on slot %s: %s clients named %r", match['slot'], len(found), name)
                return None, None

        self.debug("Could not find client on slot %s: no client matches %r", match['slot'], text)
        return None, None

    def getMessage(self, slot, message):
        if not (message := message.strip()):
            raise MissingParameter(f"empty message from slot {slot}")
        return message

    def updateGame(self, info):
        """
        Update the Game object with the infostring sent on game/round initialization.
        :param info: The decoded infostring
        """
        # ie: sv_maxPing
        info = {k.lower(): v for k, v in info.items()}
        if 'g_gametype' in info:
            self.game.gametype = self.tables.gametype.lookup(int(info['g_gametype']))
        if 'mapname' in info:
            self.game.mapname = info['mapname']
        if 'g_mapcycle' in info:
            self.game.mapcycle = info['g_mapcycle']
        if 'fs_game' in info:
            self.game.fs_game = info['fs_game']
        if 'fs_basepath' in info:
            self.game.fs_basepath = info['fs_basepath']
        if 'fs_homepath' in info:
            self.game.fs_homepath = info['fs_homepath']
        if 'sv_minping' in info:
            self.game.minping = int(info['sv_minping'])
        if 'sv_maxping' in info:
            self.game.maxping = int(info['sv_maxping'])
        if 'sv_maxclients' in info:
            self.game.maxclients = int(info['sv_maxclients'])
        if 'auth_enable' in info:
            self.game.auth_enable = info['auth_enable'] not in ('', '0')
        if 'auth_owners' in info:
            self.game.auth_owners = info['auth_owners'] or None

    def onBombDefused(self, match):
        # 0:00 Bomb was defused by 3!
        if client := self.getClient(match['slot']):
            return ClientBombDefusedEvent(client)

    def onBombHolder(self, match):
        # 0:00 Bombholder is 2
        if client := self.getClient(match['slot']):
            return ClientBombHolderEvent(client)

    def onBombPlanted(self, match):
        # 0:00 Bomb was planted by 3!
        if client := self.getClient(match['slot']):
            return ClientBombPlantedEvent(client)

    def onClientBegin(self, match):
        # 0:00 ClientBegin: 4
        if client := self.getClient(match['slot']):
            return ClientJoinEvent(client)

    def onClientConnect(self, match):
        # 0:00 ClientConnect: 4
        self.debug("Client connecting on slot %s", match['slot'])

    def onClientDisconnect(self, match):
        # 0:00 ClientDisconnect: 4
        if client := self.clients.removeBySlot(match['slot']):
            return ClientDisconnectEvent(client)
        self.debug("Could not find client on slot %s", match['slot'])

    def onClientUserinfo(self, match):
        # 0:00 ClientUserinfo: 2 \ip\145.99.135.227:27960\challenge\-232198920\qport\2781\protocol\68\name\Fenix...
        # 0:00 ClientUserinfo: 0 \gear\GMIORAA\team\blue\skill\5.000000\characterfile\bots/ut_chicken_c.c\...
        slot = int(match['slot'])
        userinfo = parseInfoString(match['infostring'])

        if client := self.clients.getBySlot(slot):
            if 'gear' in userinfo and client.gear != userinfo['gear']:
                client.gear = userinfo['gear']
                return ClientGearChangeEvent(client, client.gear)
            return None

        if 'cl_guid' not in userinfo and 'skill' in userinfo:
            self.debug("Client connecting on slot %s has been detected as a bot", slot)
            client = Client(ip='0.0.0.0', guid=f'BOT_{slot}', group=self.groups.getByKeyword('guest'), bot=True)
        elif client := self.variant.authenticate(self, slot, userinfo):
            self.debug("Client connecting on slot %s authenticated: %s", slot, client)
        else:
            self.debug("No match found for client connecting on slot %s: creating a new client", slot)
            client = Client(ip=userinfo.get('ip', '').split(':')[0] or None,
                            guid=userinfo.get('cl_guid'),
                            group=self.groups.getByKeyword('guest'))

        client.slot = slot
        if client.time_edit is None or int(time.time()) - client.time_edit > CONNECTION_INTERVAL:
            client.connections += 1
        if 'ip' in userinfo and not client.bot:
            client.ip = userinfo['ip'].split(':')[0]
        if 'name' in userinfo:
            client.name = userinfo['name']
        if 'gear' in userinfo:
            client.gear = userinfo['gear']
        if 'team' in userinfo:
            client.team = self.getTeamByName(userinfo['team'])

        self.clients.add(client)
        try:
            self.clients.save(client)
        except Exception as e:
            self.error("Could not save client connecting on slot %s: %s", slot, e)
            return None
        return ClientConnectEvent(client)

    def onClientUserinfoChanged(self, match):
        # 0:00 ClientUserinfoChanged: 0 n\Fenix\t\1\r\2\tl\0\a0\255\a1\0\a2\255
        if not (client := self.getClient(match['slot'])):
            return None

        events = []
        userinfo = parseInfoString(match['infostring'])
        if 'n' in userinfo:
            name = stripColors(userinfo['n'])
            if (client.name or '').lower() != name.lower():
                client.name = name
                events.append(ClientNameChangeEvent(client, client.name))

        if 't' in userinfo:
            team = self.tables.teamByCode.lookup(int(userinfo['t']))
            locked = client.vars.get('lockedTeam')
            if locked is not None and team != locked:
                self.debug("%s is locked to the %s team: moving back from %s", client, locked.name, team.name)
                self.console.forceteam(client, locked)
                self.console.tell(client, f"^7You are locked to the {locked.value} team")
            elif client.team != team:
                client.team = team
                events.append(ClientTeamChangeEvent(client, team))

        return events or None

    def onExit(self, match):
        # 0:00 Exit: Timelimit hit.
        self.game.reset()
        return GameExitEvent()

    def onFlag(self, match):
        # 0:00 Flag: 0 2: team_CTF_redflag
        if not (client := self.getClient(match['slot'])):
            return None
        action = int(match['action'])
        if action == 0:
            return ClientFlagDroppedEvent(client)
        elif action == 1:
            return ClientFlagReturnedEvent(client)
        elif action == 2:
            return ClientFlagCapturedEvent(client)
        self.debug("Unknown flag action %s for %s", action, client)

    def onFlagReturn(self, match):
        # 0:00 Flag Return: BLUE
        return TeamFlagReturnEvent(self.getTeamByName(match['team']))

    def onHit(self, match):
        # 0:00 Hit: 13 10 0 8: WizardOfGore hit Fenix in the Head
        mod = self.tables.modByHitCode.lookup(int(match['weapon']))
        hitlocation = self.tables.hitlocation.lookup(int(match['hitlocation']))
        if not (victim := self.getClient(match['victim'], 'victim')):
            return None
        if not (attacker := self.getClient(match['attacker'], 'attacker')):
            return None

        if attacker is victim:
            return ClientDamageSelfEvent(victim, mod, hitlocation)
        elif attacker.team == victim.team and attacker.team is not None and attacker.team.isPlaying():
            return ClientDamageTeamEvent(attacker, victim, mod, hitlocation)
        return ClientDamageEvent(attacker, victim, mod, hitlocation)

    def onInitGame(self, match):
        # 0:00 InitGame: \sv_allowdownload\0\g_matchmode\0\g_gametype\4\sv_maxclients\32\...
        self.updateGame(parseInfoString(match['infostring']))
        return GameRoundStartEvent(self.game.snapshot())

    def onInitRound(self, match):
        # 0:00 InitRound: \sv_allowdownload\0\g_matchmode\0\g_gametype\4\sv_maxclients\32\...
        self.updateGame(parseInfoString(match['infostring']))
        return GameRoundStartEvent(self.game.snapshot())

    def onItem(self, match):
        # 0:00 Item: 3 ut_weapon_lr
        item = self.tables.itemByName.lookup(match['item'].strip())
        if client := self.getClient(match['slot']):
            return ClientItemPickupEvent(client, item)

    def onKill(self, match):
        # 0:00 Kill: 0 1 16: Fenix killed WizardOfGore by UT_MOD_SPAS
        # 0:00 Kill: 1022 2 6: <world> killed Fenix by MOD_FALLING
        mod = self.tables.modByKillCode.lookup(int(match['weapon']))
        if mod is Mod.CHANGE_TEAM:
            return None

        if mod in SELF_INFLICTED:
            if victim := self.getClient(match['victim'], 'victim'):
                return ClientKillSelfEvent(victim, mod)
            return None

        if not (attacker := self.getClient(match['attacker'], 'attacker')):
            return None
        if not (victim := self.getClient(match['victim'], 'victim')):
            return None

        if attacker is victim and attacker.team is not Team.SPECTATOR:
            return ClientKillSelfEvent(attacker, mod)
        elif attacker.team == victim.team and attacker.team is not None and attacker.team.isPlaying():
            return ClientKillTeamEvent(attacker, victim, mod)
        return ClientKillEvent(attacker, victim, mod)

    def onSay(self, match):
        # 0:00 say: 8 denzel: lol
        client, message = self.getSpeaker(match)
        if client is None:
            return None
        message = self.getMessage(match['slot'], message)
        return self.parseCommand(client, message) or ClientSayEvent(client, message)

    def onSayTeam(self, match):
        # 0:00 sayteam: 8 denzel: go go go
        client, message = self.getSpeaker(match)
        if client is None:
            return None
        message = self.getMessage(match['slot'], message)
        return self.parseCommand(client, message) or ClientSayTeamEvent(client, message)

    def onSayTell(self, match):
        # 0:00 saytell: 4 7 Fenix: ahahahh it's cool isn't it?
        client, message = self.getSpeaker(match)
        if client is None:
            return None
        if not (target := self.getClient(match['target'], 'target')):
            return None
        message = self.getMessage(match['slot'], message)
        return self.parseCommand(client, message) or ClientSayPrivateEvent(client, target, message)

    def onShutdownGame(self, match):
        # 0:00 ShutdownGame:
        self.game.reset()
        return GameExitEvent()

    def onSurvivorWinner(self, match):
        # 0:00 SurvivorWinner: Red
        return TeamSurvivorWinnerEvent(self.getTeamByName(match['data']))

    def onWarmup(self, match):
        # 0:00 Warmup:
        return GameWarmupEvent()

    def error(self, msg, *args, **kwargs):
        """
        Log an ERROR message.
        """
        self.log.error(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        """
        Log a WARNING message.
        """
        self.log.warning(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        """
        Log an INFO message.
        """
        self.log.info(msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs):
        """
        Log a DEBUG message.
        """
        self.log.debug(msg, *args, **kwargs)

    def bot(self, msg, *args, **kwargs):
        """
        Log a BOT message.
        """
        self.log.bot(msg, *args, **kwargs)

    def verbose(self, msg, *args, **kwargs):
        """
        Log a VERBOSE message.
        """
        self.log.verbose(msg, *args, **kwargs)

    def verbose2(self, msg, *args, **kwargs):
        """
        Log an EXTRA VERBOSE message.
        """
        self.log.verbose2(msg, *args, **kwargs)
