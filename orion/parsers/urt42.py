"""
Urban Terror 4.2 game log parser variant.

Codes are renumbered with respect to 4.1 so the whole set of tables is
defined here. The release adds callvotes, radio messages, jump mode timings
and the auth system, which is queried to identify connecting clients.
"""
from orion.clients import Callvote, Client
from orion.events import (
    ClientCallvoteEvent,
    ClientJumpRunCanceledEvent,
    ClientJumpRunStartedEvent,
    ClientJumpRunStoppedEvent,
    ClientPositionLoadEvent,
    ClientPositionSaveEvent,
    ClientRadioEvent,
    ClientSurvivorWinnerEvent,
    ClientVoteEvent,
    TeamSurvivorWinnerEvent,
)
from orion.parsers.tables import CodeTable, CodeTables, TeamTable
from orion.parsers.urt import Variant, authenticateByGuid, lineFormat
from orion.urt import Gametype, Hitlocation, Item, Mod, Team

__author__ = 'Daniele Pantaleone'
__version__ = '1.6'

_TEAM_GAMETYPE = (Team.RED, Team.BLUE, Team.SPECTATOR)
_FREE_GAMETYPE = (Team.FREE, Team.SPECTATOR)

tables = CodeTables(
    gametype=CodeTable('gametype', {
        0: Gametype.FFA,
        1: Gametype.LMS,
        3: Gametype.TDM,
        4: Gametype.TS,
        5: Gametype.FTL,
        6: Gametype.CAH,
        7: Gametype.CTF,
        8: Gametype.BOMB,
        9: Gametype.JUMP,
    }),
    hitlocation=CodeTable('hitlocation', {
        1: Hitlocation.HEAD,
        4: Hitlocation.HELMET,
        5: Hitlocation.TORSO,
        6: Hitlocation.VEST,
        7: Hitlocation.ARM_LEFT,
        8: Hitlocation.ARM_RIGHT,
        9: Hitlocation.LEGS,
        12: Hitlocation.BODY,
    }),
    itemByCode=CodeTable('itemByCode', {
        'A': Item.EMPTY,
        'F': Item.BERETTA,
        'G': Item.DEAGLE,
        'H': Item.SPAS12,
        'I': Item.MP5K,
        'J': Item.UMP45,
        'K': Item.HK69,
        'L': Item.LR300,
        'M': Item.G36,
        'N': Item.PSG1,
        'O': Item.GRENADE_HE,
        'Q': Item.GRENADE_SMOKE,
        'R': Item.VEST,
        'S': Item.NVG,
        'T': Item.MEDKIT,
        'U': Item.SILENCER,
        'V': Item.LASER,
        'W': Item.HELMET,
        'X': Item.EXTRAMMO,
        'Z': Item.SR8,
        'a': Item.AK103,
        'c': Item.NEGEV,
        'e': Item.M4,
        'f': Item.GLOCK,
    }),
    itemByName=CodeTable('itemByName', {
        'team_CTF_redflag': Item.CTF_RED_FLAG,
        'team_CTF_blueflag': Item.CTF_BLUE_FLAG,
        'team_CTF_neutralflag': Item.CTF_NEUTRAL_FLAG,
        'ut_item_vest': Item.VEST,
        'ut_item_nvg': Item.NVG,
        'ut_item_medkit': Item.MEDKIT,
        'ut_item_silencer': Item.SILENCER,
        'ut_item_laser': Item.LASER,
        'ut_item_helmet': Item.HELMET,
        'ut_item_extraammo': Item.EXTRAMMO,
        'ut_weapon_knife': Item.KNIFE,
        'ut_weapon_beretta': Item.BERETTA,
        'ut_weapon_deagle': Item.DEAGLE,
        'ut_weapon_spas12': Item.SPAS12,
        'ut_weapon_mp5k': Item.MP5K,
        'ut_weapon_ump45': Item.UMP45,
        'ut_weapon_hk69': Item.HK69,
        'ut_weapon_lr': Item.LR300,
        'ut_weapon_g36': Item.G36,
        'ut_weapon_psg1': Item.PSG1,
        'ut_weapon_sr8': Item.SR8,
        'ut_weapon_ak103': Item.AK103,
        'ut_weapon_negev': Item.NEGEV,
        'ut_weapon_m4': Item.M4,
        'ut_weapon_glock': Item.GLOCK,
        'ut_weapon_grenade_he': Item.GRENADE_HE,
        'ut_weapon_grenade_smoke': Item.GRENADE_SMOKE,
        'ut_weapon_bomb': Item.BOMB,
    }),
    modByKillCode=CodeTable('modByKillCode', {
        0: Mod.UNKNOWN,
        1: Mod.WATER,
        2: Mod.SLIME,
        3: Mod.LAVA,
        4: Mod.CRUSH,
        5: Mod.TELEFRAG,
        6: Mod.FALLING,
        7: Mod.SUICIDE,
        8: Mod.TARGET_LASER,
        9: Mod.TRIGGER_HURT,
        10: Mod.CHANGE_TEAM,
        11: Mod.WEAPON,
        12: Mod.KNIFE,
        13: Mod.KNIFE_THROWN,
        14: Mod.BERETTA,
        15: Mod.DEAGLE,
        16: Mod.SPAS,
        17: Mod.UMP45,
        18: Mod.MP5K,
        19: Mod.LR300,
        20: Mod.G36,
        21: Mod.PSG1,
        22: Mod.HK69,
        23: Mod.BLED,
        24: Mod.KICKED,
        25: Mod.HEGRENADE,
        27: Mod.SMOKEGRENADE,
        28: Mod.SR8,
        30: Mod.AK103,
        31: Mod.SPLODED,
        32: Mod.SLAPPED,
        33: Mod.SMITED,
        34: Mod.BOMBED,
        35: Mod.NUKED,
        36: Mod.NEGEV,
        37: Mod.HK69_HIT,
        38: Mod.M4,
        39: Mod.GLOCK,
        40: Mod.FLAG,
        41: Mod.GOOMBA,
    }),
    modByHitCode=CodeTable('modByHitCode', {
        0: Mod.UNKNOWN,
        1: Mod.KNIFE,
        2: Mod.BERETTA,
        3: Mod.DEAGLE,
        4: Mod.SPAS,
        5: Mod.MP5K,
        6: Mod.UMP45,
        7: Mod.HK69,
        8: Mod.LR300,
        9: Mod.G36,
        10: Mod.PSG1,
        11: Mod.HEGRENADE,
        14: Mod.SR8,
        15: Mod.AK103,
        17: Mod.NEGEV,
        19: Mod.M4,
        20: Mod.GLOCK,
        22: Mod.KICKED,
        23: Mod.KNIFE,
    }),
    teamByCode=CodeTable('teamByCode', {
        0: Team.FREE,
        1: Team.RED,
        2: Team.BLUE,
        3: Team.SPECTATOR,
    }),
    teamByName=CodeTable('teamByName', {
        'FREE': Team.FREE,
        'RED': Team.RED,
        'BLUE': Team.BLUE,
        'SPECTATOR': Team.SPECTATOR,
        'F': Team.FREE,
        'R': Team.RED,
        'B': Team.BLUE,
        'S': Team.SPECTATOR,
        'SPEC': Team.SPECTATOR,
    }),
    teamsByGametype=TeamTable({
        Gametype.FFA: _FREE_GAMETYPE,
        Gametype.LMS: _FREE_GAMETYPE,
        Gametype.TDM: _TEAM_GAMETYPE,
        Gametype.TS: _TEAM_GAMETYPE,
        Gametype.FTL: _TEAM_GAMETYPE,
        Gametype.CAH: _TEAM_GAMETYPE,
        Gametype.CTF: _TEAM_GAMETYPE,
        Gametype.BOMB: _TEAM_GAMETYPE,
        Gametype.JUMP: _FREE_GAMETYPE,
    }),
)

_POSITION = r"(?P<slot>\d+)\s-\s(?P<x>-?\d+\.\d+)\s-\s(?P<y>-?\d+\.\d+)\s-\s(?P<z>-?\d+\.\d+)\s-\s\"(?P<location>.*)\"$"

# order matters: the first matching format wins
lineFormats = (
    lineFormat('BombDefused', r"Bomb\swas\sdefused\sby\s(?P<slot>\d+)!$"),
    lineFormat('BombHolder', r"Bombholder\sis\s+(?P<slot>\d+)$"),
    lineFormat('BombPlanted', r"Bomb\swas\splanted\sby\s(?P<slot>\d+)!$"),
    lineFormat('Callvote', r"Callvote:\s?(?P<slot>\d+)\s?-\s?\"(?P<type>\w+)\s?(?P<data>.*)\"$"),
    lineFormat('ClientBegin', r"ClientBegin:\s(?P<slot>\d+)$"),
    lineFormat('ClientConnect', r"ClientConnect:\s(?P<slot>\d+)$"),
    lineFormat('ClientDisconnect', r"ClientDisconnect:\s(?P<slot>\d+)$"),
    lineFormat('ClientJumpRunCanceled', r"ClientJumpRunCanceled:\s(?P<slot>\d+)\s-\sway:\s(?P<way>\d+).*$"),
    lineFormat('ClientJumpRunStarted', r"ClientJumpRunStarted:\s(?P<slot>\d+)\s-\sway:\s(?P<way>\d+).*$"),
    lineFormat('ClientJumpRunStopped',
               r"ClientJumpRunStopped:\s(?P<slot>\d+)\s-\sway:\s(?P<way>\d+)\s-\stime:\s(?P<time>\d+).*$"),
    lineFormat('ClientLoadPosition', r"ClientLoadPosition:\s" + _POSITION),
    lineFormat('ClientSavePosition', r"ClientSavePosition:\s" + _POSITION),
    lineFormat('ClientUserinfo', r"ClientUserinfo:\s(?P<slot>\d+)\s(?P<infostring>.*)$"),
    lineFormat('ClientUserinfoChanged', r"ClientUserinfoChanged:\s*(?P<slot>\d+)\s*(?P<infostring>.*)$"),
    lineFormat('Exit', r"Exit:\sTimelimit hit.$"),
    lineFormat('Flag', r"Flag:\s(?P<slot>\d+)\s(?P<action>\d+):\s(?P<text>.*)$"),
    lineFormat('FlagReturn', r"Flag\sReturn:\s(?P<team>.*)$"),
    lineFormat('Hit', r"Hit:\s(?P<victim>\d+)\s(?P<attacker>\d+)\s(?P<hitlocation>\d+)\s(?P<weapon>\d+):\s(.*)$"),
    lineFormat('Item', r"Item:\s(?P<slot>\d+)\s(?P<item>.*)$"),
    lineFormat('InitGame', r"InitGame:\s(?P<infostring>.*)$"),
    lineFormat('InitRound', r"InitRound:\s(?P<infostring>.*)$"),
    lineFormat('Kill', r"Kill:\s(?P<attacker>\d+)\s(?P<victim>\d+)\s(?P<weapon>\d+):\s(.*)$"),
    lineFormat('Radio', r"Radio:\s?(?P<slot>\d+)\s?-\s?(?P<group>\d+)\s?-\s?(?P<id>\d+)\s?-\s?"
                        r"\"(?P<location>.*)\"\s?-\s?\"(?P<message>.*)\"$"),
    lineFormat('Say', r"say:\s(?P<slot>\d+)\s(?P<text>.*)$"),
    lineFormat('SayTell', r"saytell:\s(?P<slot>\d+)\s(?P<target>\d+)\s(?P<text>.*)$"),
    lineFormat('SayTeam', r"sayteam:\s(?P<slot>\d+)\s(?P<text>.*)$"),
    lineFormat('ShutdownGame', r"ShutdownGame:$"),
    lineFormat('SurvivorWinner', r"SurvivorWinner:\s(?P<data>.*)$"),
    lineFormat('Vote', r"Vote:\s?(?P<slot>\d+)\s?-\s?(?P<data>\d+)$"),
    lineFormat('Warmup', r"Warmup:$"),
)


def authenticate(parser, slot, userinfo):
    """
    Identify a connecting client through the auth system, falling back to the guid.
    :param parser: The UrtParser instance
    :param slot: The slot the client is connecting on
    :param userinfo: The decoded userinfo string
    :return: The stored client or None
    """
    if not parser.game.auth_enable:
        return authenticateByGuid(parser, slot, userinfo)

    authinfo = parser.console.authWhois(slot)
    if not authinfo or not authinfo['login']:
        return authenticateByGuid(parser, slot, userinfo)

    login = authinfo['login']
    guid = userinfo.get('cl_guid')
    parser.debug("Attempt to authenticate client on slot %s [auth: %s]", slot, login)
    if client := parser.clients.getByAuth(login):
        if guid and client.guid != guid.upper():
            parser.warning("Stored guid of client on slot %s does not match the userinfo one: updating %s -> %s",
                           slot, client.guid, guid)
            client.guid = guid
        return client

    parser.debug("Could not authenticate client on slot %s through the auth system [auth: %s]", slot, login)
    if not (client := authenticateByGuid(parser, slot, userinfo)):
        parser.debug("No match found for client connecting on slot %s: creating a new client [auth: %s]", slot, login)
        client = Client(guid=guid, group=parser.groups.getByKeyword('guest'))
    client.auth = login
    return client


def onCallvote(parser, match):
    # 0:00 Callvote: 3 - "map ut42_jupiter"
    # 0:00 Callvote: 3 - "cyclemap"
    if not (client := parser.getClient(match['slot'])):
        return None
    callvote = Callvote(client, match['type'], match['data'])
    parser.game.callvote = callvote
    return ClientCallvoteEvent(client, callvote)


def onClientJumpRunCanceled(parser, match):
    # 0:00 ClientJumpRunCanceled: 0 - way: 1 - attempt: 1 of infinity
    if client := parser.getClient(match['slot']):
        return ClientJumpRunCanceledEvent(client, int(match['way']))


def onClientJumpRunStarted(parser, match):
    # 0:00 ClientJumpRunStarted: 0 - way: 1 - attempt: 1 of infinity
    if client := parser.getClient(match['slot']):
        return ClientJumpRunStartedEvent(client, int(match['way']))


def onClientJumpRunStopped(parser, match):
    # 0:00 ClientJumpRunStopped: 0 - way: 1 - time: 12345 - attempt: 1 of infinity
    if client := parser.getClient(match['slot']):
        return ClientJumpRunStoppedEvent(client, int(match['way']), int(match['time']))


def onClientLoadPosition(parser, match):
    # 0:00 ClientLoadPosition: 0 - 335.384887 - 67.469154 - -23.875000 - "unknown"
    if client := parser.getClient(match['slot']):
        return ClientPositionLoadEvent(client, float(match['x']), float(match['y']), float(match['z']),
                                       match['location'])


def onClientSavePosition(parser, match):
    # 0:00 ClientSavePosition: 0 - 335.384887 - 67.469154 - -23.875000 - "unknown"
    if client := parser.getClient(match['slot']):
        return ClientPositionSaveEvent(client, float(match['x']), float(match['y']), float(match['z']),
                                       match['location'])


def onRadio(parser, match):
    # 0:00 Radio: 3 - 9 - 7 - "1. Off With their Head!" - "Oh, you idiot"
    if client := parser.getClient(match['slot']):
        return ClientRadioEvent(client, int(match['group']), int(match['id']), match['location'], match['message'])


def onSurvivorWinner(parser, match):
    # 0:00 SurvivorWinner: Red
    # 0:00 SurvivorWinner: 1
    data = match['data'].strip()
    if not data.isdigit():
        return TeamSurvivorWinnerEvent(parser.getTeamByName(data))
    if client := parser.getClient(data):
        return ClientSurvivorWinnerEvent(client)


def onVote(parser, match):
    # 0:00 Vote: 4 - 1
    if client := parser.getClient(match['slot']):
        return ClientVoteEvent(client, int(match['data']))


variant = Variant(
    name='urt42',
    tables=tables,
    lineFormats=lineFormats,
    handlers={
        'Callvote': onCallvote,
        'ClientJumpRunCanceled': onClientJumpRunCanceled,
        'ClientJumpRunStarted': onClientJumpRunStarted,
        'ClientJumpRunStopped': onClientJumpRunStopped,
        'ClientLoadPosition': onClientLoadPosition,
        'ClientSavePosition': onClientSavePosition,
        'Radio': onRadio,
        'SurvivorWinner': onSurvivorWinner,
        'Vote': onVote,
    },
    authenticate=authenticate,
)
