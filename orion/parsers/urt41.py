"""
Urban Terror 4.1 game log parser variant.
"""
from orion.parsers.tables import CodeTable, CodeTables, TeamTable
from orion.parsers.urt import Variant, authenticateByGuid, lineFormat
from orion.urt import Gametype, Hitlocation, Item, Mod, Team

__author__ = 'Daniele Pantaleone'
__version__ = '1.4'

_TEAM_GAMETYPE = (Team.RED, Team.BLUE, Team.SPECTATOR)
_FREE_GAMETYPE = (Team.FREE, Team.SPECTATOR)

tables = CodeTables(
    gametype=CodeTable('gametype', {
        0: Gametype.FFA,
        3: Gametype.TDM,
        4: Gametype.TS,
        5: Gametype.FTL,
        6: Gametype.CAH,
        7: Gametype.CTF,
        8: Gametype.BOMB,
    }),
    hitlocation=CodeTable('hitlocation', {
        0: Hitlocation.HEAD,
        1: Hitlocation.HELMET,
        2: Hitlocation.TORSO,
        3: Hitlocation.KEVLAR,
        4: Hitlocation.ARMS,
        5: Hitlocation.LEGS,
        6: Hitlocation.BODY,
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
        28: Mod.SR8,
        30: Mod.AK103,
        31: Mod.SPLODED,
        32: Mod.SLAPPED,
        33: Mod.BOMBED,
        34: Mod.NUKED,
        35: Mod.NEGEV,
        37: Mod.HK69_HIT,
        38: Mod.M4,
        39: Mod.FLAG,
        40: Mod.GOOMBA,
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
        14: Mod.SR8,
        15: Mod.AK103,
        17: Mod.NEGEV,
        19: Mod.M4,
        21: Mod.HEGRENADE,
        22: Mod.KNIFE_THROWN,
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
        Gametype.TDM: _TEAM_GAMETYPE,
        Gametype.TS: _TEAM_GAMETYPE,
        Gametype.FTL: _TEAM_GAMETYPE,
        Gametype.CAH: _TEAM_GAMETYPE,
        Gametype.CTF: _TEAM_GAMETYPE,
        Gametype.BOMB: _TEAM_GAMETYPE,
    }),
)

# order matters: the first matching format wins
lineFormats = (
    lineFormat('BombDefused', r"Bomb\swas\sdefused\sby\s(?P<slot>\d+)!$"),
    lineFormat('BombHolder', r"Bombholder\sis\s+(?P<slot>\d+)$"),
    lineFormat('BombPlanted', r"Bomb\swas\splanted\sby\s(?P<slot>\d+)!$"),
    lineFormat('ClientBegin', r"ClientBegin:\s(?P<slot>\d+)$"),
    lineFormat('ClientConnect', r"ClientConnect:\s(?P<slot>\d+)$"),
    lineFormat('ClientDisconnect', r"ClientDisconnect:\s(?P<slot>\d+)$"),
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
    lineFormat('Say', r"say:\s(?P<slot>\d+)\s(?P<text>.*)$"),
    lineFormat('SayTell', r"saytell:\s(?P<slot>\d+)\s(?P<target>\d+)\s(?P<text>.*)$"),
    lineFormat('SayTeam', r"sayteam:\s(?P<slot>\d+)\s(?P<text>.*)$"),
    lineFormat('SurvivorWinner', r"SurvivorWinner:\s(?P<data>.*)$"),
    lineFormat('ShutdownGame', r"ShutdownGame:$"),
    lineFormat('Warmup', r"Warmup:$"),
)

variant = Variant(
    name='urt41',
    tables=tables,
    lineFormats=lineFormats,
    handlers={},
    authenticate=authenticateByGuid,
)
