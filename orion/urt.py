"""
Urban Terror domain values.

Protocol codes differ between game releases: every parser variant maps its
own codes onto these members through its code tables.
"""
import enum

__author__ = 'Daniele Pantaleone'
__version__ = '1.0'


class Gametype(enum.Enum):
    FFA = "Free For All"
    LMS = "Last Man Standing"
    TDM = "Team Death Match"
    TS = "Team Survivor"
    FTL = "Follow The Leader"
    CAH = "Capture And Hold"
    CTF = "Capture The Flag"
    BOMB = "Bomb Mode"
    JUMP = "Jump Mode"


class Team(enum.Enum):
    FREE = "Free"
    RED = "Red"
    BLUE = "Blue"
    SPECTATOR = "Spectator"

    def isPlaying(self):
        """
        Tell whether the team is one of the two sides of a team based match.
        """
        return self in (Team.RED, Team.BLUE)


class Hitlocation(enum.Enum):
    HEAD = "Head"
    HELMET = "Helmet"
    TORSO = "Torso"
    KEVLAR = "Kevlar"
    VEST = "Vest"
    ARMS = "Arms"
    ARM_LEFT = "Left Arm"
    ARM_RIGHT = "Right Arm"
    LEGS = "Legs"
    BODY = "Body"


class Item(enum.Enum):
    EMPTY = "Empty"
    CTF_RED_FLAG = "Red Flag"
    CTF_BLUE_FLAG = "Blue Flag"
    CTF_NEUTRAL_FLAG = "Neutral Flag"
    VEST = "Kevlar Vest"
    NVG = "Tac Goggles"
    MEDKIT = "Medkit"
    SILENCER = "Silencer"
    LASER = "Laser Sight"
    HELMET = "Helmet"
    EXTRAMMO = "Extra Ammo"
    KNIFE = "Knife"
    BERETTA = "Beretta 92G"
    DEAGLE = "Desert Eagle"
    SPAS12 = "Franchi SPAS12"
    MP5K = "HK MP5K"
    UMP45 = "HK UMP45"
    HK69 = "HK69 40mm"
    LR300 = "ZM LR300"
    G36 = "HK G36"
    PSG1 = "HK PSG1"
    SR8 = "Remington SR8"
    AK103 = "Kalashnikov AK103"
    NEGEV = "IMI Negev"
    M4 = "Colt M4A1"
    GLOCK = "Glock 18"
    COLT1911 = "Colt 1911"
    MAC11 = "Ingram MAC11"
    GRENADE_HE = "HE Grenade"
    GRENADE_SMOKE = "Smoke Grenade"
    BOMB = "Bomb"


class Mod(enum.Enum):
    UNKNOWN = "Unknown"
    WATER = "Water"
    SLIME = "Slime"
    LAVA = "Lava"
    CRUSH = "Crush"
    TELEFRAG = "Telefrag"
    FALLING = "Falling"
    SUICIDE = "Suicide"
    TARGET_LASER = "Target Laser"
    TRIGGER_HURT = "Trigger Hurt"
    CHANGE_TEAM = "Change Team"
    WEAPON = "Weapon"
    KNIFE = "Knife"
    KNIFE_THROWN = "Thrown Knife"
    BERETTA = "Beretta 92G"
    DEAGLE = "Desert Eagle"
    SPAS = "Franchi SPAS12"
    UMP45 = "HK UMP45"
    MP5K = "HK MP5K"
    LR300 = "ZM LR300"
    G36 = "HK G36"
    PSG1 = "HK PSG1"
    HK69 = "HK69 40mm"
    BLED = "Bleed"
    KICKED = "Kick"
    HEGRENADE = "HE Grenade"
    FLASHGRENADE = "Flash Grenade"
    SMOKEGRENADE = "Smoke Grenade"
    SR8 = "Remington SR8"
    SACRIFICE = "Sacrifice"
    AK103 = "Kalashnikov AK103"
    SPLODED = "Sploded"
    SLAPPED = "Slap"
    SMITED = "Smite"
    BOMBED = "Bomb"
    NUKED = "Nuke"
    NEGEV = "IMI Negev"
    HK69_HIT = "HK69 Hit"
    M4 = "Colt M4A1"
    GLOCK = "Glock 18"
    FLAG = "Flag"
    GOOMBA = "Goomba"


# means of death always credited to the victim, whatever the attacker slot says
SELF_INFLICTED = frozenset((
    Mod.WATER,
    Mod.SLIME,
    Mod.LAVA,
    Mod.CRUSH,
    Mod.FALLING,
    Mod.SUICIDE,
    Mod.TRIGGER_HURT,
    Mod.SPLODED,
))
