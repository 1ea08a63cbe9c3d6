import time

__author__ = "ThorN, xlr8or, Courgette, Fenix"
__version__ = "2.0"


class Event:
    """
    Base class for every event generated by the parser.
    Each subclass declares the event key, a human readable name and the
    ordered list of fields it carries. Fields are set once, in the
    constructor: events are never modified after they have been queued.
    """
    key = None
    name = None
    fields = ()

    def __init__(self, *args, **kwargs):
        """
        Object constructor.
        Field values are given positionally (in the order of `fields`) or by name.
        """
        if len(args) > len(self.fields):
            raise TypeError(f"{self.__class__.__name__} takes {len(self.fields)} values, {len(args)} given")
        values = dict(zip(self.fields, args))
        for field, value in kwargs.items():
            if field not in self.fields:
                raise TypeError(f"{self.__class__.__name__} has no field {field!r}")
            if field in values:
                raise TypeError(f"{self.__class__.__name__} got multiple values for {field!r}")
            values[field] = value
        if missing := [f for f in self.fields if f not in values]:
            raise TypeError(f"{self.__class__.__name__} missing values for {', '.join(missing)}")
        for field, value in values.items():
            object.__setattr__(self, field, value)
        object.__setattr__(self, 'time', int(time.time()))

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{self.__class__.__name__} is read-only")

    def __eq__(self, other):
        return (type(self) is type(other) and
                all(getattr(self, f) == getattr(other, f) for f in self.fields))

    def __hash__(self):
        return hash(self.key)

    def __str__(self):
        data = ", ".join(f"{f}={getattr(self, f)!r}" for f in self.fields)
        return f"Event<{self.key}>({data})"

    __repr__ = __str__


class ClientEvent(Event):
    fields = ('client',)


class ClientBombDefusedEvent(ClientEvent):
    key = "EVT_CLIENT_BOMB_DEFUSED"
    name = "Client Bomb Defused"


class ClientBombHolderEvent(ClientEvent):
    key = "EVT_CLIENT_BOMB_HOLDER"
    name = "Client Bomb Holder"


class ClientBombPlantedEvent(ClientEvent):
    key = "EVT_CLIENT_BOMB_PLANTED"
    name = "Client Bomb Planted"


class ClientConnectEvent(ClientEvent):
    key = "EVT_CLIENT_CONNECT"
    name = "Client Connect"


class ClientDisconnectEvent(ClientEvent):
    key = "EVT_CLIENT_DISCONNECT"
    name = "Client Disconnect"


class ClientJoinEvent(ClientEvent):
    key = "EVT_CLIENT_JOIN"
    name = "Client Join"


class ClientFlagDroppedEvent(ClientEvent):
    key = "EVT_CLIENT_FLAG_DROPPED"
    name = "Client Flag Dropped"


class ClientFlagReturnedEvent(ClientEvent):
    key = "EVT_CLIENT_FLAG_RETURNED"
    name = "Client Flag Returned"


class ClientFlagCapturedEvent(ClientEvent):
    key = "EVT_CLIENT_FLAG_CAPTURED"
    name = "Client Flag Captured"


class ClientSurvivorWinnerEvent(ClientEvent):
    key = "EVT_CLIENT_SURVIVOR_WINNER"
    name = "Client Survivor Winner"


class ClientGearChangeEvent(Event):
    key = "EVT_CLIENT_GEAR_CHANGE"
    name = "Client Gear Change"
    fields = ('client', 'gear')


class ClientNameChangeEvent(Event):
    key = "EVT_CLIENT_NAME_CHANGE"
    name = "Client Name Change"
    fields = ('client', 'name')


class ClientTeamChangeEvent(Event):
    key = "EVT_CLIENT_TEAM_CHANGE"
    name = "Client Team Change"
    fields = ('client', 'team')


class ClientItemPickupEvent(Event):
    key = "EVT_CLIENT_ITEM_PICKUP"
    name = "Client Item Pickup"
    fields = ('client', 'item')


class ClientDamageEvent(Event):
    key = "EVT_CLIENT_DAMAGE"
    name = "Client Damage"
    fields = ('client', 'victim', 'mod', 'hitlocation')


class ClientDamageSelfEvent(Event):
    key = "EVT_CLIENT_DAMAGE_SELF"
    name = "Client Damage Self"
    fields = ('client', 'mod', 'hitlocation')


class ClientDamageTeamEvent(ClientDamageEvent):
    key = "EVT_CLIENT_DAMAGE_TEAM"
    name = "Client Team Damage"


class ClientKillEvent(Event):
    key = "EVT_CLIENT_KILL"
    name = "Client Kill"
    fields = ('client', 'victim', 'mod')


class ClientKillSelfEvent(Event):
    key = "EVT_CLIENT_KILL_SELF"
    name = "Client Suicide"
    fields = ('client', 'mod')


class ClientKillTeamEvent(ClientKillEvent):
    key = "EVT_CLIENT_KILL_TEAM"
    name = "Client Team Kill"


class ClientSayEvent(Event):
    key = "EVT_CLIENT_SAY"
    name = "Say"
    fields = ('client', 'message')


class ClientSayTeamEvent(ClientSayEvent):
    key = "EVT_CLIENT_SAY_TEAM"
    name = "Team Say"


class ClientSayPrivateEvent(Event):
    key = "EVT_CLIENT_SAY_PRIVATE"
    name = "Private Message"
    fields = ('client', 'target', 'message')


class ClientCallvoteEvent(Event):
    key = "EVT_CLIENT_CALLVOTE"
    name = "Client Callvote"
    fields = ('client', 'callvote')


class ClientVoteEvent(Event):
    key = "EVT_CLIENT_VOTE"
    name = "Client Vote"
    fields = ('client', 'data')


class ClientRadioEvent(Event):
    key = "EVT_CLIENT_RADIO"
    name = "Client Radio"
    fields = ('client', 'group', 'id', 'location', 'message')


class ClientJumpRunStartedEvent(Event):
    key = "EVT_CLIENT_JUMP_RUN_STARTED"
    name = "Client Jump Run Started"
    fields = ('client', 'way')


class ClientJumpRunCanceledEvent(ClientJumpRunStartedEvent):
    key = "EVT_CLIENT_JUMP_RUN_CANCELED"
    name = "Client Jump Run Canceled"


class ClientJumpRunStoppedEvent(Event):
    key = "EVT_CLIENT_JUMP_RUN_STOPPED"
    name = "Client Jump Run Stopped"
    fields = ('client', 'way', 'millis')


class ClientPositionSaveEvent(Event):
    key = "EVT_CLIENT_POSITION_SAVE"
    name = "Client Position Save"
    fields = ('client', 'x', 'y', 'z', 'location')


class ClientPositionLoadEvent(ClientPositionSaveEvent):
    key = "EVT_CLIENT_POSITION_LOAD"
    name = "Client Position Load"


class TeamFlagReturnEvent(Event):
    key = "EVT_TEAM_FLAG_RETURN"
    name = "Team Flag Return"
    fields = ('team',)


class TeamSurvivorWinnerEvent(Event):
    key = "EVT_TEAM_SURVIVOR_WINNER"
    name = "Team Survivor Winner"
    fields = ('team',)


class GameRoundStartEvent(Event):
    key = "EVT_GAME_ROUND_START"
    name = "Game Round Start"
    fields = ('game',)


class GameWarmupEvent(Event):
    key = "EVT_GAME_WARMUP"
    name = "Game Warmup"


class GameExitEvent(Event):
    key = "EVT_GAME_EXIT"
    name = "Game Exit"


class Events:
    """
    Registry of the available event types, indexed by key.
    """

    def __init__(self):
        self._events = {}
        self.loadEvents(_concrete_events(Event))

    def loadEvents(self, events):
        """
        Load event classes.
        :param events: A collection of Event subclasses
        """
        for event_class in events:
            self.createEvent(event_class)

    def createEvent(self, event_class):
        """
        Register an event class.
        :param event_class: An Event subclass with a key
        """
        if not event_class.key:
            raise ValueError(f"{event_class.__name__} has no event key")
        self._events[event_class.key] = event_class
        return event_class

    def getClass(self, key):
        """
        Return the event class registered with the given key.
        :param key: The event key or class
        """
        if isinstance(key, type) and issubclass(key, Event):
            key = key.key
        try:
            return self._events[key]
        except KeyError:
            raise KeyError(f"could not find any event with key {key}") from None

    def getName(self, key):
        """
        Return an event name given its key.
        :param key: The event key
        """
        try:
            return self.getClass(key).name
        except KeyError:
            return f"Unknown ({key})"

    @property
    def events(self):
        """
        Return the key => class dict.
        """
        return dict(self._events)


def _concrete_events(base):
    for cls in base.__subclasses__():
        if cls.key:
            yield cls
        yield from _concrete_events(cls)


eventManager = Events()
