import re
import threading
import time

from orion.functions import stripColors

__author__ = 'ThorN, xlr8or, Fenix'
__version__ = '2.0'


class Group:
    """
    A group of clients sharing the same access level.
    """

    def __init__(self, id=None, name=None, keyword=None, level=0):
        self.id = id
        self.name = name
        self.keyword = keyword
        self.level = level

    def __eq__(self, other):
        return isinstance(other, Group) and (self.keyword, self.level) == (other.keyword, other.level)

    def __hash__(self):
        return hash((self.keyword, self.level))

    def __repr__(self):
        return f"Group<{self.keyword}:{self.level}>"


class Client:
    """
    A game client.
    `id` is the storage identity (None until the client is saved) and `slot`
    the position the client occupies on the server while connected.
    """

    def __init__(self, ip=None, guid=None, name=None, auth=None, group=None, id=None, slot=None,
                 connections=0, bot=False, time_add=None, time_edit=None):
        self.id = id
        self.slot = slot
        self.ip = ip
        self.guid = guid
        self.name = name
        self.auth = auth
        self.group = group
        self.connections = connections
        self.bot = bot
        self.time_add = time_add
        self.time_edit = time_edit
        self.gear = None
        self.team = None
        self.vars = {}

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, value):
        self._name = stripColors(value) if value is not None else None

    @property
    def guid(self):
        return self._guid

    @guid.setter
    def guid(self, value):
        self._guid = value.upper() if value else None

    @property
    def auth(self):
        return self._auth

    @auth.setter
    def auth(self, value):
        self._auth = value.lower() if value else None

    @property
    def level(self):
        return self.group.level if self.group else 0

    def __repr__(self):
        return f"Client<@{self.id}:{self.guid}|{self.name}|slot {self.slot}>"


class Callvote:
    """
    A vote called by a client.
    """

    def __init__(self, client, type, data=None):
        self.client = client
        self.type = type
        self.data = data or None
        self.yes = 1
        self.no = 0
        self.time_add = int(time.time())

    def __repr__(self):
        return f"Callvote<{self.type} {self.data!r} by {self.client} {self.yes}/{self.no}>"


class Groups:
    """
    Client groups, loaded from the storage on first use.
    """

    def __init__(self, console):
        """
        Object constructor.
        :param console: The object holding `storage` and the logger delegates
        """
        self.console = console
        self._cache = None

    def _load(self):
        if self._cache is None:
            self._cache = list(self.console.storage.getGroups())
        return self._cache

    def getAll(self):
        """
        Return all the groups, ordered by level.
        """
        return list(self._load())

    def getByKeyword(self, keyword):
        """
        Return the group matching the given keyword or None.
        """
        for group in self._load():
            if group.keyword == keyword:
                return group
        return None

    def getByLevel(self, level):
        """
        Return the group matching the given level or None.
        """
        for group in self._load():
            if group.level == level:
                return group
        return None


class Clients(dict):
    """
    Connected clients, indexed by slot number.
    Lookups which fail on connected clients fall back to the storage.
    """
    _reSlot = re.compile(r"^\d+$")

    def __init__(self, console):
        """
        Object constructor.
        :param console: The object holding `storage` and the logger delegates
        """
        dict.__init__(self)
        self.console = console
        self._lock = threading.RLock()

    def add(self, client):
        """
        Bind a client to its slot, releasing any other slot it is still bound to.
        :param client: The client to add (must have a slot)
        """
        with self._lock:
            for slot in [s for s, c in self.items() if c is client and s != client.slot]:
                self.console.debug("%s moved from slot %s to slot %s", client, slot, client.slot)
                del self[slot]
            if (previous := dict.get(self, client.slot)) and previous is not client:
                self.console.debug("Slot %s was still bound to %s: replacing with %s", client.slot, previous, client)
            self[client.slot] = client

    def getBySlot(self, slot):
        """
        Return the client connected on the given slot or None.
        """
        with self._lock:
            return self.get(int(slot))

    def removeBySlot(self, slot):
        """
        Unbind the client connected on the given slot.
        :return: The removed client or None
        """
        with self._lock:
            client = self.pop(int(slot), None)
        if client:
            client.slot = None
        return client

    def getList(self):
        """
        Return the connected clients ordered by slot.
        """
        with self._lock:
            return [self[slot] for slot in sorted(self)]

    def getByName(self, name):
        """
        Return the connected clients whose name contains the given text (case insensitive).
        """
        needle = stripColors(name).lower()
        return [c for c in self.getList() if c.name and needle in c.name.lower()]

    def getByGuid(self, guid):
        """
        Return the client with the given guid, or None.
        """
        guid = guid.upper()
        for client in self.getList():
            if client.guid == guid:
                return client
        return self.console.storage.getClientByGuid(guid)

    def getByAuth(self, auth):
        """
        Return the client with the given auth login, or None.
        """
        auth = auth.lower()
        for client in self.getList():
            if client.auth == auth:
                return client
        return self.console.storage.getClientByAuth(auth)

    def getByMagic(self, pattern):
        """
        Return the connected client matching a slot number or a unique partial name.
        :param pattern: The slot number or a part of the client name
        :return: A list of matching clients (empty if nothing matches)
        """
        pattern = pattern.strip()
        if self._reSlot.match(pattern):
            client = self.getBySlot(pattern)
            return [client] if client else []
        return self.getByName(pattern)

    def save(self, client):
        """
        Persist a client. Bots are never saved.
        :param client: The client to save
        """
        if client.bot:
            return client
        now = int(time.time())
        if client.time_add is None:
            client.time_add = now
        client.time_edit = now
        self.console.storage.setClient(client)
        return client
