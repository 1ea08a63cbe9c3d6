import re

import orion.output

__author__ = 'ThorN, Courgette, Fenix'
__version__ = '1.3'


class Console:
    """
    Remote console of the game server.
    Subclasses implement write(): everything else is built on top of it.
    """
    _commands = {
        "bigtext": 'bigtext "%(message)s"',
        "forceteam": "forceteam %(slot)s %(team)s",
        "kick": 'kick %(slot)s "%(reason)s"',
        "say": "say %(message)s",
        "set": 'set %(name)s "%(value)s"',
        "tell": "tell %(slot)s %(message)s",
    }

    _reCvarName = re.compile(r"^[a-z0-9_.]+$", re.IGNORECASE)

    _reCvar = (
        # "sv_maxclients" is:"16^7" default:"8^7"
        re.compile(
            r'^"(?P<cvar>[a-z0-9_.]+)"\s+is:\s*'
            r'"(?P<value>.*?)(\^7)?"\s+default:\s*'
            r'"(?P<default>.*?)(\^7)?"$',
            re.IGNORECASE | re.MULTILINE,
        ),
        # "g_maxGameClients" is:"0^7", the default
        re.compile(
            r'^"(?P<cvar>[a-z0-9_.]+)"\s+is:\s*'
            r'"(?P<default>(?P<value>.*?))(\^7)?",\s+the\sdefault$',
            re.IGNORECASE | re.MULTILINE,
        ),
        # "mapname" is:"ut4_abbey^7"
        re.compile(
            r'^"(?P<cvar>[a-z0-9_.]+)"\s+is:\s*"(?P<value>.*?)(\^7)?"$',
            re.IGNORECASE | re.MULTILINE,
        ),
    )

    # auth: id: 0 - name: ^7Courgette - login: courgette - notoriety: serious - level: -1
    _reAuthWhois = re.compile(
        r"^auth: id: (?P<slot>\d+) - "
        r"name: (?:\^7)?(?P<name>.+?) - "
        r"login: (?P<login>.*?) - "
        r"notoriety: (?P<notoriety>.+?) - "
        r"level: (?P<level>-?\d+?)(?:\s+- (?P<extra>.*))?\s*$",
        re.MULTILINE,
    )

    def __init__(self):
        self.log = orion.output.getLogger()

    def write(self, command):
        """
        Send a command to the game server and return the server reply.
        :param command: The command string
        """
        raise NotImplementedError

    def getCommand(self, name, **kwargs):
        """
        Return a server command string.
        :param name: The command name
        :param kwargs: Values substituted in the command template
        """
        return self._commands[name] % kwargs

    def getCvar(self, name, cast=str):
        """
        Return the current value of a server cvar, or None.
        :param name: The cvar name
        :param cast: Callable used to convert the raw string value
        """
        if not self._reCvarName.match(name):
            self.log.error("%s is not a valid cvar name", name)
            return None

        if not (reply := self.write(name)):
            return None

        for pattern in self._reCvar:
            if m := pattern.search(reply):
                break
        else:
            self.log.debug("getCvar(%s): unexpected reply %r", name, reply)
            return None

        if m["cvar"].lower() != name.lower():
            return None
        return cast(m["value"])

    def setCvar(self, name, value):
        """
        Set a cvar on the server.
        :param name: The cvar name
        :param value: The cvar value
        """
        if self._reCvarName.match(name):
            self.write(self.getCommand("set", name=name, value=value))
        else:
            self.log.error("%s is not a valid cvar name", name)

    def authWhois(self, slot):
        """
        Query the auth system for the client in the given slot.
        :param slot: The client slot number
        :return: A dict with slot, name, login, notoriety and level or None
        """
        if not (reply := self.write(f"auth-whois {slot}")):
            self.log.warning("authWhois: auth-whois failed for %s", slot)
            return None

        if not (m := self._reAuthWhois.search(reply)):
            self.log.warning("authWhois: auth-whois no match: %r", reply)
            return None

        data = m.groupdict()
        data.pop("extra", None)
        if not data["login"]:
            # client not authenticated: nothing but the slot and name is reliable
            data.update(login=None, notoriety=None, level=None)
        return data

    def forceteam(self, client, team):
        """
        Move a client into the given team.
        :param client: The client to move
        :param team: The urt.Team to move the client into
        """
        self.write(self.getCommand("forceteam", slot=client.slot, team=team.name.lower()))

    def tell(self, client, message):
        """
        Send a private message to a client.
        """
        if client is None or client.slot is None:
            return
        self.write(self.getCommand("tell", slot=client.slot, message=message))

    def say(self, message):
        self.write(self.getCommand("say", message=message))

    def bigtext(self, message):
        self.write(self.getCommand("bigtext", message=message))

    def kick(self, client, reason=""):
        self.write(self.getCommand("kick", slot=client.slot, reason=reason))


class LoggingConsole(Console):
    """
    Console that does not talk to any server: commands are only logged.
    Useful for dry runs over an existing game log and for tests.
    """

    def __init__(self, replies=None):
        """
        Object constructor.
        :param replies: Optional dict of canned replies (command => reply)
        """
        Console.__init__(self)
        self.replies = dict(replies or {})
        self.written = []

    def write(self, command):
        self.log.console("RCON %s", command)
        self.written.append(command)
        return self.replies.get(command, "")
