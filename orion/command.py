import enum

__author__ = 'Daniele Pantaleone'
__version__ = '1.1'


class Prefix(enum.Enum):
    NORMAL = '!'
    LOUD = '@'
    BIG = '&'

    @classmethod
    def getByChar(cls, char):
        """
        Return the prefix matching the given sigil, or None.
        :param char: The first character of a chat message
        """
        try:
            return cls(char)
        except ValueError:
            return None

    @classmethod
    def chars(cls):
        return ''.join(p.value for p in cls)


class Command:
    """
    A command issued through the game chat.
    Parameters are kept as typed by the client and tokenized on access.
    """

    def __init__(self, client, prefix, handle, params=None, force=False):
        """
        Object constructor.
        :param client: The client who issued the command
        :param prefix: The Prefix used to issue the command
        :param handle: The command name
        :param params: The raw parameter string (may be None)
        :param force: Whether the command runs regardless of the client group level
        """
        self.client = client
        self.prefix = prefix
        self.handle = handle.lower()
        self.params = params or None
        self.force = force

    def __repr__(self):
        return f"Command<{self.prefix.value}{self.handle}>({self.params!r}, {self.client}, force={self.force})"

    def _tokens(self):
        return self.params.split() if self.params else []

    def getParamNum(self):
        """
        Return the number of whitespace separated parameters.
        """
        return len(self._tokens())

    def getParamString(self, index):
        """
        Return the parameter at the given index, or None.
        :param index: The parameter index
        """
        tokens = self._tokens()
        if 0 <= index < len(tokens):
            return tokens[index]
        return None

    def getParamStringConcat(self, index):
        """
        Return the raw text starting at the given parameter index, or None.
        :param index: The index of the first parameter to include
        """
        if not self.params or index < 0:
            return None
        tokens = self.params.split(None, index)
        if index < len(tokens):
            return tokens[index]
        return None

    def getParamInt(self, index):
        """
        Return the parameter at the given index as an integer.
        :raise ValueError: If the parameter is not an integer
        """
        if (value := self.getParamString(index)) is None:
            return None
        return int(value)

    def getParamFloat(self, index):
        """
        Return the parameter at the given index as a float.
        :raise ValueError: If the parameter is not a number
        """
        if (value := self.getParamString(index)) is None:
            return None
        return float(value)

    def getParamBoolean(self, index):
        """
        Return the parameter at the given index as a boolean.
        :raise ValueError: If the parameter is not a boolean value
        """
        if (value := self.getParamString(index)) is None:
            return None
        value = value.lower()
        if value in ('yes', '1', 'on', 'true'):
            return True
        elif value in ('no', '0', 'off', 'false'):
            return False
        raise ValueError(f"{value} is not a boolean value")
