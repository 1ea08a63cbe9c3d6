from collections import namedtuple
from types import MappingProxyType

from orion.exceptions import CodeNotFound

__author__ = 'Daniele Pantaleone'
__version__ = '1.0'


class CodeTable:
    """
    Read-only mapping from protocol codes to domain values.
    """

    def __init__(self, name, mapping):
        """
        Object constructor.
        :param name: The table name (used in error messages)
        :param mapping: The code => value mapping
        """
        self.name = name
        self._mapping = MappingProxyType(dict(mapping))

    def lookup(self, code):
        """
        Return the value mapped on the given code.
        :param code: The protocol code
        :raise CodeNotFound: If the code is not part of this table
        """
        try:
            return self._mapping[code]
        except KeyError:
            raise CodeNotFound(self.name, code) from None

    def codes(self):
        return self._mapping.keys()

    def values(self):
        return self._mapping.values()

    def __contains__(self, code):
        return code in self._mapping

    def __iter__(self):
        return iter(self._mapping)

    def __len__(self):
        return len(self._mapping)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name} ({len(self)} codes)>"


class TeamTable(CodeTable):
    """
    Gametype => teams available for that gametype.
    """

    def __init__(self, mapping):
        CodeTable.__init__(self, 'teamsByGametype', {k: tuple(v) for k, v in mapping.items()})


CodeTables = namedtuple('CodeTables', (
    'gametype',
    'hitlocation',
    'itemByCode',
    'itemByName',
    'modByKillCode',
    'modByHitCode',
    'teamByCode',
    'teamByName',
    'teamsByGametype',
))
