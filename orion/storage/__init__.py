import orion.functions


PROTOCOLS = ('mysql', 'sqlite')


class Storage:
    """
    Interface every storage module implements.
    """
    console = None
    protocol = None

    def connect(self):
        raise NotImplementedError

    def getConnection(self):
        raise NotImplementedError

    def shutdown(self):
        raise NotImplementedError

    def status(self):
        raise NotImplementedError

    def getClientById(self, id):
        raise NotImplementedError

    def getClientByGuid(self, guid):
        raise NotImplementedError

    def getClientByAuth(self, auth):
        raise NotImplementedError

    def setClient(self, client):
        raise NotImplementedError

    def getGroups(self):
        raise NotImplementedError

    def getGroup(self, keyword=None, level=None):
        raise NotImplementedError

    def setCallvote(self, callvote):
        raise NotImplementedError

    def getTables(self):
        raise NotImplementedError

    def truncateTable(self, table):
        raise NotImplementedError


def getStorage(dsn, dsnDict, console):
    """
    Return an initialized storage module instance (not connected yet).
    :param dsn: The database connection string.
    :param dsnDict: The database connection string parsed into a dict.
    :param console: The object holding the logger delegates.
    :raise AttributeError: If the DSN protocol is not supported
    :raise ImportError: If the storage module cannot be loaded
    """
    if not dsnDict or dsnDict['protocol'] not in PROTOCOLS:
        raise AttributeError(f"invalid storage protocol specified: {dsnDict and dsnDict['protocol']}")
    module = orion.functions.getModule(f"orion.storage.{dsnDict['protocol']}")
    construct = getattr(module, f"{dsnDict['protocol'].title()}Storage")
    return construct(dsn, dsnDict, console)
