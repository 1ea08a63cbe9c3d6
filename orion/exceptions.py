import configparser

NoOptionError = configparser.NoOptionError
NoSectionError = configparser.NoSectionError


class ConfigFileNotFound(Exception):
    """
    Raised whenever the configuration file can't be found.
    """

    def __init__(self, message):
        Exception.__init__(self, message)

    def __str__(self):
        return repr(self.args[0])


class ConfigFileNotValid(Exception):
    """
    Raised whenever we are parsing an invalid configuration file.
    """

    def __init__(self, message):
        Exception.__init__(self, message)

    def __str__(self):
        return repr(self.args[0])


class ProgrammingError(Exception):
    """
    Raised whenever a programming error is detected.
    """

    def __init__(self, message):
        Exception.__init__(self, message)

    def __str__(self):
        return repr(self.args[0])


class DatabaseError(Exception):
    """
    Raised whenever there are inconsistences with the database schema.
    """

    def __init__(self, message):
        Exception.__init__(self, message)

    def __str__(self):
        return repr(self.args[0])


class CodeNotFound(LookupError):
    """
    Raised when a protocol code has no entry in a code table.
    """

    def __init__(self, table, code):
        LookupError.__init__(self, f"{table}: no entry for code {code!r}")
        self.table = table
        self.code = code

    def __str__(self):
        return repr(self.args[0])


class MissingParameter(Exception):
    """
    Raised when a log line lacks a value its handler requires.
    """

    def __init__(self, message):
        Exception.__init__(self, message)

    def __str__(self):
        return repr(self.args[0])


class QueueInterrupted(Exception):
    """
    Raised when a blocking queue push is abandoned because of a shutdown request.
    """

    def __init__(self, message):
        Exception.__init__(self, message)

    def __str__(self):
        return repr(self.args[0])


class CommandError(Exception):
    """
    Raised by command functions: the message is sent back to the issuing client.
    """

    def __init__(self, message):
        Exception.__init__(self, message)

    def __str__(self):
        return self.args[0]
