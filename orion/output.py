import logging
import sys
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING
from logging import handlers

__author__ = 'Daniele Pantaleone'
__version__ = '1.2'

LOGGER_NAME = 'output'

CONSOLE = 22
BOT = 21
VERBOSE = 9
VERBOSE2 = 8

LEVELS = {
    CRITICAL: 'CRITICAL',
    ERROR: 'ERROR   ',
    WARNING: 'WARNING ',
    CONSOLE: 'CONSOLE ',
    BOT: 'BOT     ',
    INFO: 'INFO    ',
    DEBUG: 'DEBUG   ',
    VERBOSE: 'VERBOSE ',
    VERBOSE2: 'VERBOS2 ',
}

for _level, _name in LEVELS.items():
    logging.addLevelName(_level, _name)

# skip caller lookup: it breaks when log records come from many threads
logging._srcfile = None

__output = None


class OutputHandler(logging.Logger):
    """
    Logger class adding the Orion specific severities.
    """

    def critical(self, msg, *args, **kwargs):
        """
        Log 'msg % args' with severity 'CRITICAL' and exit.
        """
        kwargs['exc_info'] = True
        logging.Logger.critical(self, msg, *args, **kwargs)
        sys.exit(2)

    def console(self, msg, *args, **kwargs):
        self.log(CONSOLE, msg, *args, **kwargs)

    def bot(self, msg, *args, **kwargs):
        self.log(BOT, msg, *args, **kwargs)

    def verbose(self, msg, *args, **kwargs):
        self.log(VERBOSE, msg, *args, **kwargs)

    def verbose2(self, msg, *args, **kwargs):
        self.log(VERBOSE2, msg, *args, **kwargs)


class StreamToLogger:
    """
    File-like object forwarding everything written to it to the logger.
    Used to capture stray writes to STDOut/STDErr once the bot is running.
    """

    def __init__(self, logger, level, tag):
        """
        Object constructor.
        :param logger: The logger object instance
        :param level: The severity used for every message
        :param tag: A prefix identifying the captured stream
        """
        self.logger = logger
        self.level = level
        self.tag = tag

    def write(self, msg):
        if msg and msg.strip():
            self.logger.log(self.level, f"{self.tag} {msg.rstrip()!r}")

    def flush(self):
        pass


logging.setLoggerClass(OutputHandler)


def getLogger():
    """
    Return the shared Orion logger without attaching any handler.
    """
    return logging.getLogger(LOGGER_NAME)


def getInstance(logfile='orion.log', loglevel=BOT, logsize=10485760, log2console=False):
    """
    Return a Logger instance.
    :param logfile: The logfile name.
    :param loglevel: The logging level.
    :param logsize: The size of the log file (in bytes)
    :param log2console: Whether or not to extend logging to the console.
    """
    global __output

    if __output is None:
        __output = getLogger()

        file_formatter = logging.Formatter('%(asctime)s %(levelname)s [%(threadName)s] %(message)s', '%y%m%d %H:%M:%S')
        file_handler = handlers.RotatingFileHandler(logfile, maxBytes=logsize, backupCount=5, encoding="UTF-8")
        file_handler.doRollover()
        file_handler.setFormatter(file_formatter)
        __output.addHandler(file_handler)

        if log2console:
            console_formatter = logging.Formatter('%(asctime)s\t%(levelname)s\t%(message)s', '%M:%S')
            stdout_handler = logging.StreamHandler(sys.stdout)
            stdout_handler.setFormatter(console_formatter)
            __output.addHandler(stdout_handler)

            stderr_handler = logging.StreamHandler(sys.stderr)
            stderr_handler.setFormatter(console_formatter)
            stderr_handler.setLevel(logging.ERROR)
            __output.addHandler(stderr_handler)

        __output.setLevel(loglevel)

    return __output
