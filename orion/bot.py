import os
import queue
import sys
import threading
import time
from collections import defaultdict
from traceback import extract_tb

import orion
import orion.events
import orion.functions
import orion.output
import orion.parsers
import orion.storage
from orion.clients import Clients, Groups
from orion.console import LoggingConsole
from orion.exceptions import CommandError, NoOptionError
from orion.functions import splitDSN, start_daemon_thread
from orion.game import Game
from orion.parsers.urt import UrtParser
from orion.queues import CancellableQueue

__author__ = 'Daniele Pantaleone, Mathias Van Malderen'
__version__ = '1.2'


class Bot:
    """
    Wire the game log, the parser and the event/command consumers together.

    The bot runs three threads: main, event handler and command handler. The
    main thread reads the game log and feeds the parser, which pushes events
    and commands into two bounded queues drained by the handler threads.
    shutdown() unsets ``working`` and sets the ``cancel`` token: the main loop
    stops reading, pushes blocked on a full queue give up, and the handler
    threads exit once they notice the token.
    """
    delay = 0.33  # time between each game log lines fetching
    delay2 = 0.02  # time between each game log line processing: max number of lines processed in one second
    commands = None  # command queue
    config = None
    game = None
    input = None  # game log file
    log = None
    output = None  # game server console
    parser = None
    queue = None  # event queue
    screen = None
    storage = None

    working = True
    exitcode = None

    def __init__(self, config, output=None):
        """
        Object constructor.
        :param config: The Orion main configuration (orion.config.MainConfig)
        :param output: The game server console (defaults to orion.console.LoggingConsole)
        """
        self.config = config
        self.cancel = threading.Event()
        self._handlers = defaultdict(list)
        self._commands = {}
        self._threads = []
        self.__init_logging()
        self.bot("%s", orion.getVersionString())
        self.bot("Python: %s", sys.version.replace("\n", ""))
        self.__init_serverconfig()
        self.Events = orion.events.eventManager
        self.__init_storage()
        self.__init_gamelog()
        self.__init_queues()
        self.output = output or LoggingConsole()
        self.game = Game()
        self.groups = Groups(self)
        self.clients = Clients(self)
        self.__init_parser()
        self.registerHandler('EVT_CLIENT_CALLVOTE', self.onCallvote)
        self.registerCommand('say', self.cmd_say, level=20)

    def __init_logging(self):
        try:
            logfile = self.config.getpath('orion', 'logfile')
        except NoOptionError:
            logfile = orion.functions.getAbsolutePath('@home/orion.log')
        logfile = orion.functions.getWritableFilePath(logfile)
        try:
            log2console = self.config.getboolean('devmode', 'log2console')
        except NoOptionError:
            log2console = False
        log_level = self.config.getint_default('orion', 'log_level', orion.output.BOT)
        try:
            logsize = orion.functions.getBytes(self.config.get('orion', 'logsize'))
        except (TypeError, NoOptionError):
            logsize = orion.functions.getBytes('10MB')
        self.log = orion.output.getInstance(logfile, log_level, logsize, log2console)
        self.screen = sys.stdout
        self.screen.write(f"Activating log   : {orion.functions.getShortPath(os.path.abspath(logfile))}\n")
        self.screen.flush()

    def __init_serverconfig(self):
        if self.config.has_option('server', 'delay'):
            if (delay := self.config.getfloat('server', 'delay')) > 0:
                self.delay = delay
        if self.config.has_option('server', 'lines_per_second'):
            if (delay2 := self.config.getfloat('server', 'lines_per_second')) > 0:
                self.delay2 = 1 / delay2

    def __init_storage(self):
        try:
            dsn = self.config.get('orion', 'database')
            self.storage = orion.storage.getStorage(dsn=dsn, dsnDict=splitDSN(dsn), console=self)
        except (AttributeError, ImportError) as e:
            self.critical("Could not setup storage module: %s", e)
        self.storage.connect()

    def __init_gamelog(self):
        if not self.config.has_option('server', 'game_log'):
            self.critical("server::game_log setting is required")
        path = self.config.getpath('server', 'game_log')
        self.bot("Starting bot reading file: %s", path)
        self.screen.write(f"Using gamelog    : {orion.functions.getShortPath(path)}\n")
        if not os.path.isfile(path):
            self.critical("Cannot read file: %s", path)
        self.input = open(path, 'r', encoding='latin-1')  # noqa: SIM115
        if not self.config.has_option('server', 'seek') or self.config.getboolean('server', 'seek'):
            self.input.seek(0, os.SEEK_END)

    def __init_queues(self):
        sizes = []
        for option in ('event_queue_size', 'command_queue_size'):
            try:
                sizes.append(self.config.getint_default('orion', option, 50))
            except ValueError as err:
                self.warning(err)
                sizes.append(50)
        self.info("Creating the event queue with size %s", sizes[0])
        self.queue = CancellableQueue(sizes[0])
        self.info("Creating the command queue with size %s", sizes[1])
        self.commands = CancellableQueue(sizes[1])

    def __init_parser(self):
        name = self.config.get('orion', 'parser')
        try:
            variant = orion.parsers.getVariant(name)
        except ImportError as e:
            self.critical("Could not load parser %s: %s", name, e)
        self.bot("Loading parser: %s", variant.name)
        self.parser = UrtParser(variant, self.clients, self.groups, self.game, self.output,
                                self.queue, self.commands, self.cancel)

    def start(self):
        """
        Start Orion.
        """
        self.bot("Starting event dispatching thread")
        self._threads.append(start_daemon_thread(target=self.handleEvents, name='event_handler'))
        self.bot("Starting command dispatching thread")
        self._threads.append(start_daemon_thread(target=self.handleCommands, name='command_handler'))
        self.output.say(f"{orion.version} ^2[ONLINE]")
        self.bot("Start reading game events")
        self.screen.write("Startup complete : Orion is running! Let's get to work!\n\n")
        self.screen.flush()
        sys.stdout = orion.output.StreamToLogger(self.log, orion.output.CONSOLE, 'STDOUT')
        sys.stderr = orion.output.StreamToLogger(self.log, orion.output.ERROR, 'STDERR')
        self.run()

    def run(self):
        """
        Main worker loop: read the game log and feed the parser.
        """
        sleep = time.sleep
        read_lines = self.read
        parse_line = self.parser.parseLine

        while self.working:
            for line in read_lines():
                if not self.working:
                    break
                if line := line.strip():
                    try:
                        parse_line(line)
                    except Exception as msg:
                        self.error("Could not parse line %s - (%s) %s", line, msg, extract_tb(sys.exc_info()[2]))
                    sleep(self.delay2)
            sleep(self.delay)

        self.bot("Stopped parsing")
        self.bot("Closing games log file")
        self.input.close()
        self.cancel.set()
        self.bot("Awaiting handler threads stop")
        for thread in self._threads:
            thread.join(timeout=15.0)
        self.bot("Shutting down database connection")
        try:
            self.storage.shutdown()
        except Exception as e:
            self.error(e)
        if self.exitcode:
            sys.exit(self.exitcode)
        self.bot("Shutdown Complete")

    def read(self):
        """
        Read from the game server log file.
        """
        if not (lines := self.input.readlines()):
            # if the cursor is past the end of the file the log has been rotated or emptied
            filestats = os.fstat(self.input.fileno())
            if self.input.tell() > filestats.st_size:
                self.warning("Game log is suddenly smaller than it was before (%s bytes, now %s): "
                             "the log was probably either rotated or emptied. Orion will now re-adjust "
                             "to the new size of the log", self.input.tell(), filestats.st_size)
                self.input.seek(0, os.SEEK_END)
                lines = self.input.readlines()
        return lines

    def shutdown(self):
        """
        Shutdown Orion.
        """
        if self.working:
            self.working = False
            self.cancel.set()
            self.bot("Shutting down...")

    def registerHandler(self, key, func):
        """
        Register an event handler.
        :param key: The event key (or class)
        :param func: Callable receiving the event
        """
        key = self.Events.getClass(key).key
        self.info("Registering handler %s for event <%s>", getattr(func, '__name__', func), key)
        if func not in self._handlers[key]:
            self._handlers[key].append(func)

    def registerCommand(self, handle, func, level=0):
        """
        Register a command.
        :param handle: The command name
        :param func: Callable receiving the Command
        :param level: The minimum group level required to issue the command
        """
        handle = handle.lower()
        if handle in self._commands:
            self.warning("Command %s is already registered: overriding", handle)
        self.info("Registering command %s [level: %s]", handle, level)
        self._commands[handle] = (func, level)

    def handleEvents(self):
        """
        Event handler thread.
        """
        while not self.cancel.is_set():
            try:
                event = self.queue.get(timeout=self.queue.poll_interval)
            except queue.Empty:
                continue
            self.dispatchEvent(event)
        self.bot("Event handler stopped")

    def dispatchEvent(self, event):
        """
        Run every handler registered for the given event.
        """
        for func in self._handlers[event.key]:
            try:
                func(event)
            except Exception as msg:
                self.error("Handler %s could not handle %s: %s: %s %s", getattr(func, '__name__', func), event,
                           msg.__class__.__name__, msg, extract_tb(sys.exc_info()[2]))

    def handleCommands(self):
        """
        Command handler thread.
        """
        while not self.cancel.is_set():
            try:
                command = self.commands.get(timeout=self.commands.poll_interval)
            except queue.Empty:
                continue
            self.dispatchCommand(command)
        self.bot("Command handler stopped")

    def dispatchCommand(self, command):
        """
        Execute a command on behalf of the client who issued it.
        """
        if not (entry := self._commands.get(command.handle)):
            self.debug("Unknown command %s issued by %s", command.handle, command.client)
            self.output.tell(command.client, f"^7Unknown command ^1{command.handle}")
            return

        func, level = entry
        if not command.force and command.client.level < level:
            self.debug("%s has not enough privileges to issue command %s", command.client, command.handle)
            self.output.tell(command.client, f"^7You don't have enough privileges to use ^1{command.handle}")
            return

        try:
            func(command)
        except CommandError as e:
            self.output.tell(command.client, f"^1{e}")
        except Exception as msg:
            self.error("Command %s issued by %s failed: %s: %s %s", command.handle, command.client,
                       msg.__class__.__name__, msg, extract_tb(sys.exc_info()[2]))

    def onCallvote(self, event):
        callvote = event.callvote
        callvote.id = self.storage.setCallvote(callvote)
        self.debug("Stored %s", callvote)

    def cmd_say(self, command):
        """
        <message> - broadcast a message to all the players
        """
        if not (message := command.getParamStringConcat(0)):
            raise CommandError("missing message: type !say <message>")
        self.output.say(f"^7{command.client.name}^7: {message}")

    def error(self, msg, *args, **kwargs):
        """
        Log an ERROR message.
        """
        self.log.error(msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs):
        """
        Log a DEBUG message.
        """
        self.log.debug(msg, *args, **kwargs)

    def bot(self, msg, *args, **kwargs):
        """
        Log a BOT message.
        """
        self.log.bot(msg, *args, **kwargs)

    def verbose(self, msg, *args, **kwargs):
        """
        Log a VERBOSE message.
        """
        self.log.verbose(msg, *args, **kwargs)

    def verbose2(self, msg, *args, **kwargs):
        """
        Log an EXTRA VERBOSE message.
        """
        self.log.verbose2(msg, *args, **kwargs)

    def console(self, msg, *args, **kwargs):
        """
        Log a CONSOLE message.
        """
        self.log.console(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        """
        Log a WARNING message.
        """
        self.log.warning(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        """
        Log an INFO message.
        """
        self.log.info(msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        """
        Log an EXCEPTION message.
        """
        self.log.exception(msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        """
        Log a CRITICAL message and shutdown Orion.
        """
        self.exitcode = 2
        self.shutdown()
        self.log.critical(msg, *args, **kwargs)
