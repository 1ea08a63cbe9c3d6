import configparser
import os
import time
from io import StringIO

import orion
import orion.functions
import orion.storage
from orion.exceptions import ConfigFileNotFound, ConfigFileNotValid, NoOptionError, NoSectionError

__author__ = 'ThorN, Courgette, Fenix'
__version__ = '1.8.0'

DEFAULT_CONFIG_NAMES = ('orion.ini', 'orion.cfg')


class OrionConfigParserMixin:
    """
    Mixin implementing ConfigParser methods more useful for Orion business.
    """

    def get(self, *args, **kwargs):
        """
        Return a configuration value as a string.
        """
        raise NotImplementedError

    def getboolean(self, section, setting):
        """
        Return a configuration value as a boolean.
        :param section: The configuration file section.
        :param setting: The configuration file setting.
        """
        value_raw = self.get(section, setting)
        value = value_raw.lower() if value_raw else ''
        if value in ('yes', '1', 'on', 'true'):
            return True
        elif value in ('no', '0', 'off', 'false'):
            return False
        else:
            raise ValueError("%s.%s : '%s' is not a boolean value" % (section, setting, value))

    def getDuration(self, section, setting=None):
        """
        Return a configuration value parsing the duration time
        notation and converting the value into minutes.
        :param section: The configuration file section.
        :param setting: The configuration file setting.
        """
        value = self.get(section, setting).strip()
        return orion.functions.time2minutes(value)

    def getpath(self, section, setting):
        """
        Return an absolute path name and expand the user prefix (~).
        :param section: The configuration file section.
        :param setting: The configuration file setting.
        """
        return orion.functions.getAbsolutePath(self.get(section, setting))


class CfgConfigParser(OrionConfigParserMixin, configparser.ConfigParser):
    """
    A config parser class that mimics the ConfigParser, reads the cfg format.
    """
    fileName = ''
    fileMtime = 0

    def __init__(self, allow_no_value=False):
        """
        Object constructor.
        :param allow_no_value: Whether or not to allow empty values in configuration sections
        """
        configparser.ConfigParser.__init__(self, allow_no_value=allow_no_value,
                                           inline_comment_prefixes=";", interpolation=None)

    def get(self, section, option, *args, **kwargs):
        """
        Return a configuration value as a string.
        """
        try:
            value = configparser.ConfigParser.get(self, section, option, **kwargs)
            return '' if value is None else value
        except NoSectionError:
            # callers only ever catch NoOptionError
            raise NoOptionError(option, section)

    def load(self, filename):
        """
        Load a configuration file.
        """
        if not os.path.isfile(filename):
            raise ConfigFileNotFound(filename)
        with open(filename, 'r') as f:
            self.readfp(f)
        self.fileName = filename
        self.fileMtime = os.path.getmtime(self.fileName)
        return True

    def loadFromString(self, cfg_string):
        """
        Read the cfg config from a string.
        """
        with StringIO(cfg_string) as fp:
            self.readfp(fp)
        self.fileName = None
        self.fileMtime = time.time()
        return True

    def readfp(self, fp, filename=None):
        """
        Inherits from configparser.ConfigParser to throw our custom exception if needed
        """
        try:
            configparser.ConfigParser.read_file(self, fp, filename)
        except Exception as e:
            raise ConfigFileNotValid("%s" % e)

    def save(self):
        """
        Save the configuration file.
        """
        with open(self.fileName, 'w') as f:
            self.write(f)
        return True


def load(filename):
    """
    Load a configuration file.
    """
    # allow the use of empty keys
    config = CfgConfigParser(allow_no_value=True)
    filename = orion.functions.getAbsolutePath(filename)
    return config if config.load(filename) else None


class MainConfig(OrionConfigParserMixin):
    """
    Class to use to parse the Orion main config file.
    """

    def __init__(self, config_parser):
        if not isinstance(config_parser, CfgConfigParser):
            raise NotImplementedError("unexpected config type: %r" % config_parser.__class__)
        self._config_parser = config_parser

    def get(self, *args, **kwargs):
        """
        Override the get method defined in the OrionConfigParserMixin
        """
        return self._config_parser.get(*args, **kwargs)

    def getint_default(self, section, option, default):
        """
        Return an integer setting, or the default when the setting is missing.
        :raise ValueError: If the setting is not a valid integer
        """
        try:
            return self._config_parser.getint(section, option)
        except (NoOptionError, NoSectionError):
            return default

    def analyze(self):
        """
        Analyze the main configuration file checking for common mistakes.
        This will mostly check configuration file values and will not perform any further check related,
        i.e: connection with the database can be established using the provided dsn etc.
        :return: A list of strings highlighting problems found (so they can be logged/displayed easily)
        """
        analysis = []

        def _mandatory_option(section, option):
            if not self.has_option(section, option):
                analysis.append('missing configuration value %s::%s' % (section, option))

        _mandatory_option('orion', 'parser')
        _mandatory_option('orion', 'database')
        _mandatory_option('server', 'game_log')

        # PARSER CHECK
        if self.has_option('orion', 'parser'):
            try:
                orion.functions.getModule('orion.parsers.%s' % self.get('orion', 'parser'))
            except ImportError as ie:
                analysis.append('invalid parser specified in orion::parser (%s-%s)' % (self.get('orion', 'parser'), ie))

        # DSN DICT
        if self.has_option('orion', 'database'):
            if not (dsndict := orion.functions.splitDSN(self.get('orion', 'database'))):
                analysis.append(
                    'invalid database source name specified in orion::database (%s)' % self.get('orion', 'database'))
            elif dsndict['protocol'] not in orion.storage.PROTOCOLS:
                analysis.append('invalid storage protocol specified in orion::database (%s) : '
                                'valid protocols are : %s' % (dsndict['protocol'], ', '.join(orion.storage.PROTOCOLS)))

        # QUEUE SIZES
        for option in ('event_queue_size', 'command_queue_size'):
            if self.has_option('orion', option):
                try:
                    if self.getint('orion', option) <= 0:
                        analysis.append('orion::%s must be a positive integer' % option)
                except ValueError:
                    analysis.append('invalid value specified in orion::%s (%s)' % (option, self.get('orion', option)))

        return analysis

    def __getattr__(self, name):
        """
        Act as a proxy in front of self._config_parser.
        Any attribute or method call which does not exists in this
        object (MainConfig) is then tried on the self._config_parser
        :param name: str Attribute or method name
        """
        if name.startswith('__') or '_config_parser' not in self.__dict__:
            raise AttributeError(name)
        return getattr(self._config_parser, name)


def get_main_config(config_path):
    """
    Locate, load and wrap the Orion main configuration file.
    :param config_path: The path given on the command line (may be None)
    """
    config = None
    if config_path:
        config = orion.functions.getAbsolutePath(config_path)
        if not os.path.isfile(config):
            orion.functions.console_exit(f'ERROR: configuration file not found ({config}).')
    else:
        home_dir = orion.functions.get_home_path(create=False)
        for directory in ('.', 'conf', home_dir, os.path.join(home_dir, 'conf'), '@orion/conf'):
            for name in DEFAULT_CONFIG_NAMES:
                path = orion.functions.getAbsolutePath(os.path.join(directory, name))
                if os.path.isfile(path):
                    print(f"Using configuration file: {path}")
                    config = path
                    break
            if config:
                break

    if not config:
        orion.functions.console_exit('ERROR: could not find any valid configuration file.')

    orion.confdir = os.path.dirname(config)
    return MainConfig(load(config))
