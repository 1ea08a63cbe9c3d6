import importlib
import os
import re
import sys
import tempfile
import threading

__author__ = 'ThorN, xlr8or, courgette, Fenix'
__version__ = '1.24'

_reColor = re.compile(r"\^[0-9]")


def getModule(name):
    """
    Return a module given its name.
    :param name: The module name
    """
    return importlib.import_module(name)


def parseInfoString(info):
    """
    Decode a backslash delimited infostring into a dict.
    Keys appear in the same order they have in the infostring.
    A trailing key with no value is dropped.
    :param info: The infostring to decode
    """
    # \ip\145.99.135.227:27960\challenge\-232198920\qport\2781\protocol\68\name\[SNT]^1XLR^78or
    parts = info.lstrip("\\").split("\\")
    return dict(zip(parts[0::2], parts[1::2]))


def stripColors(text):
    """
    Remove color codes from the given text.
    :param text: the text to clean from color codes.
    :return: str
    """
    return _reColor.sub("", text)


def splitDSN(url):
    """
    Return a dict containing the database connection
    arguments specified in the given input url.
    """
    m = re.match(r'^(?:(?P<protocol>[a-z]+)://)?'
                 r'(?:(?P<user>[^:]+)'
                 r'(?::'
                 r'(?P<password>[^@]*?))?@)?'
                 r'(?P<host>[^/:]+)?(?::'
                 r'(?P<port>\d+))?'
                 r'(?P<path>.*)', url)

    if not m:
        return None

    g = m.groupdict()

    if not g['protocol']:
        g['protocol'] = 'file'
    if g['protocol'] == 'file':
        if g['host'] and g['path']:
            g['path'] = f"{g['host']}{g['path']}"
            g['host'] = None
        elif g['host']:
            g['path'] = g['host']
            g['host'] = None

    if g['port']:
        g['port'] = int(g['port'])
    elif g['protocol'] == 'mysql':
        g['port'] = 3306
    return g


def minutes2int(mins):
    """
    Convert a given string to a float value which represents it.
    """
    if re.match('^[0-9.]+$', mins):
        return round(float(mins), 2)
    return 0


def time2minutes(timestr):
    """
    Return the amount of minutes the given string represent.
    :param timestr: A time string
    """
    if not timestr:
        return 0
    elif type(timestr) is int:
        return timestr

    timestr = str(timestr)
    multipliers = {'s': 1 / 60, 'm': 1, 'h': 60, 'd': 1440, 'w': 10080}
    if (unit := timestr[-1:]) in multipliers:
        return minutes2int(timestr[:-1]) * multipliers[unit]
    return minutes2int(timestr)


def console_exit(message=''):
    """
    Terminate the current console application displaying the given message.
    :param message: the message to prompt to the user
    """
    raise SystemExit(message)


def getBytes(size):
    """
    Convert the given size in the correspondent amount of bytes.
    :param size: The size we want to convert in bytes
    :raise TypeError: If an invalid input is given
    :return: The given size converted in bytes
    >>> getBytes(10)
    10
    >>> getBytes('1KB')
    1024
    >>> getBytes('1M')
    1048576
    """
    size = str(size).upper()
    r = re.compile(r'''^(?P<size>\d+)\s*(?P<mult>KB|MB|GB|K|M|G?)$''')
    if not (m := r.match(size)):
        raise TypeError(f'invalid input given: {size}')

    multipliers = {
        'K': 1024, 'KB': 1024,
        'M': 1048576, 'MB': 1048576,
        'G': 1073741824, 'GB': 1073741824,
    }
    return int(m.group('size')) * multipliers.get(m.group('mult'), 1)


def start_daemon_thread(target, args=(), kwargs=None, name=None):
    """Start a new daemon thread"""
    opts = {
        'target': target,
        'daemon': True,
        'args': args,
        'kwargs': kwargs,
    }
    if name:
        opts['name'] = name
    t = threading.Thread(**opts)
    t.start()
    return t


def get_home_path(create=True):
    """
    Return the path to the Orion home directory.
    """
    path = os.path.normpath(os.path.expanduser('~/.orion'))
    if create and not os.path.isdir(path):
        os.mkdir(path)
    return path


def getOrionPath():
    """
    Return the path to the main Orion package directory.
    """
    return os.path.dirname(os.path.abspath(sys.modules['orion'].__file__))


def getConfPath():
    """
    Return the directory holding the configuration file in use.
    """
    import orion
    return orion.confdir or os.path.join(getOrionPath(), 'conf')


def getAbsolutePath(path):
    """
    Return an absolute path name and expand the user prefix (~).
    Paths starting with @orion/, @conf/ or @home/ are resolved against
    the package directory, the configuration directory and the home directory.
    :param path: the relative path we want to expand
    """
    if path.startswith('@'):
        if path[1:7] in ('orion\\', 'orion/'):
            path = os.path.join(getOrionPath(), path[7:])
        elif path[1:6] in ('conf\\', 'conf/'):
            path = os.path.join(getConfPath(), path[6:])
        elif path[1:6] in ('home\\', 'home/'):
            path = os.path.join(get_home_path(create=True), path[6:])
    return os.path.normpath(os.path.expanduser(path))


def getWritableFilePath(filepath):
    """
    Return an absolute file path making sure the current user can write it.
    If the given path is not writable by the current user, the path will be converted
    into an absolute path pointing inside the Orion home directory.
    :param filepath: the relative path we want to expand
    """
    if filepath == ':memory:':
        return filepath
    filepath = getAbsolutePath(filepath)
    home_dir = get_home_path(create=False)
    if not filepath.startswith(home_dir):
        try:
            with tempfile.TemporaryFile(dir=os.path.dirname(filepath)):
                pass
        except OSError:
            home_dir = get_home_path(create=True)
            filepath = os.path.join(home_dir, os.path.basename(filepath))
    return filepath


def getShortPath(filepath):
    """
    Convert the given absolute path into a short path.
    Will replace path string with proper tokens (such as @orion, @conf, ~, ...)
    :param filepath: the path to convert
    :return: string
    """
    # keep the trailing separator so that sibling folders sharing a prefix do not match
    for token, path in (('@home', get_home_path(create=False)),
                        ('@conf', getConfPath()),
                        ('@orion', getOrionPath()),
                        ('~', os.path.expanduser('~'))):
        prefix = os.path.normpath(path) + os.path.sep
        if filepath.startswith(prefix):
            return filepath.replace(prefix, token + os.path.sep, 1)
    return filepath
