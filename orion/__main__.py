import argparse
import signal

import orion
import orion.config
import orion.functions
from orion.bot import Bot
from orion.exceptions import ConfigFileNotValid

__author__ = 'Daniele Pantaleone'
__version__ = '1.0'


def start(mainconfig):
    """
    Main Orion startup.
    :param mainconfig: The Orion configuration file instance orion.config.MainConfig
    """
    print(f'Starting Orion   : {orion.getVersionString()}', flush=True)
    print(f'Loading config   : {orion.functions.getShortPath(mainconfig.fileName)}', flush=True)
    print(f'Loading parser   : {mainconfig.get("orion", "parser")}', flush=True)

    bot = Bot(mainconfig)

    def term_signal_handler(signum, frame):
        """
        Define the signal handler so to handle Orion shutdown properly.
        """
        bot.bot("TERM signal received: shutting down")
        bot.shutdown()

    signal.signal(signal.SIGTERM, term_signal_handler)

    try:
        bot.start()
    except KeyboardInterrupt:
        bot.shutdown()


def run(options):
    """
    Run Orion in console.
    :param options: command line options
    """
    main_config = orion.config.get_main_config(options.config)
    if analysis := main_config.analyze():
        raise ConfigFileNotValid('Invalid configuration file specified: ' + '\n >>> '.join(analysis))

    start(main_config)


def main():
    p = argparse.ArgumentParser(prog='orion')
    p.add_argument(
        '-c',
        '--config',
        dest='config',
        default=None,
        metavar='orion.ini',
        help='Orion config file. Example: -c orion.ini'
    )
    p.add_argument(
        '-v',
        '--version',
        action='version',
        version=orion.getVersionString(),
        help='Show Orion version and exit'
    )

    options, args = p.parse_known_args()

    if not options.config and len(args) == 1:
        options.config = args[0]

    run(options)


if __name__ == '__main__':
    main()
