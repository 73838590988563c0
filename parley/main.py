"""
Parley can be configured via CLI args, environment variables and/or INI files.

To use env vars, use this convention: ``--gone-timeout`` becomes
``PARLEY_GONE_TIMEOUT``.

Everything in ``~/.config/parley/*.conf`` is automatically used. Use the long
version of the CLI arg without the double dash prefix inside INI files,
eg ``debug=true``.
"""

import logging
import os
import signal
import sys

import configargparse

from .client import ParleyClient
from .contact import Roster
from .core import config
from .core.chat_session import ChatSessions
from .core.dispatcher import EventDispatcher
from .group import MucRegistry
from .ui import ConsoleDisplay, LoggingChatLog
from .util.conf import ConfigModule
from .util.util import get_version


class MainConfig(ConfigModule):
    def update_dynamic_defaults(self, args):
        # force=True is needed in case we call a logger before this is reached,
        # or basicConfig has no effect
        logging.basicConfig(
            level=args.loglevel,
            filename=args.log_file,
            force=True,
            format=args.log_format,
        )

        if args.nick is None:
            args.nick = args.jid.node or args.jid.bare


class SigTermInterrupt(Exception):
    pass


def get_configurator():
    p = configargparse.ArgumentParser(
        default_config_files=os.getenv(
            "PARLEY_CONF_DIR", os.path.expanduser("~/.config/parley/*.conf")
        ).split(":"),
        description=__doc__,
    )
    p.add_argument(
        "-c",
        "--config",
        help="Path to a INI config file.",
        env_var="PARLEY_CONFIG",
        is_config_file=True,
    )
    p.add_argument(
        "-q",
        "--quiet",
        help="loglevel=WARNING",
        action="store_const",
        dest="loglevel",
        const=logging.WARNING,
        default=logging.INFO,
        env_var="PARLEY_QUIET",
    )
    p.add_argument(
        "-d",
        "--debug",
        help="loglevel=DEBUG",
        action="store_const",
        dest="loglevel",
        const=logging.DEBUG,
        env_var="PARLEY_DEBUG",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    configurator = MainConfig(config, p)
    return configurator


def get_parser():
    return get_configurator().parser


def configure(argv=None):
    configurator = get_configurator()
    if argv is None:
        argv = sys.argv[1:]
    args, unknown_argv = configurator.set_conf(argv)
    if unknown_argv:
        raise RuntimeError("Some arguments have not been recognized", unknown_argv)
    return args


def handle_sigterm(_signum, _frame):
    logging.info("Caught SIGTERM")
    raise SigTermInterrupt


def make_client() -> ParleyClient:
    roster = Roster()
    rooms = MucRegistry()
    sessions = ChatSessions(gone_timeout=config.GONE_TIMEOUT * 60)
    display = ConsoleDisplay()
    chat_log = LoggingChatLog(config.JID)

    def dispatcher_factory(transport):
        return EventDispatcher(roster, rooms, sessions, display, chat_log, transport)

    return ParleyClient(config.JID, config.PASSWORD, dispatcher_factory)


def main():
    signal.signal(signal.SIGTERM, handle_sigterm)

    configure()
    logging.info("Starting parley version %s", __version__)

    client = make_client()
    client.connect()

    return_code = 0
    try:
        client.loop.run_forever()
    except KeyboardInterrupt:
        logging.debug("Received SIGINT")
    except SigTermInterrupt:
        logging.debug("Received SIGTERM")
    except SystemExit as e:
        return_code = e.code  # type: ignore
        logging.debug("Exit called")
    except Exception as e:
        return_code = 2
        logging.exception("Exception in __main__")
        logging.exception(e)
    finally:
        if client.is_connected():
            logging.debug("Client is connected, cleaning up")
            client.shutdown()
            client.disconnect()
            client.loop.run_until_complete(client.disconnected)
        else:
            logging.debug("Client is not connected, no need to clean up")
            client.dispatcher.close()
        logging.info("Successful clean shut down")
    logging.debug("Exiting with code %s", return_code)
    exit(return_code)


# this should be modified before publish, but if someone cloned from the repo,
# it can help
__version__ = get_version()
