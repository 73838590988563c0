"""
The state core of a terminal XMPP chat client.

Tracks the roster, the multi-user chats we are in and our side of the
chat state protocol, and turns what the server tells us into calls to
a :class:`.Display`.
"""

from .client import ParleyClient
from .contact import Contact, Resource, Roster
from .core import config as global_config  # noqa: F401
from .core.chat_session import ChatSessions
from .core.dispatcher import EventDispatcher
from .group import MucRegistry, Occupant
from .main import main as main_func  # noqa: F401
from .util.util import addLoggingLevel

__all__ = [
    "ChatSessions",
    "Contact",
    "EventDispatcher",
    "MucRegistry",
    "Occupant",
    "ParleyClient",
    "Resource",
    "Roster",
    "global_config",
]

addLoggingLevel()
