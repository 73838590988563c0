"""
Turns decoded protocol events into store updates and display calls.
"""

from .chat import ChatMixin
from .connection import ConnectionMixin
from .presence import PresenceHandlerMixin
from .util import Ignore


class EventDispatcher(PresenceHandlerMixin, ChatMixin, ConnectionMixin):
    """
    The single entry point for everything the server tells us, and for the
    user actions that change what the stores track.

    Every handler updates the stores before it calls the display, so that
    the display always sees the post-event state.
    """


__all__ = ("EventDispatcher", "Ignore")
