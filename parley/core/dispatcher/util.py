import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from ...contact import Roster
from ...group import MucRegistry
from ...ui import ChatLog, Display
from ...util.error import PROTOCOL_ERRORS
from ..chat_session import ChatSessions
from ..transport import Transport


class Ignore(BaseException):
    pass


class DispatcherMixin:
    """
    Holds the three stores and the collaborators every handler works with.

    Handlers update the stores first, then look at the result to decide
    what, if anything, should reach the display or the chat logs.
    """

    def __init__(
        self,
        roster: Roster,
        rooms: MucRegistry,
        sessions: ChatSessions,
        display: Display,
        chat_log: ChatLog,
        transport: Transport,
    ):
        self.roster = roster
        self.rooms = rooms
        self.sessions = sessions
        self.display = display
        self.chat_log = chat_log
        self.transport = transport


HandlerType = TypeVar("HandlerType", bound=Callable[..., Any])


def exceptions_logged(cb: HandlerType) -> HandlerType:
    """
    Malformed events must never take the client down: log them and move on.
    """

    @wraps(cb)
    def wrapped(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except Ignore:
            return None
        except PROTOCOL_ERRORS as e:
            log.warning("Dropping invalid event in %s: %r", cb.__name__, e)
        except Exception as e:
            log.error("Failed to handle event: %s %s", args[1:], kwargs, exc_info=e)
        return None

    return wrapped  # type:ignore


log = logging.getLogger(__name__)
