from typing import Literal

from slixmpp.jid import InvalidJID


class InvalidEvent(Exception):
    """
    Raised when a decoded protocol event lacks a field that it cannot do without.
    """


class InvalidNick(ValueError):
    """
    Raised when a MUC nickname is empty.
    """


ErrorTypes = Literal["modify", "cancel", "auth", "wait"]

# recipient-not-found and friends: the recipient will not answer anymore,
# so there is no point in sending them chat states
RECIPIENT_GONE_TYPES: set[ErrorTypes] = {"cancel"}

PROTOCOL_ERRORS = (InvalidJID, InvalidNick, InvalidEvent)
