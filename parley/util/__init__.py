from .error import InvalidEvent, InvalidNick
from .types import ChatState, ResourcePresence, bare_jid, valid_nick

__all__ = [
    "ChatState",
    "InvalidEvent",
    "InvalidNick",
    "ResourcePresence",
    "bare_jid",
    "valid_nick",
]
