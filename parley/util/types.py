"""
Typing stuff
"""

from enum import Enum
from typing import Literal, Union

from slixmpp import JID
from slixmpp.jid import InvalidJID

from .error import InvalidNick

JidStr = Union[str, JID]

Subscription = Literal["none", "to", "from", "both"]
SubscriptionEvent = Literal["subscribe", "subscribed", "unsubscribe", "unsubscribed"]
StatusFilter = Literal["all", "online", "none"]
PresenceShow = Literal["", "chat", "away", "xa", "dnd"]


class ResourcePresence(Enum):
    """
    Presence of a single connected resource of a contact.

    ``OFFLINE`` is transient: a resource going offline is removed from its
    contact right away.
    """

    ONLINE = "online"
    CHAT = "chat"
    AWAY = "away"
    XA = "xa"
    DND = "dnd"
    OFFLINE = "offline"

    @classmethod
    def from_show(cls, show: str | None) -> "ResourcePresence":
        """
        Map an XMPP ``<show/>`` value to a presence. No show means available.

        :param show: ``chat``, ``away``, ``xa``, ``dnd``, or an empty string
        """
        if not show:
            return cls.ONLINE
        return cls(show)

    @property
    def rank(self) -> int:
        """
        Lower is more available
        """
        return _AVAILABILITY_RANK[self]

    @property
    def is_available(self) -> bool:
        return self in (ResourcePresence.ONLINE, ResourcePresence.CHAT)


_AVAILABILITY_RANK = {
    ResourcePresence.CHAT: 0,
    ResourcePresence.ONLINE: 1,
    ResourcePresence.AWAY: 2,
    ResourcePresence.XA: 3,
    ResourcePresence.DND: 4,
    ResourcePresence.OFFLINE: 5,
}


class ChatState(Enum):
    """
    :xep:`0085` chat states, as tracked for our own side of a conversation.
    """

    ACTIVE = "active"
    COMPOSING = "composing"
    PAUSED = "paused"
    INACTIVE = "inactive"
    GONE = "gone"

    @property
    def decay_rank(self) -> int:
        # active and composing sit at the same level: idle decay never goes
        # back to either of them
        return _DECAY_RANK[self]


_DECAY_RANK = {
    ChatState.ACTIVE: 0,
    ChatState.COMPOSING: 0,
    ChatState.PAUSED: 1,
    ChatState.INACTIVE: 2,
    ChatState.GONE: 3,
}


def bare_jid(jid: JidStr) -> JID:
    """
    Validate a JID and strip its resource part.

    :raises slixmpp.jid.InvalidJID: if ``jid`` is not a valid address,
        or is empty
    """
    bare = JID(jid).bare
    if not bare:
        raise InvalidJID("Missing address")
    return JID(bare)


def valid_nick(value: str | None) -> str:
    """
    Validate a MUC nickname.

    :raises InvalidNick: if the nickname is missing or blank
    """
    if value is None or not value.strip():
        raise InvalidNick(value)
    return value
