import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from slixmpp import JID


class ChatLog(ABC):
    """
    Where conversations are recorded. The dispatcher decides what gets
    logged, implementations only decide where it goes.
    """

    @abstractmethod
    def chat(
        self,
        contact: JID,
        message: str,
        incoming=True,
        stamp: Optional[datetime] = None,
    ) -> None: ...

    @abstractmethod
    def groupchat(self, room: JID, nick: str, message: str) -> None: ...


class LoggingChatLog(ChatLog):
    """
    Hands chat lines to the ``parley.chatlog`` logger, so that where they end
    up is a matter of logging configuration.
    """

    def __init__(self, account: JID):
        self.account = account
        self.log = logging.getLogger("parley.chatlog")

    def chat(self, contact, message, incoming=True, stamp=None):
        direction = "<-" if incoming else "->"
        when = (stamp or datetime.now()).isoformat(timespec="seconds")
        self.log.info(
            "%s %s %s %s: %s", self.account.bare, when, direction, contact.bare, message
        )

    def groupchat(self, room, nick, message):
        when = datetime.now().isoformat(timespec="seconds")
        self.log.info(
            "%s %s %s/%s: %s", self.account.bare, when, room.bare, nick, message
        )
