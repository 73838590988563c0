from abc import ABC, abstractmethod
from typing import Optional

from slixmpp import JID

from ..util.types import ChatState


class Transport(ABC):
    """
    The stanzas the event dispatcher needs to send. Implemented by
    :class:`parley.client.ParleyClient`.
    """

    @abstractmethod
    def send_chat_state(self, recipient: JID, state: ChatState) -> None: ...

    @abstractmethod
    def send_join(self, room: JID, nick: str, password: Optional[str]) -> None: ...

    @abstractmethod
    def send_leave(self, room: JID, nick: str) -> None: ...

    @abstractmethod
    def send_nick_change(self, room: JID, nick: str) -> None: ...
