from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from slixmpp import JID

from ..contact import Contact, Resource
from ..group import Occupant
from ..util.types import SubscriptionEvent


class Display(ABC):
    """
    Everything the event dispatcher may ask the user interface to show.

    Implementations only render: they receive snapshots and must not
    expect the stores to be in any particular state beyond what they are
    given.
    """

    # connection

    @abstractmethod
    def show_error(self, message: str) -> None: ...

    @abstractmethod
    def login_success(self, jid: JID) -> None: ...

    @abstractmethod
    def disconnected(self) -> None: ...

    # contacts

    @abstractmethod
    def console_contact_online(
        self,
        contact: Contact,
        resource: Resource,
        last_activity: Optional[datetime],
    ) -> None: ...

    @abstractmethod
    def chat_contact_online(
        self,
        contact: Contact,
        resource: Resource,
        last_activity: Optional[datetime],
    ) -> None: ...

    @abstractmethod
    def console_contact_offline(
        self, contact: Contact, resource: str, status: Optional[str]
    ) -> None: ...

    @abstractmethod
    def chat_contact_offline(
        self, contact: Contact, resource: str, status: Optional[str]
    ) -> None: ...

    @abstractmethod
    def subscription(self, jid: JID, kind: SubscriptionEvent) -> None: ...

    @abstractmethod
    def roster_add(self, jid: JID, name: Optional[str]) -> None: ...

    @abstractmethod
    def roster_remove(self, jid: JID) -> None: ...

    @abstractmethod
    def group_added(self, jid: JID, group: str) -> None: ...

    @abstractmethod
    def group_removed(self, jid: JID, group: str) -> None: ...

    # one-to-one chats

    @abstractmethod
    def incoming_message(
        self,
        jid: JID,
        message: str,
        stamp: Optional[datetime] = None,
        private=False,
    ) -> None: ...

    @abstractmethod
    def contact_typing(self, jid: JID) -> None: ...

    @abstractmethod
    def recipient_gone(self, jid: JID) -> None: ...

    @abstractmethod
    def recipient_error(self, jid: JID, message: str) -> None: ...

    @abstractmethod
    def recipient_not_found(self, jid: JID, message: str) -> None: ...

    # rooms

    @abstractmethod
    def room_invite(self, inviter: JID, room: JID, reason: Optional[str]) -> None: ...

    @abstractmethod
    def room_join(self, room: JID, focus: bool) -> None: ...

    @abstractmethod
    def room_join_error(self, room: JID, error: str) -> None: ...

    @abstractmethod
    def room_roster(self, room: JID, occupants: list[Occupant]) -> None: ...

    @abstractmethod
    def room_subject(self, room: JID, subject: str) -> None: ...

    @abstractmethod
    def room_broadcast(self, room: JID, message: str) -> None: ...

    @abstractmethod
    def room_message(self, room: JID, nick: str, message: str) -> None: ...

    @abstractmethod
    def room_history(
        self, room: JID, nick: str, stamp: datetime, message: str
    ) -> None: ...

    @abstractmethod
    def room_member_presence(
        self, room: JID, nick: str, show: Optional[str], status: Optional[str]
    ) -> None: ...

    @abstractmethod
    def room_member_online(
        self, room: JID, nick: str, show: Optional[str], status: Optional[str]
    ) -> None: ...

    @abstractmethod
    def room_member_offline(self, room: JID, nick: str) -> None: ...

    @abstractmethod
    def room_member_nick_change(self, room: JID, old_nick: str, nick: str) -> None: ...

    @abstractmethod
    def room_nick_change(self, room: JID, nick: str) -> None: ...

    @abstractmethod
    def room_requires_config(self, room: JID) -> None: ...

    @abstractmethod
    def room_destroyed(self, room: JID) -> None: ...
