from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from slixmpp import JID

from ..util.types import ResourcePresence, Subscription


@dataclass(frozen=True)
class Resource:
    """
    One connected client of a contact.

    Instances are immutable, so they can be handed out to display code as-is.
    """

    name: str
    presence: ResourcePresence
    status: Optional[str] = None
    priority: int = 0
    last_activity: Optional[datetime] = None

    def same_presence(self, other: "Resource") -> bool:
        """
        Whether ``other`` would look the same to the user. Last activity is
        not taken into account.
        """
        return (
            self.presence == other.presence
            and self.status == other.status
            and self.priority == other.priority
        )

    def availability_key(self) -> tuple[int, int]:
        return -self.priority, self.presence.rank


class Contact:
    """
    An entry of the user's roster, ie, their contact list.

    Contacts are owned by :class:`.Roster`; the instances returned by its
    getters are the live ones.
    """

    def __init__(
        self,
        barejid: JID,
        name: Optional[str] = None,
        subscription: Subscription = "none",
        groups: Iterable[str] = (),
        pending_out=False,
    ):
        self.barejid = barejid
        self.name = name
        self.subscription: Subscription = subscription
        self.groups = set(groups)
        self.pending_out = pending_out
        self.offline_status: Optional[str] = None
        self.__resources = dict[str, Resource]()

    def __repr__(self):
        return f"<Contact {self.barejid} ({self.presence.value})>"

    @property
    def resources(self) -> dict[str, Resource]:
        """
        A copy of the contact's resources, by name
        """
        return dict(self.__resources)

    def get_resource(self, name: str) -> Optional[Resource]:
        return self.__resources.get(name)

    def set_resource(self, resource: Resource) -> bool:
        """
        Insert or replace a resource.

        :return: ``False`` if an identical presence was already known for
            this resource.
        """
        old = self.__resources.get(resource.name)
        self.__resources[resource.name] = resource
        self.offline_status = None
        return old is None or not old.same_presence(resource)

    def remove_resource(self, name: str) -> bool:
        return self.__resources.pop(name, None) is not None

    def clear_resources(self) -> bool:
        had_any = bool(self.__resources)
        self.__resources.clear()
        return had_any

    def most_available_resource(self) -> Optional[Resource]:
        if not self.__resources:
            return None
        return min(self.__resources.values(), key=Resource.availability_key)

    @property
    def presence(self) -> ResourcePresence:
        if (r := self.most_available_resource()) is None:
            return ResourcePresence.OFFLINE
        return r.presence

    @property
    def status(self) -> Optional[str]:
        if (r := self.most_available_resource()) is None:
            return self.offline_status
        return r.status

    @property
    def last_activity(self) -> Optional[datetime]:
        if (r := self.most_available_resource()) is None:
            return None
        return r.last_activity

    @property
    def is_available(self) -> bool:
        return self.presence.is_available

    @property
    def is_subscribed(self) -> bool:
        """
        Whether we receive this contact's presence
        """
        return self.subscription in ("to", "both")

    def display_string(self, resource: Optional[str] = None) -> str:
        base = self.name or str(self.barejid)
        if resource:
            return f"{base} ({resource})"
        return base
