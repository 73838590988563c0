from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Occupant:
    """
    A participant of a room, as known by their in-room nickname.

    Unlike :class:`parley.contact.Contact`, occupants are not identified by
    a JID: most rooms do not disclose their occupants' real addresses.
    """

    nick: str
    show: Optional[str] = None
    status: Optional[str] = None

    def same_presence(self, show: Optional[str], status: Optional[str]) -> bool:
        return self.show == show and self.status == status
