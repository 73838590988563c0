import logging
from typing import Optional

from slixmpp import JID

from .occupant import Occupant


class Room:
    """
    What we know about a multi-user chat we joined at some point.

    Rooms are owned by :class:`.MucRegistry`. Leaving a room does not
    forget it: the nick, password and autojoin flag are kept for rejoining.
    """

    def __init__(
        self,
        jid: JID,
        nick: str,
        password: Optional[str] = None,
        autojoin=False,
    ):
        self.jid = jid
        self.nick = nick
        # an empty password means no password
        self.password = password or None
        self.autojoin = autojoin
        self.active = True
        self.requires_config = False

        self.pending_nick: Optional[str] = None
        self.subject: Optional[str] = None
        self.roster_received = False

        self.__occupants = dict[str, Occupant]()
        # other occupants' renames in progress, new nick -> old nick
        self.__pending_renames = dict[str, str]()
        self.__pending_broadcasts = list[str]()

        self.log = logging.getLogger(f"{__name__}:{jid}")

    def __repr__(self):
        state = "active" if self.active else "inactive"
        return f"<Room {self.jid} as '{self.nick}' ({state})>"

    def reset(self):
        """
        Forget everything that is only valid while we are in the room.
        """
        self.__occupants.clear()
        self.__pending_renames.clear()
        self.__pending_broadcasts.clear()
        self.subject = None
        self.roster_received = False
        self.pending_nick = None

    @property
    def occupants(self) -> list[Occupant]:
        """
        A snapshot of the room's occupants, sorted by nickname
        """
        return sorted(self.__occupants.values(), key=lambda o: o.nick.casefold())

    def get_occupant(self, nick: str) -> Optional[Occupant]:
        return self.__occupants.get(nick)

    def set_occupant(
        self, nick: str, show: Optional[str], status: Optional[str]
    ) -> bool:
        old = self.__occupants.get(nick)
        if old is not None and old.same_presence(show, status):
            return False
        self.__occupants[nick] = Occupant(nick, show, status)
        return True

    def remove_occupant(self, nick: str) -> Optional[Occupant]:
        return self.__occupants.pop(nick, None)

    def rename_occupant(self, old_nick: str, new_nick: str) -> Occupant:
        old = self.__occupants.pop(old_nick, None)
        if old is None:
            self.log.debug("No occupant named %s to rename", old_nick)
            new = Occupant(new_nick, "online")
        else:
            new = Occupant(new_nick, old.show, old.status)
        self.__occupants[new_nick] = new
        return new

    def set_pending_rename(self, new_nick: str, old_nick: str):
        self.__pending_renames[new_nick] = old_nick

    def get_pending_rename(self, new_nick: str) -> Optional[str]:
        return self.__pending_renames.get(new_nick)

    def pop_pending_rename(self, new_nick: str) -> Optional[str]:
        return self.__pending_renames.pop(new_nick, None)

    def add_pending_broadcast(self, message: str):
        self.__pending_broadcasts.append(message)

    def drain_pending_broadcasts(self) -> list[str]:
        pending = self.__pending_broadcasts
        self.__pending_broadcasts = []
        return pending
