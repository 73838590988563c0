import logging
from typing import Optional

from slixmpp import JID

from ..util.types import JidStr, bare_jid, valid_nick
from .occupant import Occupant
from .room import Room


class MucRegistry:
    """
    Every room joined during this process' lifetime, and the invites we have
    not acted on yet.

    Rooms are never removed: leaving a room only marks it inactive. Invites
    are cleared on disconnection with :meth:`clear_invites`, the whole
    registry with :meth:`close` on shutdown.

    All mutations tolerate duplicate protocol events: the same occupant
    presence or the same invite received twice changes nothing the second
    time, and reports it through a ``False`` return value.

    Only one own-nick change can be pending per room at a time; a second
    request replaces the first.
    """

    def __init__(self):
        self.__rooms = dict[JID, Room]()
        # dicts keep insertion order, and this one is only used for its keys
        self.__invites = dict[JID, None]()

    def __repr__(self):
        return f"<MucRegistry ({len(self.__rooms)} rooms)>"

    def __get(self, room: JidStr) -> Optional[Room]:
        return self.__rooms.get(bare_jid(room))

    def __get_active(self, room: JidStr) -> Optional[Room]:
        r = self.__get(room)
        if r is None:
            log.debug("Unknown room: %s", room)
            return None
        if not r.active:
            r.log.debug("Ignoring update for an inactive room")
            return None
        return r

    # room lifecycle

    def join_room(
        self,
        room: JidStr,
        nick: str,
        password: Optional[str] = None,
        autojoin=False,
    ) -> Room:
        jid = bare_jid(room)
        nick = valid_nick(nick)
        r = self.__rooms.get(jid)
        if r is None:
            r = self.__rooms[jid] = Room(jid, nick, password, autojoin)
            r.log.debug("Created")
            return r
        r.reset()
        r.active = True
        r.nick = nick
        r.autojoin = r.autojoin or autojoin
        if password:
            r.password = password
        r.log.debug("Rejoining")
        return r

    def leave_room(self, room: JidStr) -> None:
        r = self.__get(room)
        if r is None:
            return
        r.reset()
        r.active = False
        r.requires_config = False
        r.log.debug("Left")

    def get_room(self, room: JidStr) -> Optional[Room]:
        return self.__get(room)

    def is_active(self, room: JidStr) -> bool:
        r = self.__get(room)
        return r is not None and r.active

    def is_autojoin(self, room: JidStr) -> bool:
        r = self.__get(room)
        return r is not None and r.autojoin

    def get_active_rooms(self) -> list[JID]:
        return [jid for jid, r in self.__rooms.items() if r.active]

    def get_nick(self, room: JidStr) -> Optional[str]:
        r = self.__get(room)
        return None if r is None else r.nick

    def get_password(self, room: JidStr) -> Optional[str]:
        r = self.__get(room)
        return None if r is None else r.password

    def close(self) -> None:
        log.debug("Forgetting %s rooms", len(self.__rooms))
        self.__rooms.clear()
        self.__invites.clear()

    # occupants

    def add_to_roster(
        self,
        room: JidStr,
        nick: str,
        show: Optional[str] = None,
        status: Optional[str] = None,
    ) -> bool:
        """
        Insert or update an occupant.

        :return: ``False`` if nothing changed, including when the room is
            not active.
        """
        r = self.__get_active(room)
        if r is None:
            return False
        return r.set_occupant(valid_nick(nick), show, status)

    def remove_from_roster(self, room: JidStr, nick: str) -> None:
        r = self.__get(room)
        if r is not None:
            r.remove_occupant(nick)

    def get_roster(self, room: JidStr) -> list[Occupant]:
        """
        A snapshot of a room's occupants, empty for unknown rooms.
        """
        r = self.__get(room)
        return [] if r is None else r.occupants

    def nick_in_roster(self, room: JidStr, nick: str) -> bool:
        return self.get_occupant(room, nick) is not None

    def get_occupant(self, room: JidStr, nick: str) -> Optional[Occupant]:
        r = self.__get(room)
        return None if r is None else r.get_occupant(nick)

    def set_roster_received(self, room: JidStr) -> None:
        if r := self.__get_active(room):
            r.roster_received = True

    def get_roster_received(self, room: JidStr) -> bool:
        r = self.__get(room)
        return r is not None and r.roster_received

    # our own nick changes

    def set_pending_nick_change(self, room: JidStr, new_nick: str) -> None:
        if r := self.__get_active(room):
            r.pending_nick = valid_nick(new_nick)

    def is_pending_nick_change(self, room: JidStr) -> bool:
        r = self.__get(room)
        return r is not None and r.pending_nick is not None

    def complete_nick_change(
        self,
        room: JidStr,
        nick: str,
        show: Optional[str] = None,
        status: Optional[str] = None,
    ) -> None:
        """
        The server confirmed our new nickname.

        Our occupant entry moves from the previous nickname to the new one.
        It keeps its show and status unless the presence confirming the
        change carries new ones. The server may confirm a nickname other
        than the one we requested; the confirmed one wins.
        """
        r = self.__get_active(room)
        if r is None:
            return
        nick = valid_nick(nick)
        if r.pending_nick not in (None, nick):
            r.log.warning(
                "Nick changed to %s, but %s was requested", nick, r.pending_nick
            )
        r.rename_occupant(r.nick, nick)
        if show is not None:
            r.set_occupant(nick, show, status)
        r.nick = nick
        r.pending_nick = None

    def get_old_nick(self, room: JidStr, new_nick: str) -> Optional[str]:
        """
        Which nickname ``new_nick`` replaces, according to the renames we
        were told about or asked for.
        """
        r = self.__get(room)
        if r is None:
            return None
        if (old := r.get_pending_rename(new_nick)) is not None:
            return old
        if r.pending_nick == new_nick:
            return r.nick
        return None

    # other occupants' nick changes

    def set_roster_pending_nick_change(
        self, room: JidStr, new_nick: str, old_nick: str
    ) -> None:
        if r := self.__get_active(room):
            r.set_pending_rename(valid_nick(new_nick), old_nick)

    def complete_roster_nick_change(self, room: JidStr, nick: str) -> Optional[str]:
        """
        :return: The previous nickname of the occupant now known as ``nick``,
            or ``None`` if no rename to ``nick`` was announced.
        """
        r = self.__get(room)
        if r is None:
            return None
        old = r.pop_pending_rename(nick)
        if old is not None:
            r.remove_occupant(old)
        return old

    # invites

    def add_invite(self, room: JidStr) -> bool:
        """
        :return: ``False`` if this room is already in the invites, or active.
        """
        jid = bare_jid(room)
        if jid in self.__invites or self.is_active(jid):
            return False
        self.__invites[jid] = None
        return True

    def remove_invite(self, room: JidStr) -> None:
        self.__invites.pop(bare_jid(room), None)

    def get_invites(self) -> list[JID]:
        """
        A new list of the rooms we were invited to, oldest invite first
        """
        return list(self.__invites)

    def invite_count(self) -> int:
        return len(self.__invites)

    def invites_include(self, room: JidStr) -> bool:
        return bare_jid(room) in self.__invites

    def clear_invites(self) -> None:
        self.__invites.clear()

    # misc room state

    def set_subject(self, room: JidStr, subject: Optional[str]) -> None:
        if r := self.__get_active(room):
            r.subject = subject or None

    def get_subject(self, room: JidStr) -> Optional[str]:
        r = self.__get(room)
        return None if r is None else r.subject

    def add_pending_broadcast(self, room: JidStr, message: str) -> None:
        if r := self.__get_active(room):
            r.add_pending_broadcast(message)

    def get_pending_broadcasts(self, room: JidStr) -> list[str]:
        """
        Take the room messages buffered before the roster was received,
        in arrival order. The buffer is emptied.
        """
        r = self.__get(room)
        return [] if r is None else r.drain_pending_broadcasts()

    def set_requires_config(self, room: JidStr, value: bool) -> None:
        if r := self.__get(room):
            r.requires_config = value

    def requires_config(self, room: JidStr) -> bool:
        r = self.__get(room)
        return r is not None and r.requires_config


log = logging.getLogger(__name__)
