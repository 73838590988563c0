import logging
from datetime import datetime
from typing import Optional

from slixmpp import JID

from ...util.error import InvalidEvent
from ...util.types import JidStr, bare_jid, valid_nick
from .. import config
from .util import DispatcherMixin, Ignore, exceptions_logged


class MucMixin(DispatcherMixin):
    def _active_room(self, room: JidStr) -> JID:
        jid = bare_jid(room)
        if not self.rooms.is_active(jid):
            log.debug("Ignoring event for %s, a room we are not in", jid)
            raise Ignore
        return jid

    # presences

    @exceptions_logged
    def on_room_presence(
        self,
        room: JidStr,
        nick: str,
        show: Optional[str],
        status: Optional[str],
        own=False,
        created=False,
    ):
        """
        An available presence from a room occupant, possibly ourselves.

        :param own: the presence carried the 'self-presence' status code
        :param created: the presence carried the 'room created' status code
        """
        room = self._active_room(room)
        nick = valid_nick(nick)
        if own:
            self.__own_presence(room, nick, show, status, created)
            return

        if not self.rooms.get_roster_received(room):
            self.rooms.add_to_roster(room, nick, show, status)
            return

        old_nick = self.rooms.complete_roster_nick_change(room, nick)
        if old_nick is not None:
            self.rooms.add_to_roster(room, nick, show, status)
            if config.STATUSES_MUC != "none":
                self.display.room_member_nick_change(room, old_nick, nick)
        elif self.rooms.nick_in_roster(room, nick):
            self.on_room_member_presence(room, nick, show, status)
        else:
            self.on_room_member_online(room, nick, show, status)

    def __own_presence(
        self,
        room: JID,
        nick: str,
        show: Optional[str],
        status: Optional[str],
        created: bool,
    ):
        if created:
            self.on_room_requires_config(room)

        if not self.rooms.get_roster_received(room):
            if nick == self.rooms.get_nick(room):
                self.rooms.add_to_roster(room, nick, show, status)
            else:
                # the server picked another nick for us
                self.rooms.complete_nick_change(room, nick, show, status)
            self.on_room_roster_complete(room)
        elif (
            self.rooms.is_pending_nick_change(room)
            or nick != self.rooms.get_nick(room)
        ):
            self.on_room_nick_change(room, nick, show, status)
        else:
            self.on_room_member_presence(room, nick, show, status)

    @exceptions_logged
    def on_room_roster_complete(self, room: JidStr):
        room = self._active_room(room)
        self.rooms.remove_invite(room)
        self.rooms.set_roster_received(room)
        occupants = self.rooms.get_roster(room)
        subject = self.rooms.get_subject(room)
        broadcasts = self.rooms.get_pending_broadcasts(room)

        self.display.room_join(room, not self.rooms.is_autojoin(room))
        self.display.room_roster(room, occupants)
        if subject:
            self.display.room_subject(room, subject)
        for message in broadcasts:
            self.display.room_broadcast(room, message)

    @exceptions_logged
    def on_room_member_presence(
        self, room: JidStr, nick: str, show: Optional[str], status: Optional[str]
    ):
        room = self._active_room(room)
        changed = self.rooms.add_to_roster(room, nick, show, status)
        if changed and config.STATUSES_MUC == "all":
            self.display.room_member_presence(room, nick, show, status)

    @exceptions_logged
    def on_room_member_online(
        self, room: JidStr, nick: str, show: Optional[str], status: Optional[str]
    ):
        room = self._active_room(room)
        self.rooms.add_to_roster(room, nick, show, status)
        if config.STATUSES_MUC != "none":
            self.display.room_member_online(room, nick, show, status)

    @exceptions_logged
    def on_room_member_offline(self, room: JidStr, nick: str):
        room = self._active_room(room)
        if not self.rooms.nick_in_roster(room, nick):
            log.debug("%s left %s but was not in its roster", nick, room)
            return
        self.rooms.remove_from_roster(room, nick)
        if config.STATUSES_MUC != "none":
            self.display.room_member_offline(room, nick)

    @exceptions_logged
    def on_room_member_nick_change(
        self, room: JidStr, old_nick: str, new_nick: str, own=False
    ):
        """
        An occupant announced they are leaving under ``old_nick`` to come
        back as ``new_nick``. Their new presence completes the rename.
        """
        room = self._active_room(room)
        if not own:
            self.rooms.set_roster_pending_nick_change(room, new_nick, old_nick)
            return
        if self.rooms.get_old_nick(room, new_nick) is None:
            log.info("%s: the server changed our nick to %s", room, new_nick)
        self.rooms.set_pending_nick_change(room, new_nick)

    @exceptions_logged
    def on_room_nick_change(
        self,
        room: JidStr,
        nick: str,
        show: Optional[str] = None,
        status: Optional[str] = None,
    ):
        room = self._active_room(room)
        old_nick = self.rooms.get_old_nick(room, nick)
        self.rooms.complete_nick_change(room, nick, show, status)
        log.debug("%s: our nick changed from %s to %s", room, old_nick, nick)
        self.display.room_nick_change(room, nick)

    @exceptions_logged
    def on_room_leave(self, room: JidStr):
        room = bare_jid(room)
        self.rooms.leave_room(room)

    @exceptions_logged
    def on_room_requires_config(self, room: JidStr):
        room = self._active_room(room)
        self.rooms.set_requires_config(room, True)
        self.display.room_requires_config(room)

    @exceptions_logged
    def on_room_destroy(self, room: JidStr):
        room = bare_jid(room)
        self.rooms.leave_room(room)
        self.display.room_destroyed(room)

    @exceptions_logged
    def on_room_join_error(self, room: JidStr, error: str):
        room = bare_jid(room)
        if self.rooms.is_active(room):
            self.rooms.leave_room(room)
        self.display.room_join_error(room, error)

    # messages

    @exceptions_logged
    def on_room_subject(self, room: JidStr, subject: Optional[str]):
        room = self._active_room(room)
        self.rooms.set_subject(room, subject)
        if subject and self.rooms.get_roster_received(room):
            self.display.room_subject(room, subject)

    @exceptions_logged
    def on_room_broadcast(self, room: JidStr, message: str):
        room = self._active_room(room)
        if not message:
            raise InvalidEvent("Empty room broadcast")
        if self.rooms.get_roster_received(room):
            self.display.room_broadcast(room, message)
        else:
            self.rooms.add_pending_broadcast(room, message)

    @exceptions_logged
    def on_room_message(self, room: JidStr, nick: str, message: str):
        room = self._active_room(room)
        nick = valid_nick(nick)
        self.display.room_message(room, nick, message)
        if config.GRLOG:
            self.chat_log.groupchat(room, nick, message)

    @exceptions_logged
    def on_room_history(
        self, room: JidStr, nick: str, stamp: datetime, message: str
    ):
        room = self._active_room(room)
        self.display.room_history(room, valid_nick(nick), stamp, message)

    @exceptions_logged
    def on_room_invite(
        self, inviter: Optional[JidStr], room: JidStr, reason: Optional[str] = None
    ):
        if not inviter:
            raise InvalidEvent("Room invite without an inviter")
        room = bare_jid(room)
        if self.rooms.add_invite(room):
            self.display.room_invite(JID(inviter), room, reason or None)
        else:
            log.debug("Ignoring invite to %s", room)

    # outgoing

    def join_room(
        self,
        room: JidStr,
        nick: Optional[str] = None,
        password: Optional[str] = None,
        autojoin=False,
    ):
        r = self.rooms.join_room(room, nick or config.NICK, password, autojoin)
        self.transport.send_join(r.jid, r.nick, r.password)

    def leave_room(self, room: JidStr):
        room = bare_jid(room)
        nick = self.rooms.get_nick(room)
        if nick is None or not self.rooms.is_active(room):
            return
        self.rooms.leave_room(room)
        self.transport.send_leave(room, nick)

    def change_nick(self, room: JidStr, nick: str):
        room = bare_jid(room)
        if not self.rooms.is_active(room):
            return
        self.rooms.set_pending_nick_change(room, nick)
        self.transport.send_nick_change(room, valid_nick(nick))

    def decline_invite(self, room: JidStr):
        self.rooms.remove_invite(room)


log = logging.getLogger(__name__)
