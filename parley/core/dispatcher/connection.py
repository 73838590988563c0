import logging

from ...util.error import PROTOCOL_ERRORS
from ...util.types import JidStr
from .. import config
from .muc import MucMixin


class ConnectionMixin(MucMixin):
    def on_login_success(self, jid: JidStr):
        for room in self.rooms.get_active_rooms():
            log.debug("Rejoining %s", room)
            self.join_room(
                room, self.rooms.get_nick(room), self.rooms.get_password(room)
            )
        for room in config.AUTOJOIN or ():
            try:
                if self.rooms.is_active(room):
                    continue
                log.debug("Auto-joining %s", room)
                self.join_room(room, config.NICK, autojoin=True)
            except PROTOCOL_ERRORS as e:
                log.warning("Cannot auto-join %r: %r", room, e)
        log.info("Logged in as %s", jid)
        self.display.login_success(jid)

    def on_login_failed(self):
        log.warning("Login failed")
        self.display.show_error("Login failed.")

    def on_lost_connection(self):
        log.warning("Lost connection")
        self.roster.clear()
        self.rooms.clear_invites()
        self.sessions.clear()
        self.display.show_error("Lost connection.")
        self.display.disconnected()

    def close(self):
        """
        Forget everything, before the process exits.
        """
        self.rooms.close()
        self.roster.clear()
        self.sessions.clear()


log = logging.getLogger(__name__)
