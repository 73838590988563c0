import sys
from datetime import datetime
from typing import Optional, TextIO

from slixmpp import JID

from ..group import Occupant
from ..util.types import SubscriptionEvent
from .display import Display

_SUBSCRIPTION_LINES = {
    "subscribe": "Received authorization request from {jid}",
    "subscribed": "Subscription received from {jid}",
    "unsubscribed": "{jid} deleted subscription",
}


class ConsoleDisplay(Display):
    """
    Line-oriented rendering on a text stream, one line per event, prefixed
    with the time and the window the line belongs to.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _print(self, window: str, line: str, stamp: Optional[datetime] = None):
        when = (stamp or datetime.now()).strftime("%H:%M")
        self.stream.write(f"{when} [{window}] {line}\n")
        self.stream.flush()

    @staticmethod
    def _status_string(
        name: str,
        show: str,
        status: Optional[str],
        last_activity: Optional[datetime] = None,
    ) -> str:
        res = f"{name} is {show}"
        if last_activity is not None:
            idle = datetime.now(last_activity.tzinfo) - last_activity
            res += f", idle {int(idle.total_seconds() // 60)}m"
        if status:
            res += f', "{status}"'
        return res

    def show_error(self, message):
        self._print("console", f"! {message}")

    def login_success(self, jid):
        self._print("console", f"{jid} logged in successfully")

    def disconnected(self):
        self._print("console", "Disconnected")

    def console_contact_online(self, contact, resource, last_activity):
        self._print(
            "console",
            "++ "
            + self._status_string(
                contact.display_string(resource.name),
                resource.presence.value,
                resource.status,
                last_activity,
            ),
        )

    def chat_contact_online(self, contact, resource, last_activity):
        self._print(
            str(contact.barejid),
            "++ "
            + self._status_string(
                contact.display_string(resource.name),
                resource.presence.value,
                resource.status,
                last_activity,
            ),
        )

    def console_contact_offline(self, contact, resource, status):
        self._print(
            "console",
            "-- "
            + self._status_string(contact.display_string(resource), "offline", status),
        )

    def chat_contact_offline(self, contact, resource, status):
        self._print(
            str(contact.barejid),
            "-- "
            + self._status_string(contact.display_string(resource), "offline", status),
        )

    def subscription(self, jid: JID, kind: SubscriptionEvent):
        self._print("console", _SUBSCRIPTION_LINES[kind].format(jid=jid))

    def roster_add(self, jid, name):
        suffix = f" ({name})" if name else ""
        self._print("console", f"Roster item added: {jid}{suffix}")

    def roster_remove(self, jid):
        self._print("console", f"Roster item removed: {jid}")

    def group_added(self, jid, group):
        self._print("console", f"{jid} added to group {group}")

    def group_removed(self, jid, group):
        self._print("console", f"{jid} removed from group {group}")

    def incoming_message(self, jid, message, stamp=None, private=False):
        window = str(jid) if private else str(JID(jid).bare)
        self._print(window, f"{jid}: {message}", stamp)

    def contact_typing(self, jid):
        self._print(str(jid), f"{jid} is typing...")

    def recipient_gone(self, jid):
        self._print(str(jid), f"<- {jid} has left the conversation")

    def recipient_error(self, jid, message):
        self._print(str(jid), f"! Error from {jid}: {message}")

    def recipient_not_found(self, jid, message):
        self._print(str(jid), f"! Recipient {jid} not found: {message}")

    def room_invite(self, inviter, room, reason):
        line = f"{inviter} has invited you to join {room}"
        if reason:
            line += f', "{reason}"'
        self._print("console", line)

    def room_join(self, room, focus):
        # focus is a window concern, every line goes to the same stream
        self._print(str(room), "-> You have joined the room")

    def room_join_error(self, room, error):
        self._print("console", f"! Error joining {room}: {error}")

    def room_roster(self, room, occupants: list[Occupant]):
        if not occupants:
            self._print(str(room), "Room is empty")
            return
        nicks = ", ".join(o.nick for o in occupants)
        self._print(str(room), f"Room occupants: {nicks}")

    def room_subject(self, room, subject):
        self._print(str(room), f"Room subject: {subject}")

    def room_broadcast(self, room, message):
        self._print(str(room), f"Room message: {message}")

    def room_message(self, room, nick, message):
        self._print(str(room), f"{nick}: {message}")

    def room_history(self, room, nick, stamp, message):
        self._print(str(room), f"{nick}: {message}", stamp)

    def room_member_presence(self, room, nick, show, status):
        self._print(str(room), self._status_string(nick, show or "online", status))

    def room_member_online(self, room, nick, show, status):
        line = f"-> {nick} has joined the room"
        if status:
            line += f', "{status}"'
        self._print(str(room), line)

    def room_member_offline(self, room, nick):
        self._print(str(room), f"<- {nick} has left the room")

    def room_member_nick_change(self, room, old_nick, nick):
        self._print(str(room), f"** {old_nick} is now known as {nick}")

    def room_nick_change(self, room, nick):
        self._print(str(room), f"** You are now known as {nick}")

    def room_requires_config(self, room):
        self._print(
            str(room),
            "Room locked, it requires configuration before anyone else can join",
        )

    def room_destroyed(self, room):
        self._print("console", f"<- Room destroyed: {room}")
