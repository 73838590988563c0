"""
The XMPP side: a :class:`slixmpp.ClientXMPP` that decodes the stanzas it
receives into :class:`.EventDispatcher` calls, and sends the few stanzas the
dispatcher asks for.
"""

import logging
from datetime import datetime
from typing import NamedTuple, Optional

from slixmpp import JID, Callback, ClientXMPP, Iq, Message, Presence, StanzaPath

from .core.dispatcher import EventDispatcher
from .core.transport import Transport
from .contact import Resource
from .util.types import ChatState, JidStr, ResourcePresence

STATUS_OWN = 110
STATUS_CREATED = 201
STATUS_NICK_CHANGED = 303

_SUBSCRIPTION_TYPES = {"subscribe", "subscribed", "unsubscribe", "unsubscribed"}


class MucStatus(NamedTuple):
    codes: frozenset[int]
    new_nick: Optional[str]
    destroyed: bool

    @property
    def own(self):
        return STATUS_OWN in self.codes

    @property
    def created(self):
        return STATUS_CREATED in self.codes

    @property
    def nick_changed(self):
        return STATUS_NICK_CHANGED in self.codes


class Invite(NamedTuple):
    inviter: Optional[JID]
    # left unvalidated, the dispatcher drops invites to invalid rooms
    room: JidStr
    reason: Optional[str]


def muc_status(p: Presence) -> Optional[MucStatus]:
    """
    The MUC specifics of an occupant presence, or ``None`` if this presence
    does not come from a room occupant.
    """
    muc = p.get_plugin("muc", check=True)
    if muc is None:
        return None
    try:
        codes = frozenset(muc["status_codes"])
    except (KeyError, ValueError):
        log.debug("Ignoring invalid MUC status codes in %s", p)
        codes = frozenset()
    return MucStatus(
        codes,
        muc["item_nick"] or None,
        muc.get_plugin("destroy", check=True) is not None,
    )


def invite(msg: Message) -> Optional[Invite]:
    """
    A :xep:`0249` direct invite, or a :xep:`0045` mediated one.
    """
    direct = msg.get_plugin("groupchat_invite", check=True)
    if direct is not None:
        return Invite(msg.get_from(), direct["jid"], direct["reason"] or None)
    muc = msg.get_plugin("muc", check=True)
    mediated = None if muc is None else muc.get_plugin("invite", check=True)
    if mediated is None:
        return None
    return Invite(
        mediated["from"] or None,
        msg.get_from().bare,
        mediated["reason"] or None,
    )


def chat_state(msg: Message) -> Optional[ChatState]:
    state = msg["chat_state"]
    return ChatState(state) if state else None


def delay_stamp(msg: Message) -> Optional[datetime]:
    if msg.get_plugin("delay", check=True) is None:
        return None
    try:
        return msg["delay"]["stamp"]
    except ValueError:
        log.debug("Ignoring invalid delay stamp in %s", msg)
        return None


def idle_since(p: Presence) -> Optional[datetime]:
    if p.get_plugin("idle", check=True) is None:
        return None
    try:
        return p["idle"]["since"]
    except ValueError:
        log.debug("Ignoring invalid idle stamp in %s", p)
        return None


def error_info(stanza) -> tuple[str, str]:
    """
    The type and a human readable description of a stanza error.
    """
    error = stanza["error"]
    text = error["text"] or error["condition"] or "Unknown error"
    return error["type"] or "cancel", text


class StanzaDecoder:
    """
    Turns incoming presences, messages and roster pushes into
    :class:`.EventDispatcher` calls.
    """

    def __init__(self, dispatcher: EventDispatcher, account: JID):
        self.dispatcher = dispatcher
        self.account = JID(account.bare)

    def on_roster_update(self, iq: Iq):
        for jid, item in iq["roster"]["items"].items():
            if item.get("subscription") == "remove":
                self.dispatcher.on_roster_remove(jid)
                continue
            self.dispatcher.on_roster_update(
                jid,
                item.get("name"),
                item.get("subscription") or "none",
                item.get("groups") or (),
                item.get("ask") == "subscribe",
            )

    def on_presence(self, p: Presence):
        pfrom = p.get_from()
        ptype = p["type"]
        if not pfrom or pfrom.bare == self.account.bare:
            log.trace("Ignoring presence from our own account: %s", p)  # type:ignore
            return

        if ptype in _SUBSCRIPTION_TYPES:
            self.dispatcher.on_subscription(pfrom, ptype)
            return

        muc = muc_status(p)
        if muc is not None or self.dispatcher.rooms.is_active(pfrom.bare):
            self.__on_room_presence(p, muc)
            return

        if ptype == "error":
            self.dispatcher.on_presence_error(pfrom.full or None, *error_info(p))
        elif ptype == "unavailable":
            self.dispatcher.on_contact_offline(
                pfrom.bare, pfrom.resource or None, p["status"] or None
            )
        elif ptype in ("available", *p.showtypes):
            resource = Resource(
                pfrom.resource or "",
                ResourcePresence.from_show(p["show"]),
                p["status"] or None,
                p["priority"] or 0,
            )
            self.dispatcher.on_contact_online(pfrom.bare, resource, idle_since(p))
        else:
            log.debug("Ignoring presence of type %s", ptype)

    def __on_room_presence(self, p: Presence, muc: Optional[MucStatus]):
        pfrom = p.get_from()
        room = JID(pfrom.bare)
        nick = pfrom.resource
        ptype = p["type"]

        if ptype == "error":
            self.dispatcher.on_room_join_error(room, error_info(p)[1])
            return

        if muc is None:
            muc = MucStatus(frozenset(), None, False)

        if ptype == "unavailable":
            if muc.destroyed:
                self.dispatcher.on_room_destroy(room)
            elif muc.nick_changed and muc.new_nick:
                self.dispatcher.on_room_member_nick_change(
                    room, nick, muc.new_nick, own=muc.own
                )
            elif muc.own:
                self.dispatcher.on_room_leave(room)
            else:
                self.dispatcher.on_room_member_offline(room, nick)
            return

        self.dispatcher.on_room_presence(
            room,
            nick,
            p["show"] or "online",
            p["status"] or None,
            own=muc.own,
            created=muc.created,
        )

    def on_message(self, msg: Message):
        mfrom = msg.get_from()
        mtype = msg["type"]

        if mtype == "error":
            self.dispatcher.on_message_error(mfrom.full or None, *error_info(msg))
            return

        if inv := invite(msg):
            self.dispatcher.on_room_invite(inv.inviter, inv.room, inv.reason)
            return

        if mtype == "groupchat":
            self.__on_groupchat(msg)
            return

        self.dispatcher.on_chat_message(
            mfrom, msg["body"] or None, delay_stamp(msg), chat_state(msg)
        )

    def __on_groupchat(self, msg: Message):
        mfrom = msg.get_from()
        room = JID(mfrom.bare)
        if msg.xml.find(f"{{{msg.namespace}}}subject") is not None:
            self.dispatcher.on_room_subject(room, msg["subject"] or None)
            return
        body = msg["body"]
        if not body:
            return
        if not mfrom.resource:
            self.dispatcher.on_room_broadcast(room, body)
        elif (stamp := delay_stamp(msg)) is not None:
            self.dispatcher.on_room_history(room, mfrom.resource, stamp, body)
        else:
            self.dispatcher.on_room_message(room, mfrom.resource, body)


class ParleyClient(ClientXMPP, Transport):
    """
    The XMPP connection of the client.

    Slixmpp's own subscription handling is disabled: subscription requests
    are surfaced to the user instead of being answered automatically.
    """

    def __init__(self, jid: JID, password: str, dispatcher_factory):
        """
        :param dispatcher_factory: called with this client as the only argument,
            returns the :class:`.EventDispatcher` that this client will feed.
        """
        super().__init__(jid, password)
        self.dispatcher: EventDispatcher = dispatcher_factory(self)
        self.decoder = StanzaDecoder(self.dispatcher, JID(jid))
        self.is_shutting_down = False
        self.auto_authorize = None
        self.auto_subscribe = False

        for plugin in SLIXMPP_PLUGINS:
            self.register_plugin(plugin)

        self.__register_slixmpp_events()

    def __register_slixmpp_events(self):
        self.add_event_handler("session_start", self.__on_session_start)
        self.add_event_handler("disconnected", self.__on_disconnected)
        self.add_event_handler("failed_auth", self.__on_failed_auth)
        self.add_event_handler("roster_update", self.decoder.on_roster_update)
        self.register_handler(
            Callback(
                "parley-presence", StanzaPath("presence"), self.decoder.on_presence
            )
        )
        self.register_handler(
            Callback("parley-message", StanzaPath("message"), self.decoder.on_message)
        )

    # connection

    async def __on_session_start(self, _event):
        log.debug("Session start")
        await self.get_roster()
        self.send_presence()
        self.dispatcher.on_login_success(self.boundjid)
        self.schedule(
            "chat-state-tick", 1, self.dispatcher.on_idle_tick, repeat=True
        )

    def __on_disconnected(self, reason):
        log.debug("Disconnected: %s", reason)
        self.cancel_schedule("chat-state-tick")
        if self.is_shutting_down:
            return
        self.dispatcher.on_lost_connection()

    def __on_failed_auth(self, _event):
        self.dispatcher.on_login_failed()

    def shutdown(self):
        log.debug("Shutting down")
        self.is_shutting_down = True
        for room in self.dispatcher.rooms.get_active_rooms():
            self.dispatcher.leave_room(room)
        self.dispatcher.close()

    # outgoing, Transport implementation

    def send_chat_state(self, recipient: JID, state: ChatState):
        msg = self.make_message(mto=recipient, mtype="chat")
        msg["chat_state"] = state.value
        msg.send()

    def send_join(self, room: JID, nick: str, password: Optional[str]):
        pres = self.make_presence(pto=JID(f"{room.bare}/{nick}"))
        pres.enable("muc_join")
        if password:
            pres["muc_join"]["password"] = password
        pres.send()

    def send_leave(self, room: JID, nick: str):
        self.make_presence(pto=JID(f"{room.bare}/{nick}"), ptype="unavailable").send()

    def send_nick_change(self, room: JID, nick: str):
        self.make_presence(pto=JID(f"{room.bare}/{nick}")).send()

    # outgoing, user actions

    def send_chat_message(self, recipient: JID, body: str):
        msg = self.make_message(mto=recipient, mbody=body, mtype="chat")
        if state := self.dispatcher.on_message_sent(recipient, body):
            msg["chat_state"] = state.value
        msg.send()

    def send_room_message(self, room: JID, body: str):
        self.make_message(mto=JID(room.bare), mbody=body, mtype="groupchat").send()


SLIXMPP_PLUGINS = [
    "xep_0045",  # Multi-User Chat
    "xep_0085",  # Chat state notifications
    "xep_0203",  # Delayed delivery
    "xep_0249",  # Direct MUC Invitations
    "xep_0319",  # Last User Interaction in Presence
]

log = logging.getLogger(__name__)
