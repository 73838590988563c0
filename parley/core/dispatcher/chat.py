import logging
from datetime import datetime
from typing import Optional

from slixmpp import JID

from ...util.error import RECIPIENT_GONE_TYPES
from ...util.types import ChatState, JidStr, bare_jid
from .. import config
from .util import DispatcherMixin, exceptions_logged

_IDLE_STATES = (ChatState.PAUSED, ChatState.INACTIVE, ChatState.GONE)


class ChatMixin(DispatcherMixin):
    # incoming

    @exceptions_logged
    def on_chat_message(
        self,
        jid: JidStr,
        body: Optional[str],
        stamp: Optional[datetime] = None,
        chat_state: Optional[ChatState] = None,
    ):
        jid = JID(jid)
        if self.rooms.is_active(jid.bare):
            # a private message from a room occupant, no chat session for those
            if body:
                self.display.incoming_message(jid, body, stamp, private=True)
            return

        barejid = bare_jid(jid)
        if config.STATES:
            supports = chat_state is not None
            if self.sessions.exists(barejid):
                self.sessions.set_recipient_supports(barejid, supports)
            else:
                self.sessions.start(barejid, supports)

        if chat_state == ChatState.COMPOSING:
            self.display.contact_typing(barejid)
        elif chat_state == ChatState.GONE:
            self.display.recipient_gone(barejid)

        if not body:
            return
        self.display.incoming_message(jid, body, stamp)
        if config.CHLOG:
            self.chat_log.chat(barejid, body, incoming=True, stamp=stamp)

    @exceptions_logged
    def on_message_error(
        self, jid: Optional[JidStr], error_type: Optional[str], text: str
    ):
        if jid is None:
            self.display.show_error(text)
            return
        jid = JID(jid)
        if error_type in RECIPIENT_GONE_TYPES:
            if config.STATES and self.sessions.exists(jid):
                self.sessions.set_recipient_supports(jid, False)
            self.display.recipient_not_found(jid, text)
        else:
            self.display.recipient_error(jid, text)

    # outgoing

    def on_message_sent(self, recipient: JidStr, body: str) -> Optional[ChatState]:
        """
        Called right before a chat message is sent.

        :return: The chat state to attach to the message, if any.
        """
        recipient = bare_jid(recipient)
        if config.CHLOG:
            self.chat_log.chat(recipient, body, incoming=False)
        if not config.STATES:
            return None
        if not self.sessions.exists(recipient):
            self.sessions.start(recipient, True)
        if not self.sessions.get_recipient_supports(recipient):
            return None
        self.sessions.set_active(recipient)
        return ChatState.ACTIVE

    def on_typing(self, recipient: JidStr):
        if not config.STATES:
            return
        recipient = bare_jid(recipient)
        if not self.sessions.exists(recipient):
            self.sessions.start(recipient, True)
        if not self.sessions.get_recipient_supports(recipient):
            return
        self.sessions.set_composing(recipient)
        self.__notify(recipient)

    def on_idle_tick(self):
        if not config.STATES:
            return
        for recipient in self.sessions.recipients():
            self.sessions.no_activity(recipient)
            if self.sessions.get_state(recipient) in _IDLE_STATES:
                self.__notify(recipient)

    def on_chat_closed(self, recipient: JidStr):
        recipient = bare_jid(recipient)
        notify = config.STATES and self.sessions.get_recipient_supports(recipient)
        self.sessions.set_gone(recipient)
        self.sessions.end(recipient)
        if notify:
            self.transport.send_chat_state(recipient, ChatState.GONE)

    def __notify(self, recipient: JID):
        if not self.sessions.get_recipient_supports(recipient):
            return
        if self.sessions.get_sent(recipient):
            return
        state = self.sessions.get_state(recipient)
        if state is None:
            return
        self.sessions.set_sent(recipient)
        log.debug("Sending %s to %s", state.value, recipient)
        self.transport.send_chat_state(recipient, state)


log = logging.getLogger(__name__)
