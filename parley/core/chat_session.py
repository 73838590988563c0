"""
Our side of the :xep:`0085` chat state protocol, per one-to-one conversation.
"""

import logging
import time
from typing import Callable, Optional

from slixmpp import JID

from ..util.types import ChatState, JidStr, bare_jid

PAUSED_TIMEOUT = 10.0
INACTIVE_TIMEOUT = 30.0


class ChatSession:
    def __init__(self, recipient: JID, recipient_supports: bool, now: float):
        self.recipient = recipient
        self.recipient_supports = recipient_supports
        self.state = ChatState.ACTIVE
        self.last_activity = now
        # whether a notification for the current state has been sent already
        self.sent = False

    def __repr__(self):
        return f"<ChatSession with {self.recipient}: {self.state.value}>"

    def move_to(self, state: ChatState):
        if self.state != state:
            self.sent = False
        self.state = state


class ChatSessions:
    """
    All ongoing chat sessions, at most one per recipient bare JID.

    Idle decay is driven from the outside by calling :meth:`no_activity`
    periodically; it only depends on the time elapsed since the last
    explicit state change, so calling it more often changes nothing.

    Every query about a recipient without a session answers ``False``,
    and every mutation except :meth:`start` is a no-op for them.
    """

    def __init__(
        self,
        gone_timeout: Optional[float] = 600.0,
        paused_timeout: float = PAUSED_TIMEOUT,
        inactive_timeout: float = INACTIVE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        :param gone_timeout: seconds of inactivity before switching to
            ``gone``. ``None`` or ``0`` means never.
        :param paused_timeout: seconds of inactivity before ``paused``
        :param inactive_timeout: seconds of inactivity before ``inactive``
        :param clock: returns the current time in seconds
        """
        self.gone_timeout = gone_timeout or None
        self.paused_timeout = paused_timeout
        self.inactive_timeout = inactive_timeout
        self.clock = clock
        self.__sessions = dict[JID, ChatSession]()

    def __len__(self):
        return len(self.__sessions)

    def __get(self, recipient: JidStr) -> Optional[ChatSession]:
        return self.__sessions.get(bare_jid(recipient))

    def start(self, recipient: JidStr, recipient_supports: bool) -> None:
        jid = bare_jid(recipient)
        if jid in self.__sessions:
            log.trace("Session with %s already exists", jid)  # type:ignore
            return
        self.__sessions[jid] = ChatSession(jid, recipient_supports, self.clock())
        log.debug("Started chat session with %s", jid)

    def exists(self, recipient: JidStr) -> bool:
        return self.__get(recipient) is not None

    def end(self, recipient: JidStr) -> None:
        if self.__sessions.pop(bare_jid(recipient), None) is not None:
            log.debug("Ended chat session with %s", recipient)

    def recipients(self) -> list[JID]:
        """
        A copy of the recipients with a session, safe to iterate over while
        sessions are started or ended.
        """
        return list(self.__sessions)

    def get_recipient_supports(self, recipient: JidStr) -> bool:
        session = self.__get(recipient)
        return session is not None and session.recipient_supports

    def set_recipient_supports(self, recipient: JidStr, supports: bool) -> None:
        if session := self.__get(recipient):
            session.recipient_supports = supports

    def get_state(self, recipient: JidStr) -> Optional[ChatState]:
        session = self.__get(recipient)
        return None if session is None else session.state

    def set_composing(self, recipient: JidStr) -> None:
        if session := self.__get(recipient):
            session.move_to(ChatState.COMPOSING)
            session.last_activity = self.clock()

    def set_active(self, recipient: JidStr) -> None:
        if session := self.__get(recipient):
            session.state = ChatState.ACTIVE
            session.last_activity = self.clock()
            # the active state is carried by the outgoing message itself
            session.sent = True

    def set_gone(self, recipient: JidStr) -> None:
        if session := self.__get(recipient):
            session.move_to(ChatState.GONE)

    def no_activity(self, recipient: JidStr) -> None:
        session = self.__get(recipient)
        if session is None:
            return
        target = self.__decayed_state(self.clock() - session.last_activity)
        if target is None or target.decay_rank <= session.state.decay_rank:
            return
        log.debug("%s: %s -> %s", session.recipient, session.state, target)
        session.move_to(target)

    def __decayed_state(self, elapsed: float) -> Optional[ChatState]:
        if self.gone_timeout is not None and elapsed >= self.gone_timeout:
            return ChatState.GONE
        if elapsed >= self.inactive_timeout:
            return ChatState.INACTIVE
        if elapsed >= self.paused_timeout:
            return ChatState.PAUSED
        return None

    def is_inactive(self, recipient: JidStr) -> bool:
        return self.get_state(recipient) == ChatState.INACTIVE

    def is_paused(self, recipient: JidStr) -> bool:
        return self.get_state(recipient) == ChatState.PAUSED

    def is_gone(self, recipient: JidStr) -> bool:
        return self.get_state(recipient) == ChatState.GONE

    def set_sent(self, recipient: JidStr) -> None:
        if session := self.__get(recipient):
            session.sent = True

    def get_sent(self, recipient: JidStr) -> bool:
        session = self.__get(recipient)
        return session is not None and session.sent

    def clear(self) -> None:
        log.debug("Clearing %s chat sessions", len(self.__sessions))
        self.__sessions.clear()


log = logging.getLogger(__name__)
