import logging
from datetime import datetime
from typing import Iterable, Optional

from slixmpp import JID

from ...contact import Resource
from ...util.types import (
    JidStr,
    ResourcePresence,
    StatusFilter,
    Subscription,
    SubscriptionEvent,
    bare_jid,
)
from .. import config
from .util import DispatcherMixin, exceptions_logged


class PresenceHandlerMixin(DispatcherMixin):
    @exceptions_logged
    def on_contact_online(
        self,
        barejid: JidStr,
        resource: Resource,
        last_activity: Optional[datetime] = None,
    ):
        jid = bare_jid(barejid)
        if not self.roster.update_presence(jid, resource, last_activity):
            return
        contact = self.roster.get_contact(jid)
        if contact is None or contact.subscription == "none":
            return
        resource = contact.get_resource(resource.name) or resource
        online = resource.presence == ResourcePresence.ONLINE
        if _show_online(config.STATUSES_CONSOLE, online):
            self.display.console_contact_online(contact, resource, last_activity)
        if _show_online(config.STATUSES_CHAT, online):
            self.display.chat_contact_online(contact, resource, last_activity)

    @exceptions_logged
    def on_contact_offline(
        self, barejid: JidStr, resource: Optional[str], status: Optional[str]
    ):
        jid = bare_jid(barejid)
        updated = self.roster.contact_offline(jid, resource, status)
        if resource is None or not updated:
            return
        contact = self.roster.get_contact(jid)
        if contact is None or contact.subscription == "none":
            return
        if config.STATUSES_CONSOLE != "none":
            self.display.console_contact_offline(contact, resource, status)
        if config.STATUSES_CHAT != "none":
            self.display.chat_contact_offline(contact, resource, status)

    @exceptions_logged
    def on_subscription(self, barejid: JidStr, kind: SubscriptionEvent):
        jid = bare_jid(barejid)
        if kind in ("subscribed", "unsubscribed"):
            if contact := self.roster.get_contact(jid):
                contact.pending_out = False
        if kind == "unsubscribe":
            log.debug("%s unsubscribed from our presence", jid)
            return
        log.info("Subscription event from %s: %s", jid, kind)
        self.display.subscription(jid, kind)

    @exceptions_logged
    def on_presence_error(
        self, jid: Optional[JidStr], error_type: Optional[str], text: str
    ):
        log.debug("Presence error (%s) from %s: %s", error_type, jid, text)
        if jid is None:
            self.display.show_error(text)
        else:
            self.display.recipient_error(JID(jid), text)

    @exceptions_logged
    def on_roster_update(
        self,
        barejid: JidStr,
        name: Optional[str],
        subscription: Subscription,
        groups: Iterable[str] = (),
        pending_out=False,
    ):
        jid = bare_jid(barejid)
        name = name or None
        if jid not in self.roster:
            self.roster.add(jid, name, subscription, groups, pending_out)
            self.display.roster_add(jid, name)
            return
        added, removed = self.roster.update(
            jid, name, subscription, groups, pending_out
        )
        for group in sorted(added):
            self.display.group_added(jid, group)
        for group in sorted(removed):
            self.display.group_removed(jid, group)

    @exceptions_logged
    def on_roster_remove(self, barejid: JidStr):
        jid = bare_jid(barejid)
        if self.roster.remove(jid) is None:
            log.debug("Roster removal of unknown contact %s", jid)
            return
        self.display.roster_remove(jid)


def _show_online(pref: StatusFilter, presence_is_online: bool) -> bool:
    if pref == "all":
        return True
    return pref == "online" and presence_is_online


log = logging.getLogger(__name__)
