import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Iterator, Optional

from slixmpp import JID

from ..util.types import JidStr, Subscription, bare_jid
from .contact import Contact, Resource


class Roster:
    """
    The user's contact list for the current connection, with the presence
    of every connected resource of each contact.

    Contacts are created through :meth:`add` (typically on a roster push)
    and presence updates for unknown contacts are refused. The whole store is
    emptied by :meth:`clear` when the connection is lost, and can be refilled
    from scratch afterwards.

    The store never talks to the UI: callers use the boolean results to decide
    whether something is worth showing.
    """

    def __init__(self):
        self.__contacts = dict[JID, Contact]()

    def __repr__(self):
        return f"<Roster ({len(self)} contacts)>"

    def __len__(self):
        return len(self.__contacts)

    def __contains__(self, barejid: JidStr):
        return bare_jid(barejid) in self.__contacts

    def __iter__(self) -> Iterator[Contact]:
        return iter(self.get_contact_list())

    def add(
        self,
        barejid: JidStr,
        name: Optional[str] = None,
        subscription: Subscription = "none",
        groups: Iterable[str] = (),
        pending_out=False,
    ) -> Optional[Contact]:
        """
        Add a contact.

        :return: The new contact, or ``None`` if there already is one for
            this JID, in which case nothing is changed.
        """
        jid = bare_jid(barejid)
        if jid in self.__contacts:
            log.debug("%s is already in the roster", jid)
            return None
        contact = Contact(jid, name, subscription, groups, pending_out)
        self.__contacts[jid] = contact
        log.debug("Added %r", contact)
        return contact

    def update(
        self,
        barejid: JidStr,
        name: Optional[str],
        subscription: Subscription,
        groups: Iterable[str],
        pending_out: bool,
    ) -> tuple[set[str], set[str]]:
        """
        Apply a roster push to an existing contact.

        :return: groups the contact was added to, and groups it was removed
            from. Both are empty for unknown contacts.
        """
        contact = self.get_contact(barejid)
        if contact is None:
            log.warning("Cannot update %s, not in the roster", barejid)
            return set(), set()
        new_groups = set(groups)
        added = new_groups - contact.groups
        removed = contact.groups - new_groups
        contact.name = name
        contact.subscription = subscription
        contact.groups = new_groups
        contact.pending_out = pending_out
        return added, removed

    def remove(self, barejid: JidStr) -> Optional[Contact]:
        return self.__contacts.pop(bare_jid(barejid), None)

    def get_contact(self, barejid: JidStr) -> Optional[Contact]:
        return self.__contacts.get(bare_jid(barejid))

    def get_contact_list(self) -> list[Contact]:
        """
        A new list of the (live) contacts, in no particular order. Adding or
        removing contacts does not affect a list that was already returned.
        """
        return list(self.__contacts.values())

    def update_presence(
        self,
        barejid: JidStr,
        resource: Resource,
        last_activity: Optional[datetime] = None,
    ) -> bool:
        """
        Record the presence of a contact's resource.

        :return: ``False`` if the contact is unknown, or if the resource
            already had this exact presence, status and priority.
        """
        contact = self.get_contact(barejid)
        if contact is None:
            log.warning("Presence from %s, who is not in the roster", barejid)
            return False
        if last_activity is not None and resource.last_activity != last_activity:
            resource = replace(resource, last_activity=last_activity)
        updated = contact.set_resource(resource)
        if not updated:
            log.trace("Duplicate presence for %s/%s", barejid, resource.name)  # type:ignore
        return updated

    def contact_offline(
        self, barejid: JidStr, resource: Optional[str], status: Optional[str]
    ) -> bool:
        """
        A resource of a contact went offline. Without a resource, all of the
        contact's resources are considered gone.

        :return: ``True`` if a known resource was removed.
        """
        contact = self.get_contact(barejid)
        if contact is None:
            return False
        if resource is None:
            removed = contact.clear_resources()
        else:
            removed = contact.remove_resource(resource)
        if removed and contact.most_available_resource() is None:
            contact.offline_status = status
        return removed

    def has_pending_subscriptions(self) -> bool:
        return any(c.pending_out for c in self.__contacts.values())

    def pending_subscriptions(self) -> list[Contact]:
        """
        Contacts we sent a subscription request to, that have not answered yet.
        """
        return [c for c in self.__contacts.values() if c.pending_out]

    def get_groups(self) -> list[str]:
        return sorted({g for c in self.__contacts.values() for g in c.groups})

    def get_group(self, group: str) -> list[Contact]:
        return [c for c in self.__contacts.values() if group in c.groups]

    def clear(self) -> None:
        log.debug("Clearing %s contacts", len(self.__contacts))
        self.__contacts.clear()


log = logging.getLogger(__name__)
