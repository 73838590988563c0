"""
Everything related to the user's contact list and the presence of contacts.
"""

from .contact import Contact, Resource
from .roster import Roster

__all__ = ("Contact", "Resource", "Roster")
