"""
Everything related to multi-user chats.
"""

from .occupant import Occupant
from .registry import MucRegistry
from .room import Room

__all__ = ("MucRegistry", "Occupant", "Room")
