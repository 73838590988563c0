"""
The display and chat log collaborators of the event dispatcher.
"""

from .chatlog import ChatLog, LoggingChatLog
from .console import ConsoleDisplay
from .display import Display

__all__ = ("ChatLog", "ConsoleDisplay", "Display", "LoggingChatLog")
