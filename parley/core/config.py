from pathlib import Path
from typing import Optional

from slixmpp import JID as JIDType

# REQUIRED, so not default value

JID: JIDType
JID__DOC = "The account's JID, eg user@example.com"
JID__SHORT = "j"

PASSWORD: str
PASSWORD__DOC = (
    "The account's password. Prefer the PARLEY_PASSWORD environment variable "
    "or a config file over the command line."
)

# Dynamic default (depends on other values)

NICK: str
NICK__DOC = "Nickname used when joining rooms. Defaults to the local part of the JID."
NICK__DYNAMIC_DEFAULT = True

# Optional, so default value + type hint if default is None

AUTOJOIN: tuple[JIDType, ...] = ()
AUTOJOIN__DOC = "Rooms to join automatically after logging in"

STATES = True
STATES__DOC = "Send and track chat state notifications (typing, paused, gone...)"

GONE_TIMEOUT = 10
GONE_TIMEOUT__DOC = (
    "Minutes without activity in a chat after which a 'gone' chat state is "
    "sent. 0 disables it."
)

STATUSES_CONSOLE: str = "all"
STATUSES_CONSOLE__DOC = (
    "Which contact presence changes are shown in the console: 'all', "
    "'online' (only contacts becoming available, and going offline) or 'none'."
)
STATUSES_CONSOLE__CHOICES = ("all", "online", "none")

STATUSES_CHAT: str = "all"
STATUSES_CHAT__DOC = (
    "Which contact presence changes are shown in chat windows: 'all', 'online' or 'none'."
)
STATUSES_CHAT__CHOICES = ("all", "online", "none")

STATUSES_MUC: str = "all"
STATUSES_MUC__DOC = (
    "Which room occupant presence changes are shown: 'all', 'online' "
    "(only joins, leaves and nick changes) or 'none'."
)
STATUSES_MUC__CHOICES = ("all", "online", "none")

CHLOG = True
CHLOG__DOC = "Log one-to-one chats"

GRLOG = True
GRLOG__DOC = "Log room messages"

LOG_FILE: Optional[Path] = None
LOG_FILE__DOC = "Log to a file instead of stderr"

LOG_FORMAT: str = "%(asctime)s:%(levelname)s:%(name)s:%(message)s"
LOG_FORMAT__DOC = (
    "Optionally, a format string for logging messages. Refer to "
    "https://docs.python.org/3/library/logging.html#logrecord-attributes "
    "for available options."
)
