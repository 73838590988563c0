from unittest.mock import create_autospec

import pytest

from parley.contact import Roster
from parley.core import config
from parley.core.chat_session import ChatSessions
from parley.core.dispatcher import EventDispatcher
from parley.core.transport import Transport
from parley.group import MucRegistry
from parley.ui import ChatLog, Display


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def roster():
    return Roster()


@pytest.fixture
def rooms():
    return MucRegistry()


@pytest.fixture
def sessions(clock):
    return ChatSessions(gone_timeout=600, clock=clock)


@pytest.fixture
def display():
    return create_autospec(Display, instance=True)


@pytest.fixture
def chat_log():
    return create_autospec(ChatLog, instance=True)


@pytest.fixture
def transport():
    return create_autospec(Transport, instance=True)


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.setattr(config, "NICK", "me", raising=False)
    monkeypatch.setattr(config, "AUTOJOIN", ())
    monkeypatch.setattr(config, "STATES", True)
    monkeypatch.setattr(config, "STATUSES_CONSOLE", "all")
    monkeypatch.setattr(config, "STATUSES_CHAT", "all")
    monkeypatch.setattr(config, "STATUSES_MUC", "all")
    monkeypatch.setattr(config, "CHLOG", True)
    monkeypatch.setattr(config, "GRLOG", True)


@pytest.fixture
def dispatcher(roster, rooms, sessions, display, chat_log, transport):
    return EventDispatcher(roster, rooms, sessions, display, chat_log, transport)
