import io
from datetime import datetime

import pytest
from slixmpp import JID

from parley.contact import Resource, Roster
from parley.group import Occupant
from parley.ui import ConsoleDisplay
from parley.util.types import ResourcePresence


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def console(stream):
    return ConsoleDisplay(stream)


def lines(stream):
    return [line.split(" ", 1)[1] for line in stream.getvalue().splitlines()]


def test_contact_online(console, stream):
    contact = Roster().add("buddy@example.com", "Bud", "both")
    resource = Resource("phone", ResourcePresence.AWAY, "lunch", 0)
    console.console_contact_online(contact, resource, None)
    console.chat_contact_offline(contact, "phone", None)
    assert lines(stream) == [
        '[console] ++ Bud (phone) is away, "lunch"',
        "[buddy@example.com] -- Bud (phone) is offline",
    ]


def test_private_message_window(console, stream):
    console.incoming_message(
        JID("room@conference.example.com/alice"), "psst", private=True
    )
    console.incoming_message(JID("buddy@example.com/phone"), "hi")
    assert lines(stream) == [
        "[room@conference.example.com/alice] room@conference.example.com/alice: psst",
        "[buddy@example.com] buddy@example.com/phone: hi",
    ]


def test_history_keeps_its_timestamp(console, stream):
    console.room_history(
        JID("room@conference.example.com"), "alice", datetime(2024, 1, 1, 8, 5), "old"
    )
    assert stream.getvalue() == "08:05 [room@conference.example.com] alice: old\n"


def test_room_roster(console, stream):
    room = JID("room@conference.example.com")
    console.room_roster(room, [])
    console.room_roster(room, [Occupant("alice"), Occupant("bob")])
    assert lines(stream) == [
        "[room@conference.example.com] Room is empty",
        "[room@conference.example.com] Room occupants: alice, bob",
    ]
