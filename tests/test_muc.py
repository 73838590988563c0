import pytest
from slixmpp import JID

from parley.group import MucRegistry, Occupant
from parley.util import InvalidNick

ROOM = "room@conference.example.com"


@pytest.fixture
def joined(rooms):
    rooms.join_room(ROOM, "me")
    return rooms


def test_join(rooms):
    room = rooms.join_room("room@conference.example.com/whatever", "me", "secret")
    assert room.jid == JID(ROOM)
    assert rooms.is_active(ROOM)
    assert rooms.get_nick(ROOM) == "me"
    assert rooms.get_password(ROOM) == "secret"
    assert not rooms.is_autojoin(ROOM)
    assert rooms.get_active_rooms() == [JID(ROOM)]
    assert rooms.get_room(ROOM) is room


def test_join_requires_a_nick(rooms):
    with pytest.raises(InvalidNick):
        rooms.join_room(ROOM, "  ")
    assert not rooms.is_active(ROOM)


def test_leave_keeps_the_room(joined):
    joined.add_to_roster(ROOM, "alice", "online")
    joined.leave_room(ROOM)
    assert not joined.is_active(ROOM)
    assert joined.get_roster(ROOM) == []
    assert joined.get_nick(ROOM) == "me"
    assert joined.get_active_rooms() == []


def test_unknown_room(rooms):
    assert not rooms.is_active(ROOM)
    assert rooms.get_nick(ROOM) is None
    assert rooms.get_roster(ROOM) == []
    assert not rooms.add_to_roster(ROOM, "alice")
    assert not rooms.get_roster_received(ROOM)
    assert rooms.complete_roster_nick_change(ROOM, "bob") is None
    assert rooms.get_pending_broadcasts(ROOM) == []
    rooms.remove_from_roster(ROOM, "alice")
    rooms.leave_room(ROOM)


def test_rejoin_resets_transient_state(joined):
    joined.add_to_roster(ROOM, "alice", "online")
    joined.set_roster_received(ROOM)
    joined.set_subject(ROOM, "topic")
    joined.set_pending_nick_change(ROOM, "me2")
    joined.add_pending_broadcast(ROOM, "hello")
    joined.leave_room(ROOM)

    joined.join_room(ROOM, "me", autojoin=True)
    assert joined.is_active(ROOM)
    assert joined.is_autojoin(ROOM)
    assert joined.get_roster(ROOM) == []
    assert not joined.get_roster_received(ROOM)
    assert joined.get_subject(ROOM) is None
    assert not joined.is_pending_nick_change(ROOM)
    assert joined.get_pending_broadcasts(ROOM) == []


def test_rejoin_keeps_password_and_autojoin(rooms):
    rooms.join_room(ROOM, "me", "secret", autojoin=True)
    rooms.join_room(ROOM, "me2")
    assert rooms.get_password(ROOM) == "secret"
    assert rooms.is_autojoin(ROOM)
    assert rooms.get_nick(ROOM) == "me2"
    rooms.join_room(ROOM, "me2", "other")
    assert rooms.get_password(ROOM) == "other"


def test_roster(joined):
    assert joined.add_to_roster(ROOM, "bob", "away", "brb")
    assert joined.add_to_roster(ROOM, "alice")
    assert not joined.add_to_roster(ROOM, "bob", "away", "brb")
    assert joined.add_to_roster(ROOM, "bob", "online", None)
    assert joined.get_roster(ROOM) == [
        Occupant("alice"),
        Occupant("bob", "online", None),
    ]
    assert joined.nick_in_roster(ROOM, "alice")
    joined.remove_from_roster(ROOM, "alice")
    assert not joined.nick_in_roster(ROOM, "alice")


def test_roster_is_a_snapshot(joined):
    joined.add_to_roster(ROOM, "alice")
    occupants = joined.get_roster(ROOM)
    joined.add_to_roster(ROOM, "bob")
    assert len(occupants) == 1


def test_roster_of_inactive_room(joined):
    joined.leave_room(ROOM)
    assert not joined.add_to_roster(ROOM, "alice")
    assert joined.get_roster(ROOM) == []


def test_own_nick_change(joined):
    joined.add_to_roster(ROOM, "me", "dnd", "busy")
    joined.set_pending_nick_change(ROOM, "me2")
    assert joined.is_pending_nick_change(ROOM)
    assert joined.get_old_nick(ROOM, "me2") == "me"

    joined.complete_nick_change(ROOM, "me2")
    assert joined.get_nick(ROOM) == "me2"
    assert not joined.is_pending_nick_change(ROOM)
    assert not joined.nick_in_roster(ROOM, "me")
    assert joined.get_occupant(ROOM, "me2") == Occupant("me2", "dnd", "busy")


def test_pending_nick_change_is_replaced(joined):
    joined.set_pending_nick_change(ROOM, "first")
    joined.set_pending_nick_change(ROOM, "second")
    assert joined.get_old_nick(ROOM, "first") is None
    assert joined.get_old_nick(ROOM, "second") == "me"


def test_unrequested_nick_change(joined):
    joined.add_to_roster(ROOM, "me", "away", "lunch")
    joined.complete_nick_change(ROOM, "server-picked")
    assert joined.get_nick(ROOM) == "server-picked"
    assert not joined.nick_in_roster(ROOM, "me")
    assert joined.get_occupant(ROOM, "server-picked") == Occupant(
        "server-picked", "away", "lunch"
    )


def test_requested_nick_rewritten(joined):
    joined.add_to_roster(ROOM, "me", "dnd", "busy")
    joined.set_pending_nick_change(ROOM, "me2")
    joined.complete_nick_change(ROOM, "me3", "dnd", "busy")
    assert joined.get_nick(ROOM) == "me3"
    assert not joined.is_pending_nick_change(ROOM)
    assert joined.get_roster(ROOM) == [Occupant("me3", "dnd", "busy")]


def test_nick_change_with_new_presence(joined):
    joined.add_to_roster(ROOM, "me", "dnd", "busy")
    joined.set_pending_nick_change(ROOM, "me2")
    joined.complete_nick_change(ROOM, "me2", "online", None)
    assert joined.get_roster(ROOM) == [Occupant("me2", "online", None)]


def test_roster_nick_change(joined):
    joined.add_to_roster(ROOM, "alice", "away", "lunch")
    joined.set_roster_pending_nick_change(ROOM, "alicia", "alice")
    assert joined.get_old_nick(ROOM, "alicia") == "alice"
    # the old nick stays until the new presence arrives
    assert joined.nick_in_roster(ROOM, "alice")

    assert joined.complete_roster_nick_change(ROOM, "alicia") == "alice"
    assert not joined.nick_in_roster(ROOM, "alice")
    assert joined.complete_roster_nick_change(ROOM, "alicia") is None


def test_unannounced_nick(joined):
    assert joined.complete_roster_nick_change(ROOM, "carol") is None


def test_invites(rooms):
    assert rooms.add_invite("b@conference.example.com")
    assert rooms.add_invite("a@conference.example.com")
    assert not rooms.add_invite("b@conference.example.com/nick")
    assert rooms.invite_count() == 2
    assert rooms.get_invites() == [
        JID("b@conference.example.com"),
        JID("a@conference.example.com"),
    ]
    assert rooms.invites_include("a@conference.example.com")

    rooms.remove_invite("b@conference.example.com")
    assert rooms.get_invites() == [JID("a@conference.example.com")]
    rooms.remove_invite("nope@conference.example.com")

    rooms.clear_invites()
    assert rooms.invite_count() == 0


def test_invite_to_active_room(joined):
    assert not joined.add_invite(ROOM)
    assert joined.invite_count() == 0


def test_get_invites_is_a_snapshot(rooms):
    rooms.add_invite(ROOM)
    invites = rooms.get_invites()
    rooms.clear_invites()
    assert invites == [JID(ROOM)]


def test_pending_broadcasts(joined):
    joined.add_pending_broadcast(ROOM, "one")
    joined.add_pending_broadcast(ROOM, "two")
    assert joined.get_pending_broadcasts(ROOM) == ["one", "two"]
    assert joined.get_pending_broadcasts(ROOM) == []


def test_subject(joined):
    joined.set_subject(ROOM, "topic")
    assert joined.get_subject(ROOM) == "topic"
    joined.set_subject(ROOM, "")
    assert joined.get_subject(ROOM) is None


def test_requires_config(joined):
    joined.set_requires_config(ROOM, True)
    assert joined.requires_config(ROOM)
    joined.leave_room(ROOM)
    assert not joined.requires_config(ROOM)


def test_close():
    rooms = MucRegistry()
    rooms.join_room(ROOM, "me")
    rooms.add_invite("other@conference.example.com")
    rooms.close()
    assert rooms.get_room(ROOM) is None
    assert rooms.get_invites() == []
