import json
import pytest

from redhead.client.session import ClientSession, SessionUser


@pytest.fixture
def snapshot_path(tmp_path):
    return tmp_path / "session.json"


@pytest.fixture
def session(snapshot_path):
    return ClientSession(snapshot_path)


def test_starts_signed_out(session):
    assert session.get_user() is None
    assert session.is_authenticated() is False


def test_subscribe_delivers_current_state_immediately(session):
    seen = []
    session.subscribe(seen.append)
    assert len(seen) == 1
    assert seen[0].user is None


def test_sign_in_creates_local_user_and_notifies(session):
    seen = []
    session.subscribe(seen.append)

    user = session.sign_in("alice@x.com")

    assert user.username == "alice"
    assert user.credits == 120
    assert user.id.startswith("user-")
    assert session.is_authenticated()
    # initial call, loading, signed in
    assert [state.is_loading for state in seen] == [False, True, False]
    assert seen[-1].user == user


def test_sign_up_uses_given_username(session):
    user = session.sign_up("a@x.com", "alice", "secret")
    assert user.username == "alice"
    assert session.get_user().email == "a@x.com"


def test_update_credits_notifies_synchronously(session):
    session.sign_in("a@x.com", "alice")
    credits_seen = []
    session.subscribe(lambda state: credits_seen.append(state.user.credits))

    session.update_credits(116)

    assert credits_seen == [120, 116]
    assert session.get_user().credits == 116


def test_update_credits_while_signed_out_is_ignored(session):
    seen = []
    session.subscribe(seen.append)
    session.update_credits(50)
    assert len(seen) == 1


def test_unsubscribe_stops_notifications(session):
    seen = []
    unsubscribe = session.subscribe(seen.append)
    unsubscribe()
    unsubscribe()

    session.sign_in("a@x.com")

    assert len(seen) == 1


def test_state_survives_reload(session, snapshot_path):
    session.sign_in("a@x.com", "alice")
    session.update_credits(80)

    reloaded = ClientSession(snapshot_path)

    assert reloaded.get_user() == session.get_user()
    assert json.loads(snapshot_path.read_text())["credits"] == 80


def test_sign_out_clears_snapshot(session, snapshot_path):
    session.sign_in("a@x.com")
    session.sign_out()

    assert session.get_user() is None
    assert not snapshot_path.exists()
    assert ClientSession(snapshot_path).get_user() is None


def test_corrupt_snapshot_is_ignored(snapshot_path):
    snapshot_path.write_text("{not json")
    assert ClientSession(snapshot_path).get_user() is None


def test_set_user_from_server_payload(session):
    session.set_user({"id": "abc", "username": "alice", "email": "a@x.com", "credits": 7})
    assert session.get_user() == SessionUser(id="abc", username="alice", email="a@x.com", credits=7)


def test_state_returned_is_a_copy(session):
    session.sign_in("a@x.com")
    session.state.user.credits = 0
    assert session.get_user().credits == 120
