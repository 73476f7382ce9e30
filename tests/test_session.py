import threading

from sirc_core.config_defs import ServerConfig
from sirc_core.state_manager import ConnectionState, Session


def make_session(channel=None):
    return Session(ServerConfig("irc.test", 6667, "alice", "Alice", channel))


def test_realname_defaults_to_nick():
    assert ServerConfig("irc.test", 6667, "alice").realname == "alice"


def test_channel_and_peer_are_exclusive():
    session = make_session("#chan")
    assert session.active_target == "#chan"

    session.set_peer("bob")
    assert session.current_channel is None
    assert session.active_target == "bob"

    session.set_channel("#other")
    assert session.current_peer is None
    assert session.active_target == "#other"

    assert session.clear_channel() == "#other"
    assert session.active_target is None


def test_own_nick_is_case_insensitive():
    session = make_session()
    assert session.is_own_nick("ALICE")
    assert not session.is_own_nick("bob")
    assert not session.is_own_nick(None)


def test_epoch_lifecycle():
    session = make_session()
    assert session.connection_state is ConnectionState.DISCONNECTED
    assert not session.is_current_epoch(0)

    epoch = session.begin_epoch()
    assert epoch == 1
    assert session.is_current_epoch(1)
    assert session.connection_state is ConnectionState.CONNECTED

    assert session.mark_registered(1)
    assert not session.mark_registered(1)
    assert session.connection_state is ConnectionState.REGISTERED

    assert session.end_epoch(1, "read failed")
    assert not session.end_epoch(1)
    assert not session.registered
    assert session.connection_state is ConnectionState.ERROR
    assert session.last_error == "read failed"

    assert session.begin_epoch() == 2
    assert not session.is_current_epoch(1)
    assert not session.end_epoch(1)
    assert not session.mark_registered(1)


def test_begin_epoch_resets_per_connection_flags():
    session = make_session()
    session.begin_epoch()
    session.mark_registered(1)
    session.set_away(True)
    session.record_keepalive()
    session.end_epoch(1)

    session.begin_epoch()
    snap = session.snapshot()
    assert not snap.registered
    assert not snap.away
    assert snap.last_keepalive_at is None
    assert session.keepalive_age() is None


def test_concurrent_target_changes_never_leave_both_set():
    session = make_session("#chan")
    seen_both = []

    def flip(n):
        for i in range(2000):
            if (i + n) % 2:
                session.set_peer("bob")
            else:
                session.set_channel("#chan")
            snap = session.snapshot()
            if snap.current_peer and snap.current_channel:
                seen_both.append(snap)

    threads = [threading.Thread(target=flip, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert not seen_both


def test_auto_join_channel_is_independent_of_send_target():
    session = make_session("#chan")
    assert session.autojoin_channel == "#chan"

    session.set_peer("bob")
    session.set_channel("#elsewhere")
    assert session.autojoin_channel == "#chan"

    assert not session.forget_autojoin_channel("#elsewhere")
    assert session.forget_autojoin_channel("#CHAN")
    assert session.autojoin_channel is None
