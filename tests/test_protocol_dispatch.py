import pytest

from conftest import connect_and_register, make_client, wait_for
from sirc_core.irc.irc_protocol import handle_server_message
from sirc_core.state_manager import ConnectionState


@pytest.mark.asyncio
async def test_ping_is_answered_with_matching_pong():
    client, network, view = make_client()
    await client.network_handler.establish_connection()
    transport = network.current

    await handle_server_message(client, "PING :abc123")
    await handle_server_message(client, "PING xyz")

    assert "PONG :abc123" in transport.sent
    assert "PONG :xyz" in transport.sent
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_malformed_privmsg_is_dropped_without_side_effects():
    client, network, view = make_client(channel="#chan")
    await client.network_handler.establish_connection()
    before = client.session.snapshot()
    shown = len(view.lines)

    await handle_server_message(client, ":bob!b@h PRIVMSG alice")
    await handle_server_message(client, "")

    assert client.session.snapshot() == before
    assert len(view.lines) == shown
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_private_message_sets_peer_and_is_shown():
    client, network, view = make_client(channel="#chan")
    await client.network_handler.establish_connection()

    await handle_server_message(client, ":bob!b@h PRIVMSG alice :hey there")

    assert client.session.current_peer == "bob"
    assert client.session.current_channel is None
    assert ("private_message", "[PM] <bob> hey there") in view.lines
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_channel_message_and_action_are_shown():
    client, network, view = make_client(channel="#chan")
    await client.network_handler.establish_connection()
    network.current.sent.clear()

    await handle_server_message(client, ":bob!b@h PRIVMSG #chan :hello all")
    await handle_server_message(client, ":bob!b@h PRIVMSG #chan :\x01ACTION waves\x01")

    assert ("channel_message", "[#chan] <bob> hello all") in view.lines
    assert ("action", "[#chan] * bob waves") in view.lines
    assert network.current.sent == []
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_notice_and_ctcp_reply_are_shown():
    client, network, view = make_client()
    await client.network_handler.establish_connection()

    await handle_server_message(client, ":NickServ!s@services NOTICE alice :Please identify")
    await handle_server_message(client, ":bob!b@h NOTICE alice :\x01VERSION irssi 1.4\x01")

    assert ("notice", "-NickServ- Please identify") in view.lines
    assert ("ctcp", "[CTCP reply] bob: VERSION irssi 1.4") in view.lines
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_nick_change_of_own_nick_and_of_peer():
    client, network, view = make_client()
    await client.network_handler.establish_connection()
    client.session.set_peer("bob")

    await handle_server_message(client, ":alice!a@h NICK :alicia")
    await handle_server_message(client, ":bob!b@h NICK robert")

    assert client.session.nick == "alicia"
    assert client.session.current_peer == "robert"
    assert view.contains("You are now known as alicia")
    assert view.contains("bob is now known as robert")
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_kick_from_current_channel_clears_it():
    client, network, view = make_client(channel="#chan")
    await client.network_handler.establish_connection()

    await handle_server_message(client, ":op!o@h KICK #chan alice :behave")

    assert client.session.current_channel is None
    assert view.contains("You were kicked from #chan by op (behave)")
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_server_error_and_unknown_command():
    client, network, view = make_client()
    await client.network_handler.establish_connection()

    await handle_server_message(client, "ERROR :Closing Link: too many")
    await handle_server_message(client, ":irc.test WALLOPS :maintenance soon")

    assert client.session.connection_state is ConnectionState.ERROR
    assert view.contains("Server ERROR: Closing Link: too many")
    assert ("raw", ":irc.test WALLOPS :maintenance soon") in view.lines
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_away_numerics_track_away_flag_and_generic_numerics_are_shown():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    transport.feed(":irc.test 306 alice :You have been marked as being away")
    await wait_for(lambda: client.session.away)
    transport.feed(":irc.test 305 alice :You are no longer marked as being away")
    await wait_for(lambda: not client.session.away)
    transport.feed(":irc.test 372 alice :- message of the day")
    await wait_for(lambda: view.contains("- message of the day"))
    await client.network_handler.stop()
