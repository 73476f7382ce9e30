import pytest

from conftest import connect_and_register, make_client, wait_for


async def run(client, *lines):
    for line in lines:
        await client.command_handler.process_user_input(line)


@pytest.mark.asyncio
async def test_join_then_free_text_goes_to_channel():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    await run(client, "/join #chan", "hello")

    assert "JOIN #chan" in transport.sent
    assert transport.sent[-1] == "PRIVMSG #chan :hello"
    assert ("my_message", "[#chan] <alice> hello") in view.lines
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_join_adds_channel_prefix():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    await run(client, "/j python")

    assert "JOIN #python" in transport.sent
    assert client.session.current_channel == "#python"
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_join_before_registration_waits_for_welcome():
    client, network, view = make_client()
    await client.network_handler.establish_connection()
    transport = network.current

    await run(client, "/join #later")
    assert "JOIN #later" not in transport.sent

    transport.feed(":irc.test 001 alice :Welcome")
    await wait_for(lambda: client.session.registered)
    assert transport.sent.count("JOIN #later") == 1
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_query_then_free_text_goes_to_peer():
    client, network, view = make_client(channel="#chan")
    transport = await connect_and_register(client, network)

    await run(client, "/query bob", "hi")

    assert transport.sent[-1] == "PRIVMSG bob :hi"
    assert client.session.current_channel is None
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_msg_does_not_change_target():
    client, network, view = make_client(channel="#chan")
    transport = await connect_and_register(client, network)

    await run(client, "/msg carol psst, over here")

    assert transport.sent[-1] == "PRIVMSG carol :psst, over here"
    assert client.session.active_target == "#chan"
    await client.network_handler.stop()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "line, usage",
    [
        ("/join", "Usage: /join <channel>"),
        ("/msg bob", "Usage: /msg <target> <message>"),
        ("/query", "Usage: /query <nick> [message]"),
        ("/whois", "Usage: /whois <nick>"),
        ("/nick", "Usage: /nick <newnickname>"),
        ("/raw", "Usage: /raw <raw IRC command>"),
        ("/me", "Usage: /me <action text>"),
    ],
)
async def test_usage_errors_send_nothing(line, usage):
    client, network, view = make_client(channel="#chan")
    transport = await connect_and_register(client, network)
    sent = list(transport.sent)

    await run(client, line)

    assert transport.sent == sent
    assert ("error", usage) in view.lines
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_unknown_command_is_reported():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)
    sent = list(transport.sent)

    await run(client, "/frobnicate now")

    assert transport.sent == sent
    assert view.contains("Unknown command: /frobnicate. Type /help")
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_free_text_without_target():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)
    sent = list(transport.sent)

    await run(client, "anyone there?", "   ")

    assert transport.sent == sent
    assert view.texts().count("No active target.") == 1
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_network_commands_need_a_connection():
    client, network, view = make_client(channel="#chan")

    await run(client, "/whois bob", "hello", "/raw VERSION")

    assert view.texts().count("Not connected.") == 3
    assert network.attempts == 0


@pytest.mark.asyncio
async def test_status_is_local_only():
    client, network, view = make_client(channel="#chan")
    transport = await connect_and_register(client, network)
    sent = list(transport.sent)

    await run(client, "/status")

    assert transport.sent == sent
    assert view.contains("State: registered (connected: yes, registered: yes)")
    assert view.contains("Target: #chan")
    assert view.contains("Last keepalive: never")
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_raw_is_sent_verbatim_without_line_breaks():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    await run(client, "/raw MODE alice +i")
    await client.command_handler.process_user_command("/raw PRIVMSG #a :x\r\nQUIT :injected")

    assert "MODE alice +i" in transport.sent
    assert "PRIVMSG #a :xQUIT :injected" in transport.sent
    assert all("\r" not in line and "\n" not in line for line in transport.sent)
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_nick_whois_away_back_version():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    await run(client, "/nick alicia", "/whois bob", "/away", "/away brb", "/back", "/version")

    assert transport.sent[-6:] == ["NICK alicia", "WHOIS bob", "AWAY :Away", "AWAY :brb", "AWAY", "VERSION"]
    assert client.session.nick == "alicia"
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_me_and_part():
    client, network, view = make_client(channel="#chan")
    transport = await connect_and_register(client, network)

    await run(client, "/me waves", "/part see you")

    assert transport.sent[-2:] == ["PRIVMSG #chan :\x01ACTION waves\x01", "PART #chan :see you"]
    assert ("action", "[#chan] * alice waves") in view.lines
    assert client.session.current_channel is None

    await run(client, "/part")
    assert view.contains("Not in a channel.")
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_quit_sends_quit_and_stops():
    client, network, view = make_client(channel="#chan")
    transport = await connect_and_register(client, network)

    await run(client, "/quit see ya")

    assert transport.sent[-1] == "QUIT :see ya"
    assert transport.closed
    assert client.should_quit.is_set()
    assert client.session.user_initiated_shutdown
    assert not client.session.connected
    assert view.contains("Client stopped.")
    assert not client.reconnection_supervisor.pending


@pytest.mark.asyncio
async def test_help_lists_commands_and_shows_usage():
    client, network, view = make_client()

    await run(client, "/help", "/help join", "/h q")

    listing = next(text for text in view.texts() if text.startswith("Commands: "))
    for name in ("/join", "/part", "/msg", "/query", "/whois", "/nick", "/raw", "/away", "/back", "/status", "/quit"):
        assert name in listing
    assert view.contains("Usage: /join <channel>")
    assert view.contains("Usage: /query <nick> [message]")


@pytest.mark.asyncio
async def test_rejected_nick_change_is_rolled_back():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    await run(client, "/nick bob")
    assert client.session.nick == "bob"
    transport.feed(":irc.test 433 alice bob :Nickname is already in use")
    await wait_for(lambda: client.session.nick == "alice")
    assert view.contains("Nick bob is already in use. You are still alice.")

    transport.feed(":carol!c@h PRIVMSG alice :hi")
    await wait_for(lambda: client.session.current_peer == "carol")
    assert ("private_message", "[PM] <carol> hi") in view.lines
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_server_echo_of_own_nick_change():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    await run(client, "/nick bob")
    transport.feed(":alice!a@h NICK :bob")
    await wait_for(lambda: view.contains("You are now known as bob"))

    assert client.session.nick == "bob"
    assert not view.contains("alice is now known as bob")
    assert client.registration_handler.nick_before_change is None
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_raw_keeps_trailing_spaces():
    client, network, view = make_client()
    transport = await connect_and_register(client, network)

    await run(client, "/raw PRIVMSG #a :padded   ")

    assert transport.sent[-1] == "PRIVMSG #a :padded   "
    await client.network_handler.stop()


@pytest.mark.asyncio
async def test_join_part_and_kick_drive_auto_join_channel():
    client, network, view = make_client(channel="#start")
    transport = await connect_and_register(client, network)

    await run(client, "/join #next", "/query bob")
    assert client.session.autojoin_channel == "#next"

    await run(client, "/join #next", "/part")
    assert client.session.autojoin_channel is None

    await run(client, "/join #other")
    transport.feed(":op!o@h KICK #other alice :out")
    await wait_for(lambda: client.session.autojoin_channel is None)
    await client.network_handler.stop()
