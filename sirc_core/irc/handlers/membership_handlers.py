# sirc_core/irc/handlers/membership_handlers.py
import logging
from typing import TYPE_CHECKING, Optional

from sirc_core.irc.irc_message import IRCMessage

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.handlers.membership")


async def _handle_join(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    channel = parsed_msg.all_params[0]
    nick = parsed_msg.source_nick or "?"
    if client.session.is_own_nick(nick):
        await client.add_status_message(f"Joined {channel}")
        return
    await client.add_message(f"[{channel}] {nick} has joined", "join_part")


async def _handle_part(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    channel = parsed_msg.params[0] if parsed_msg.params else parsed_msg.all_params[0]
    nick = parsed_msg.source_nick or "?"
    reason = f" ({trailing})" if trailing and parsed_msg.params else ""
    if client.session.is_own_nick(nick):
        await client.add_status_message(f"Left {channel}")
        return
    await client.add_message(f"[{channel}] {nick} has left{reason}", "join_part")


async def _handle_quit(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    nick = parsed_msg.source_nick or "?"
    reason = f" ({trailing})" if trailing else ""
    await client.add_message(f"{nick} has quit{reason}", "join_part")


async def _handle_kick(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    channel, kicked = parsed_msg.all_params[0], parsed_msg.all_params[1]
    kicker = parsed_msg.source_nick or "?"
    reason = f" ({trailing})" if trailing and len(parsed_msg.params) >= 2 else ""
    session = client.session
    if session.is_own_nick(kicked):
        current = session.current_channel
        if current and current.lower() == channel.lower():
            session.clear_channel()
        session.forget_autojoin_channel(channel)
        await client.add_status_message(f"You were kicked from {channel} by {kicker}{reason}", "error")
        return
    await client.add_message(f"[{channel}] {kicked} was kicked by {kicker}{reason}", "join_part")
