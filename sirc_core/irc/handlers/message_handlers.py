# sirc_core/irc/handlers/message_handlers.py
import logging
from typing import TYPE_CHECKING, Optional

from sirc_core.irc.ctcp_handler import parse_ctcp
from sirc_core.irc.irc_message import IRCMessage

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.handlers.message")


async def _handle_privmsg(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    """Handles PRIVMSG: CTCP requests, direct messages and channel messages."""
    target = parsed_msg.all_params[0]
    message_content = parsed_msg.last_param
    source_nick = parsed_msg.source_nick
    if not source_nick or not message_content:
        logger.debug(f"PRIVMSG: Missing sender or body. Raw: {raw_line.strip()}")
        return

    ctcp = parse_ctcp(message_content)
    if ctcp is not None:
        if ctcp.tag == "ACTION":
            where = "PM" if client.session.is_own_nick(target) else target
            await client.add_message(f"[{where}] * {source_nick} {ctcp.argument or ''}".rstrip(), "action")
            return
        await client.ctcp_handler.handle_request(source_nick, ctcp)
        return

    if client.session.is_own_nick(target):
        client.session.set_peer(source_nick)
        await client.add_message(f"[PM] <{source_nick}> {message_content}", "private_message")
    else:
        await client.add_message(f"[{target}] <{source_nick}> {message_content}", "channel_message")


async def _handle_notice(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    message_content = parsed_msg.last_param
    source_nick = parsed_msg.source_nick or "Server"

    ctcp = parse_ctcp(message_content)
    if ctcp is not None:
        reply_text = f"{ctcp.tag} {ctcp.argument}" if ctcp.argument else ctcp.tag
        await client.add_status_message(f"[CTCP reply] {source_nick}: {reply_text}", "ctcp")
        return

    await client.add_message(f"-{source_nick}- {message_content}", "notice")
