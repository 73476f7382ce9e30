# sirc_core/irc/handlers/protocol_flow_handlers.py
import logging
from typing import TYPE_CHECKING, Optional

from sirc_core.irc.irc_message import IRCMessage
from sirc_core.state_manager import ConnectionState

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.handlers.protocol_flow")


async def _handle_ping(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    """Answers a server PING with a PONG carrying the same argument."""
    challenge = parsed_msg.last_param
    await client.network_handler.send_raw(f"PONG :{challenge}")
    logger.debug(f"Responded to PING {challenge} with PONG.")


async def _handle_pong(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    """Swallows the echo of our own keepalive PING; other PONGs are only logged."""
    pong_message = parsed_msg.last_param
    if client.keepalive_monitor.is_keepalive_echo(pong_message):
        client.session.record_keepalive()
        logger.debug(f"Keepalive echo received from {parsed_msg.prefix}.")
        return
    logger.debug(f"Received PONG from {parsed_msg.prefix} with message: {pong_message}")


async def _handle_error(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    """Server ERROR usually precedes the server closing the connection."""
    error_reason = trailing or (params[0] if params else "Unknown error")
    logger.error(f"Received ERROR from server: {error_reason}")
    client.session.set_connection_state(ConnectionState.ERROR, error_reason)
    await client.add_status_message(f"Server ERROR: {error_reason}", "error")
