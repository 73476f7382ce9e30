# sirc_core/irc/irc_protocol.py
import logging
from typing import TYPE_CHECKING, Optional, Dict, Callable, Awaitable

from sirc_core.exceptions import ProtocolParseError
from sirc_core.irc.irc_message import IRCMessage
from sirc_core.irc.handlers import (
    message_handlers,
    membership_handlers,
    state_change_handlers,
    protocol_flow_handlers,
    irc_numeric_handlers,
)

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.protocol")

HandlerFunction = Callable[["IRCClient_Logic", IRCMessage, str, list, Optional[str]], Awaitable[None]]


COMMAND_HANDLERS: Dict[str, HandlerFunction] = {
    "PING": protocol_flow_handlers._handle_ping,
    "PONG": protocol_flow_handlers._handle_pong,
    "ERROR": protocol_flow_handlers._handle_error,
    "PRIVMSG": message_handlers._handle_privmsg,
    "NOTICE": message_handlers._handle_notice,
    "NICK": state_change_handlers._handle_nick,
    "JOIN": membership_handlers._handle_join,
    "PART": membership_handlers._handle_part,
    "QUIT": membership_handlers._handle_quit,
    "KICK": membership_handlers._handle_kick,
}

# Minimum number of params (middle + trailing) a command needs to be usable.
MIN_PARAMS: Dict[str, int] = {
    "PING": 1,
    "PONG": 1,
    "PRIVMSG": 2,
    "NOTICE": 2,
    "NICK": 1,
    "JOIN": 1,
    "PART": 1,
    "KICK": 2,
    irc_numeric_handlers.RPL_WELCOME: 1,
}


def parse_server_line(raw_line: str) -> IRCMessage:
    """Parse and validate one inbound line. Raises ProtocolParseError."""
    parsed_msg = IRCMessage.parse(raw_line)
    required = MIN_PARAMS.get(parsed_msg.command, 0)
    if len(parsed_msg.all_params) < required:
        raise ProtocolParseError(
            f"{parsed_msg.command} needs {required} params, got {len(parsed_msg.all_params)}"
        )
    return parsed_msg


async def handle_server_message(client: "IRCClient_Logic", raw_line: str):
    """
    Parses a raw IRC line and dispatches it to the appropriate handler.

    Malformed lines are dropped and logged at DEBUG only. A failing handler is
    logged and never propagates into the read loop.
    """
    try:
        parsed_msg = parse_server_line(raw_line)
    except ProtocolParseError as e:
        logger.debug(f"Dropped line: {e}. Raw: {raw_line.strip()!r}")
        return

    command_upper = parsed_msg.command
    params = list(parsed_msg.params)
    trailing = parsed_msg.trailing

    if command_upper in COMMAND_HANDLERS:
        handler = COMMAND_HANDLERS[command_upper]
        try:
            await handler(client, parsed_msg, raw_line, params, trailing)
        except Exception as e:
            logger.error(f"Error in handler for command {command_upper}: {e}", exc_info=True)
    elif command_upper.isdigit():
        try:
            await irc_numeric_handlers._handle_numeric_command(client, parsed_msg, raw_line, params, trailing)
        except Exception as e:
            logger.error(f"Error in numeric handler for {command_upper}: {e}", exc_info=True)
    else:
        logger.debug(f"No specific handler for command: {command_upper}. Raw: {raw_line.strip()}")
        await client.add_status_message(raw_line.strip(), "raw")
