# sirc_core/commands/server/raw_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.exceptions import UserInputError

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.server.raw")

COMMAND_DEFINITIONS = [
    {
        "name": "raw",
        "handler": "handle_raw_command",
        "help": {
            "usage": "/raw <raw IRC command>",
            "description": "Sends a line to the server as typed.",
            "aliases": ["quote"]
        }
    }
]


async def handle_raw_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /raw command."""
    if not args_str.strip():
        raise UserInputError("/raw <raw IRC command>")
    if not await client.require_connection():
        return
    await client.network_handler.send_raw(args_str)
    logger.info(f"Sent raw line: {args_str}")
