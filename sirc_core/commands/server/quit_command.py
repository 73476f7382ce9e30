# sirc_core/commands/server/quit_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.server.quit")

COMMAND_DEFINITIONS = [
    {
        "name": "quit",
        "handler": "handle_quit_command",
        "help": {
            "usage": "/quit [message]",
            "description": "Disconnects from the server and exits.",
            "aliases": ["exit"]
        }
    }
]


async def handle_quit_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /quit command."""
    reason = args_str.strip() or None
    logger.info(f"User requested quit: {reason or client.config.quit_message}")
    await client.request_shutdown(reason)
