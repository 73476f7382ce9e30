# sirc_core/commands/user/away_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.user.away")

COMMAND_DEFINITIONS = [
    {
        "name": "away",
        "handler": "handle_away_command",
        "help": {
            "usage": "/away [message]",
            "description": "Marks you as away, with the configured message if none is given.",
            "aliases": []
        }
    },
    {
        "name": "back",
        "handler": "handle_back_command",
        "help": {
            "usage": "/back",
            "description": "Clears your away status.",
            "aliases": []
        }
    }
]


async def handle_away_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /away command."""
    if not await client.require_connection():
        return
    message = args_str.strip() or client.config.away_message
    if await client.network_handler.send_raw(f"AWAY :{message}"):
        logger.info(f"Set away status with message: {message}")
        await client.add_status_message(f"Marking you as away: {message}")


async def handle_back_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /back command."""
    if not await client.require_connection():
        return
    if await client.network_handler.send_raw("AWAY"):
        logger.info("Cleared away status.")
