# sirc_core/commands/utility/rehash_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.utility.rehash")

COMMAND_DEFINITIONS = [
    {
        "name": "rehash",
        "handler": "handle_rehash_command",
        "help": {
            "usage": "/rehash",
            "description": "Reloads the configuration file. Connection identity is not changed.",
            "aliases": []
        }
    }
]


async def handle_rehash_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /rehash command."""
    logger.info("Rehash command initiated by user.")
    if client.config.rehash():
        await client.add_status_message(f"Configuration reloaded from {client.config.CONFIG_FILE_PATH}.")
    else:
        await client.add_status_message("Failed to reload configuration. See the error log.", "error")
