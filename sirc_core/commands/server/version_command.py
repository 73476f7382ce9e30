# sirc_core/commands/server/version_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.server.version")

COMMAND_DEFINITIONS = [
    {
        "name": "version",
        "handler": "handle_version_command",
        "help": {
            "usage": "/version [server]",
            "description": "Asks the server (or the named server) for its version.",
            "aliases": []
        }
    }
]


async def handle_version_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /version command."""
    if not await client.require_connection():
        return
    target = args_str.strip()
    await client.network_handler.send_raw(f"VERSION {target}" if target else "VERSION")
