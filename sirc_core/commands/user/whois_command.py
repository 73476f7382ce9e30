# sirc_core/commands/user/whois_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.exceptions import UserInputError

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.user.whois")

COMMAND_DEFINITIONS = [
    {
        "name": "whois",
        "handler": "handle_whois_command",
        "help": {
            "usage": "/whois <nick>",
            "description": "Requests WHOIS information for a nick.",
            "aliases": ["w"]
        }
    }
]


async def handle_whois_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /whois command."""
    parts = args_str.split()
    if len(parts) != 1:
        raise UserInputError("/whois <nick>")
    if not await client.require_connection():
        return
    await client.network_handler.send_raw(f"WHOIS {parts[0]}")
