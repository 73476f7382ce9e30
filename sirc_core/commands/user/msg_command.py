# sirc_core/commands/user/msg_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.exceptions import UserInputError

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.user.msg")

COMMAND_DEFINITIONS = [
    {
        "name": "msg",
        "handler": "handle_msg_command",
        "help": {
            "usage": "/msg <target> <message>",
            "description": "Sends a message to a nick or channel without changing the active target.",
            "aliases": ["m"]
        }
    }
]


async def handle_msg_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /msg command."""
    parts = args_str.split(" ", 1)
    if len(parts) < 2 or not parts[0] or not parts[1].strip():
        raise UserInputError("/msg <target> <message>")
    target, message = parts[0], parts[1].strip()
    await client.send_privmsg(target, message)
