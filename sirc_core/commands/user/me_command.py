# sirc_core/commands/user/me_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.exceptions import UserInputError
from sirc_core.irc.ctcp_handler import CtcpPayload

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.user.me")

COMMAND_DEFINITIONS = [
    {
        "name": "me",
        "handler": "handle_me_command",
        "help": {
            "usage": "/me <action text>",
            "description": "Sends an action to the active target.",
            "aliases": ["action"]
        }
    }
]


async def handle_me_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /me <action text> command."""
    text = args_str.strip()
    if not text:
        raise UserInputError("/me <action text>")

    target = client.session.active_target
    if target is None:
        await client.add_status_message("No active target.", "error")
        return
    if not await client.require_connection():
        return

    payload = CtcpPayload("ACTION", text).encode()
    if await client.network_handler.send_raw(f"PRIVMSG {target} :{payload}"):
        await client.add_message(f"[{target}] * {client.session.nick} {text}", "action")
        logger.info(f"Sent ACTION to {target}: {text}")
