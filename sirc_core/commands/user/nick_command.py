# sirc_core/commands/user/nick_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.exceptions import UserInputError

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.user.nick")

COMMAND_DEFINITIONS = [
    {
        "name": "nick",
        "handler": "handle_nick_command",
        "help": {
            "usage": "/nick <newnickname>",
            "description": "Changes your nickname.",
            "aliases": []
        }
    }
]


async def handle_nick_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /nick command."""
    parts = args_str.split()
    if len(parts) != 1:
        raise UserInputError("/nick <newnickname>")
    new_nick = parts[0]

    old_nick = client.session.nick
    if client.network_handler.connected:
        await client.network_handler.send_raw(f"NICK {new_nick}")
        if client.session.registered:
            # Optimistic; a 433 reply restores old_nick.
            client.registration_handler.note_nick_change(old_nick)
    client.session.set_nick(new_nick)
    await client.add_status_message(f"Nick set to {new_nick}.")
