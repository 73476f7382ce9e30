# sirc_core/commands/user/query_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.exceptions import UserInputError

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.user.query")

COMMAND_DEFINITIONS = [
    {
        "name": "query",
        "handler": "handle_query_command",
        "help": {
            "usage": "/query <nick> [message]",
            "description": "Makes a nick the active target, optionally sending a first message.",
            "aliases": ["q"]
        }
    }
]


async def handle_query_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /query command."""
    parts = args_str.split(" ", 1)
    nick = parts[0].strip()
    if not nick:
        raise UserInputError("/query <nick> [message]")

    client.session.set_peer(nick)
    logger.info(f"Active target is now {nick}")
    await client.add_status_message(f"Now talking to {nick}.")
    if len(parts) > 1 and parts[1].strip():
        await client.send_privmsg(nick, parts[1].strip())
