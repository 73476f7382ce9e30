# sirc_core/commands/channel/join_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.config_defs import CHANNEL_PREFIXES
from sirc_core.exceptions import UserInputError

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.channel.join")

COMMAND_DEFINITIONS = [
    {
        "name": "join",
        "handler": "handle_join_command",
        "help": {
            "usage": "/join <channel>",
            "description": "Joins a channel and makes it the active target.",
            "aliases": ["j"]
        }
    }
]


async def handle_join_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /join command."""
    parts = args_str.split()
    if len(parts) != 1:
        raise UserInputError("/join <channel>")

    channel = parts[0]
    if not channel.startswith(CHANNEL_PREFIXES):
        channel = "#" + channel

    client.session.set_channel(channel)
    client.session.set_autojoin_channel(channel)
    if client.session.registered:
        await client.network_handler.send_raw(f"JOIN {channel}")
        logger.info(f"Sent JOIN for {channel}")
        await client.add_status_message(f"Joining {channel}...")
    else:
        # RegistrationHandler joins the current channel on RPL_WELCOME.
        await client.add_status_message(f"Will join {channel} once registered.")
