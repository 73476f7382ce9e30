# sirc_core/commands/channel/part_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.channel.part")

COMMAND_DEFINITIONS = [
    {
        "name": "part",
        "handler": "handle_part_command",
        "help": {
            "usage": "/part [message]",
            "description": "Leaves the current channel.",
            "aliases": ["leave"]
        }
    }
]


async def handle_part_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /part command."""
    channel = client.session.current_channel
    if not channel:
        await client.add_status_message("Not in a channel.", "error")
        return

    reason = args_str.strip()
    if client.network_handler.connected:
        command = f"PART {channel} :{reason}" if reason else f"PART {channel}"
        await client.network_handler.send_raw(command)
        logger.info(f"Sent PART for {channel}")
    client.session.clear_channel()
    client.session.forget_autojoin_channel(channel)
    if not client.network_handler.connected:
        await client.add_status_message(f"Left {channel}.")
