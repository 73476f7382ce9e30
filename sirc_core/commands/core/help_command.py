# sirc_core/commands/core/help_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.core.help")

COMMAND_DEFINITIONS = [
    {
        "name": "help",
        "handler": "handle_help_command",
        "help": {
            "usage": "/help [command]",
            "description": "Lists commands, or shows help for one command.",
            "aliases": ["h"]
        }
    }
]


async def handle_help_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /help command."""
    handler = client.command_handler
    prefix = client.config.command_prefix
    name = args_str.strip()

    if not name:
        await client.add_status_message("Commands: " + ", ".join(f"{prefix}{c}" for c in handler.get_primary_commands()))
        await client.add_status_message(f"Type {prefix}help <command> for details.")
        return

    info = handler.get_help_text_for_command(name)
    if info is None:
        await client.add_status_message(f"No help for '{name}'.", "error")
        return
    await client.add_status_message(f"Usage: {info['usage']}")
    if info["description"]:
        await client.add_status_message(info["description"])
    if info["aliases"]:
        await client.add_status_message("Aliases: " + ", ".join(f"{prefix}{a}" for a in info["aliases"]))
