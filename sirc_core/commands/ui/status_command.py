# sirc_core/commands/ui/status_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.commands.ui.status")

COMMAND_DEFINITIONS = [
    {
        "name": "status",
        "handler": "handle_status_command",
        "help": {
            "usage": "/status",
            "description": "Shows connection state, registration, active target and keepalive age.",
            "aliases": []
        }
    }
]


async def handle_status_command(client: "IRCClient_Logic", args_str: str):
    """Handles the /status command. Local only."""
    snap = client.session.snapshot()
    age = client.session.keepalive_age()
    lines = [
        f"Server: {snap.server}:{snap.port} as {snap.nick}",
        f"State: {snap.connection_state.name.lower()} (connected: {'yes' if snap.connected else 'no'}, "
        f"registered: {'yes' if snap.registered else 'no'})",
        f"Target: {snap.active_target or 'none'}",
        f"Last keepalive: {f'{age:.0f}s ago' if age is not None else 'never'}",
        f"Away: {'yes' if snap.away else 'no'}",
    ]
    if client.reconnection_supervisor.pending:
        lines.append("Reconnect pending.")
    for line in lines:
        await client.add_status_message(line)
