# sirc_core/irc/handlers/state_change_handlers.py
import logging
from typing import TYPE_CHECKING, Optional

from sirc_core.irc.irc_message import IRCMessage

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.handlers.state_change")


async def _handle_nick(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    """Handles NICK changes, ours and other users'."""
    old_nick = parsed_msg.source_nick
    new_nick = parsed_msg.last_param
    if not old_nick or not new_nick:
        return

    session = client.session
    # After an optimistic /nick the echo names a nick we already dropped.
    if session.is_own_nick(old_nick) or session.is_own_nick(new_nick):
        session.set_nick(new_nick)
        client.registration_handler.confirm_nick_change()
        await client.add_status_message(f"You are now known as {new_nick}")
        return

    if session.current_peer and session.current_peer.lower() == old_nick.lower():
        session.set_peer(new_nick)
    await client.add_message(f"{old_nick} is now known as {new_nick}", "nick_change")
