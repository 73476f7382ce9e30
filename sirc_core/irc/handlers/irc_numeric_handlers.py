import logging
from typing import TYPE_CHECKING, Optional

from sirc_core.irc.irc_message import IRCMessage

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.handlers.numeric")

RPL_WELCOME = "001"
RPL_UNAWAY = "305"
RPL_NOWAWAY = "306"
ERR_NICKNAMEINUSE = "433"


async def _handle_rpl_welcome(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    """Handles RPL_WELCOME (001)."""
    confirmed_nick = parsed_msg.all_params[0]
    if trailing:
        await client.add_status_message(trailing, "server")
    logger.info(f"Received RPL_WELCOME (001) for {confirmed_nick}.")
    await client.registration_handler.on_welcome_received(confirmed_nick, client.session.epoch)


async def _handle_err_nicknameinuse(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    """Handles ERR_NICKNAMEINUSE (433): <client> <nick> :Nickname is already in use."""
    attempted = params[1] if len(params) > 1 else client.session.nick
    await client.registration_handler.on_nick_in_use(attempted)


async def _handle_rpl_unaway(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    client.session.set_away(False)
    await client.add_status_message(trailing or "You are no longer marked as being away")


async def _handle_rpl_nowaway(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    client.session.set_away(True)
    await client.add_status_message(trailing or "You have been marked as being away")


async def _handle_generic_numeric(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    # params[0] is our own nick; the rest is informational.
    display_params = params[1:] if params else []
    parts = display_params + ([trailing] if trailing else [])
    if parts:
        await client.add_status_message(" ".join(parts), "server")


NUMERIC_HANDLERS = {
    RPL_WELCOME: _handle_rpl_welcome,
    RPL_UNAWAY: _handle_rpl_unaway,
    RPL_NOWAWAY: _handle_rpl_nowaway,
    ERR_NICKNAMEINUSE: _handle_err_nicknameinuse,
}


async def _handle_numeric_command(
    client: "IRCClient_Logic",
    parsed_msg: IRCMessage,
    raw_line: str,
    params: list,
    trailing: Optional[str],
):
    handler = NUMERIC_HANDLERS.get(parsed_msg.command, _handle_generic_numeric)
    await handler(client, parsed_msg, raw_line, params, trailing)
