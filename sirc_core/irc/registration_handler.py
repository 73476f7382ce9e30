# sirc_core/irc/registration_handler.py
import asyncio
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.registration")


class RegistrationHandler:
    """
    Sends PASS/NICK/USER at the start of every epoch and completes registration
    on RPL_WELCOME addressed to our current nick.
    """

    def __init__(self, client_logic_ref: "IRCClient_Logic"):
        self.client_logic_ref = client_logic_ref
        self.session = client_logic_ref.session
        self.config = client_logic_ref.config
        self.nick_retries = 0
        self._autojoin_epoch = 0
        self.nick_before_change: Optional[str] = None

    async def on_connection_established(self, epoch: int) -> bool:
        self.nick_retries = 0
        self.nick_before_change = None
        grace = self.config.registration_grace_period
        if grace > 0:
            logger.debug(f"Waiting {grace}s before registering.")
            await asyncio.sleep(grace)
        if not self.session.is_current_epoch(epoch):
            logger.info(f"Epoch {epoch} ended before registration could be sent.")
            return False

        network = self.client_logic_ref.network_handler
        nick = self.session.nick
        logger.info(f"Proceeding with NICK/USER registration. Nick: {nick}, Real: {self.session.realname}")
        if self.session.server_password:
            await network.send_raw(f"PASS {self.session.server_password}", epoch=epoch)
        sent_nick = await network.send_raw(f"NICK {nick}", epoch=epoch)
        sent_user = await network.send_raw(f"USER {nick} 0 * :{self.session.realname}", epoch=epoch)
        return sent_nick and sent_user

    async def on_welcome_received(self, confirmed_nick: str, epoch: int) -> bool:
        """Flip the session to registered and auto-join. Returns True on the flip."""
        if not self.session.is_own_nick(confirmed_nick):
            logger.warning(f"RPL_WELCOME for '{confirmed_nick}' does not match our nick '{self.session.nick}'.")
            return False
        if not self.session.mark_registered(epoch):
            logger.debug(f"Ignoring repeated RPL_WELCOME in epoch {epoch}.")
            return False

        await self.client_logic_ref.add_status_message(f"Registered as {self.session.nick}")
        channel = self.session.autojoin_channel
        if channel and self._autojoin_epoch != epoch:
            self._autojoin_epoch = epoch
            logger.info(f"Auto-joining {channel}")
            await self.client_logic_ref.network_handler.send_raw(f"JOIN {channel}", epoch=epoch)
        return True

    def note_nick_change(self, old_nick: str) -> None:
        """Remember the nick to fall back to if the server rejects a /nick."""
        self.nick_before_change = old_nick

    def confirm_nick_change(self) -> None:
        self.nick_before_change = None

    async def on_nick_in_use(self, attempted_nick: str) -> None:
        client = self.client_logic_ref
        if self.session.registered:
            previous = self.nick_before_change
            self.nick_before_change = None
            if previous and self.session.is_own_nick(attempted_nick):
                self.session.set_nick(previous)
                await client.add_status_message(
                    f"Nick {attempted_nick} is already in use. You are still {previous}.", "error"
                )
            else:
                await client.add_status_message(f"Nick {attempted_nick} is already in use.", "error")
            return
        if self.nick_retries >= self.config.nick_retry_limit:
            await client.add_status_message(
                f"Nick {attempted_nick} is already in use. Use /nick to pick another.", "error"
            )
            return
        self.nick_retries += 1
        new_nick = f"{attempted_nick}_"
        self.session.set_nick(new_nick)
        await client.add_status_message(f"Nick {attempted_nick} is in use, trying {new_nick}", "warning")
        await client.network_handler.send_raw(f"NICK {new_nick}")
