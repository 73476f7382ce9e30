import asyncio
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.keepalive")


class KeepaliveMonitor:
    """Sends a keepalive PING every ``keepalive_interval`` seconds while registered."""

    def __init__(self, client_logic_ref: "IRCClient_Logic"):
        self.client_logic_ref = client_logic_ref
        self.session = client_logic_ref.session
        self.config = client_logic_ref.config
        self.pings_sent = 0

    @property
    def token(self) -> str:
        return self.config.keepalive_token

    def is_keepalive_echo(self, argument: Optional[str]) -> bool:
        return argument is not None and argument == self.token

    async def run(self, epoch: int) -> None:
        """One monitor per epoch; returns once the epoch is no longer current."""
        logger.debug(f"Keepalive monitor started for epoch {epoch}.")
        try:
            while self.session.is_current_epoch(epoch):
                await asyncio.sleep(self.config.keepalive_interval)
                if not self.session.is_current_epoch(epoch):
                    break
                if not self.session.registered:
                    continue
                sent = await self.client_logic_ref.network_handler.send_raw(f"PING {self.token}", epoch=epoch)
                if sent:
                    self.pings_sent += 1
                    self.session.record_keepalive()
        except asyncio.CancelledError:
            logger.debug(f"Keepalive monitor for epoch {epoch} cancelled.")
            raise
        logger.debug(f"Keepalive monitor for epoch {epoch} finished.")
