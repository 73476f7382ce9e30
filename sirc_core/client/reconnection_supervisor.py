import asyncio
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.reconnect")


class ReconnectionSupervisor:
    """
    Schedules a delayed reconnect after a transport failure.

    At most one attempt is pending at a time. The pending task sleeps for
    ``reconnect_delay``, re-checks the shutdown flag, then detaches itself and
    runs the full connection sequence; a failed attempt schedules the next one.
    """

    def __init__(self, client_logic_ref: "IRCClient_Logic"):
        self.client_logic_ref = client_logic_ref
        self.session = client_logic_ref.session
        self.config = client_logic_ref.config
        self._pending: Optional[asyncio.Task] = None
        self.attempts = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def schedule(self) -> bool:
        """Schedule one reconnect attempt. Returns False if none was scheduled."""
        if self.session.user_initiated_shutdown:
            logger.debug("Not scheduling reconnect: shutdown requested.")
            return False
        if not self.config.auto_reconnect:
            logger.info("Auto-reconnect disabled; staying disconnected.")
            return False
        if self.pending:
            logger.debug("Reconnect already pending.")
            return False
        self._pending = asyncio.create_task(self._reconnect_after_delay(), name="sirc-reconnect")
        return True

    async def _reconnect_after_delay(self) -> None:
        client = self.client_logic_ref
        delay = self.config.reconnect_delay
        await client.add_status_message(f"Reconnecting in {delay:g}s...", "warning")
        await asyncio.sleep(delay)
        if self.session.user_initiated_shutdown:
            logger.info("Reconnect skipped: shutdown requested during delay.")
            return
        self._pending = None
        self.attempts += 1
        logger.info(f"Reconnect attempt {self.attempts}.")
        if not await client.network_handler.establish_connection():
            self.schedule()

    async def cancel(self) -> bool:
        """Cancel a pending attempt and wait for it to finish. Returns True if one was pending."""
        task = self._pending
        if task is None or task.done():
            return False
        self._pending = None
        if task is asyncio.current_task():
            return True
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Pending reconnect cancelled.")
        return True
