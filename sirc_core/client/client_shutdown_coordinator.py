# sirc_core/client/client_shutdown_coordinator.py
import asyncio
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.shutdown_coordinator")


class ClientShutdownCoordinator:
    """Handles the graceful shutdown sequence for the IRC client."""

    def __init__(self, client_logic_ref: "IRCClient_Logic"):
        self.client_logic = client_logic_ref
        self.shutdown_initiated = False
        self.shutdown_lock = asyncio.Lock()

    async def initiate_graceful_shutdown(self, reason: Optional[str] = None) -> bool:
        """
        Stop reconnecting, send QUIT if connected and release the transport.
        Idempotent; returns False when shutdown had already started.
        """
        client = self.client_logic
        async with self.shutdown_lock:
            if self.shutdown_initiated:
                logger.info("Shutdown already in progress or completed.")
                return False
            self.shutdown_initiated = True
            quit_message = reason or client.config.quit_message
            logger.info(f"Initiating graceful shutdown. Reason: {quit_message}")

            # Set before anything else so a reconnect waking up now sees it.
            client.session.request_shutdown()

            if await client.reconnection_supervisor.cancel():
                logger.debug("Cancelled pending reconnect.")

            if client.network_handler.connected:
                logger.debug(f"Disconnecting from server with quit message: {quit_message}")
                await client.network_handler.disconnect_gracefully(quit_message=quit_message)
            await client.network_handler.stop()

            await client.add_status_message("Client stopped.")
            client.should_quit.set()
            logger.info("Client shutdown sequence complete.")
            return True
