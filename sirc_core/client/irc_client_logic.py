# sirc_core/client/irc_client_logic.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from aioconsole import ainput

from sirc_core.app_config import AppConfig
from sirc_core.client.client_shutdown_coordinator import ClientShutdownCoordinator
from sirc_core.client.console_view import ConsoleView
from sirc_core.client.keepalive_monitor import KeepaliveMonitor
from sirc_core.client.reconnection_supervisor import ReconnectionSupervisor
from sirc_core.commands.command_handler import CommandHandler
from sirc_core.config_defs import ServerConfig
from sirc_core.irc.ctcp_handler import CtcpHandler
from sirc_core.irc.registration_handler import RegistrationHandler
from sirc_core.network_handler import NetworkHandler, TransportFactory
from sirc_core.state_manager import Session

logger = logging.getLogger("sirc.logic")

InputFunc = Callable[[], Awaitable[str]]


class IRCClient_Logic:
    """
    Owns the Session and every component that acts on it, and runs the
    operator input loop until the client is told to quit.
    """

    def __init__(
        self,
        server_config: ServerConfig,
        config: AppConfig,
        view: Optional[Any] = None,
        input_func: Optional[InputFunc] = None,
        transport_factory: Optional[TransportFactory] = None,
    ):
        self.config = config
        self.session = Session(server_config)
        self.ui = view or ConsoleView()
        self.input_func: InputFunc = input_func or ainput
        self.should_quit = asyncio.Event()

        self.network_handler = NetworkHandler(self, transport_factory=transport_factory)
        self.registration_handler = RegistrationHandler(self)
        self.keepalive_monitor = KeepaliveMonitor(self)
        self.ctcp_handler = CtcpHandler(self)
        self.reconnection_supervisor = ReconnectionSupervisor(self)
        self.command_handler = CommandHandler(self)
        self.shutdown_coordinator = ClientShutdownCoordinator(self)

    async def add_message(self, text: str, kind: str = "channel_message") -> None:
        logger.debug(f"[{kind}] {text}")
        self.ui.add_message(text, kind)

    async def add_status_message(self, text: str, kind: str = "system") -> None:
        await self.add_message(text, kind)

    async def require_connection(self) -> bool:
        if self.network_handler.connected:
            return True
        await self.add_status_message("Not connected.", "error")
        return False

    async def send_privmsg(self, target: str, text: str) -> bool:
        """Send text to a channel or nick and echo it locally."""
        if not await self.require_connection():
            return False
        if not await self.network_handler.send_raw(f"PRIVMSG {target} :{text}"):
            await self.add_status_message(f"Failed to send message to {target}.", "error")
            return False
        await self.add_message(f"[{target}] <{self.session.nick}> {text}", "my_message")
        return True

    async def request_shutdown(self, reason: Optional[str] = None) -> None:
        await self.shutdown_coordinator.initiate_graceful_shutdown(reason)

    async def _read_input(self) -> None:
        while not self.should_quit.is_set():
            try:
                line = await self.input_func()
            except EOFError:
                logger.info("End of input; quitting.")
                await self.request_shutdown()
                return
            try:
                await self.command_handler.process_user_input(line)
            except Exception as e:
                logger.error(f"Error processing input '{line}': {e}", exc_info=True)
                await self.add_status_message(f"Error: {e}", "error")

    async def run_main_loop(self) -> None:
        logger.info(f"Starting main client loop for {self.session.server}:{self.session.port}.")
        input_task: Optional[asyncio.Task] = None
        try:
            if not await self.network_handler.establish_connection():
                self.reconnection_supervisor.schedule()

            input_task = asyncio.create_task(self._read_input(), name="sirc-input")
            quit_waiter = asyncio.create_task(self.should_quit.wait(), name="sirc-quit-wait")
            await asyncio.wait({input_task, quit_waiter}, return_when=asyncio.FIRST_COMPLETED)
            quit_waiter.cancel()
        except asyncio.CancelledError:
            logger.info("run_main_loop task was cancelled. Proceeding to cleanup.")
        finally:
            if input_task is not None and not input_task.done():
                input_task.cancel()
                try:
                    await input_task
                except asyncio.CancelledError:
                    logger.debug("Input task cancelled.")
            await self.shutdown_coordinator.initiate_graceful_shutdown()
            logger.info("Main loop finished.")
