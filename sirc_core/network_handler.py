# sirc_core/network_handler.py
import asyncio
import logging
import socket
from typing import Awaitable, Callable, Coroutine, Any, Optional, Set, TYPE_CHECKING

from sirc_core.app_config import AppConfig
from sirc_core.exceptions import TransportError
from sirc_core.irc.irc_protocol import handle_server_message
from sirc_core.state_manager import ConnectionState, Session

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic


logger = logging.getLogger("sirc.network")

LINE_TERMINATOR = "\r\n"
READ_LIMIT = 64 * 1024


def _mask_for_log(line: str) -> str:
    if line.upper().startswith("PASS "):
        return "PASS ******"
    return line


class Transport:
    """
    One TCP connection to the server, owned by a single connection epoch.

    Reads are line oriented. Writes go through ``send_line``, which holds a lock
    for the whole write+drain so concurrent callers never interleave, and which
    refuses to write once the transport is closed or its epoch is superseded.
    """

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self._reader = reader
        self._writer = writer
        self._send_lock = asyncio.Lock()
        self._closed = False
        self._session: Optional[Session] = None
        self.epoch: Optional[int] = None

    @classmethod
    async def open(cls, host: str, port: int, timeout: Optional[float] = None) -> "Transport":
        logger.info(f"Attempting asyncio.open_connection to {host}:{port}")
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port, limit=READ_LIMIT), timeout=timeout
            )
        except asyncio.TimeoutError:
            raise TransportError(f"Timed out connecting to {host}:{port}")
        except OSError as e:
            raise TransportError(f"Cannot connect to {host}:{port}: {e}") from e
        sock = writer.get_extra_info("socket")
        if sock is not None:
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
            except OSError as e:
                logger.debug(f"Could not enable SO_KEEPALIVE: {e}")
        logger.info(f"Successfully connected to {host}:{port}.")
        return cls(reader, writer)

    def bind(self, session: Session, epoch: int) -> None:
        """Tie this transport to ``epoch``; sends are refused once it is stale."""
        self._session = session
        self.epoch = epoch

    @property
    def closed(self) -> bool:
        return self._closed or self._writer.is_closing()

    async def read_line(self) -> Optional[str]:
        """Next line without its terminator, or None at end of stream."""
        try:
            data = await self._reader.readline()
        except (ConnectionError, OSError) as e:
            raise TransportError(f"Read failed: {e}") from e
        except (asyncio.LimitOverrunError, ValueError) as e:
            raise TransportError(f"Line exceeded {READ_LIMIT} bytes: {e}") from e
        if not data:
            return None
        line = data.decode("utf-8", errors="replace").rstrip("\r\n")
        logger.debug(f"S << {line}")
        return line

    async def send_line(self, text: str) -> bool:
        """Write one protocol line. Returns False instead of raising on any failure."""
        line = text.replace("\r", "").replace("\n", "")
        async with self._send_lock:
            if self.closed:
                logger.warning(f"send_line: transport closed. Dropped: {_mask_for_log(line)}")
                return False
            if self._session is None or self.epoch is None or not self._session.is_current_epoch(self.epoch):
                logger.warning(f"send_line: epoch {self.epoch} is not current. Dropped: {_mask_for_log(line)}")
                return False
            try:
                self._writer.write((line + LINE_TERMINATOR).encode("utf-8", errors="replace"))
                await self._writer.drain()
            except (ConnectionError, OSError, RuntimeError) as e:
                logger.error(f"Network error sending data ('{_mask_for_log(line)}'): {e}")
                self._abort()
                return False
        logger.debug(f"C >> {_mask_for_log(line)}")
        return True

    def _abort(self) -> None:
        self._closed = True
        if not self._writer.is_closing():
            self._writer.close()

    async def close(self) -> None:
        if self._closed and self._writer.is_closing():
            return
        self._abort()
        try:
            await asyncio.wait_for(self._writer.wait_closed(), timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning("Timeout waiting for writer to close.")
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing transport: {e}")


TransportFactory = Callable[[str, int, Optional[float]], Awaitable[Transport]]


class NetworkHandler:
    """
    Owns the current Transport and the task set of its epoch.

    ``establish_connection`` opens a transport, starts a new epoch and spawns the
    epoch's reader and keepalive tasks. When the reader sees end of stream or a
    read error the epoch is torn down and, unless the user asked to quit, the
    reconnection supervisor is asked for a delayed retry.
    """

    def __init__(self, client_logic_ref: "IRCClient_Logic", transport_factory: Optional[TransportFactory] = None):
        self.client_logic_ref = client_logic_ref
        self.config: AppConfig = client_logic_ref.config
        self.session: Session = client_logic_ref.session
        self.transport: Optional[Transport] = None
        self.transport_factory: TransportFactory = transport_factory or Transport.open
        self._epoch_tasks: Set[asyncio.Task] = set()
        self._connect_lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self.transport is not None and self.session.connected

    async def establish_connection(self) -> bool:
        """Connect, start a new epoch and send registration. Returns False on failure."""
        client = self.client_logic_ref
        async with self._connect_lock:
            await self._end_current_epoch()
            if self.session.user_initiated_shutdown:
                logger.info("Shutdown requested; not connecting.")
                return False

            server, port = self.session.server, self.session.port
            self.session.set_connection_state(ConnectionState.CONNECTING)
            await client.add_status_message(f"Connecting to {server}:{port}...")
            try:
                transport = await self.transport_factory(server, port, self.config.connection_timeout)
            except TransportError as e:
                logger.error(f"Connection error to {server}:{port}: {e}")
                self.session.set_connection_state(ConnectionState.ERROR, str(e))
                await client.add_status_message(f"Connection failed: {e}", "error")
                return False

            if self.session.user_initiated_shutdown:
                await transport.close()
                return False

            epoch = self.session.begin_epoch()
            transport.bind(self.session, epoch)
            self.transport = transport
            await client.add_status_message(f"Connected to {server}:{port}.")

            self._spawn(self._read_loop(epoch, transport), f"sirc-reader-{epoch}")
            self._spawn(client.keepalive_monitor.run(epoch), f"sirc-keepalive-{epoch}")
        await client.registration_handler.on_connection_established(epoch)
        return True

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._epoch_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._epoch_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Task {task.get_name()} failed: {task.exception()!r}")

    async def _read_loop(self, epoch: int, transport: Transport) -> None:
        logger.info(f"Read loop started for epoch {epoch}.")
        error: Optional[str] = None
        try:
            while True:
                line = await transport.read_line()
                if not self.session.is_current_epoch(epoch):
                    logger.debug(f"Read loop for stale epoch {epoch} exiting.")
                    return
                if line is None:
                    logger.info("Connection closed by server (end of stream).")
                    break
                if line:
                    await handle_server_message(self.client_logic_ref, line)
        except TransportError as e:
            if not self.session.is_current_epoch(epoch):
                return
            logger.error(f"Read error in epoch {epoch}: {e}")
            error = str(e)
        await self.on_transport_lost(epoch, error)

    async def on_transport_lost(self, epoch: int, error: Optional[str] = None) -> None:
        """End ``epoch`` after a read failure and hand over to the reconnection supervisor."""
        if not self.session.end_epoch(epoch, error):
            return
        client = self.client_logic_ref
        await self._teardown_epoch_tasks()
        reason = error or "connection closed by server"
        await client.add_status_message(f"Disconnected from {self.session.server}: {reason}", "error")
        if self.session.user_initiated_shutdown:
            return
        client.reconnection_supervisor.schedule()

    async def send_raw(self, data: str, epoch: Optional[int] = None) -> bool:
        """Send one line on the current transport. ``epoch`` restricts the send to that epoch."""
        transport = self.transport
        if transport is None:
            logger.warning(f"send_raw: Not connected. Attempted to send: {_mask_for_log(data.strip())}")
            return False
        if epoch is not None and transport.epoch != epoch:
            logger.debug(f"send_raw: epoch {epoch} superseded by {transport.epoch}.")
            return False
        return await transport.send_line(data)

    async def disconnect_gracefully(self, quit_message: Optional[str] = None) -> None:
        """Send QUIT, end the epoch and close the transport."""
        transport = self.transport
        if transport is not None and self.session.connected:
            await transport.send_line(f"QUIT :{quit_message or self.config.quit_message}")
        await self._end_current_epoch()

    async def stop(self) -> None:
        await self._end_current_epoch()

    async def _end_current_epoch(self) -> None:
        self.session.end_epoch(self.session.epoch)
        await self._teardown_epoch_tasks()

    async def _teardown_epoch_tasks(self) -> None:
        current = asyncio.current_task()
        tasks = [t for t in self._epoch_tasks if t is not current and not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        transport, self.transport = self.transport, None
        if transport is not None:
            await transport.close()
            logger.debug(f"Transport for epoch {transport.epoch} closed.")
