import asyncio
import time
from typing import Callable, List, Optional, Tuple, Union

from sirc_core.app_config import AppConfig
from sirc_core.client.irc_client_logic import IRCClient_Logic
from sirc_core.config_defs import ServerConfig
from sirc_core.exceptions import TransportError

NO_CONFIG_FILE = "/nonexistent/sirc_test_config.ini"


class FakeTransport:
    """In-memory stand-in for Transport: records sent lines, replays fed ones."""

    def __init__(self) -> None:
        self.sent: List[str] = []
        self.epoch: Optional[int] = None
        self._session = None
        self._incoming: "asyncio.Queue[Union[str, None, TransportError]]" = asyncio.Queue()
        self._closed = False

    def bind(self, session, epoch: int) -> None:
        self._session = session
        self.epoch = epoch

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, line: str) -> None:
        self._incoming.put_nowait(line)

    def feed_eof(self) -> None:
        self._incoming.put_nowait(None)

    def feed_error(self, reason: str = "Read failed: connection reset by peer") -> None:
        self._incoming.put_nowait(TransportError(reason))

    async def read_line(self) -> Optional[str]:
        item = await self._incoming.get()
        if isinstance(item, TransportError):
            raise item
        return item

    async def send_line(self, text: str) -> bool:
        line = text.replace("\r", "").replace("\n", "")
        if self._closed or self._session is None or not self._session.is_current_epoch(self.epoch):
            return False
        self.sent.append(line)
        return True

    async def close(self) -> None:
        self._closed = True


class FakeNetwork:
    """Transport factory handing out FakeTransports; can refuse the first N connects."""

    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.attempts = 0
        self.transports: List[FakeTransport] = []

    async def __call__(self, host: str, port: int, timeout: Optional[float]) -> FakeTransport:
        self.attempts += 1
        if self.failures > 0:
            self.failures -= 1
            raise TransportError(f"Cannot connect to {host}:{port}: refused")
        transport = FakeTransport()
        self.transports.append(transport)
        return transport

    @property
    def current(self) -> FakeTransport:
        return self.transports[-1]


class RecordingView:
    def __init__(self) -> None:
        self.lines: List[Tuple[str, str]] = []

    def add_message(self, text: str, kind: str = "system") -> None:
        self.lines.append((kind, text))

    def texts(self) -> List[str]:
        return [text for _, text in self.lines]

    def contains(self, fragment: str) -> bool:
        return any(fragment in text for text in self.texts())


def make_client(
    nick: str = "alice",
    channel: Optional[str] = None,
    password: Optional[str] = None,
    network: Optional[FakeNetwork] = None,
    input_func=None,
    **config_overrides,
) -> Tuple[IRCClient_Logic, FakeNetwork, RecordingView]:
    """Build a client wired to fakes. Call from inside a running event loop."""
    config = AppConfig(config_file_path=NO_CONFIG_FILE)
    config.reconnect_delay = 0.01
    for key, value in config_overrides.items():
        setattr(config, key, value)
    network = network or FakeNetwork()
    view = RecordingView()
    server_config = ServerConfig("irc.test", 6667, nick, "Alice Liddell", channel, password)
    client = IRCClient_Logic(server_config, config, view=view, input_func=input_func, transport_factory=network)
    return client, network, view


async def wait_for(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


async def connect_and_register(client: IRCClient_Logic, network: FakeNetwork) -> FakeTransport:
    assert await client.network_handler.establish_connection()
    transport = network.current
    transport.feed(f":irc.test 001 {client.session.nick} :Welcome to the test network")
    await wait_for(lambda: client.session.registered)
    return transport
