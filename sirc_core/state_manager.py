import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from sirc_core.config_defs import ServerConfig

logger = logging.getLogger("sirc.state")


class ConnectionState(Enum):
    """Possible connection states."""

    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    REGISTERED = auto()
    ERROR = auto()


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent point-in-time copy of the session, taken under the lock."""

    server: str
    port: int
    nick: str
    realname: str
    current_channel: Optional[str]
    current_peer: Optional[str]
    autojoin_channel: Optional[str]
    connected: bool
    registered: bool
    user_initiated_shutdown: bool
    last_keepalive_at: Optional[float]
    away: bool
    connection_state: ConnectionState
    epoch: int

    @property
    def active_target(self) -> Optional[str]:
        return self.current_peer or self.current_channel


class Session:
    """
    Identity, send target and lifecycle flags for one client instance.

    Every loop (reader, keepalive, reconnect wait, command input) shares one
    Session, so all access goes through the methods below, which hold a single
    re-entrant lock. Fields are never read or written directly from outside.

    The epoch counter increments on every successful transport establishment.
    Loops remember the epoch they were started for and call
    ``is_current_epoch`` before acting.
    """

    def __init__(self, server_config: ServerConfig):
        self._lock = threading.RLock()
        self._server = server_config.address
        self._port = server_config.port
        self._nick = server_config.nick
        self._realname = server_config.realname or server_config.nick
        self._server_password = server_config.server_password
        self._current_channel: Optional[str] = server_config.channel
        self._current_peer: Optional[str] = None
        self._autojoin_channel: Optional[str] = server_config.channel
        self._connected = False
        self._registered = False
        self._user_initiated_shutdown = False
        self._last_keepalive_at: Optional[float] = None
        self._away = False
        self._connection_state = ConnectionState.DISCONNECTED
        self._last_error: Optional[str] = None
        self._epoch = 0

    # --- identity ---

    @property
    def server(self) -> str:
        return self._server

    @property
    def port(self) -> int:
        return self._port

    @property
    def realname(self) -> str:
        return self._realname

    @property
    def server_password(self) -> Optional[str]:
        return self._server_password

    @property
    def nick(self) -> str:
        with self._lock:
            return self._nick

    def set_nick(self, new_nick: str) -> None:
        with self._lock:
            if new_nick != self._nick:
                logger.info(f"Nick changed: {self._nick} -> {new_nick}")
            self._nick = new_nick

    def is_own_nick(self, name: Optional[str]) -> bool:
        if not name:
            return False
        with self._lock:
            return name.lower() == self._nick.lower()

    # --- send target ---

    @property
    def current_channel(self) -> Optional[str]:
        with self._lock:
            return self._current_channel

    @property
    def current_peer(self) -> Optional[str]:
        with self._lock:
            return self._current_peer

    def set_channel(self, channel: str) -> None:
        with self._lock:
            self._current_channel = channel
            self._current_peer = None

    def clear_channel(self) -> Optional[str]:
        with self._lock:
            channel, self._current_channel = self._current_channel, None
            return channel

    def set_peer(self, peer: str) -> None:
        with self._lock:
            self._current_peer = peer
            self._current_channel = None

    @property
    def active_target(self) -> Optional[str]:
        """The peer if one is set, else the channel, else None."""
        with self._lock:
            return self._current_peer or self._current_channel

    @property
    def autojoin_channel(self) -> Optional[str]:
        """Channel joined on every welcome; independent of the send target."""
        with self._lock:
            return self._autojoin_channel

    def set_autojoin_channel(self, channel: str) -> None:
        with self._lock:
            self._autojoin_channel = channel

    def forget_autojoin_channel(self, channel: str) -> bool:
        """Stop auto-joining ``channel``. Returns False if a different one is set."""
        with self._lock:
            if self._autojoin_channel is None or self._autojoin_channel.lower() != channel.lower():
                return False
            self._autojoin_channel = None
            return True

    # --- lifecycle ---

    @property
    def epoch(self) -> int:
        with self._lock:
            return self._epoch

    def is_current_epoch(self, epoch: int) -> bool:
        with self._lock:
            return self._connected and epoch == self._epoch

    def begin_epoch(self) -> int:
        """Start a new connection epoch: connected, not yet registered."""
        with self._lock:
            self._epoch += 1
            self._connected = True
            self._registered = False
            self._last_keepalive_at = None
            self._away = False
            self._connection_state = ConnectionState.CONNECTED
            self._last_error = None
            logger.debug(f"Epoch {self._epoch} started")
            return self._epoch

    def end_epoch(self, epoch: int, error: Optional[str] = None) -> bool:
        """
        Mark the given epoch as finished.

        Returns False when ``epoch`` was already superseded or ended, so only
        one caller reacts to the loss of a connection.
        """
        with self._lock:
            if epoch != self._epoch or not self._connected:
                return False
            self._connected = False
            self._registered = False
            self._connection_state = ConnectionState.ERROR if error else ConnectionState.DISCONNECTED
            self._last_error = error
            logger.debug(f"Epoch {epoch} ended (error: {error})")
            return True

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._connected

    @property
    def registered(self) -> bool:
        with self._lock:
            return self._registered

    def mark_registered(self, epoch: int) -> bool:
        """Flip ``registered`` to True once per epoch. Returns True only on that flip."""
        with self._lock:
            if not self._connected or epoch != self._epoch or self._registered:
                return False
            self._registered = True
            self._connection_state = ConnectionState.REGISTERED
            return True

    @property
    def connection_state(self) -> ConnectionState:
        with self._lock:
            return self._connection_state

    def set_connection_state(self, state: ConnectionState, error: Optional[str] = None) -> None:
        with self._lock:
            self._connection_state = state
            if error is not None:
                self._last_error = error

    @property
    def last_error(self) -> Optional[str]:
        with self._lock:
            return self._last_error

    @property
    def user_initiated_shutdown(self) -> bool:
        with self._lock:
            return self._user_initiated_shutdown

    def request_shutdown(self) -> None:
        with self._lock:
            self._user_initiated_shutdown = True

    # --- liveness / away ---

    @property
    def last_keepalive_at(self) -> Optional[float]:
        with self._lock:
            return self._last_keepalive_at

    def record_keepalive(self, when: Optional[float] = None) -> None:
        with self._lock:
            self._last_keepalive_at = time.monotonic() if when is None else when

    def keepalive_age(self) -> Optional[float]:
        with self._lock:
            if self._last_keepalive_at is None:
                return None
            return time.monotonic() - self._last_keepalive_at

    @property
    def away(self) -> bool:
        with self._lock:
            return self._away

    def set_away(self, away: bool) -> None:
        with self._lock:
            self._away = away

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                server=self._server,
                port=self._port,
                nick=self._nick,
                realname=self._realname,
                current_channel=self._current_channel,
                current_peer=self._current_peer,
                autojoin_channel=self._autojoin_channel,
                connected=self._connected,
                registered=self._registered,
                user_initiated_shutdown=self._user_initiated_shutdown,
                last_keepalive_at=self._last_keepalive_at,
                away=self._away,
                connection_state=self._connection_state,
                epoch=self._epoch,
            )
