from dataclasses import dataclass
from typing import Optional

# --- Default Fallback Constants ---
# These are used as fallbacks if values are not found in the INI file.

CLIENT_NAME = "sIRC"
CLIENT_VERSION = "1.8"

# Connection
DEFAULT_PORT = 6667
DEFAULT_AUTO_RECONNECT = True
DEFAULT_RECONNECT_DELAY = 5.0
DEFAULT_CONNECTION_TIMEOUT = 30.0
DEFAULT_KEEPALIVE_INTERVAL = 60.0
DEFAULT_KEEPALIVE_TOKEN = "keepalive"
DEFAULT_REGISTRATION_GRACE_PERIOD = 0.0
DEFAULT_NICK_RETRY_LIMIT = 3

# Client
DEFAULT_COMMAND_PREFIX = "/"
DEFAULT_QUIT_MESSAGE = "Bye"
DEFAULT_AWAY_MESSAGE = "Away"

# CTCP
DEFAULT_CTCP_VERSION_REPLY = f"{CLIENT_NAME} v{CLIENT_VERSION}"
DEFAULT_CTCP_FINGER_REPLY = "sIRC terminal client"

# Logging
DEFAULT_LOG_ENABLED = True
DEFAULT_LOG_FILE = "sirc.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_ERROR_FILE = "sirc_error.log"
DEFAULT_LOG_ERROR_LEVEL = "WARNING"
DEFAULT_LOG_MAX_BYTES = 1024 * 1024 * 5
DEFAULT_LOG_BACKUP_COUNT = 3

CHANNEL_PREFIXES = ("#", "&", "!", "+")


# --- Data Classes ---

@dataclass
class ServerConfig:
    address: str
    port: int
    nick: str
    realname: Optional[str] = None
    channel: Optional[str] = None
    server_password: Optional[str] = None

    def __post_init__(self) -> None:
        if self.realname is None:
            self.realname = self.nick
