# sirc_core/app_config.py
import configparser
import os
import logging
from typing import Type, Any, Optional
from sirc_core.config_defs import *
from sirc_core.exceptions import ConfigError

logger = logging.getLogger("sirc.config")

class AppConfig:
    def __init__(self, config_file_path: Optional[str] = None):
        self.BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.CONFIG_FILE_NAME = "sirc_config.ini"
        self.CONFIG_DIR = os.path.join(self.BASE_DIR, "config")
        self.CONFIG_FILE_PATH = config_file_path or os.path.join(self.CONFIG_DIR, self.CONFIG_FILE_NAME)
        self._config_parser = configparser.ConfigParser()
        self._load_config_file()
        self._load_all_settings()

    def _load_config_file(self):
        if os.path.exists(self.CONFIG_FILE_PATH):
            self._config_parser.read(self.CONFIG_FILE_PATH, encoding="utf-8")

    def _get_config_value(self, section: str, key: str, fallback: Any, value_type: Type = str) -> Any:
        if self._config_parser.has_section(section) and self._config_parser.has_option(section, key):
            try:
                if value_type == bool:
                    return self._config_parser.getboolean(section, key)
                elif value_type == int:
                    return self._config_parser.getint(section, key)
                elif value_type == float:
                    return self._config_parser.getfloat(section, key)
                return self._config_parser.get(section, key)
            except (ValueError, configparser.Error):
                logger.warning(f"Invalid value for [{section}] {key}, using default {fallback!r}")
                return fallback
        return fallback

    def _load_all_settings(self):
        self.auto_reconnect = self._get_config_value("Connection", "auto_reconnect", DEFAULT_AUTO_RECONNECT, bool)
        self.reconnect_delay = self._get_config_value("Connection", "reconnect_delay", DEFAULT_RECONNECT_DELAY, float)
        self.connection_timeout = self._get_config_value("Connection", "connection_timeout", DEFAULT_CONNECTION_TIMEOUT, float)
        self.keepalive_interval = self._get_config_value("Connection", "keepalive_interval", DEFAULT_KEEPALIVE_INTERVAL, float)
        self.keepalive_token = self._get_config_value("Connection", "keepalive_token", DEFAULT_KEEPALIVE_TOKEN, str)
        self.registration_grace_period = self._get_config_value("Connection", "registration_grace_period", DEFAULT_REGISTRATION_GRACE_PERIOD, float)
        self.nick_retry_limit = self._get_config_value("Connection", "nick_retry_limit", DEFAULT_NICK_RETRY_LIMIT, int)
        self.command_prefix = self._get_config_value("Client", "command_prefix", DEFAULT_COMMAND_PREFIX, str)
        self.quit_message = self._get_config_value("Client", "quit_message", DEFAULT_QUIT_MESSAGE, str)
        self.away_message = self._get_config_value("Client", "away_message", DEFAULT_AWAY_MESSAGE, str)
        self.ctcp_version_reply = self._get_config_value("CTCP", "version_reply", DEFAULT_CTCP_VERSION_REPLY, str)
        self.ctcp_finger_reply = self._get_config_value("CTCP", "finger_reply", DEFAULT_CTCP_FINGER_REPLY, str)
        self.log_enabled = self._get_config_value("Logging", "log_enabled", DEFAULT_LOG_ENABLED, bool)
        self.log_file = self._get_config_value("Logging", "log_file", DEFAULT_LOG_FILE, str)
        self.log_error_file = self._get_config_value("Logging", "log_error_file", DEFAULT_LOG_ERROR_FILE, str)
        log_level_raw = self._get_config_value("Logging", "log_level", DEFAULT_LOG_LEVEL, str)
        self.log_level_str = log_level_raw.split('#')[0].strip().upper()
        log_error_level_raw = self._get_config_value("Logging", "log_error_level", DEFAULT_LOG_ERROR_LEVEL, str)
        self.log_error_level_str = log_error_level_raw.split('#')[0].strip().upper()
        self.log_max_bytes = self._get_config_value("Logging", "log_max_bytes", DEFAULT_LOG_MAX_BYTES, int)
        self.log_backup_count = self._get_config_value("Logging", "log_backup_count", DEFAULT_LOG_BACKUP_COUNT, int)
        if not self.command_prefix:
            self.command_prefix = DEFAULT_COMMAND_PREFIX

    def get_log_level_int_from_str(self, level_str: str, default_level: int) -> int:
        level = getattr(logging, level_str.upper(), None)
        return level if isinstance(level, int) else default_level

    def rehash(self) -> bool:
        logger.info(f"Rehashing configuration from {self.CONFIG_FILE_PATH}...")
        self._config_parser = configparser.ConfigParser()
        try:
            self._load_config_file()
        except configparser.Error as e:
            logger.error(f"Error during configuration rehash: {e}")
            return False
        self._load_all_settings()
        logger.info("Configuration rehashed successfully.")
        return True

    @property
    def log_level_int(self) -> int:
        return self.get_log_level_int_from_str(self.log_level_str, logging.INFO)

    @property
    def log_error_level_int(self) -> int:
        return self.get_log_level_int_from_str(self.log_error_level_str, logging.WARNING)


def build_server_config(
    server: str,
    port: Any,
    nick: str,
    realname: Optional[str] = None,
    channel: Optional[str] = None,
    server_password: Optional[str] = None,
) -> ServerConfig:
    """Validate startup parameters and bundle them into a ServerConfig."""
    if not server or not server.strip():
        raise ConfigError("Server address must not be empty.")
    try:
        port_int = int(port)
    except (TypeError, ValueError):
        raise ConfigError(f"Port must be numeric, got {port!r}.")
    if not 0 < port_int < 65536:
        raise ConfigError(f"Port out of range: {port_int}.")
    if not nick or not nick.strip() or " " in nick.strip():
        raise ConfigError("Nick must be a non-empty word.")
    if realname is not None and not realname.strip():
        raise ConfigError("Real name must not be empty.")
    if channel is not None:
        channel = channel.strip()
        if not channel:
            raise ConfigError("Channel must not be empty.")
        if not channel.startswith(CHANNEL_PREFIXES):
            channel = "#" + channel
    return ServerConfig(
        address=server.strip(),
        port=port_int,
        nick=nick.strip(),
        realname=realname.strip() if realname else None,
        channel=channel,
        server_password=server_password or None,
    )
