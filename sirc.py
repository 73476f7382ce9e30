#!/usr/bin/env python3
# sirc.py - entry point
import argparse
import asyncio
import logging
import logging.handlers
import os
import sys
from typing import List, Optional

from sirc_core.app_config import AppConfig, build_server_config
from sirc_core.client.irc_client_logic import IRCClient_Logic
from sirc_core.config_defs import CLIENT_NAME, CLIENT_VERSION
from sirc_core.exceptions import ConfigError


def setup_logging(config: AppConfig):
    """Set up file logging for the application using the config object."""
    if not config.log_enabled:
        logging.disable(logging.CRITICAL + 1)
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    log_dir = os.path.join(config.BASE_DIR, "logs")
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e:
        print(f"Error creating log directory {log_dir}: {e}. Logging to project root.", file=sys.stderr)
        log_dir = config.BASE_DIR

    full_log_path = os.path.join(log_dir, config.log_file)
    error_log_path = os.path.join(log_dir, config.log_error_file)
    try:
        full_handler = logging.handlers.RotatingFileHandler(
            full_log_path,
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
        full_handler.setFormatter(formatter)
        full_handler.setLevel(config.log_level_int)
        root_logger.addHandler(full_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            error_log_path,
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
        error_handler.setFormatter(formatter)
        error_handler.setLevel(config.log_error_level_int)
        root_logger.addHandler(error_handler)
    except OSError as e:
        # The console belongs to the chat view; without a log file, log nothing.
        print(f"Failed to initialize file logging: {e}", file=sys.stderr)
        root_logger.addHandler(logging.NullHandler())
        return

    sirc_base_logger = logging.getLogger("sirc")
    sirc_base_logger.setLevel(config.log_level_int)
    sirc_base_logger.info(f"Logging initialized. Full log: {full_log_path}, Error log: {error_log_path}")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="sirc", description=f"{CLIENT_NAME} terminal IRC client")
    parser.add_argument("server", help="IRC server address")
    parser.add_argument("port", help="IRC server port")
    parser.add_argument("nick", help="Nickname")
    parser.add_argument("realname", help="Real name sent in USER")
    parser.add_argument("channel", nargs="?", default=None, help="Channel to join after registration")
    parser.add_argument("--config", default=None, help="Path to an INI configuration file")
    parser.add_argument("--password", default=None, help="Server password (sent as PASS)")
    parser.add_argument("--version", action="version", version=f"{CLIENT_NAME} {CLIENT_VERSION}")
    args = parser.parse_args(argv)

    try:
        args.server_config = build_server_config(
            args.server,
            args.port,
            args.nick,
            realname=args.realname,
            channel=args.channel,
            server_password=args.password,
        )
    except ConfigError as e:
        parser.error(str(e))
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    app_config = AppConfig(config_file_path=args.config)
    setup_logging(app_config)
    logger = logging.getLogger("sirc.main_app")
    logger.info(f"Starting {CLIENT_NAME} {CLIENT_VERSION} for {args.server_config.address}:{args.server_config.port}")

    client = IRCClient_Logic(args.server_config, app_config)
    try:
        asyncio.run(client.run_main_loop())
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    logger.info("Application shutdown complete.")
    logging.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
