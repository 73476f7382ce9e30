import importlib
import inspect
import logging
import pkgutil
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional, Tuple

import sirc_core.commands
from sirc_core.exceptions import UserInputError

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

CommandHandlerCallable = Callable[["IRCClient_Logic", str], Awaitable[Any]]

logger = logging.getLogger("sirc.command_handler")


class CommandHandler:
    """
    Routes operator input: slash commands to their handlers, free text to the
    active target.

    Command modules live in subpackages of ``sirc_core.commands`` and declare a
    ``COMMAND_DEFINITIONS`` list; each entry names an async handler taking
    ``(client, args_str)`` plus usage, description and aliases.
    """

    def __init__(self, client_logic: "IRCClient_Logic"):
        self.client = client_logic
        self.command_map: Dict[str, CommandHandlerCallable] = {}
        self.registered_command_help: Dict[str, Dict[str, Any]] = {}
        self._load_commands()

    def _load_commands(self) -> None:
        for module_loader, module_name, is_pkg in pkgutil.walk_packages(
            path=sirc_core.commands.__path__,
            prefix=sirc_core.commands.__name__ + ".",
            onerror=lambda name: logger.error(f"Error importing module during walk_packages: {name}"),
        ):
            if is_pkg:
                continue
            module = importlib.import_module(module_name)
            for cmd_def in getattr(module, "COMMAND_DEFINITIONS", []):
                self._register(module_name, module, cmd_def)
        logger.info(f"Loaded {len(self.get_primary_commands())} commands.")

    def _register(self, module_name: str, module: Any, cmd_def: Dict[str, Any]) -> None:
        cmd_name = cmd_def["name"].lower()
        handler_func = getattr(module, cmd_def["handler"], None)
        if handler_func is None or not inspect.iscoroutinefunction(handler_func):
            logger.error(f"Handler '{cmd_def['handler']}' in {module_name} for '{cmd_name}' is missing or not async.")
            return
        if cmd_name in self.command_map:
            logger.warning(f"Command '{cmd_name}' from {module_name} conflicts with existing command. Overwriting.")

        help_info = cmd_def.get("help", {})
        aliases = [a.lower() for a in help_info.get("aliases", [])]
        self.command_map[cmd_name] = handler_func
        self.registered_command_help[cmd_name] = {
            "usage": help_info.get("usage", f"/{cmd_name}"),
            "description": help_info.get("description", ""),
            "aliases": aliases,
            "is_alias": False,
        }
        for alias in aliases:
            self.command_map[alias] = handler_func
            self.registered_command_help[alias] = dict(self.registered_command_help[cmd_name], is_alias=True, primary_command=cmd_name)
        logger.debug(f"Registered command '{cmd_name}' (aliases: {aliases}) from {module_name}.")

    def get_primary_commands(self) -> List[str]:
        return sorted(name for name, info in self.registered_command_help.items() if not info["is_alias"])

    def get_help_text_for_command(self, command_name: str) -> Optional[Dict[str, Any]]:
        return self.registered_command_help.get(command_name.lower().lstrip(self.client.config.command_prefix))

    @staticmethod
    def split_command(line: str, prefix: str) -> Tuple[str, str]:
        """'/msg bob hi there' -> ('msg', 'bob hi there'). Trailing spaces are kept."""
        body = line[len(prefix):]
        cmd, _, args_str = body.partition(" ")
        return cmd.lower(), args_str.lstrip(" ")

    async def process_user_input(self, line: str) -> None:
        line = line.rstrip("\r\n")
        if not line.strip():
            return
        if line.startswith(self.client.config.command_prefix):
            await self.process_user_command(line)
        else:
            await self.send_free_text(line)

    async def process_user_command(self, line: str) -> bool:
        """Run a slash command. Returns False if the command is unknown."""
        prefix = self.client.config.command_prefix
        cmd, args_str = self.split_command(line, prefix)
        handler = self.command_map.get(cmd)
        if handler is None:
            await self.client.add_status_message(f"Unknown command: {prefix}{cmd}. Type {prefix}help", "error")
            return False
        try:
            await handler(self.client, args_str)
        except UserInputError as e:
            usage = e.usage or self.registered_command_help[cmd]["usage"]
            await self.client.add_status_message(f"Usage: {usage}", "error")
        return True

    async def send_free_text(self, text: str) -> bool:
        target = self.client.session.active_target
        if target is None:
            await self.client.add_status_message("No active target.", "error")
            return False
        return await self.client.send_privmsg(target, text)
