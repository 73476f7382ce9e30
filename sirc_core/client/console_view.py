import time
from typing import Dict, Optional

from rich.console import Console
from rich.text import Text

MESSAGE_STYLES: Dict[str, str] = {
    "system": "bold white",
    "server": "dim",
    "raw": "dim",
    "error": "bold red",
    "warning": "yellow",
    "channel_message": "white",
    "private_message": "bold magenta",
    "my_message": "yellow",
    "action": "cyan",
    "notice": "green",
    "ctcp": "blue",
    "join_part": "green",
    "nick_change": "magenta",
}


class ConsoleView:
    """Prints client output to the terminal, one timestamped line per message."""

    def __init__(self, console: Optional[Console] = None, prefix_time: bool = True):
        self.console = console or Console(highlight=False)
        self.prefix_time = prefix_time

    def add_message(self, text: str, kind: str = "system") -> None:
        line = Text()
        if self.prefix_time:
            line.append(time.strftime("[%H:%M:%S] "), style="dim")
        line.append(text, style=MESSAGE_STYLES.get(kind, ""))
        self.console.print(line)
