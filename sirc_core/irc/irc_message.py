import re
from typing import Optional, Dict, Any, List

from sirc_core.exceptions import ProtocolParseError

# [@tags] [:prefix] COMMAND [middle params...] [:trailing]
IRC_MSG_RE = re.compile(
    r"^(?::(?P<prefix>[^ ]+) +)?"
    r"(?P<command>[A-Za-z]+|\d{3})"
    r"(?P<params>(?: +[^: ][^ ]*)*)"
    r"(?: +:(?P<trailing>.*))? *$"
)


def unescape_tag_value(value: str) -> str:
    """Unescape an IRCv3 tag value."""
    value = value.replace("\\:", ";")
    value = value.replace("\\s", " ")
    value = value.replace("\\\\", "\\")
    value = value.replace("\\r", "\r")
    value = value.replace("\\n", "\n")
    return value


class IRCMessage:
    def __init__(
        self,
        prefix: Optional[str],
        command: str,
        params_str: Optional[str],
        trailing: Optional[str],
        tags: Optional[Dict[str, str]] = None,
    ):
        self.prefix = prefix
        self.command = command.upper()
        self.params_str = params_str.strip() if params_str else None
        self.trailing = trailing
        self.params: List[str] = (
            [p for p in self.params_str.split(" ") if p] if self.params_str else []
        )
        self.source_nick = prefix.split("!")[0] if prefix else None
        self.tags = tags or {}

    @property
    def all_params(self) -> List[str]:
        """Middle params followed by the trailing param, if any."""
        if self.trailing is None:
            return list(self.params)
        return self.params + [self.trailing]

    @property
    def last_param(self) -> Optional[str]:
        params = self.all_params
        return params[-1] if params else None

    @classmethod
    def parse(cls, line: str) -> "IRCMessage":
        line = line.rstrip("\r\n")
        if not line.strip():
            raise ProtocolParseError("Empty line")

        tags = {}
        if line.startswith("@"):
            tag_end = line.find(" ")
            if tag_end == -1:
                raise ProtocolParseError(f"Tags without command: {line!r}")
            tag_str = line[1:tag_end]
            line = line[tag_end + 1 :].lstrip(" ")

            for tag in tag_str.split(";"):
                if "=" in tag:
                    key, value = tag.split("=", 1)
                    tags[key] = unescape_tag_value(value)
                elif tag:
                    tags[tag] = ""

        match = IRC_MSG_RE.match(line)
        if not match:
            raise ProtocolParseError(f"Unparseable line: {line!r}")
        return cls(
            match.group("prefix"),
            match.group("command"),
            match.group("params"),
            match.group("trailing"),
            tags=tags,
        )

    def get_tag(self, key: str, default: Any = None) -> Any:
        return self.tags.get(key, default)

    def __repr__(self) -> str:
        return (
            f"IRCMessage(prefix={self.prefix!r}, command={self.command!r}, "
            f"params={self.params!r}, trailing={self.trailing!r})"
        )
