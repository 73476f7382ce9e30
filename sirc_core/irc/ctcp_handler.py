# sirc_core/irc/ctcp_handler.py
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sirc_core.client.irc_client_logic import IRCClient_Logic

logger = logging.getLogger("sirc.ctcp")

CTCP_DELIMITER = "\x01"
SUPPORTED_TAGS = ("ACTION", "CLIENTINFO", "FINGER", "PING", "TIME", "VERSION")


@dataclass(frozen=True)
class CtcpPayload:
    tag: str
    argument: Optional[str] = None

    def encode(self) -> str:
        body = f"{self.tag} {self.argument}" if self.argument else self.tag
        return f"{CTCP_DELIMITER}{body}{CTCP_DELIMITER}"


def is_ctcp(body: Optional[str]) -> bool:
    return bool(body) and len(body) >= 2 and body.startswith(CTCP_DELIMITER) and body.endswith(CTCP_DELIMITER)


def parse_ctcp(body: Optional[str]) -> Optional[CtcpPayload]:
    """Split a delimiter-wrapped body into tag and argument. None if not CTCP."""
    if not is_ctcp(body):
        return None
    inner = body[1:-1].strip()
    if not inner:
        return None
    tag, _, argument = inner.partition(" ")
    return CtcpPayload(tag.upper(), argument.strip() or None)


class CtcpHandler:
    """Answers CTCP requests found in PRIVMSG bodies with scripted NOTICE replies."""

    def __init__(self, client_logic_ref: "IRCClient_Logic"):
        self.client = client_logic_ref
        self.config = client_logic_ref.config

    def build_reply(self, request: CtcpPayload) -> Optional[CtcpPayload]:
        tag = request.tag
        if tag == "VERSION":
            return CtcpPayload("VERSION", self.config.ctcp_version_reply)
        if tag == "PING":
            if not request.argument:
                return None
            return CtcpPayload("PING", request.argument)
        if tag == "TIME":
            return CtcpPayload("TIME", time.strftime("%a %b %d %H:%M:%S %Y"))
        if tag == "FINGER":
            return CtcpPayload("FINGER", self.config.ctcp_finger_reply)
        if tag == "CLIENTINFO":
            return CtcpPayload("CLIENTINFO", " ".join(SUPPORTED_TAGS))
        return None

    async def handle_request(self, sender: str, request: CtcpPayload) -> bool:
        """Send the scripted reply for ``request``. Returns True if a reply went out."""
        reply = self.build_reply(request)
        if reply is None:
            logger.debug(f"No CTCP reply for {request.tag} from {sender}")
            return False
        await self.client.add_status_message(f"[CTCP] {sender} requested {request.tag}", "ctcp")
        return await self.client.network_handler.send_raw(f"NOTICE {sender} :{reply.encode()}")
