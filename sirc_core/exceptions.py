class SircError(Exception):
    """Base class for all client errors."""


class TransportError(SircError):
    """Connect, read or write failure on the server connection."""


class ProtocolParseError(SircError):
    """An inbound line could not be parsed or is missing required fields."""


class UserInputError(SircError):
    """A slash command was given bad or missing arguments."""

    def __init__(self, usage: str):
        super().__init__(usage)
        self.usage = usage


class ConfigError(SircError):
    """Startup parameters or configuration values are invalid."""
