"""Errors raised while talking to a line printer daemon."""


class LprError(Exception):
    """Base class for every lpr_printer error."""


class LprConnectionError(LprError):
    """The daemon could not be reached (DNS failure, refused, timed out)."""

    def __init__(self, message: str, errno: int = 0):
        super().__init__(message)
        self.errno = errno


class LprProtocolError(LprError):
    """The daemon answered a protocol step with a non-zero acknowledgement."""

    def __init__(self, message: str, step: str, ack: bytes = b""):
        super().__init__(message)
        self.step = step
        self.ack = ack


class LprEncodingError(LprError):
    """Job text or a command cannot be written in the client encoding."""
