"""
Error taxonomy for discovery: validation, transport and protocol errors.
"""


class AutodiscoverError(Exception):
    """Base class for every failure a discovery can report."""


class ValidationError(AutodiscoverError, ValueError):
    """Missing or malformed input, raised before any network I/O."""


class TransportError(AutodiscoverError):
    """Network failure, timeout, unreadable body or missing endpoint field."""


class ProtocolError(AutodiscoverError):
    """The autodiscover server answered with an explicit <Error> element."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f'errorCode: {code}, message: "{message}"')
