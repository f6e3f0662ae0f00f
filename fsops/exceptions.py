"""
Error taxonomy shared by the transport, model and rendering layers.
"""


class FsopsError(Exception):
    """Base class for all fsops errors."""


class TransportError(FsopsError):
    """The service could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class UnknownKindError(FsopsError):
    """An operation description carries an absent or unrecognized kind tag."""


class WrongKindError(FsopsError):
    """A kind-specific accessor was called on a description of another kind."""


class MalformedIdentifierError(FsopsError, ValueError):
    """Operation identifier text could not be decoded."""
