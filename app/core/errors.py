"""
Error taxonomy.

Every failure the services report is one of these, and each carries the
HTTP status the API layer renders it with.
"""


class RadioError(Exception):
    """Base class for service errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RadioError):
    """Missing or malformed input. Raised before any storage access."""

    status_code = 400


class NotFoundError(RadioError):
    """A referenced entity does not exist."""

    status_code = 404


class StorageError(RadioError):
    """Underlying persistence failure."""

    status_code = 500


class UpstreamError(RadioError):
    """The station metadata feed could not be read."""

    status_code = 502
