"""
Error taxonomy for talking to the remote Task API.

Every failure the client can produce derives from ``TaskAPIError`` so that
callers may catch the whole family in one ``except`` clause while still
being able to tell a dead network apart from a misbehaving server.

- ``TransportError`` -- the HTTP layer never produced a response
  (connection refused, DNS failure, timeout).
- ``ProtocolError`` -- a response arrived but is not usable: non-2xx
  status, a body that is not JSON, or JSON that is not an envelope.
- ``ApplicationFailure`` -- a well-formed envelope whose status is
  ``FAILURE``.
- ``ValidationError`` -- a draft rejected client-side before any call.
"""

from __future__ import annotations


class TaskAPIError(Exception):
    """Base class for all task synchronization errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(TaskAPIError):
    """The request could not be delivered or no response was received."""

    def __init__(self, message: str, *, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class ProtocolError(TaskAPIError):
    """
    The server answered, but not with a usable success envelope.

    Attributes:
        status_code: HTTP status of the response, or ``None`` when the
            status was fine and the body could not be decoded.
    """

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApplicationFailure(TaskAPIError):
    """The server reported ``status = FAILURE`` in an otherwise valid envelope."""


class ValidationError(TaskAPIError):
    """A required draft field is empty."""
