"""Exceptions raised by the data access layer."""

from __future__ import annotations


class YamaError(Exception):
    """Base class for catalog and session failures."""


class TransportError(YamaError):
    """The remote backend was unreachable or answered with a failure status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(YamaError):
    """A payload could not be decoded into the expected shape."""


class ValidationError(YamaError, ValueError):
    """Caller-supplied input was rejected before reaching any backend."""


class AuthenticationError(YamaError):
    """The backend refused the supplied credentials."""


class NotConfiguredError(YamaError):
    """An operation needs an endpoint or session that is not present."""
