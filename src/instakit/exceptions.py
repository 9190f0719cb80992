"""Exception hierarchy for instakit.

All exceptions inherit from :class:`InstakitError`, which carries an
:class:`ErrorKind` and an ``exit_code`` taken from :mod:`instakit.exit_codes`.
Library operations do not raise these for expected failures; they return
them inside a :class:`~instakit.result.Result`. The command line
entry point unwraps results and exits with the error's code.

Subclass hierarchy::

    InstakitError                (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- InvalidRequestError      (exit 3)
    +-- MissingConfigurationError (exit 4)
    +-- ParseError               (exit 5)
    +-- ConnectionError_         (exit 6)
    +-- StorageError             (exit 7)
    +-- LoginCancelledError      (exit 130)
    +-- ConfigError              (exit 1)
"""

from __future__ import annotations

import enum
from typing import Optional

from instakit.exit_codes import (
    EXIT_CANCELLED,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_REQUEST,
    EXIT_INVALID_USAGE,
    EXIT_MISSING_CONFIGURATION,
    EXIT_PARSE_ERROR,
    EXIT_STORAGE_ERROR,
)


class ErrorKind(str, enum.Enum):
    """Machine-readable category of an :class:`InstakitError`."""

    GENERIC = "generic"
    INVALID_USAGE = "invalid_usage"
    MISSING_CONFIGURATION = "missing_configuration"
    INVALID_REQUEST = "invalid_request"
    PARSE_ERROR = "parse_error"
    STORAGE_ERROR = "storage_error"
    CANCELLED = "cancelled"
    CONNECTION_ERROR = "connection_error"
    CONFIG_ERROR = "config_error"


class InstakitError(Exception):
    """Base exception for all instakit errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.GENERIC
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(InstakitError):
    """Raised for invalid CLI arguments, a missing TTY, or a reused login flow."""

    kind = ErrorKind.INVALID_USAGE
    exit_code = EXIT_INVALID_USAGE


class MissingConfigurationError(InstakitError):
    """The client id or redirect URI was absent when a login was attempted."""

    kind = ErrorKind.MISSING_CONFIGURATION
    exit_code = EXIT_MISSING_CONFIGURATION


class InvalidRequestError(InstakitError):
    """The provider rejected a request.

    Produced for an HTTP 400 seen during the login flow, and for any
    response envelope whose ``meta.error_message`` is set.

    Args:
        message: The provider's error message.
        error_type: The provider's ``meta.error_type``, when available.
        code: The provider's ``meta.code`` or the HTTP status.
    """

    kind = ErrorKind.INVALID_REQUEST
    exit_code = EXIT_INVALID_REQUEST

    def __init__(
        self,
        message: str,
        error_type: Optional[str] = None,
        code: Optional[int] = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.code = code


class ParseError(InstakitError):
    """A response body failed to decode against the expected envelope shape."""

    kind = ErrorKind.PARSE_ERROR
    exit_code = EXIT_PARSE_ERROR


class StorageError(InstakitError):
    """Writing or deleting the access token failed.

    Args:
        message: Human-readable description.
        code: The token store's result code (an ``errno`` value for the
            file-backed store).
    """

    kind = ErrorKind.STORAGE_ERROR
    exit_code = EXIT_STORAGE_ERROR

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.code = code


class LoginCancelledError(InstakitError):
    """The user dismissed the login browser before a token was received."""

    kind = ErrorKind.CANCELLED
    exit_code = EXIT_CANCELLED


class ConnectionError_(InstakitError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    kind = ErrorKind.CONNECTION_ERROR
    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(InstakitError):
    """The settings file exists but cannot be read or validated."""

    kind = ErrorKind.CONFIG_ERROR
    exit_code = EXIT_GENERIC_FAILURE
