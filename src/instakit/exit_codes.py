"""Numeric process exit codes for the ``instakit`` command line.

Each constant maps to one error kind and is referenced by the matching
:class:`~instakit.exceptions.InstakitError` subclass, so shell scripts can
branch on the failure class without parsing stderr.

Example::

    $ instakit login
    $ echo $?
    4   # EXIT_MISSING_CONFIGURATION -- no client id configured
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or without a usable terminal."""

EXIT_INVALID_REQUEST = 3
"""The provider rejected the request (HTTP 400 during login, or an error envelope)."""

EXIT_MISSING_CONFIGURATION = 4
"""The client id or redirect URI is not configured."""

EXIT_PARSE_ERROR = 5
"""A response body could not be decoded."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_STORAGE_ERROR = 7
"""The access token could not be written to or removed from storage."""

EXIT_CANCELLED = 130
"""The user dismissed the login flow."""
