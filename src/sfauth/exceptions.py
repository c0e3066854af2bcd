"""Exception hierarchy for sfauth.

All exceptions inherit from :class:`SfauthError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`sfauth.exit_codes`.
The top-level error handler in :func:`sfauth.app.main` catches
``SfauthError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SfauthError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- AuthenticationError   (exit 3)
    +-- ConnectionError_      (exit 6)
    +-- ConfigError           (exit 1)
"""

from __future__ import annotations

import enum
from typing import Any, Mapping, Optional

from sfauth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class SfauthError(Exception):
    """Base exception for all sfauth errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`sfauth.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SfauthError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ErrorKind(str, enum.Enum):
    """Reasons an :class:`AuthenticationError` can be raised.

    ``FAILED`` means the token exchange did not yield a usable access token
    and instance URL. ``NOT_AUTHENTICATED`` is reserved for a client being
    requested before any exchange has succeeded; the bundled strategies
    never raise it.
    """

    FAILED = "failed"
    NOT_AUTHENTICATED = "not_authenticated"


_DEFAULT_MESSAGES = {
    ErrorKind.FAILED: "Authentication failed",
    ErrorKind.NOT_AUTHENTICATED: "Not authenticated",
}


class AuthenticationError(SfauthError):
    """Raised when a strategy cannot produce an authenticated client.

    The error keeps the raw provider response for diagnosis together with a
    copy of the triggering parameters. Callers constructing this error are
    responsible for passing parameters through
    :func:`~sfauth.obfuscate.obfuscate` first, so that ``client_secret`` and
    ``password`` only ever appear as bcrypt hashes.

    Args:
        kind: The :class:`ErrorKind` describing the failure.
        message: Optional override for the default message of *kind*.
        response: The raw :class:`httpx.Response`, if a request was made.
        parameters: Obfuscated credential parameters.

    Example::

        try:
            client = Password.create("salesforce.com").authenticate(params)
        except AuthenticationError as exc:
            if exc.kind is AuthenticationError.FAILED:
                log.warning("login rejected: %s", exc.parameters)
    """

    exit_code = EXIT_AUTH_FAILURE

    FAILED = ErrorKind.FAILED
    NOT_AUTHENTICATED = ErrorKind.NOT_AUTHENTICATED

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        response: Any = None,
        parameters: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message or _DEFAULT_MESSAGES[kind])
        self.kind = kind
        self.response = response
        self.parameters: dict[str, Any] = dict(parameters or {})

    @classmethod
    def create(
        cls,
        kind: ErrorKind,
        context: Optional[Mapping[str, Any]] = None,
        message: Optional[str] = None,
    ) -> AuthenticationError:
        """Build an error from a ``{"response": ..., "parameters": ...}`` context map.

        Args:
            kind: The failure kind.
            context: Diagnostic context. Unknown keys are ignored.
            message: Optional message override.

        Returns:
            A new :class:`AuthenticationError`.
        """
        context = context or {}
        return cls(
            kind,
            message=message,
            response=context.get("response"),
            parameters=context.get("parameters"),
        )

    @property
    def context(self) -> dict[str, Any]:
        """The diagnostic context as originally supplied to :meth:`create`."""
        return {"response": self.response, "parameters": dict(self.parameters)}


class ConnectionError_(SfauthError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(SfauthError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
