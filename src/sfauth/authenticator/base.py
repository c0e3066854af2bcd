"""Abstract base class for Salesforce authenticators.

An :class:`Authenticator` turns caller-supplied credential parameters into an
:class:`httpx.Client` bound to the authenticated session: its base URL is
the org's instance URL and every request carries an
``Authorization: OAuth <access_token>`` header.

Authenticators hold an options map rather than a client instance, see
:mod:`sfauth.client`. Each call builds fresh clients from those options, so
a single authenticator can be reused sequentially without any state leaking
between calls.

To implement a new strategy, subclass :class:`Authenticator` and implement
:meth:`~Authenticator.authenticate`, typically by calling
:meth:`~Authenticator._request_token` and :meth:`~Authenticator._http_client`.

See Also:
    :func:`sfauth.authenticator.create_authenticator` for dispatch by name.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import httpx
from pydantic import ValidationError

from sfauth.client import build_client
from sfauth.constants import AUTHORIZATION_SCHEME, DEFAULT_INSTANCE_NAME, TOKEN_PATH
from sfauth.exceptions import AuthenticationError
from sfauth.models import TokenResponse
from sfauth.obfuscate import SECRET_KEYS, obfuscate

logger = logging.getLogger(__name__)

_SESSION_FIELDS = ("access_token", "instance_url")


class Authenticator(ABC):
    """Base class for authentication strategies.

    Args:
        instance_name: Salesforce instance name, including the
            ``salesforce.com`` part and without a trailing slash.
        options: Default options for every HTTP client this authenticator
            builds. Copied on construction.
    """

    DEFAULT_OPTIONS: Mapping[str, Any] = {"http_errors": False}

    def __init__(
        self,
        instance_name: str = DEFAULT_INSTANCE_NAME,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._instance_name = instance_name
        self._options: dict[str, Any] = {**self.DEFAULT_OPTIONS, **(options or {})}

    @classmethod
    def create(
        cls,
        instance_name: str = DEFAULT_INSTANCE_NAME,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Authenticator:
        """Build a new authenticator. Performs no network I/O.

        Args:
            instance_name: Your Salesforce instance name.
            options: Default options for the HTTP clients to authenticate with.

        Returns:
            The new instance.
        """
        return cls(instance_name, options)

    @property
    def instance_name(self) -> str:
        return self._instance_name

    @property
    def options(self) -> dict[str, Any]:
        """A copy of the HTTP client options."""
        return dict(self._options)

    @property
    def login_endpoint(self) -> str:
        """The login host for :attr:`instance_name`."""
        return f"https://login.{self._instance_name}"

    @abstractmethod
    def authenticate(self, parameters: Mapping[str, Any]) -> httpx.Client:
        """Authenticate with the Salesforce API.

        Args:
            parameters: Authenticator parameters. Which keys are expected
                depends on the strategy.

        Returns:
            An authenticated HTTP client.

        Raises:
            AuthenticationError: ``FAILED`` if no access token and instance
                URL could be obtained.
        """
        ...

    def _http_client(
        self,
        base_uri: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> httpx.Client:
        """Build a new HTTP client from this authenticator's options.

        Args:
            base_uri: Overrides the configured ``base_uri``.
            access_token: When non-empty, sent as ``Authorization: OAuth <token>``.
        """
        options = self.options
        options["base_uri"] = base_uri if base_uri is not None else options.get("base_uri")
        if access_token:
            headers = dict(options.get("headers") or {})
            headers["Authorization"] = f"{AUTHORIZATION_SCHEME} {access_token}"
            options["headers"] = headers
        return build_client(options)

    def _request_token(
        self,
        endpoint: str,
        form: Mapping[str, Any],
        parameters: Mapping[str, Any],
        secret_keys: tuple[str, ...] = SECRET_KEYS,
    ) -> TokenResponse:
        """POST *form* to the token endpoint of *endpoint* and validate the answer.

        The response body decides the outcome, not the status code: any body
        lacking ``access_token`` or ``instance_url`` is a failure.

        Args:
            endpoint: Login host, e.g. ``https://login.salesforce.com``.
            form: Form fields to send, including ``grant_type``.
            parameters: The caller's parameters, obfuscated into the error
                context on failure.
            secret_keys: Parameter names hashed in that context.

        Returns:
            A :class:`TokenResponse` for which ``is_complete()`` holds.

        Raises:
            AuthenticationError: ``FAILED`` on an unusable response.
        """
        logger.debug(
            "Requesting %s token from %s%s", form.get("grant_type"), endpoint, TOKEN_PATH
        )
        client = self._http_client(endpoint)
        try:
            response = client.post(TOKEN_PATH, data=dict(form))
        except httpx.HTTPStatusError as exc:
            raise self._failure(
                exc.response, parameters, _parse_token(exc.response), secret_keys
            ) from exc
        finally:
            # A caller-supplied transport is shared with the bound client.
            if "transport" not in self._options:
                client.close()

        token = _parse_token(response)
        if token is None or not token.is_complete():
            raise self._failure(response, parameters, token, secret_keys)

        logger.debug("Authenticated against %s", token.instance_url)
        return token

    def _failure(
        self,
        response: Optional[httpx.Response],
        parameters: Mapping[str, Any],
        token: Optional[TokenResponse] = None,
        secret_keys: tuple[str, ...] = SECRET_KEYS,
    ) -> AuthenticationError:
        """Build a ``FAILED`` error carrying *response* and obfuscated *parameters*."""
        message = _describe_failure(response, token)
        logger.warning(message)
        return AuthenticationError.create(
            AuthenticationError.FAILED,
            {"response": response, "parameters": obfuscate(parameters, secret_keys)},
            message=message,
        )


def _parse_token(response: httpx.Response) -> Optional[TokenResponse]:
    """Parse a token response body, returning ``None`` if it is not a JSON object.

    A mistyped ``access_token`` or ``instance_url`` counts as absent.
    """
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return TokenResponse.model_validate(payload)
    except ValidationError:
        return TokenResponse.model_validate(
            {k: v for k, v in payload.items() if k not in _SESSION_FIELDS}
        )


def _describe_failure(
    response: Optional[httpx.Response],
    token: Optional[TokenResponse],
) -> str:
    message = "Authentication failed"
    if response is None:
        return f"{message}: no access token supplied"
    detail = f"HTTP {response.status_code}"
    if token is not None and token.error:
        detail += f": {token.error}"
        if token.error_description:
            detail += f" ({token.error_description})"
    elif token is not None:
        detail += ": response is missing access_token or instance_url"
    else:
        detail += ": response is not a JSON object"
    return f"{message} ({detail})"
