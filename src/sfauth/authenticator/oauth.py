"""OAuth token authenticator.

This module provides :class:`OAuth`, for callers that already hold an
access token (e.g. from a web-server or JWT flow handled elsewhere). Its
:meth:`~OAuth.authenticate` wraps that token into a client without any
network round trip, and :meth:`~OAuth.refresh` performs the OAuth2
refresh-token grant (:rfc:`6749` section 6) to obtain a new one.

See Also:
    :class:`sfauth.authenticator.base.Authenticator` for the base interface.
    :mod:`sfauth.authenticator.password` for the username-password flow.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from sfauth.authenticator.base import Authenticator
from sfauth.constants import DEFAULT_INSTANCE_NAME
from sfauth.obfuscate import SECRET_KEYS


class OAuth(Authenticator):
    """OAuth-based Salesforce authenticator.

    The ``base_uri`` option defaults to the login host of *instance_name*
    (``https://login.salesforce.com`` for the default instance). If you pass
    your own ``base_uri`` it should be your instance endpoint, without a
    trailing slash.

    Example::

        auth = OAuth.create()
        client = auth.authenticate({
            "access_token": token,
            "instance_url": "https://na1.salesforce.com",
        })
    """

    GRANT_TYPE = "refresh_token"

    REDACTED_KEYS = SECRET_KEYS + ("refresh_token",)
    """Parameters hashed in error snapshots, the long-lived refresh token included."""

    def __init__(
        self,
        instance_name: str = DEFAULT_INSTANCE_NAME,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(instance_name, options)
        self._options.setdefault("base_uri", self.login_endpoint)

    def authenticate(self, parameters: Mapping[str, Any]) -> httpx.Client:
        """Wrap an existing access token into a client.

        No request is made and the token is not validated. Expected
        parameters:

        - ``access_token`` (required)
        - ``instance_url`` (optional, overrides the configured ``base_uri``)
        - ``refresh_token`` (optional, not used here; see :meth:`refresh`)

        Args:
            parameters: Authenticator parameters.

        Returns:
            A client sending ``Authorization: OAuth <access_token>``.

        Raises:
            AuthenticationError: ``FAILED`` if ``access_token`` is missing or
                empty.
        """
        access_token = parameters.get("access_token")
        if not access_token:
            raise self._failure(None, parameters, secret_keys=self.REDACTED_KEYS)
        return self._http_client(parameters.get("instance_url") or None, access_token)

    def refresh(
        self,
        refresh_token: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Client:
        """Exchange a refresh token for a new access token.

        The request goes to the configured ``base_uri``. Expected
        parameters:

        - ``client_id``
        - ``client_secret`` (required unless the connected app allows
          refresh without a secret)

        Args:
            refresh_token: The refresh token issued with the original grant.
            parameters: Extra form fields, typically the client credentials.

        Returns:
            A client bound to the returned ``instance_url`` and access token.

        Raises:
            AuthenticationError: ``FAILED`` if the response lacks an access
                token or an instance URL.
        """
        form = {
            **(parameters or {}),
            "grant_type": self.GRANT_TYPE,
            "refresh_token": refresh_token,
        }
        token = self._request_token(self._options["base_uri"], form, form, self.REDACTED_KEYS)
        return self._http_client(token.instance_url, token.access_token)
