"""Username-password authenticator.

This module provides :class:`Password`, which performs the OAuth2
username-password flow against ``https://login.<instance_name>``: the
connected app's ``client_id`` and ``client_secret`` are sent together with
the user's ``username`` and ``password``, and the resulting access token is
bound to a client pointed at the org's instance URL.

See Also:
    :class:`sfauth.authenticator.base.Authenticator` for the base interface.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from sfauth.authenticator.base import Authenticator


class Password(Authenticator):
    """Password-based Salesforce authenticator.

    Example::

        auth = Password.create("salesforce.com", {"timeout": 10})
        client = auth.authenticate({
            "client_id": "3MVG9...",
            "client_secret": "...",
            "username": "ops@example.com",
            "password": "...",
        })
        client.get("/services/data/")
    """

    GRANT_TYPE = "password"

    def authenticate(self, parameters: Mapping[str, Any]) -> httpx.Client:
        """Exchange username/password credentials for an authenticated client.

        This method does not validate the provided parameters; the token
        endpoint is the judge. Expected parameters:

        - ``client_id``
        - ``client_secret``
        - ``username``
        - ``password``

        ``grant_type`` is always sent as ``password``, whatever *parameters*
        contains.

        Args:
            parameters: Authenticator parameters.

        Returns:
            A client whose base URL is the returned ``instance_url``.

        Raises:
            AuthenticationError: ``FAILED`` if the response lacks an access
                token or an instance URL.
        """
        form = {**parameters, "grant_type": self.GRANT_TYPE}
        token = self._request_token(self.login_endpoint, form, parameters)
        return self._http_client(token.instance_url, token.access_token)
