"""Pluggable Salesforce authenticators.

The main entry points are:

- :class:`Authenticator` -- abstract base class for authentication strategies.
- :class:`Password` -- OAuth2 username-password flow.
- :class:`OAuth` -- wraps an existing access token; supports refresh.
- :func:`create_authenticator` -- builds a strategy from its type name.

Typical usage::

    from sfauth.authenticator import create_authenticator

    auth = create_authenticator("password", "salesforce.com")
    client = auth.authenticate(parameters)
    # client.base_url is the org's instance URL; requests carry the token.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from sfauth.authenticator.base import Authenticator
from sfauth.authenticator.oauth import OAuth
from sfauth.authenticator.password import Password
from sfauth.constants import DEFAULT_INSTANCE_NAME
from sfauth.exceptions import InvalidUsageError

AUTHENTICATORS: dict[str, type[Authenticator]] = {
    "password": Password,
    "oauth": OAuth,
}
"""Strategy classes keyed by the ``auth_type`` used in profiles and on the CLI."""


def create_authenticator(
    auth_type: str,
    instance_name: str = DEFAULT_INSTANCE_NAME,
    options: Optional[Mapping[str, Any]] = None,
) -> Authenticator:
    """Create an authenticator by type name.

    Args:
        auth_type: One of the keys of :data:`AUTHENTICATORS`.
        instance_name: Salesforce instance name.
        options: Default HTTP client options.

    Returns:
        A new :class:`Authenticator`.

    Raises:
        InvalidUsageError: If *auth_type* is unknown.
    """
    cls = AUTHENTICATORS.get(auth_type)
    if cls is None:
        available = ", ".join(sorted(AUTHENTICATORS))
        raise InvalidUsageError(
            f"Unknown authenticator type '{auth_type}'. Available types: {available}"
        )
    return cls.create(instance_name, options)


__all__ = [
    "AUTHENTICATORS",
    "Authenticator",
    "OAuth",
    "Password",
    "create_authenticator",
]
