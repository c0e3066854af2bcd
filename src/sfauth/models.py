"""Pydantic models shared across sfauth modules.

The models fall into two groups:

**Wire models** -- parsed from provider responses:
    :class:`TokenResponse`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig` and :class:`Profile`.

All models use Pydantic v2. Models that mirror provider payloads or accept
user extensions use ``extra="allow"`` so that unknown keys are preserved in
``model_extra``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from sfauth.constants import DEFAULT_INSTANCE_NAME


# --- Wire Models ---


class TokenResponse(BaseModel):
    """Body of a ``/services/oauth2/token`` response.

    Every field is optional because the same endpoint answers failures with
    an ``error`` / ``error_description`` pair instead. Only ``access_token``
    and ``instance_url`` are typed; the informational fields keep whatever
    JSON value the provider sends. Use
    :meth:`is_complete` to check that the exchange produced a usable session.

    Example::

        token = TokenResponse.model_validate(response.json())
        if token.is_complete():
            client = build_client({"base_uri": token.instance_url})
    """

    model_config = ConfigDict(extra="allow")

    access_token: Optional[str] = None
    instance_url: Optional[str] = None
    id: Optional[Any] = None
    token_type: Optional[Any] = None
    issued_at: Optional[Any] = None
    signature: Optional[Any] = None
    scope: Optional[Any] = None
    refresh_token: Optional[Any] = None
    error: Optional[Any] = None
    error_description: Optional[Any] = None

    def is_complete(self) -> bool:
        """Whether both ``access_token`` and ``instance_url`` are non-empty."""
        return bool(self.access_token) and bool(self.instance_url)


# --- Configuration Models ---


class RequestConfig(BaseModel):
    """HTTP settings applied to the token exchange and the authenticated client."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra default headers"
    )

    def to_client_options(self) -> dict[str, Any]:
        """Convert to the options map understood by :func:`sfauth.client.build_client`."""
        options: dict[str, Any] = {
            "timeout": self.timeout,
            "verify": self.verify_ssl,
        }
        if self.headers:
            options["headers"] = dict(self.headers)
        return options


class Profile(BaseModel):
    """Per-org profile stored as JSON under the ``profiles/`` config directory.

    A profile names the strategy to use, the Salesforce instance to log in
    to, and where each credential parameter comes from. Values in
    ``parameters`` are credential *sources* (``env:VAR``, ``file:/path``,
    ``prompt``), never the secrets themselves; they are resolved at login
    time by :func:`~sfauth.config.resolve_parameters`.

    Example::

        Profile(
            name="prod",
            auth_type="password",
            instance_name="salesforce.com",
            parameters={
                "client_id": "env:SF_CLIENT_ID",
                "client_secret": "env:SF_CLIENT_SECRET",
                "username": "env:SF_USERNAME",
                "password": "prompt",
            },
        )

    See Also:
        :func:`~sfauth.config.load_profile`: Deserialise a profile by name.
        :func:`~sfauth.config.save_profile`: Persist a profile to disk.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    auth_type: str = Field(
        default="password", description="Authenticator type: password, oauth"
    )
    instance_name: str = Field(
        default=DEFAULT_INSTANCE_NAME,
        description="Salesforce instance name, without scheme or trailing slash",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    parameters: dict[str, str] = Field(
        default_factory=dict,
        description="Credential parameter name -> source (env:VAR, file:/path, prompt)",
    )
