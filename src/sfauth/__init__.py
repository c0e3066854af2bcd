"""sfauth -- authenticate against the Salesforce API and get a ready-to-use HTTP client.

Pick a strategy, hand it your credentials, and receive an
:class:`httpx.Client` whose base URL is your org's instance URL and whose
requests carry the access token::

    from sfauth import Password

    client = Password.create("salesforce.com").authenticate({
        "client_id": "...",
        "client_secret": "...",
        "username": "...",
        "password": "...",
    })
    client.get("/services/data/")

Failures raise :class:`~sfauth.exceptions.AuthenticationError`, whose
parameter snapshot never contains a plaintext ``client_secret`` or
``password``.

Modules:
    authenticator: The :class:`Authenticator` strategies and factory.
    obfuscate: Secret redaction for error contexts.
    client: Options-map to :class:`httpx.Client` construction.
    models: Pydantic models for token responses and profiles.
    config: XDG-aware profile management and credential sources.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

import logging  # noqa: E402

from sfauth.authenticator import (  # noqa: E402
    Authenticator,
    OAuth,
    Password,
    create_authenticator,
)
from sfauth.exceptions import AuthenticationError, ErrorKind  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Authenticator",
    "AuthenticationError",
    "ErrorKind",
    "OAuth",
    "Password",
    "create_authenticator",
]
