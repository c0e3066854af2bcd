"""Named defaults for the Salesforce token endpoints.

These are plain module constants so that strategies, configuration models
and the CLI agree on the same fallbacks without sharing mutable state.
"""

DEFAULT_INSTANCE_NAME = "salesforce.com"
"""Instance name used when none is given; resolves to the production login host."""

DEFAULT_INSTANCE_ENDPOINT = f"https://login.{DEFAULT_INSTANCE_NAME}"
"""Production OAuth host, the default ``base_uri`` of the OAuth strategy."""

TOKEN_PATH = "/services/oauth2/token"
"""Path of the OAuth2 token endpoint, relative to the login host."""

AUTHORIZATION_SCHEME = "OAuth"
"""Scheme prefix of the ``Authorization`` header sent with the access token."""
