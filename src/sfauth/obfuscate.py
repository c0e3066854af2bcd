"""Redaction of credential parameters for error contexts and logs.

Secrets are replaced by salted bcrypt hashes rather than a fixed mask so
that an operator holding the original value can still confirm which
credential was used, via :func:`verify_secret`, without the plaintext ever
being written anywhere.

bcrypt is slow but not memory-hard; a short or guessable secret can still be
brute-forced offline from a leaked hash.
"""

from __future__ import annotations

import base64
import hashlib
from typing import Any, Mapping

import bcrypt

SECRET_KEYS: tuple[str, ...] = ("client_secret", "password")
"""Parameter names whose values are hashed by :func:`obfuscate`."""

BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of its input.
_BCRYPT_MAX_BYTES = 72


def _prepare(secret: Any) -> bytes:
    raw = str(secret).encode("utf-8")
    if len(raw) > _BCRYPT_MAX_BYTES:
        raw = base64.b64encode(hashlib.sha256(raw).digest())
    return raw


def hash_secret(secret: Any) -> str:
    """Return a salted bcrypt hash of *secret*.

    Hashing the same value twice gives different results; compare with
    :func:`verify_secret` instead of ``==``.
    """
    return bcrypt.hashpw(_prepare(secret), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("ascii")


def verify_secret(secret: Any, hashed: str) -> bool:
    """Check *secret* against a hash produced by :func:`hash_secret`.

    Args:
        secret: The candidate plaintext value.
        hashed: A bcrypt hash string.

    Returns:
        ``True`` if they match. Malformed hashes never match.
    """
    try:
        return bcrypt.checkpw(_prepare(secret), hashed.encode("ascii"))
    except (ValueError, TypeError, UnicodeEncodeError):
        return False


def obfuscate(
    parameters: Mapping[str, Any],
    keys: tuple[str, ...] = SECRET_KEYS,
) -> dict[str, Any]:
    """Return a copy of *parameters* with secret values hashed.

    Keys listed in *keys* that are present with a non-``None`` value are
    replaced by :func:`hash_secret` output. Every other key is copied as is.
    The input mapping is never modified.

    Args:
        parameters: Authenticator parameters (``client_id``, ``password``, ...).
        keys: Names of the parameters to hash.

    Returns:
        A new dict safe to embed in an error context or log record.
    """
    redacted = dict(parameters)
    for key in keys:
        if redacted.get(key) is not None:
            redacted[key] = hash_secret(redacted[key])
    return redacted
