"""Construction of :class:`httpx.Client` instances from an options map.

Authenticators hold a plain mapping of client options instead of a live
client, because the base URL and default headers of an ``httpx.Client``
are fixed for its lifetime in practice: every token exchange and every
authenticated session gets its own client built from the same options.

The options map uses the following keys, everything else being forwarded to
:class:`httpx.Client` untouched (``timeout``, ``verify``, ``transport``,
``follow_redirects``, ...):

* ``base_uri`` -- becomes ``base_url``.
* ``headers`` -- default request headers.
* ``http_errors`` -- when true (the default), every response with a 4xx or
  5xx status raises :class:`httpx.HTTPStatusError`.

Example::

    client = build_client({"base_uri": "https://na1.salesforce.com", "timeout": 10})
    client.get("/services/data/")
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_error:
        # Load the body so the error handler can still inspect it.
        response.read()
        response.raise_for_status()


def build_client(options: Mapping[str, Any]) -> httpx.Client:
    """Create an :class:`httpx.Client` from an options map.

    Args:
        options: Client options, see the module docstring.

    Returns:
        A new, open client. The caller owns it and is responsible for
        closing it.
    """
    kwargs = dict(options)
    base_uri = kwargs.pop("base_uri", None)
    http_errors = kwargs.pop("http_errors", True)

    if base_uri is not None:
        kwargs["base_url"] = base_uri
    if kwargs.get("headers") is not None:
        kwargs["headers"] = dict(kwargs["headers"])

    if http_errors:
        hooks = {name: list(fns) for name, fns in (kwargs.pop("event_hooks", None) or {}).items()}
        hooks.setdefault("response", []).append(_raise_for_status)
        kwargs["event_hooks"] = hooks

    return httpx.Client(**kwargs)
