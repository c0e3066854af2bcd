"""Built-in sfauth CLI commands (``login``, ``refresh``, ``verify-secret``, ``profile``)."""
