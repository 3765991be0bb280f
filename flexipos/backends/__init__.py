"""Built-in tagging backends. Each module exposes a ``BACKEND_SPEC``."""
