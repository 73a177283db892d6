"""Default configuration values.

DEFAULT_CONFIG is a plain dict so that it can be passed straight to
deep_merge, which copies its inputs.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "identity": {
        "name": "Claude Checkpoint",
        "email": "claude@checkpoint.local",
    },
    "resolver": {
        "max_candidates": 5,
    },
    "list": {
        "default_limit": 10,
    },
    "hooks": {
        "stdin_timeout_ms": 100,
    },
    "ui": {
        "language": "auto",
    },
}
