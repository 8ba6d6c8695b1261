from .ansi import (
    Ansi,
    USER_LABEL,
    ASSISTANT_LABEL,
    ERROR_LABEL,
    WARNING_LABEL,
    RULE,
    console,
    hint,
    muted,
    notice,
)
from .log import setup_logging
from .spinner import Spinner

__all__ = [
    "Ansi",
    "USER_LABEL",
    "ASSISTANT_LABEL",
    "ERROR_LABEL",
    "WARNING_LABEL",
    "RULE",
    "console",
    "hint",
    "muted",
    "notice",
    "setup_logging",
    "Spinner",
]
