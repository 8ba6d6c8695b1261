from .config import ALLOWED_MODELS, DEFAULT_MAX_TOKENS, DEFAULT_MODEL, Config, load_config
from .errors import ApiError, ApiErrorKind, ConfigurationError, ValidationError, classify_error
from .session import ChatSession

__all__ = [
    "ALLOWED_MODELS",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "Config",
    "load_config",
    "ApiError",
    "ApiErrorKind",
    "ConfigurationError",
    "ValidationError",
    "classify_error",
    "ChatSession",
]
