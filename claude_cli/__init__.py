"""Command-line client for Anthropic's Claude models.

Features
--------
1. One-shot questions: `claude-cli ask "..."` prints the answer and its token usage.
2. Model listing: `claude-cli models` shows one page of the models the API offers.
3. Interactive chat: `claude-cli chat` keeps the conversation history in memory, can
   switch models mid-conversation with `/model` and stream replies with `/stream on`.

Run `python -m claude_cli` or use the `claude-cli` console script as the entry point.
"""
# Re-export useful symbols for convenience
from .core import (
    ALLOWED_MODELS,
    ApiError,
    ApiErrorKind,
    ChatSession,
    Config,
    ConfigurationError,
    ValidationError,
    load_config,
)
from .core.client import ClaudeClientWrapper
from .cli import ChatCLI, main, run_cli

__all__ = [
    "ALLOWED_MODELS",
    "ApiError",
    "ApiErrorKind",
    "ChatSession",
    "Config",
    "ConfigurationError",
    "ValidationError",
    "load_config",
    "ClaudeClientWrapper",
    "ChatCLI",
    "main",
    "run_cli",
]
