"""State of one interactive chat session."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .config import ALLOWED_MODELS
from .errors import ValidationError

logger = logging.getLogger(__name__)


class ChatSession:
    """Conversation history plus the model and streaming choice for it.

    Nothing here is persisted; a session lives as long as the ``chat``
    subcommand does.
    """

    def __init__(
        self,
        model: str,
        messages: Optional[List[Dict[str, str]]] = None,
        streaming: bool = False,
    ) -> None:
        if model not in ALLOWED_MODELS:
            raise ValidationError(f"Unknown model id: {model}")
        self.model = model
        self.messages: List[Dict[str, str]] = list(messages or [])
        self.streaming = streaming

    def add_user_message(self, content: str) -> None:
        self.messages.append({"role": "user", "content": content})

    def add_assistant_message(self, content: str) -> None:
        self.messages.append({"role": "assistant", "content": content})

    def replace_history(self, messages: List[Dict[str, str]]) -> None:
        """Adopt the history returned by a buffered chat turn."""
        self.messages = list(messages)

    def clear(self) -> None:
        logger.debug("Clearing %d turns", len(self.messages))
        self.messages = []

    def switch_model(self, model: str) -> None:
        if model not in ALLOWED_MODELS:
            raise ValidationError(f"Unknown model id: {model}")
        logger.debug("Switching model %s -> %s", self.model, model)
        self.model = model

    def set_streaming(self, enabled: bool) -> None:
        logger.debug("Streaming %s", "enabled" if enabled else "disabled")
        self.streaming = enabled
