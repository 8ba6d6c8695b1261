"""Anthropic client wrapper for single questions, chat turns and model listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import anthropic
from anthropic import Anthropic

from .errors import classify_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Usage:
    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class Reply:
    content: str
    usage: Usage


@dataclass(frozen=True)
class ChatReply:
    content: str
    usage: Usage
    history: List[Dict[str, str]]


@dataclass(frozen=True)
class TextFragment:
    text: str


@dataclass(frozen=True)
class StreamDone:
    usage: Usage


StreamEvent = Union[TextFragment, StreamDone]


@dataclass(frozen=True)
class ModelDescriptor:
    id: str
    display_name: str
    created_at: datetime


@dataclass(frozen=True)
class ModelPage:
    models: Tuple[ModelDescriptor, ...]
    has_more: bool
    first_id: Optional[str] = None
    last_id: Optional[str] = None


class ClaudeClientWrapper:
    """Thin wrapper around the Anthropic Python SDK.

    Model id and token limit are passed on every call, so one wrapper serves
    a whole chat session even when the user switches models. SDK failures are
    re-raised as :class:`~claude_cli.core.errors.ApiError`; nothing here
    prints or exits.
    """

    def __init__(self, client: Anthropic):
        self.client = client

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_text(message: Any) -> str:
        """Join the text blocks of a Messages API response, dropping the rest."""
        return "".join(
            block.text
            for block in getattr(message, "content", None) or []
            if getattr(block, "type", None) == "text"
        )

    @staticmethod
    def _extract_usage(message: Any) -> Usage:
        usage = message.usage
        return Usage(
            input_tokens=usage.input_tokens or 0,
            output_tokens=usage.output_tokens or 0,
        )

    def _create(self, model: str, max_tokens: int, messages: List[Dict[str, str]]) -> Any:
        logger.debug(
            "Sending %d turn(s) to %s (max_tokens=%d)", len(messages), model, max_tokens
        )
        try:
            message = self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=messages,
            )
        except anthropic.AnthropicError as exc:
            raise classify_error(exc) from exc
        logger.debug(
            "Reply from %s: %s input / %s output tokens",
            model,
            message.usage.input_tokens,
            message.usage.output_tokens,
        )
        return message

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ask(self, prompt: str, *, model: str, max_tokens: int) -> Reply:
        """Send *prompt* as a single user turn."""
        message = self._create(model, max_tokens, [{"role": "user", "content": prompt}])
        return Reply(content=self._extract_text(message), usage=self._extract_usage(message))

    def chat(
        self,
        history: List[Dict[str, str]],
        prompt: str,
        *,
        model: str,
        max_tokens: int,
    ) -> ChatReply:
        """Continue *history* with *prompt*.

        The caller's list is left untouched; the returned ``history`` is a copy
        with the user turn and the assistant turn appended.
        """
        messages = list(history)
        messages.append({"role": "user", "content": prompt})
        message = self._create(model, max_tokens, messages)

        content = self._extract_text(message)
        messages.append({"role": "assistant", "content": content})
        return ChatReply(content=content, usage=self._extract_usage(message), history=messages)

    def chat_stream(
        self,
        history: List[Dict[str, str]],
        prompt: str,
        *,
        model: str,
        max_tokens: int,
    ) -> Iterator[StreamEvent]:
        """Stream a reply to *prompt* as :class:`TextFragment` events.

        The last event is always a :class:`StreamDone` carrying the usage of
        the finished message. History is not modified; callers append the
        joined fragments themselves once the stream is done.
        """
        messages = list(history)
        messages.append({"role": "user", "content": prompt})
        logger.debug(
            "Streaming %d turn(s) from %s (max_tokens=%d)", len(messages), model, max_tokens
        )
        try:
            with self.client.messages.stream(
                model=model,
                max_tokens=max_tokens,
                messages=messages,
            ) as stream:
                for text in stream.text_stream:
                    if text:
                        yield TextFragment(text)
                final = stream.get_final_message()
        except anthropic.AnthropicError as exc:
            raise classify_error(exc) from exc

        usage = self._extract_usage(final)
        logger.debug(
            "Stream from %s done: %d input / %d output tokens",
            model,
            usage.input_tokens,
            usage.output_tokens,
        )
        yield StreamDone(usage)

    def list_models(
        self,
        *,
        after_id: Optional[str] = None,
        before_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> ModelPage:
        """Return one page of available models; cursors are passed through as-is."""
        params: Dict[str, Any] = {}
        if after_id is not None:
            params["after_id"] = after_id
        if before_id is not None:
            params["before_id"] = before_id
        if limit is not None:
            params["limit"] = limit

        logger.debug("Listing models %s", params)
        try:
            page = self.client.models.list(**params)
        except anthropic.AnthropicError as exc:
            raise classify_error(exc) from exc

        # ``page.data`` rather than iterating ``page``: iteration would fetch
        # every following page too.
        models = tuple(
            ModelDescriptor(id=m.id, display_name=m.display_name, created_at=m.created_at)
            for m in page.data
        )
        return ModelPage(
            models=models,
            has_more=bool(page.has_more),
            first_id=getattr(page, "first_id", None),
            last_id=getattr(page, "last_id", None),
        )
