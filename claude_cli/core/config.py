"""Configuration loaded from the environment (and an optional ``.env`` file)."""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional, get_args

import pydantic
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from .errors import ConfigurationError

ModelId = Literal[
    "claude-opus-4-1-20250805",
    "claude-opus-4-20250514",
    "claude-3-7-sonnet-latest",
]

ALLOWED_MODELS = get_args(ModelId)
DEFAULT_MODEL = "claude-opus-4-20250514"
DEFAULT_MAX_TOKENS = 1000

# Environment variable -> Config field
ENV_VARS = {
    "ANTHROPIC_API_KEY": "api_key",
    "CLAUDE_MODEL": "model",
    "MAX_TOKENS": "max_tokens",
    "CLAUDE_STREAM": "stream",
}


class Config(BaseModel):
    """Validated, immutable settings for one process invocation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: str = Field(min_length=1)
    model: ModelId = DEFAULT_MODEL
    max_tokens: PositiveInt = DEFAULT_MAX_TOKENS
    stream: bool = False

    def with_overrides(
        self,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        stream: Optional[bool] = None,
    ) -> "Config":
        """Return a re-validated copy with the given fields replaced."""
        data = self.model_dump()
        if model is not None:
            data["model"] = model
        if max_tokens is not None:
            data["max_tokens"] = max_tokens
        if stream is not None:
            data["stream"] = stream
        return _validate(data)

    def __repr__(self) -> str:
        # Never echo the key into logs or tracebacks.
        return f"Config(model={self.model!r}, max_tokens={self.max_tokens}, stream={self.stream})"


def _validate(data: dict) -> Config:
    try:
        return Config.model_validate(data)
    except pydantic.ValidationError as exc:
        problems = []
        for err in exc.errors():
            field = ".".join(str(p) for p in err["loc"]) or "config"
            problems.append(f"{field}: {err['msg']}")
        raise ConfigurationError("; ".join(problems)) from exc


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """Build a :class:`Config` from *env* (defaults to ``os.environ``).

    When reading the real environment a ``.env`` file in the working
    directory is loaded first; variables that are already set win.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    data = {}
    for var, field in ENV_VARS.items():
        value = env.get(var)
        if value is None:
            continue
        value = value.strip()
        # Empty optional values fall back to their defaults; an empty key is
        # still reported as missing by validation.
        if value or field == "api_key":
            data[field] = value

    if "api_key" not in data:
        raise ConfigurationError("ANTHROPIC_API_KEY is not set")
    return _validate(data)
