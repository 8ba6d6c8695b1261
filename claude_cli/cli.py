"""Terminal client for Anthropic's Claude models.

Subcommands: ``ask`` for a single question, ``models`` for one page of the
model list and ``chat`` for an interactive conversation.
"""
from __future__ import annotations

import argparse
import logging
import readline  # noqa: F401 – side-effect: history & line editing
import sys
from typing import Callable, Dict, List, Optional

from anthropic import Anthropic
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

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
from .core.client import ClaudeClientWrapper, ModelPage, StreamDone, TextFragment, Usage
from .utils import (
    Ansi,
    ASSISTANT_LABEL,
    ERROR_LABEL,
    RULE,
    USER_LABEL,
    WARNING_LABEL,
    Spinner,
    console,
    hint,
    muted,
    notice,
    setup_logging,
)

logger = logging.getLogger(__name__)

# Consecutive authentication failures after which the chat loop gives up.
MAX_AUTH_FAILURES = 3

CHAT_HELP = """\
Commands:
  /help              show this help
  /exit              leave the chat (Ctrl-D works too)
  /clear             forget the conversation so far
  /model             list available models
  /model MODEL_ID    switch to another model
  /stream on|off     stream replies as they are generated"""


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def print_api_error(err: ApiError) -> None:
    console.print(f"{ERROR_LABEL} API error: {escape(str(err))}")
    if err.hint:
        console.print(hint(err.hint))


def print_usage(usage: Usage) -> None:
    console.print(RULE)
    console.print(
        muted(f"Tokens used: {usage.input_tokens} input, {usage.output_tokens} output")
    )


def print_models(page: ModelPage, current: Optional[str] = None) -> None:
    table = Table(title="Available Claude models", title_justify="left")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("Released", style="dim")

    for idx, model in enumerate(page.models, start=1):
        model_id = model.id
        if model.id == current:
            model_id += " ← current"
        table.add_row(
            str(idx),
            escape(model.display_name),
            escape(model_id),
            f"{model.created_at:%Y-%m-%d}",
        )
    console.print(table)

    if page.has_more:
        console.print(
            hint("Note: more models are available. This shows the most recent ones.")
        )


# ---------------------------------------------------------------------------
# Interactive chat
# ---------------------------------------------------------------------------


class ChatCLI:
    """High-level orchestration class for the interactive REPL.

    One line of input drives one transition: slash commands go through the
    dispatch table in ``handle_command``; anything else is sent to the model.
    The loop ends on ``/exit``, EOF, or after ``max_auth_failures``
    authentication errors in a row.
    """

    def __init__(
        self,
        session: ChatSession,
        client_wrapper: ClaudeClientWrapper,
        max_tokens: int,
        max_auth_failures: int = MAX_AUTH_FAILURES,
    ):
        self.session = session
        self.client = client_wrapper
        self.max_tokens = max_tokens
        self.max_auth_failures = max_auth_failures
        self.auth_failures = 0
        self.exit_code = 0
        self._commands: Dict[str, Callable[[List[str]], bool]] = {
            "/exit": self._cmd_exit,
            "/clear": self._cmd_clear,
            "/help": self._cmd_help,
            "/model": self._cmd_model,
            "/stream": self._cmd_stream,
        }

    # ---------------- Command handling ---------------

    def handle_command(self, line: str) -> bool:
        """Handle slash commands. Return False to exit REPL."""
        parts = line.strip().split()
        if not parts:
            return True

        cmd, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(cmd)
        try:
            if handler is None:
                raise ValidationError(f"Unknown command: {cmd} (see /help)")
            return handler(args)
        except ValidationError as exc:
            console.print(f"{ERROR_LABEL} {escape(str(exc))}")
            return True

    def _cmd_exit(self, args: List[str]) -> bool:
        console.print(notice("Chat ended."))
        return False

    def _cmd_clear(self, args: List[str]) -> bool:
        self.session.clear()
        console.print(muted("History cleared."))
        return True

    def _cmd_help(self, args: List[str]) -> bool:
        console.print(CHAT_HELP, markup=False, highlight=False)
        state = "on" if self.session.streaming else "off"
        console.print(muted(f"Current model: {self.session.model} (streaming {state})"))
        return True

    def _cmd_model(self, args: List[str]) -> bool:
        if not args:
            console.print(notice("Fetching available models..."))
            try:
                page = self.client.list_models()
            except ApiError as err:
                return self._on_api_error(err)
            self.auth_failures = 0
            print_models(page, current=self.session.model)
            console.print(muted(f"Current model: {self.session.model}"))
            console.print(muted(f"Selectable: {', '.join(ALLOWED_MODELS)}"))
            return True

        if len(args) != 1:
            raise ValidationError("Usage: /model <model_id>")

        self.session.switch_model(args[0])
        console.print(muted(f"Model set to: {self.session.model}"))
        return True

    def _cmd_stream(self, args: List[str]) -> bool:
        if not args:
            state = "on" if self.session.streaming else "off"
            console.print(muted(f"Streaming is {state}."))
            return True
        if len(args) != 1 or args[0].lower() not in {"on", "off"}:
            raise ValidationError("Usage: /stream on|off")

        self.session.set_streaming(args[0].lower() == "on")
        state = "enabled" if self.session.streaming else "disabled"
        console.print(muted(f"Streaming {state}."))
        return True

    # ---------------- Model turns ---------------

    def send(self, prompt: str) -> bool:
        """Run one chat turn. Return False when the session should end."""
        try:
            if self.session.streaming:
                self._send_streaming(prompt)
            else:
                self._send_buffered(prompt)
        except ApiError as err:
            return self._on_api_error(err)
        self.auth_failures = 0
        return True

    def _send_buffered(self, prompt: str) -> None:
        with Spinner(prefix=f"{ASSISTANT_LABEL}> "):
            reply = self.client.chat(
                self.session.messages,
                prompt,
                model=self.session.model,
                max_tokens=self.max_tokens,
            )
        self.session.replace_history(reply.history)
        console.print(reply.content, markup=False, highlight=False, emoji=False, soft_wrap=True)
        print_usage(reply.usage)

    def _send_streaming(self, prompt: str) -> None:
        fragments: List[str] = []
        usage: Optional[Usage] = None

        spinner = Spinner(prefix=f"{ASSISTANT_LABEL}> ")
        spinner.start()
        try:
            for event in self.client.chat_stream(
                self.session.messages,
                prompt,
                model=self.session.model,
                max_tokens=self.max_tokens,
            ):
                if isinstance(event, TextFragment):
                    spinner.stop()
                    console.print(
                        event.text, end="", markup=False, highlight=False, emoji=False, soft_wrap=True
                    )
                    fragments.append(event.text)
                elif isinstance(event, StreamDone):
                    usage = event.usage
        finally:
            spinner.stop()
            console.print()

        # Only a completed stream reaches history.
        self.session.add_user_message(prompt)
        self.session.add_assistant_message("".join(fragments))
        if usage is not None:
            print_usage(usage)

    def _on_api_error(self, err: ApiError) -> bool:
        logger.info("Request failed: %s (%s)", err, err.kind.value)
        print_api_error(err)
        if err.kind is not ApiErrorKind.AUTHENTICATION:
            return True

        self.auth_failures += 1
        if self.auth_failures < self.max_auth_failures:
            return True
        console.print(
            f"{WARNING_LABEL} Giving up after {self.auth_failures} authentication failures in a row."
        )
        self.exit_code = 1
        return False

    # ---------------- Interaction loop ---------------

    def repl(self) -> int:
        """Run the interactive read–eval–print-loop and return an exit code."""
        console.print(Panel.fit("Claude Chat CLI", style="bold magenta"))
        console.print(
            hint("Type your message and press Enter. Commands start with '/'."),
            hint(f"Current model: {self.session.model}."),
            hint("Type /help for help."),
            sep="\n",
        )

        while True:
            try:
                line = console.input(f"{USER_LABEL}> ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print()
                console.print(notice("Chat ended."))
                break

            if not line:
                continue

            if line.startswith("/"):
                if not self.handle_command(line):
                    break
                continue

            if not self.send(line):
                break

        return self.exit_code


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _build_client(config: Config) -> ClaudeClientWrapper:
    return ClaudeClientWrapper(Anthropic(api_key=config.api_key))


def cmd_ask(args: argparse.Namespace, config: Config) -> int:
    console.print(notice("Asking Claude..."))
    console.print(muted(f"Model: {config.model}"))
    console.print(muted(f"Max tokens: {config.max_tokens}"))

    client = _build_client(config)
    try:
        with Spinner():
            reply = client.ask(args.prompt, model=config.model, max_tokens=config.max_tokens)
    except ApiError as err:
        logger.info("ask failed: %s (%s)", err, err.kind.value)
        print_api_error(err)
        return 1

    console.print(Ansi.style("Claude says:", Ansi.FG_GREEN))
    console.print(reply.content, markup=False, highlight=False, emoji=False, soft_wrap=True)
    print_usage(reply.usage)
    return 0


def cmd_models(args: argparse.Namespace, config: Config) -> int:
    console.print(notice("Fetching available models..."))

    client = _build_client(config)
    try:
        page = client.list_models(after_id=args.after_id, before_id=args.before_id, limit=args.limit)
    except ApiError as err:
        logger.info("models failed: %s (%s)", err, err.kind.value)
        print_api_error(err)
        return 1

    print_models(page)
    if page.has_more and page.last_id:
        console.print(muted(f"Next page: --after-id {page.last_id}"))
    if args.after_id and page.first_id:
        console.print(muted(f"Previous page: --before-id {page.first_id}"))
    return 0


def cmd_chat(args: argparse.Namespace, config: Config) -> int:
    session = ChatSession(model=config.model, streaming=config.stream)
    return ChatCLI(session, _build_client(config), max_tokens=config.max_tokens).repl()


# ---------------------------------------------------------------------------
# Entrypoint helpers (keeping it separate simplifies __main__ handling)
# ---------------------------------------------------------------------------


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _add_model_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--model", "-m", choices=ALLOWED_MODELS, help="Claude model to use")
    parser.add_argument("--tokens", "-t", type=_positive_int, help="Max tokens for the response")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claude-cli",
        description="CLI tool for interacting with Claude models.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    ask = subparsers.add_parser("ask", help="Ask Claude a question")
    ask.add_argument("prompt", help="The question or prompt for Claude")
    _add_model_options(ask)
    ask.set_defaults(handler=cmd_ask)

    models = subparsers.add_parser("models", help="List available Claude models")
    models.add_argument("--limit", type=_positive_int, help="Number of models per page")
    models.add_argument("--after-id", help="Return the page after this model id")
    models.add_argument("--before-id", help="Return the page before this model id")
    models.set_defaults(handler=cmd_models)

    chat = subparsers.add_parser("chat", help="Chat with Claude")
    _add_model_options(chat)
    chat.add_argument("--stream", action="store_true", help="Start with streaming enabled")
    chat.set_defaults(handler=cmd_chat)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config().with_overrides(
            model=getattr(args, "model", None),
            max_tokens=getattr(args, "tokens", None),
            stream=True if getattr(args, "stream", False) else None,
        )
    except ConfigurationError as exc:
        console.print(f"{ERROR_LABEL} Configuration error: {escape(str(exc))}")
        console.print(hint("Make sure you have set ANTHROPIC_API_KEY in your .env file"))
        return 1
    logger.debug("Loaded %r", config)

    try:
        return args.handler(args, config)
    except KeyboardInterrupt:
        console.print()
        console.print(hint("Interrupted."))
        return 130


def run_cli() -> None:  # pragma: no cover
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run_cli()
