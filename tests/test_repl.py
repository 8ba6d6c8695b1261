from unittest.mock import patch

import anthropic

from .test_base import BaseClaudeCLITest, DEFAULT_MODEL, make_message, make_stream, status_error


class TestREPL(BaseClaudeCLITest):
    @patch("builtins.input")
    def test_repl_basic_interaction(self, mock_input):
        """Test basic REPL interaction with mocked input"""
        mock_input.side_effect = ["Hello", "/exit"]
        self.mock_client.messages.create.return_value = make_message("Hi there!", 8, 3)

        self.assertEqual(self.chat_cli.repl(), 0)

        self.assertEqual(
            self.test_session.messages,
            [
                {"role": "user", "content": "Hello"},
                {"role": "assistant", "content": "Hi there!"},
            ],
        )
        output = self.printed()
        self.assertIn("Hi there!", output)
        self.assertIn("Tokens used: 8 input, 3 output", output)

    @patch("builtins.input")
    def test_repl_with_commands(self, mock_input):
        """Model switches apply to the following turns"""
        mock_input.side_effect = [
            "Hello",
            "",
            "/model claude-3-7-sonnet-latest",
            "How are you?",
            "/exit",
        ]
        self.mock_client.messages.create.side_effect = [
            make_message("Hi there!"),
            make_message("I'm doing well!"),
        ]

        self.chat_cli.repl()

        self.assertEqual(self.chat_cli.session.model, "claude-3-7-sonnet-latest")
        self.assertEqual(len(self.chat_cli.session.messages), 4)
        models = [c.kwargs["model"] for c in self.mock_client.messages.create.call_args_list]
        self.assertEqual(models, [DEFAULT_MODEL, "claude-3-7-sonnet-latest"])

    @patch("builtins.input")
    def test_clear_starts_fresh(self, mock_input):
        """After /clear the next request carries only the new turn"""
        mock_input.side_effect = ["First", "/clear", "Second", "/exit"]
        self.mock_client.messages.create.side_effect = [make_message("One"), make_message("Two")]

        self.chat_cli.repl()

        sent = self.mock_client.messages.create.call_args.kwargs["messages"]
        self.assertEqual(sent, [{"role": "user", "content": "Second"}])
        self.assertEqual(len(self.test_session.messages), 2)

    @patch("builtins.input")
    def test_streaming_turn(self, mock_input):
        """Streamed fragments are shown, joined into history and followed by usage"""
        self.test_session.set_streaming(True)
        mock_input.side_effect = ["Hi", "/exit"]
        self.mock_client.messages.stream.return_value = make_stream(["Hel", "lo"], 5, 2)

        self.chat_cli.repl()

        output = self.printed()
        self.assertIn("Hello", output)
        self.assertIn("Tokens used: 5 input, 2 output", output)
        self.assertEqual(self.test_session.messages[-1], {"role": "assistant", "content": "Hello"})
        self.assertEqual(len(self.test_session.messages), 2)
        self.mock_client.messages.create.assert_not_called()

    @patch("builtins.input")
    def test_bogus_model_keeps_session_open(self, mock_input):
        mock_input.side_effect = ["/model bogus-id", "Still there?", "/exit"]
        self.mock_client.messages.create.return_value = make_message("Yes.")

        self.assertEqual(self.chat_cli.repl(), 0)

        self.assertEqual(self.test_session.model, DEFAULT_MODEL)
        self.assertIn("Unknown model id: bogus-id", self.printed())
        self.assertEqual(self.test_session.messages[-1]["content"], "Yes.")

    @patch("builtins.input")
    def test_api_error_does_not_end_session(self, mock_input):
        """A failed turn is reported and leaves history untouched"""
        mock_input.side_effect = ["Hello", "Again", "/exit"]
        self.mock_client.messages.create.side_effect = [
            status_error(anthropic.RateLimitError, 429),
            make_message("Hi!"),
        ]

        self.assertEqual(self.chat_cli.repl(), 0)

        self.assertIn("Rate limit exceeded", self.printed())
        self.assertEqual(
            self.test_session.messages,
            [{"role": "user", "content": "Again"}, {"role": "assistant", "content": "Hi!"}],
        )

    @patch("builtins.input")
    def test_repeated_auth_failures_end_session(self, mock_input):
        mock_input.side_effect = ["one", "two", "three", "never read"]
        self.mock_client.messages.create.side_effect = status_error(anthropic.AuthenticationError, 401)

        self.assertEqual(self.chat_cli.repl(), 1)

        self.assertEqual(mock_input.call_count, 3)
        self.assertEqual(self.test_session.messages, [])
        self.assertIn("ANTHROPIC_API_KEY", self.printed())

    @patch("builtins.input")
    def test_successful_turn_resets_auth_failures(self, mock_input):
        auth_error = status_error(anthropic.AuthenticationError, 401)
        mock_input.side_effect = ["a", "b", "c", "d", "/exit"]
        self.mock_client.messages.create.side_effect = [
            auth_error,
            auth_error,
            make_message("ok"),
            auth_error,
        ]

        self.assertEqual(self.chat_cli.repl(), 0)
        self.assertEqual(self.chat_cli.auth_failures, 1)

    @patch("builtins.input")
    def test_eof_exits(self, mock_input):
        mock_input.side_effect = EOFError

        self.assertEqual(self.chat_cli.repl(), 0)
        self.assertIn("Chat ended.", self.printed())

    def test_buffered_and_streamed_display_match(self):
        """Both reply paths print the model text verbatim and identically"""
        reply = "Use :smile: or :warning: here [bold]x[/bold]"
        self.mock_client.messages.create.return_value = make_message(reply)
        self.assertTrue(self.chat_cli.send("first"))
        buffered = self.printed()

        self.output.seek(0)
        self.output.truncate()
        self.test_session.set_streaming(True)
        self.mock_client.messages.stream.return_value = make_stream(
            ["Use :smi", "le: or :warn", "ing: here [bo", "ld]x[/bold]"]
        )
        self.assertTrue(self.chat_cli.send("second"))
        streamed = self.printed()

        self.assertIn(reply, buffered)
        self.assertEqual(buffered, streamed)
