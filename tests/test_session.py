import unittest

from claude_cli import ALLOWED_MODELS, ChatSession, ValidationError
from .test_base import DEFAULT_MODEL


class TestSession(unittest.TestCase):
    def test_session_creation(self):
        """A new session starts empty with streaming off"""
        session = ChatSession(model=DEFAULT_MODEL)
        self.assertEqual(session.model, DEFAULT_MODEL)
        self.assertEqual(session.messages, [])
        self.assertFalse(session.streaming)

    def test_session_rejects_unknown_initial_model(self):
        with self.assertRaises(ValidationError):
            ChatSession(model="bogus-id")

    def test_switch_model(self):
        session = ChatSession(model=DEFAULT_MODEL)
        for model in ALLOWED_MODELS:
            session.switch_model(model)
            self.assertEqual(session.model, model)

        with self.assertRaises(ValidationError):
            session.switch_model("bogus-id")
        self.assertEqual(session.model, ALLOWED_MODELS[-1])

    def test_replace_history_copies(self):
        session = ChatSession(model=DEFAULT_MODEL)
        history = [{"role": "user", "content": "Hello"}]
        session.replace_history(history)
        history.append({"role": "assistant", "content": "late"})
        self.assertEqual(len(session.messages), 1)

    def test_clear(self):
        session = ChatSession(model=DEFAULT_MODEL)
        session.add_user_message("Hello")
        session.add_assistant_message("Hi there!")
        session.clear()
        self.assertEqual(session.messages, [])
