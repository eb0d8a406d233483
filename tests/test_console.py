import unittest
from io import StringIO
from unittest.mock import patch

import pyperclip
from rich.console import Console

from senpai.ai.errors import EmptyInputError, ErrorKind
from senpai.ai.providers.base import Failure
from senpai.ai.renderer import RenderedOutput
from senpai.console import OutputSink, get_user_input


class TestGetUserInput(unittest.TestCase):
    """Tests for the interactive input prompt."""

    @patch("senpai.console.Prompt.ask", return_value="  ls -la  ")
    def test_answer_is_trimmed(self, mock_ask):
        self.assertEqual(get_user_input("Enter the command:"), "ls -la")
        mock_ask.assert_called_once()

    @patch("senpai.console.Prompt.ask", return_value="   ")
    def test_empty_answer_raises(self, mock_ask):
        with self.assertRaises(EmptyInputError):
            get_user_input("Enter the command:")


class TestOutputSink(unittest.TestCase):
    """Tests for terminal output and the clipboard copy."""

    def setUp(self):
        self.out = StringIO()
        self.err = StringIO()
        self.sink = OutputSink(
            console=Console(file=self.out, width=200),
            err_console=Console(file=self.err, width=200),
        )
        self.rendered = RenderedOutput(
            display="[green]ls  [/green][grey62]list files[/grey62]", plain="ls: list files"
        )

    @patch("senpai.console.pyperclip.copy")
    def test_emit_prints_display_and_copies_plain(self, mock_copy):
        self.sink.emit(self.rendered)

        self.assertEqual(self.out.getvalue(), "ls  list files\n")
        mock_copy.assert_called_once_with("ls: list files")
        self.assertIn("copied to clipboard", self.err.getvalue())

    @patch("senpai.console.pyperclip.copy", side_effect=pyperclip.PyperclipException("no clipboard"))
    def test_clipboard_failure_only_warns(self, mock_copy):
        self.sink.emit(self.rendered)

        self.assertEqual(self.out.getvalue(), "ls  list files\n")
        self.assertIn("Warning: Could not copy to clipboard: no clipboard", self.err.getvalue())

    @patch("senpai.console.pyperclip.copy")
    def test_emit_without_copy(self, mock_copy):
        self.sink.emit(self.rendered, copy=False)

        mock_copy.assert_not_called()

    def test_fail_names_provider_and_model(self):
        self.sink.fail(
            Failure(
                kind=ErrorKind.UNAUTHORIZED,
                message="HTTP 401: bad key",
                provider_id="groq",
                model="llama3-70b-8192",
            )
        )

        self.assertEqual(
            self.err.getvalue(),
            "Error: Unauthorized from groq (llama3-70b-8192): HTTP 401: bad key\n",
        )
        self.assertEqual(self.out.getvalue(), "")
