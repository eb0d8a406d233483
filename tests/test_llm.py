import unittest
from unittest.mock import MagicMock, patch

from senpai.ai.llm import LLMClient, LLMCompletionResponse


class TestLLMClient(unittest.TestCase):
    """Tests for the aisuite wrapper."""

    @patch("senpai.ai.llm.aisuite")
    def test_completion_returns_the_first_message(self, mock_aisuite):
        # Arrange
        message = MagicMock()
        message.model_dump.return_value = {"role": "assistant", "content": "ls -la"}
        choice = MagicMock(message=message)
        mock_client = mock_aisuite.Client.return_value
        mock_client.chat.completions.create.return_value = MagicMock(choices=[choice])
        configs = {"openai": {"api_key": "sk-test", "timeout": 30}}

        # Action
        client = LLMClient(configs)
        response = client.completion(
            model="openai:gpt-4",
            messages=[LLMClient.format_user_message("list files")],
            max_tokens=10,
        )

        # Assert
        mock_aisuite.Client.assert_called_once_with(configs)
        mock_client.chat.completions.create.assert_called_once_with(
            model="openai:gpt-4",
            messages=[{"role": "user", "content": "list files"}],
            max_tokens=10,
        )
        message.model_dump.assert_called_once_with(exclude_unset=True)
        self.assertEqual(response.content, "ls -la")

    def test_message_helpers(self):
        self.assertEqual(
            LLMClient.format_system_message("be brief"), {"role": "system", "content": "be brief"}
        )
        self.assertEqual(LLMClient.format_user_message("hi"), {"role": "user", "content": "hi"})

    def test_content_is_optional(self):
        self.assertIsNone(LLMCompletionResponse({"role": "assistant"}).content)

    def test_prompt_messages_put_the_system_prompt_first(self):
        self.assertEqual(
            LLMClient.prompt_messages("be brief", "ls"),
            [{"role": "system", "content": "be brief"}, {"role": "user", "content": "ls"}],
        )
