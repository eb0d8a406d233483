from dataclasses import dataclass
import aisuite

from typing import Dict, List, Optional


@dataclass
class LLMCompletionResponse:
    """The assistant message of a completion, as a plain dict."""

    assistant_message: Dict

    @property
    def content(self) -> Optional[str]:
        return self.assistant_message.get("content")


class LLMClient:
    """
    Thin wrapper around `aisuite.Client` for the SDK-backed providers.

    Every request senpai makes is a single system + user exchange, so the client only
    needs to build those two messages and read back the first choice.
    """

    def __init__(self, provider_configs: Dict):
        """
        Args:
            provider_configs: aisuite provider settings keyed by aisuite provider name,
                e.g. {"groq": {"api_key": "...", "timeout": 30}}.
        """
        self.client = aisuite.Client(provider_configs)

    @staticmethod
    def format_system_message(content: str) -> Dict:
        return {"role": "system", "content": content}

    @staticmethod
    def format_user_message(content: str) -> Dict:
        return {"role": "user", "content": content}

    @classmethod
    def prompt_messages(cls, system_prompt: str, user_prompt: str) -> List[Dict]:
        return [cls.format_system_message(system_prompt), cls.format_user_message(user_prompt)]

    def completion(self, model: str, messages: List[Dict], **kwargs) -> LLMCompletionResponse:
        """
        Runs one chat completion.

        Args:
            model: "<aisuite provider>:<model name>", e.g. "anthropic:claude-3-haiku-20240307".
            messages: The conversation, oldest first.
            **kwargs: Passed through to the vendor, e.g. `max_tokens`.
        """
        response = self.client.chat.completions.create(
            model=model, messages=messages, **kwargs
        )

        # Unset fields are left out so vendors that reject nulls are not tripped up.
        message = response.choices[0].message.model_dump(exclude_unset=True)
        return LLMCompletionResponse(assistant_message=message)
