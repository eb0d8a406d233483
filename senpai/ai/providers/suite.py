import logging
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from ..llm import LLMClient
from .base import GatewayRequest, ProviderAdapter, ProviderConfig


logger = logging.getLogger("senpai.ai.providers.suite")


class SuiteAdapter(ProviderAdapter):
    """
    A hosted vendor reached through its official SDK, via aisuite.

    aisuite normalizes every vendor reply to the OpenAI shape, so the text is always
    `choices[0].message.content`.
    """

    suite_provider: str = ""
    completion_kwargs: Mapping = MappingProxyType({})

    def __init__(self, client_factory: Optional[Callable[[Dict], LLMClient]] = None):
        self._client_factory = client_factory or LLMClient

    def _send(
        self, request: GatewayRequest, config: ProviderConfig, model: Optional[str]
    ) -> Optional[str]:
        provider_configs = {
            self.suite_provider: {"api_key": config.api_key, "timeout": self.timeout}
        }
        if config.base_url:
            provider_configs[self.suite_provider]["base_url"] = config.base_url

        client = self._client_factory(provider_configs)
        logger.debug("Sending %s request for model %s", self.suite_provider, model)
        response = client.completion(
            model=f"{self.suite_provider}:{model}",
            messages=LLMClient.prompt_messages(request.system_prompt, request.user_prompt),
            **self.completion_kwargs,
        )
        return response.content


class OpenAIAdapter(SuiteAdapter):
    provider_id = "openai"
    display_name = "OpenAI"
    suite_provider = "openai"


class GroqAdapter(SuiteAdapter):
    provider_id = "groq"
    display_name = "Groq"
    suite_provider = "groq"
    default_model = "llama3-70b-8192"


class ClaudeAdapter(SuiteAdapter):
    provider_id = "claude"
    display_name = "Anthropic"
    suite_provider = "anthropic"
    # The Messages API rejects requests without an explicit output limit.
    completion_kwargs = MappingProxyType({"max_tokens": 1024})
