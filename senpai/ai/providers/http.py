"""
Backends spoken to directly over their REST APIs with `requests`.

Each adapter only describes its endpoint, auth headers, request body and where the text
lives in the reply; `HttpAdapter._send` does the round trip and classifies failures.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import ErrorKind
from .base import (
    LOCAL_TIMEOUT,
    GatewayRequest,
    ProviderAdapter,
    ProviderConfig,
    ProviderError,
    status_to_kind,
)


logger = logging.getLogger("senpai.ai.providers.http")

ERROR_DETAIL_LIMIT = 200


def _chat_messages(request: GatewayRequest) -> List[Dict]:
    return [
        {"role": "system", "content": request.system_prompt},
        {"role": "user", "content": request.user_prompt},
    ]


def _error_detail(response: requests.Response) -> str:
    """Pulls the most specific error message out of a failed response."""
    try:
        data = response.json()
    except ValueError:
        return (response.text or "")[:ERROR_DETAIL_LIMIT]

    if isinstance(data, dict):
        error = data.get("error") or data.get("detail") or data.get("message")
        if isinstance(error, dict):
            error = error.get("message")
        if error:
            return str(error)[:ERROR_DETAIL_LIMIT]
    return str(data)[:ERROR_DETAIL_LIMIT]


class HttpAdapter(ProviderAdapter):
    default_base_url: str = ""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def close(self):
        self.session.close()

    def base_url(self, config: ProviderConfig) -> str:
        return (config.base_url or self.default_base_url).rstrip("/")

    def endpoint(self, config: ProviderConfig, model: Optional[str]) -> str:
        raise NotImplementedError

    def headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.credential(config)}",
        }

    def build_payload(self, request: GatewayRequest, model: Optional[str]) -> Dict:
        raise NotImplementedError

    def extract_text(self, data: Any) -> Optional[str]:
        raise NotImplementedError

    def classify(self, exc: Exception) -> ErrorKind:
        # ConnectTimeout is both a Timeout and a ConnectionError; report it as a timeout.
        if isinstance(exc, requests.exceptions.Timeout):
            return ErrorKind.TIMEOUT
        if isinstance(exc, requests.exceptions.ConnectionError):
            return ErrorKind.UNREACHABLE
        if isinstance(exc, requests.exceptions.RequestException):
            return ErrorKind.UPSTREAM_ERROR
        return super().classify(exc)

    def _send(
        self, request: GatewayRequest, config: ProviderConfig, model: Optional[str]
    ) -> Optional[str]:
        url = self.endpoint(config, model)
        logger.debug("POST %s (provider=%s, model=%s)", url, self.provider_id, model)

        response = self.session.post(
            url,
            json=self.build_payload(request, model),
            headers=self.headers(config),
            timeout=self.timeout,
        )
        logger.debug("%s answered with HTTP %s", self.provider_id, response.status_code)

        if not 200 <= response.status_code < 300:
            raise ProviderError(
                status_to_kind(response.status_code),
                f"HTTP {response.status_code}: {_error_detail(response)}",
            )

        try:
            data = response.json()
        except ValueError:
            raise ProviderError(ErrorKind.UPSTREAM_ERROR, "The reply is not valid JSON.")

        try:
            text = self.extract_text(data)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderError(
                ErrorKind.UPSTREAM_ERROR, f"Unexpected reply shape ({type(e).__name__}: {e})."
            )

        if text is not None and not isinstance(text, str):
            raise ProviderError(
                ErrorKind.UPSTREAM_ERROR,
                f"Expected text in the reply but got {type(text).__name__}.",
            )
        return text


class ServerAdapter(HttpAdapter):
    """The managed service: a proxy that holds the vendor keys and authenticates users by JWT."""

    provider_id = "server"
    display_name = "senpai Cloud"
    default_base_url = "http://localhost:3000"
    requires_model = False
    credential_setting = "jwt"

    def credential(self, config: ProviderConfig) -> Optional[str]:
        return config.auth_token

    def endpoint(self, config, model):
        return f"{self.base_url(config)}/api/askai"

    def build_payload(self, request, model):
        return {"systemPrompt": request.system_prompt, "userPrompt": request.user_prompt}

    def extract_text(self, data):
        return data["response"]


class OllamaAdapter(HttpAdapter):
    provider_id = "ollama"
    display_name = "Ollama"
    default_base_url = "http://localhost:11434"
    default_model = "llama3"
    requires_api_key = False
    timeout = LOCAL_TIMEOUT

    def headers(self, config):
        return {"Content-Type": "application/json"}

    def endpoint(self, config, model):
        return f"{self.base_url(config)}/api/chat"

    def build_payload(self, request, model):
        return {"model": model, "messages": _chat_messages(request), "stream": False}

    def extract_text(self, data):
        return data["message"]["content"]


class OpenAICompatibleAdapter(HttpAdapter):
    """Vendors exposing the OpenAI chat completions API under their own base URL."""

    def endpoint(self, config, model):
        return f"{self.base_url(config)}/chat/completions"

    def build_payload(self, request, model):
        return {"model": model, "messages": _chat_messages(request)}

    def extract_text(self, data):
        return data["choices"][0]["message"]["content"]


class OpenRouterAdapter(OpenAICompatibleAdapter):
    provider_id = "openrouterai"
    display_name = "OpenRouter"
    default_base_url = "https://openrouter.ai/api/v1"


class TogetherAdapter(OpenAICompatibleAdapter):
    provider_id = "togetherai"
    display_name = "Together AI"
    default_base_url = "https://api.together.xyz/v1"


class DeepInfraAdapter(OpenAICompatibleAdapter):
    provider_id = "deepinfra"
    display_name = "DeepInfra"
    default_base_url = "https://api.deepinfra.com/v1/openai"


class HuggingFaceAdapter(HttpAdapter):
    """The Inference API takes a single prompt string and answers with generated text."""

    provider_id = "huggingface"
    display_name = "Hugging Face"
    default_base_url = "https://api-inference.huggingface.co"
    max_new_tokens = 512

    def endpoint(self, config, model):
        return f"{self.base_url(config)}/models/{model}"

    def build_payload(self, request, model):
        return {
            "inputs": f"{request.system_prompt.strip()}\n\n{request.user_prompt}",
            "parameters": {"max_new_tokens": self.max_new_tokens, "return_full_text": False},
        }

    def extract_text(self, data):
        if isinstance(data, dict) and data.get("error"):
            raise ProviderError(ErrorKind.UPSTREAM_ERROR, str(data["error"]))
        return data[0]["generated_text"]


class ReplicateAdapter(HttpAdapter):
    """
    Runs a prediction synchronously: `Prefer: wait` holds the connection open until the
    model finishes, so a prediction that is still running when the reply arrives counts
    as a timeout.
    """

    provider_id = "replicate"
    display_name = "Replicate"
    default_base_url = "https://api.replicate.com/v1"
    max_new_tokens = 512

    def headers(self, config):
        headers = super().headers(config)
        headers["Prefer"] = f"wait={int(self.timeout)}"
        return headers

    def endpoint(self, config, model):
        return f"{self.base_url(config)}/models/{model}/predictions"

    def build_payload(self, request, model):
        return {
            "input": {
                "prompt": request.user_prompt,
                "system_prompt": request.system_prompt,
                "max_new_tokens": self.max_new_tokens,
            }
        }

    def extract_text(self, data):
        status = data.get("status")
        if status in ("failed", "canceled"):
            raise ProviderError(
                ErrorKind.UPSTREAM_ERROR, f"Prediction {status}: {data.get('error')}"
            )
        if status != "succeeded":
            raise ProviderError(
                ErrorKind.TIMEOUT, f"Prediction still {status} after {self.timeout}s."
            )

        output = data.get("output")
        if isinstance(output, list):
            return "".join(str(token) for token in output)
        return output
