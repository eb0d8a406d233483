"""
The `providers` package holds one adapter per LLM backend and the mapping used to pick
the active one from configuration.
"""

import logging
from typing import Dict, Optional

from .base import (
    Failure,
    GatewayRequest,
    GatewayResponse,
    ProviderAdapter,
    ProviderConfig,
    Success,
)
from .http import (
    DeepInfraAdapter,
    HuggingFaceAdapter,
    OllamaAdapter,
    OpenRouterAdapter,
    ReplicateAdapter,
    ServerAdapter,
    TogetherAdapter,
)
from .suite import ClaudeAdapter, GroqAdapter, OpenAIAdapter


logger = logging.getLogger("senpai.ai.providers")

# Unknown or unset providers fall back to the managed service.
DEFAULT_PROVIDER = "server"

ADAPTER_TYPES = (
    ServerAdapter,
    OllamaAdapter,
    OpenAIAdapter,
    GroqAdapter,
    ClaudeAdapter,
    OpenRouterAdapter,
    TogetherAdapter,
    HuggingFaceAdapter,
    ReplicateAdapter,
    DeepInfraAdapter,
)


_ADAPTER_TYPES_BY_ID = {adapter_type.provider_id: adapter_type for adapter_type in ADAPTER_TYPES}


def _warn_fallback(provider_id: Optional[str]):
    if provider_id:
        logger.warning(
            "Unknown provider '%s', falling back to '%s'", provider_id, DEFAULT_PROVIDER
        )


def build_adapters() -> Dict[str, ProviderAdapter]:
    return {provider_id: adapter_type() for provider_id, adapter_type in _ADAPTER_TYPES_BY_ID.items()}


def create_adapter(provider_id: Optional[str]) -> ProviderAdapter:
    """Instantiates only the adapter for `provider_id`, with the same fallback as `select_adapter`."""
    adapter_type = _ADAPTER_TYPES_BY_ID.get(provider_id or "")
    if adapter_type is None:
        _warn_fallback(provider_id)
        adapter_type = _ADAPTER_TYPES_BY_ID[DEFAULT_PROVIDER]
    return adapter_type()


def select_adapter(
    provider_id: Optional[str], adapters: Dict[str, ProviderAdapter]
) -> ProviderAdapter:
    adapter = adapters.get(provider_id or "")
    if adapter is None:
        _warn_fallback(provider_id)
        adapter = adapters[DEFAULT_PROVIDER]
    return adapter


__all__ = [
    "ADAPTER_TYPES",
    "DEFAULT_PROVIDER",
    "Failure",
    "GatewayRequest",
    "GatewayResponse",
    "ProviderAdapter",
    "ProviderConfig",
    "Success",
    "build_adapters",
    "create_adapter",
    "select_adapter",
]
