import logging
from typing import Dict, Optional

from .errors import ErrorKind
from .prompts import TaskKind, lookup
from .providers import (
    Failure,
    GatewayRequest,
    GatewayResponse,
    ProviderAdapter,
    ProviderConfig,
    create_adapter,
    select_adapter,
)


logger = logging.getLogger("senpai.ai.gateway")


def dispatch(
    kind: TaskKind,
    user_input: str,
    config: ProviderConfig,
    adapters: Optional[Dict[str, ProviderAdapter]] = None,
) -> GatewayResponse:
    """
    Sends one task to the configured provider and returns its response.

    The call is a single round trip: failures are returned as they come from the adapter,
    without retries. This function never raises; anything unexpected is reported as an
    `INTERNAL_ERROR` failure.

    Args:
        kind: The task, which selects the system prompt.
        user_input: The command, task description or error message typed by the user.
        config: A snapshot of the active provider settings.
        adapters: Adapters keyed by provider id. Defaults to a fresh
            adapter for the configured provider, closed once the call is over.
    """
    if not user_input or not user_input.strip():
        return Failure(
            kind=ErrorKind.INVALID_REQUEST,
            message="Input cannot be empty.",
            provider_id=config.provider_id,
            model=config.model,
        )

    try:
        request = GatewayRequest(system_prompt=lookup(kind), user_prompt=user_input.strip())
        owned = not adapters
        if owned:
            adapter = create_adapter(config.provider_id)
        else:
            adapter = select_adapter(config.provider_id, adapters)

        logger.debug("Dispatching %s task to %s", kind.value, adapter.provider_id)
        try:
            return adapter.invoke(request, config)
        finally:
            if owned:
                adapter.close()
    except Exception as e:
        logger.exception("Unexpected error while dispatching %s task", kind.value)
        return Failure(
            kind=ErrorKind.INTERNAL_ERROR,
            message=str(e) or type(e).__name__,
            provider_id=config.provider_id,
            model=config.model,
        )
