"""
Shared contract for every LLM backend.

An adapter turns a `GatewayRequest` into one provider call and always answers with a
`GatewayResponse`: either `Success` with non-empty text or `Failure` with an `ErrorKind`.
Vendor exceptions never leave `ProviderAdapter.invoke`.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Union

from ..errors import ErrorKind


logger = logging.getLogger("senpai.ai.providers")

# Seconds. Hosted APIs must answer within HOSTED_TIMEOUT; a local daemon generating on
# consumer hardware gets more room.
HOSTED_TIMEOUT = 30
LOCAL_TIMEOUT = 120


@dataclass(frozen=True)
class ProviderConfig:
    """A snapshot of the active backend and its credentials, taken once per call."""

    provider_id: str = ""
    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    auth_token: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Mapping) -> "ProviderConfig":
        """
        Builds a snapshot from the raw key/value settings of the config store.

        `serverUrl` and `ollamaUrl` are the base URLs of the managed server and of the
        Ollama daemon; any other provider may override its endpoint with `baseUrl`.
        """
        provider_id = (settings.get("provider") or "").strip()
        if provider_id == "server":
            base_url = settings.get("serverUrl")
        elif provider_id == "ollama":
            base_url = settings.get("ollamaUrl")
        else:
            base_url = settings.get("baseUrl")

        return cls(
            provider_id=provider_id,
            api_key=settings.get("apiKey") or None,
            model=settings.get("model") or None,
            base_url=base_url or None,
            auth_token=settings.get("jwt") or None,
        )


@dataclass(frozen=True)
class GatewayRequest:
    system_prompt: str
    user_prompt: str

    def is_valid(self) -> bool:
        return bool(self.system_prompt.strip()) and bool(self.user_prompt.strip())


@dataclass(frozen=True)
class Success:
    text: str
    provider_id: str
    model: Optional[str] = None

    ok = True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    provider_id: str
    model: Optional[str] = None

    ok = False

    def describe(self) -> str:
        """A user-facing message naming the provider (and model) that failed."""
        source = self.provider_id or "unknown provider"
        if self.model:
            source = f"{source} ({self.model})"
        return f"{self.kind.value} from {source}: {self.message}"


GatewayResponse = Union[Success, Failure]


class ProviderError(Exception):
    """Raised inside an adapter once a failure has been classified."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


_STATUS_KINDS: Dict[int, ErrorKind] = {
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    429: ErrorKind.RATE_LIMITED,
}


def status_to_kind(status_code: int) -> ErrorKind:
    return _STATUS_KINDS.get(status_code, ErrorKind.UPSTREAM_ERROR)


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _status_code_of(exc: BaseException) -> Optional[int]:
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status
    status = getattr(getattr(exc, "response", None), "status_code", None)
    if isinstance(status, int):
        return status
    return None


def classify_exception(exc: BaseException) -> ErrorKind:
    """
    Maps an arbitrary client exception to an `ErrorKind`.

    SDKs wrap transport errors differently (some re-raise their own error type from the
    original), so the whole exception chain is inspected: an HTTP status wins, then
    timeout and connection error types recognised by name.
    """
    for err in _exception_chain(exc):
        if isinstance(err, ProviderError):
            return err.kind
        status = _status_code_of(err)
        if status is not None:
            return status_to_kind(status)
        name = type(err).__name__
        if "Timeout" in name:
            return ErrorKind.TIMEOUT
        if "Connect" in name:
            return ErrorKind.UNREACHABLE
    return ErrorKind.UPSTREAM_ERROR


class ProviderAdapter(ABC):
    """
    One LLM backend.

    Subclasses implement `_send`, which performs the network call and returns the reply
    text, raising on failure. `invoke` wraps it with the checks and error normalization
    that every adapter shares.
    """

    provider_id: str = ""
    display_name: str = ""
    default_model: Optional[str] = None
    requires_api_key: bool = True
    # The config key the user sets to provide the credential.
    credential_setting: str = "apiKey"
    requires_model: bool = True
    timeout: float = HOSTED_TIMEOUT

    def resolve_model(self, config: ProviderConfig) -> Optional[str]:
        model = (config.model or "").strip()
        return model or self.default_model

    def credential(self, config: ProviderConfig) -> Optional[str]:
        return config.api_key

    def _check_preconditions(
        self, config: ProviderConfig, model: Optional[str]
    ) -> Optional[Failure]:
        if self.requires_api_key and not (self.credential(config) or "").strip():
            return Failure(
                kind=ErrorKind.MISSING_CREDENTIAL,
                message=(
                    f"{self.display_name} credentials are missing. "
                    f"Set them using: senpai config --set {self.credential_setting} <value>"
                ),
                provider_id=self.provider_id,
                model=model,
            )
        if self.requires_model and not model:
            return Failure(
                kind=ErrorKind.MISSING_MODEL,
                message=(
                    f"No model configured for {self.display_name}. "
                    "Set one using: senpai config --set model <model-name>"
                ),
                provider_id=self.provider_id,
            )
        return None

    def classify(self, exc: Exception) -> ErrorKind:
        return classify_exception(exc)

    def close(self):
        """Releases any connection held by the adapter."""

    def invoke(self, request: GatewayRequest, config: ProviderConfig) -> GatewayResponse:
        model = self.resolve_model(config)

        if not request.is_valid():
            return Failure(
                kind=ErrorKind.INVALID_REQUEST,
                message="Both the system prompt and the user prompt are required.",
                provider_id=self.provider_id,
                model=model,
            )

        failure = self._check_preconditions(config, model)
        if failure:
            return failure

        try:
            text = self._send(request, config, model)
        except Exception as e:
            kind = self.classify(e)
            message = e.message if isinstance(e, ProviderError) else str(e) or type(e).__name__
            logger.warning("%s request failed (%s): %s", self.provider_id, kind.value, message)
            return Failure(kind=kind, message=message, provider_id=self.provider_id, model=model)

        if not isinstance(text, str) or not text.strip():
            return Failure(
                kind=ErrorKind.EMPTY_REPLY,
                message="The model returned an empty reply.",
                provider_id=self.provider_id,
                model=model,
            )

        return Success(text=text.strip(), provider_id=self.provider_id, model=model)

    @abstractmethod
    def _send(
        self, request: GatewayRequest, config: ProviderConfig, model: Optional[str]
    ) -> Optional[str]:
        pass
