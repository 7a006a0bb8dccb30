"""
LLM Client
----------

Thin chat clients used by the self‑healing resolver.  The resolver only
needs one capability from a language model: send a text prompt, get a
text answer back within a deadline.  :class:`ModelClient` captures that
contract; concrete clients wrap the provider SDKs.

Supported providers:

- ``openai`` – the OpenAI SDK.  Setting ``ai.openai.base_url`` points
  the client at any OpenAI‑compatible endpoint (self‑hosted gateways,
  vLLM, LiteLLM proxies and so on).
- ``ollama`` – local models served by Ollama.

Clients raise :class:`ModelCallError` for every failure (transport,
timeout, empty answer) so callers have exactly one exception type to
handle.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import ollama
from openai import OpenAI

from .logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a web automation expert. Answer with a single CSS selector only."


class ModelCallError(RuntimeError):
    """Raised when a model call fails or produces no usable text."""


class ModelClient(ABC):
    """Abstract chat client: one prompt in, one text answer out."""

    name = "abstract"

    @abstractmethod
    def chat(self, prompt: str, timeout: float) -> str:
        """Send ``prompt`` and return the model's answer.

        ``timeout`` is the upper bound in seconds for the whole call.
        Implementations raise :class:`ModelCallError` on any failure.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={getattr(self, 'model', None)!r})"


class OpenAIModelClient(ModelClient):
    """Chat client for OpenAI and OpenAI‑compatible endpoints."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        temperature: float = 0.0,
        client: Any = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        # ``client`` lets tests and embedders inject a preconfigured SDK client
        self._client = client or OpenAI(api_key=api_key, base_url=base_url)

    def chat(self, prompt: str, timeout: float) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                timeout=timeout,
            )
            content = response.choices[0].message.content
        except Exception as exc:
            raise ModelCallError(f"OpenAI call failed: {exc}") from exc
        if not content or not content.strip():
            raise ModelCallError("OpenAI returned an empty answer")
        return content


class OllamaModelClient(ModelClient):
    """Chat client for a local Ollama server."""

    name = "ollama"

    def __init__(self, host: str = "http://localhost:11434", model: str = "llama3", temperature: float = 0.0) -> None:
        self.host = host
        self.model = model
        self.temperature = temperature
        self._clients: Dict[float, Any] = {}
        self._lock = threading.Lock()

    def _client_for(self, timeout: float) -> Any:
        # Ollama exposes the timeout on the client, not per request
        with self._lock:
            client = self._clients.get(timeout)
            if client is None:
                client = ollama.Client(host=self.host, timeout=timeout)
                self._clients[timeout] = client
            return client

    def chat(self, prompt: str, timeout: float) -> str:
        try:
            response = self._client_for(timeout).chat(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                options={"temperature": self.temperature},
            )
            content = response["message"]["content"]
        except Exception as exc:
            raise ModelCallError(f"Ollama call failed: {exc}") from exc
        if not content or not content.strip():
            raise ModelCallError("Ollama returned an empty answer")
        return content


def create_model_client(config: Any) -> Optional[ModelClient]:
    """Create the model client named by ``ai.provider``.

    Returns ``None`` when no provider is configured, the provider is
    unknown or the SDK client cannot be constructed (for example a
    missing API key).  The resolver treats a missing client as
    "self‑healing unavailable".
    """
    provider = str(config.get("ai.provider", "") or "").strip().lower()
    if not provider:
        logger.warning("No AI provider configured (ai.provider); self-healing will be unavailable")
        return None

    logger.info("Initialising AI model client for provider: %s", provider.upper())
    try:
        if provider in ("openai", "custom"):
            return OpenAIModelClient(
                api_key=config.get("ai.openai.api_key"),
                model=config.get("ai.openai.model", "gpt-4o-mini"),
                base_url=config.get("ai.openai.base_url"),
            )
        if provider == "ollama":
            return OllamaModelClient(
                host=config.get("ai.ollama.host", "http://localhost:11434"),
                model=config.get("ai.ollama.model", "llama3"),
            )
    except Exception as exc:
        logger.error("Failed to initialise %s client: %s", provider, exc)
        return None

    logger.error("AI provider '%s' is not supported", provider)
    return None


__all__ = [
    "ModelClient",
    "ModelCallError",
    "OpenAIModelClient",
    "OllamaModelClient",
    "create_model_client",
]
