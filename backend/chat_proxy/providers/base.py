import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
import orjson

from chat_proxy.config import settings
from chat_proxy.models.request import ChatMessage
from chat_proxy.utils.message_helpers import format_for_openai

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for upstream completion providers"""

    name: str  # Provider identifier, e.g. "openai"

    def __init__(self, api_key: str, model: str, temperature: float = 0.7):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def timeout(self) -> float:
        """Get the configured provider timeout in seconds."""
        return float(settings.provider_timeout)

    @abstractmethod
    async def complete(self, messages: list[ChatMessage]) -> Optional[str]:
        """Run one non-streaming completion and return the first choice's text."""
        pass

    async def cleanup(self):
        """Cleanup HTTP client resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def is_configured(self) -> bool:
        """Check if provider has valid API key"""
        return bool(self.api_key)


class OpenAIFormatProvider(BaseProvider):
    """Base class for providers using the OpenAI chat completions format.

    Subclasses only need to set `name` and `base_url` class attributes.
    """

    name: str = ""  # Override in subclass
    base_url: str = ""  # Override in subclass

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, model, temperature)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=transport,
        )

    def build_payload(self, messages: list[ChatMessage]) -> dict:
        """Build the /chat/completions request body."""
        return {
            "model": self.model,
            "messages": [format_for_openai(msg) for msg in messages],
            "temperature": self.temperature,
        }

    async def complete(self, messages: list[ChatMessage]) -> Optional[str]:
        """Send one chat completion request. Errors propagate to the caller."""
        payload = self.build_payload(messages)

        response = await self._client.post(
            "/chat/completions", content=orjson.dumps(payload)
        )
        response.raise_for_status()

        data = orjson.loads(response.content)
        choices = data.get("choices") or []
        if not choices:
            logger.debug(f"{self.name} returned no choices")
            return None

        message = choices[0].get("message") or {}
        content = message.get("content")
        return content if isinstance(content, str) else None
