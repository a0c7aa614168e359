from typing import Optional

import httpx

from chat_proxy.providers.base import OpenAIFormatProvider


class OpenAIProvider(OpenAIFormatProvider):
    """OpenAI GPT provider."""

    name = "openai"
    base_url = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        # Allow pointing at an OpenAI-compatible gateway
        if base_url:
            self.base_url = base_url.rstrip("/")
        super().__init__(api_key, model, temperature, transport=transport)
