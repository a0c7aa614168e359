from chat_proxy.providers.base import BaseProvider, OpenAIFormatProvider
from chat_proxy.providers.openai import OpenAIProvider

__all__ = ["BaseProvider", "OpenAIFormatProvider", "OpenAIProvider"]
