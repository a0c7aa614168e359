"""
Chat proxy route.

Normalizes the inbound request, injects the system prompt, forwards one
non-streaming completion upstream and returns ``{"reply": ...}``.
"""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request

from chat_proxy.models.response import ChatReply
from chat_proxy.providers.base import BaseProvider
from chat_proxy.services.prompts import build_outbound_messages, extract_reply
from chat_proxy.services.request_parser import read_envelope
from chat_proxy.utils.exceptions import (
    ProxyError,
    raise_misconfigured,
    raise_proxy_failed,
    raise_streaming_not_implemented,
)
from chat_proxy.utils.message_helpers import attach_image, get_mime_type_from_data_url, has_images

logger = logging.getLogger(__name__)

router = APIRouter()


def get_provider(request: Request) -> Optional[BaseProvider]:
    """Provider built at startup; None when the credential is missing."""
    return getattr(request.app.state, "provider", None)


def require_provider(
    provider: Optional[BaseProvider] = Depends(get_provider),
) -> BaseProvider:
    """Fail before the body is read if the upstream credential is missing."""
    if provider is None or not provider.is_configured():
        raise_misconfigured()
    return provider


@router.post("/chat", response_model=ChatReply)
async def chat(
    request: Request,
    provider: BaseProvider = Depends(require_provider),
):
    """
    POST /api/chat - single-shot chat completion proxy

    Accepts either:
    - application/json: {"messages": [...], "stream"?: bool, "imageUrl"?: str}
    - multipart/form-data: messages (JSON text), stream ("true"/"false"),
      and an optional image upload under "image" or "file"

    An attached image is added to the most recent user message. Streaming
    requests are rejected with 400.
    """
    try:
        envelope = await read_envelope(request)

        messages = envelope.messages
        if envelope.image_url:
            messages = attach_image(messages, envelope.image_url)

        if envelope.stream:
            raise_streaming_not_implemented()

        image_note = ""
        if envelope.image_url:
            mime_type = get_mime_type_from_data_url(envelope.image_url) or "remote url"
            image_note = f", image attached ({mime_type})"
        with_images = sum(1 for msg in messages if has_images(msg))
        logger.info(
            f"Forwarding {len(messages)} message(s), {with_images} with images, "
            f"to {provider.name}/{provider.model}{image_note}"
        )

        content = await provider.complete(build_outbound_messages(messages))
        return ChatReply(reply=extract_reply(content))

    except ProxyError as e:
        if e.status_code < 500:
            logger.warning(f"Rejected chat request: {e}")
        else:
            logger.error(f"Chat request failed: {e}")
        raise
    except httpx.HTTPStatusError as e:
        logger.exception(f"Proxy error: upstream returned {e.response.status_code}: {e.response.text}")
        raise_proxy_failed(str(e))
    except Exception as e:
        logger.exception(f"Proxy error: {e}")
        raise_proxy_failed(str(e))
