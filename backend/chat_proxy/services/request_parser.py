"""
Normalize inbound chat requests into a ChatEnvelope.

Two encodings are accepted:
- multipart/form-data: ``messages`` (JSON text), optional ``stream`` and an
  optional ``image``/``file`` upload, which is inlined as a data URL
- JSON body: ``{messages, stream?, imageUrl?}``
"""

import logging
from typing import Any, List, Optional

import orjson
from fastapi import Request
from pydantic import TypeAdapter, ValidationError
from starlette.datastructures import FormData, UploadFile

from chat_proxy.config import settings
from chat_proxy.models.request import ChatEnvelope, ChatMessage
from chat_proxy.utils.exceptions import raise_invalid_input, raise_proxy_failed
from chat_proxy.utils.message_helpers import guess_mime_type, to_data_url

logger = logging.getLogger(__name__)

MULTIPART_CONTENT_TYPE = "multipart/form-data"
UPLOAD_FIELD_NAMES = ("image", "file")

_messages_adapter = TypeAdapter(List[ChatMessage])


def validate_messages(raw: Any) -> List[ChatMessage]:
    """Validate decoded JSON into chat messages, raising InvalidInput on bad shapes."""
    if raw is None:
        raise_invalid_input("No messages provided")
    try:
        return _messages_adapter.validate_python(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(["messages", *(str(part) for part in first.get("loc", ()))])
        raise_invalid_input("Invalid message format", f"{first.get('msg')} at {location}")


def parse_json_body(raw_body: bytes) -> ChatEnvelope:
    """Build an envelope from a JSON request body.

    An empty body is treated as ``{}`` and therefore fails the messages check.
    """
    body: Any = {}
    if raw_body.strip():
        try:
            body = orjson.loads(raw_body)
        except orjson.JSONDecodeError:
            raise_invalid_input("Invalid JSON in request body")

    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        raise_invalid_input("Invalid body: messages[] required")

    image_url = body.get("imageUrl")
    return ChatEnvelope(
        messages=validate_messages(body["messages"]),
        stream=is_truthy(body.get("stream")),
        # http(s) and data: URLs are both passed through untouched
        image_url=image_url if isinstance(image_url, str) and image_url else None,
    )


def is_truthy(value: Any) -> bool:
    """JSON truthiness as browsers see it: objects and arrays count as true, even empty."""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _first_value(form: FormData, key: str) -> Any:
    values = form.getlist(key)
    return values[0] if values else None


def _find_upload(form: FormData) -> Optional[UploadFile]:
    for name in UPLOAD_FIELD_NAMES:
        value = _first_value(form, name)
        if isinstance(value, UploadFile):
            return value
    return None


async def read_upload_as_data_url(upload: UploadFile, max_bytes: int) -> str:
    """Read an uploaded file fully and inline it as a base64 data URL.

    Reads at most one byte past the cap so oversized uploads never land in
    memory whole.
    """
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise_proxy_failed(
            f"maxFileSize exceeded: {upload.filename or 'upload'} is larger than {max_bytes} bytes"
        )

    mime_type = upload.content_type or guess_mime_type(upload.filename)
    logger.debug(f"Read upload {upload.filename!r} ({len(data)} bytes, {mime_type})")
    return to_data_url(data, mime_type)


async def parse_multipart_form(form: FormData, max_upload_bytes: int) -> ChatEnvelope:
    """Build an envelope from a decoded multipart form."""
    raw_messages = _first_value(form, "messages")
    if not isinstance(raw_messages, str) or not raw_messages:
        raise_invalid_input('Missing "messages" field')

    try:
        decoded = orjson.loads(raw_messages)
    except orjson.JSONDecodeError:
        raise_invalid_input("Invalid JSON in messages")

    raw_stream = _first_value(form, "stream")
    stream = raw_stream is not None and str(raw_stream) == "true"

    image_url = None
    upload = _find_upload(form)
    if upload is not None:
        image_url = await read_upload_as_data_url(upload, max_upload_bytes)

    return ChatEnvelope(
        messages=validate_messages(decoded),
        stream=stream,
        image_url=image_url,
    )


def is_multipart(request: Request) -> bool:
    return MULTIPART_CONTENT_TYPE in request.headers.get("content-type", "")


async def read_envelope(request: Request) -> ChatEnvelope:
    """Normalize either request encoding into a ChatEnvelope."""
    if is_multipart(request):
        async with request.form(max_part_size=settings.max_form_field_bytes) as form:
            return await parse_multipart_form(form, settings.max_upload_bytes)

    return parse_json_body(await request.body())
