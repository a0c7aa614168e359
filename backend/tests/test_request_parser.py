"""Tests for inbound request normalization."""

import io

import pytest
from starlette.datastructures import FormData, Headers, UploadFile

from chat_proxy.services.request_parser import (
    is_truthy,
    parse_json_body,
    parse_multipart_form,
    read_upload_as_data_url,
    validate_messages,
)
from chat_proxy.utils.exceptions import InvalidInput, ProxyFailed


def make_upload(data: bytes, filename: str, content_type: str | None = None) -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else Headers()
    return UploadFile(file=io.BytesIO(data), filename=filename, headers=headers)


def test_parse_json_body_reads_fields():
    envelope = parse_json_body(
        b'{"messages": [{"role": "user", "content": "hi"}], "stream": false, "imageUrl": "https://x/y.png"}'
    )
    assert envelope.messages[0].content == "hi"
    assert envelope.stream is False
    assert envelope.image_url == "https://x/y.png"


def test_parse_json_body_stream_truthiness():
    envelope = parse_json_body(b'{"messages": [], "stream": 1}')
    assert envelope.stream is True


@pytest.mark.parametrize(
    "value, expected",
    [({}, True), ([], True), ("yes", True), (True, True), (None, False), (0, False), ("", False), (False, False)],
)
def test_is_truthy_matches_json_client_semantics(value, expected):
    assert is_truthy(value) is expected


def test_parse_json_body_ignores_non_string_image_url():
    envelope = parse_json_body(b'{"messages": [], "imageUrl": 42}')
    assert envelope.image_url is None


def test_parse_json_body_invalid_json():
    with pytest.raises(InvalidInput) as exc_info:
        parse_json_body(b"{not json")
    assert exc_info.value.error == "Invalid JSON in request body"


@pytest.mark.parametrize("body", [b"", b"[]", b"null", b'{"messages": "hi"}', b"{}"])
def test_parse_json_body_requires_messages_array(body):
    with pytest.raises(InvalidInput) as exc_info:
        parse_json_body(body)
    assert exc_info.value.error == "Invalid body: messages[] required"


def test_validate_messages_rejects_unknown_role():
    with pytest.raises(InvalidInput) as exc_info:
        validate_messages([{"role": "tool", "content": "x"}])
    assert exc_info.value.error == "Invalid message format"
    assert "messages.0.role" in exc_info.value.detail


def test_validate_messages_rejects_empty_content():
    with pytest.raises(InvalidInput):
        validate_messages([{"role": "user", "content": ""}])


def test_validate_messages_none():
    with pytest.raises(InvalidInput) as exc_info:
        validate_messages(None)
    assert exc_info.value.error == "No messages provided"


@pytest.mark.asyncio
async def test_read_upload_uses_declared_mime_type():
    upload = make_upload(b"abc", "photo.bin", "image/webp")
    assert await read_upload_as_data_url(upload, 1024) == "data:image/webp;base64,YWJj"


@pytest.mark.asyncio
async def test_read_upload_infers_mime_type_from_extension():
    upload = make_upload(b"abc", "photo.JPG")
    assert await read_upload_as_data_url(upload, 1024) == "data:image/jpeg;base64,YWJj"


@pytest.mark.asyncio
async def test_read_upload_enforces_size_cap():
    upload = make_upload(b"x" * 11, "big.png", "image/png")
    with pytest.raises(ProxyFailed) as exc_info:
        await read_upload_as_data_url(upload, 10)
    assert "maxFileSize exceeded" in exc_info.value.detail


@pytest.mark.asyncio
async def test_parse_multipart_form_with_image():
    form = FormData(
        [
            ("messages", '[{"role": "user", "content": "what is this"}]'),
            ("stream", "false"),
            ("image", make_upload(b"abc", "cat.png", "image/png")),
        ]
    )
    envelope = await parse_multipart_form(form, 1024)

    assert envelope.messages[0].content == "what is this"
    assert envelope.stream is False
    assert envelope.image_url == "data:image/png;base64,YWJj"


@pytest.mark.asyncio
async def test_parse_multipart_form_accepts_file_alias():
    form = FormData(
        [
            ("messages", "[]"),
            ("file", make_upload(b"abc", "cat.jpeg")),
        ]
    )
    envelope = await parse_multipart_form(form, 1024)
    assert envelope.image_url == "data:image/jpeg;base64,YWJj"


@pytest.mark.asyncio
async def test_parse_multipart_form_stream_exact_match():
    form = FormData([("messages", "[]"), ("stream", "True")])
    envelope = await parse_multipart_form(form, 1024)
    assert envelope.stream is False

    form = FormData([("messages", "[]"), ("stream", "true")])
    envelope = await parse_multipart_form(form, 1024)
    assert envelope.stream is True


@pytest.mark.asyncio
async def test_parse_multipart_form_missing_messages():
    with pytest.raises(InvalidInput) as exc_info:
        await parse_multipart_form(FormData([("stream", "true")]), 1024)
    assert exc_info.value.error == 'Missing "messages" field'


@pytest.mark.asyncio
async def test_parse_multipart_form_invalid_messages_json():
    with pytest.raises(InvalidInput) as exc_info:
        await parse_multipart_form(FormData([("messages", "[{oops")]), 1024)
    assert exc_info.value.error == "Invalid JSON in messages"


@pytest.mark.asyncio
async def test_parse_multipart_form_null_messages():
    with pytest.raises(InvalidInput) as exc_info:
        await parse_multipart_form(FormData([("messages", "null")]), 1024)
    assert exc_info.value.error == "No messages provided"
