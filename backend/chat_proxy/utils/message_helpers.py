"""Message helpers for attaching images and building OpenAI-format payloads."""

import base64
import re
from typing import Any, List, Optional

from chat_proxy.models.request import ChatMessage, ImageUrl, ImageUrlContent, TextContent

DEFAULT_MIME_TYPE = "application/octet-stream"

EXTENSION_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


def has_images(message: ChatMessage) -> bool:
    """
    Check if a message contains images.

    Args:
        message: Chat message

    Returns:
        True if message contains image_url content parts
    """
    if isinstance(message.content, str):
        return False
    return any(isinstance(part, ImageUrlContent) for part in message.content)


def guess_mime_type(filename: Optional[str]) -> str:
    """
    Infer an upload's MIME type from its filename extension.

    Examples:
        >>> guess_mime_type("photo.JPG")
        "image/jpeg"
        >>> guess_mime_type("scan.tiff")
        "application/octet-stream"
    """
    if not filename:
        return DEFAULT_MIME_TYPE
    lowered = filename.lower()
    for extension, mime_type in EXTENSION_MIME_TYPES.items():
        if lowered.endswith(extension):
            return mime_type
    return DEFAULT_MIME_TYPE


def to_data_url(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def get_mime_type_from_data_url(data_url: str) -> Optional[str]:
    """
    Extract MIME type from data URL.

    Args:
        data_url: Base64 data URL (e.g., "data:image/jpeg;base64,...")

    Returns:
        MIME type string, or None for anything that is not a data URL

    Examples:
        >>> get_mime_type_from_data_url("data:image/png;base64,iVBORw0...")
        "image/png"
        >>> get_mime_type_from_data_url("https://example.com/cat.png")
        None
    """
    match = re.match(r'data:([^;,]+)[;,]', data_url)
    if match:
        return match.group(1)
    return None


def find_last_user_index(messages: List[ChatMessage]) -> int:
    """Return the index of the most recent user message, or -1 if none."""
    for index in range(len(messages) - 1, -1, -1):
        if messages[index].role == "user":
            return index
    return -1


def attach_image(messages: List[ChatMessage], image_url: str) -> List[ChatMessage]:
    """
    Attach one image to the last user message.

    Returns a new list; the input messages are left untouched.

    - no user message: a new user message holding only the image is appended
    - string content: becomes [text part, image part]
    - list content: the image part is appended

    Examples:
        >>> msgs = [ChatMessage(role="user", content="describe this")]
        >>> attach_image(msgs, "https://x/y.png")[0].content
        [TextContent(text="describe this"), ImageUrlContent(image_url=ImageUrl(url="https://x/y.png"))]
    """
    image_part = ImageUrlContent(image_url=ImageUrl(url=image_url))
    result = list(messages)

    index = find_last_user_index(result)
    if index == -1:
        result.append(ChatMessage(role="user", content=[image_part]))
        return result

    target = result[index]
    if isinstance(target.content, str):
        content = [TextContent(text=target.content), image_part]
    else:
        content = [*target.content, image_part]
    result[index] = target.model_copy(update={"content": content})
    return result


def format_for_openai(message: ChatMessage) -> dict[str, Any]:
    """
    Convert message to the OpenAI chat completions wire format.

    OpenAI format for images:
    {
        "role": "user",
        "content": [
            {"type": "text", "text": "What's in this image?"},
            {
                "type": "image_url",
                "image_url": {
                    "url": "data:image/jpeg;base64,iVBORw0KGgoAAAANSUhEUgAA..."
                }
            }
        ]
    }
    """
    return message.model_dump(mode="json")
