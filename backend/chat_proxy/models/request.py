from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Annotated, List, Literal, Optional, Union


class TextContent(BaseModel):
    """Text content part of a multimodal message"""
    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    """Image reference: an http(s) URL or a base64 data URL"""
    url: str


class ImageUrlContent(BaseModel):
    """Image content part of a multimodal message"""
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentPart = Annotated[Union[TextContent, ImageUrlContent], Field(discriminator="type")]


class ChatMessage(BaseModel):
    """Message with either text-only (string) or multimodal (array) content"""
    role: Literal["user", "assistant", "system"]
    content: Union[str, List[ContentPart]]

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "role": "user",
                    "content": "What is the capital of France?"
                },
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": "What's in this image?"},
                        {
                            "type": "image_url",
                            "image_url": {"url": "data:image/jpeg;base64,iVBORw0KGgoAAAANSUhEUgAA..."}
                        }
                    ]
                }
            ]
        }
    )

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, value):
        if not value:
            raise ValueError("content must not be empty")
        return value


class ChatEnvelope(BaseModel):
    """Normalized chat request, built from either a JSON body or a multipart form"""
    messages: List[ChatMessage]
    stream: bool = False
    image_url: Optional[str] = None
