from pydantic import BaseModel
from typing import Optional


class ChatReply(BaseModel):
    """Successful chat response"""

    reply: str


class ErrorBody(BaseModel):
    """Error response returned for every failed request"""

    error: str
    detail: Optional[str] = None
