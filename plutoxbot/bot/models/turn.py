from pydantic import BaseModel
from typing import Literal, Optional

from .user import User


class InboundTurn(BaseModel):
    """One inbound text message, already stripped of transport specifics."""

    sender: User
    text: str

    @property
    def user_id(self) -> int:
        return self.sender.id


class Reply(BaseModel):
    kind: Literal["text", "image"]
    content: Optional[str] = None
    locator: Optional[str] = None
    caption: Optional[str] = None
    parse_mode: Optional[str] = None

    @classmethod
    def text(cls, content: str, parse_mode: str | None = None) -> "Reply":
        return cls(kind="text", content=content, parse_mode=parse_mode)

    @classmethod
    def image(cls, locator: str, caption: str) -> "Reply":
        return cls(kind="image", locator=locator, caption=caption)
