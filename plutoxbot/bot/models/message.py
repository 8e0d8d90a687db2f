from pydantic import BaseModel
from typing import Literal, Optional
from datetime import datetime

ROLE_USER = "user"
ROLE_BOT = "bot"

class MessageModel(BaseModel):
    id: Optional[int] = None  # insertion sequence, assigned by the store
    user_id: int
    role: Literal["user", "bot"]
    content: str
    created_at: Optional[datetime] = None
