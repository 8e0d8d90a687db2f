from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class User(BaseModel):
    id: int  # telegram id
    username: Optional[str] = None
    first_name: Optional[str] = None
    created_at: Optional[datetime] = None
