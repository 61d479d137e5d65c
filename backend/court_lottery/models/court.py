from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from court_lottery.utils.clock import utcnow


class Court(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True)
    description: Optional[str] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow)
