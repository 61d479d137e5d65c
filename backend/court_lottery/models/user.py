from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlmodel import Column, Field, SQLModel

from court_lottery.utils.clock import utcnow


class UserType(str, Enum):
    MEMBER = "MEMBER"
    NON_MEMBER = "NON_MEMBER"


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    type: UserType = Field(default=UserType.NON_MEMBER, sa_column=Column(String, nullable=False))
    # Cached copy of UsageCounter.count, written together with the counter
    usage_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
