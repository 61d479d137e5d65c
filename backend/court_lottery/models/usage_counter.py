from datetime import date
from typing import Optional

from sqlmodel import Field, SQLModel


class UsageCounter(SQLModel, table=True):
    __tablename__ = "usagecounter"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)
    count: int = Field(default=0)
    last_reset_date: date = Field(default_factory=date.today)
