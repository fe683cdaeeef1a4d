import datetime as dt
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    description: str = Field(min_length=1)
    amount: float = Field(ge=0)
    category: str = Field(min_length=1)
    date: dt.date = Field(default_factory=dt.date.today)


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    date: Optional[dt.date] = None


class Expense(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    description: str = ""
    amount: float = Field(ge=0)
    category: str
    date: dt.date = Field(default_factory=dt.date.today)
