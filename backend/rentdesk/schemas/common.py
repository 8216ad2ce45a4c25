# backend/rentdesk/schemas/common.py
import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel

ItemT = TypeVar("ItemT")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class Page(BaseModel, Generic[ItemT]):
    items: List[ItemT]
    pagination: Pagination


class Usage(BaseModel):
    current: int
    max: int
    percentage: int


class Message(BaseModel):
    message: str
