# app/schemas/common.py
"""Shared schema base: snake_case in Python, camelCase on the wire."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Generic, List, TypeVar

T = TypeVar("T")


class ApiModel(BaseModel):
    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class Page(ApiModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int
