from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel

from schooldesk.utils.text import split_csv

T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    """Rows of one tenant plus an explicit message when there are none"""
    items: List[T]
    total: int
    message: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
    redirect: Optional[str] = None


def csv_field(value):
    """Before-validator for comma separated list fields"""
    if value is None:
        return value
    return split_csv(value)


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value
