from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator


def parse_count(value):
    """
    Accept integers or numeric strings for the typed-in counters.
    An empty string clears the value.
    """
    if value is None or isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if value.lstrip("-").isdigit():
            return int(value)
        raise ValueError("must be a whole number")
    return value


class SchoolProfileRequest(BaseModel):
    """Fields left out of the request body keep their stored value"""
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    principal: Optional[str] = None
    logo_url: Optional[str] = None
    established_year: Optional[int] = None
    description: Optional[str] = None
    total_students: Optional[int] = None
    total_teachers: Optional[int] = None

    @field_validator("established_year", "total_students", "total_teachers", mode="before")
    @classmethod
    def parse_counts(cls, v):
        return parse_count(v)


class SchoolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    principal: Optional[str] = None
    logo_url: Optional[str] = None
    established_year: Optional[int] = None
    description: Optional[str] = None
    total_students: Optional[int] = None
    total_teachers: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DashboardOverview(BaseModel):
    email: str
    school: Optional[SchoolResponse] = None


class TenantOverview(BaseModel):
    school: str
    welcome: str
    students: int
    classes: int
    teachers: int
