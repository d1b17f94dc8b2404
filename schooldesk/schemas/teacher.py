from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator

from schooldesk.schemas.common import blank_to_none, csv_field
from schooldesk.utils.text import join_csv, split_csv


class TeacherCreateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    subjects: List[str] = Field(default_factory=list)
    classes: List[str] = Field(default_factory=list)

    @field_validator("email", "password", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return blank_to_none(v)

    @field_validator("subjects", "classes", mode="before")
    @classmethod
    def split_lists(cls, v):
        return split_csv(v)


class TeacherUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    subjects: Optional[List[str]] = None
    classes: Optional[List[str]] = None

    @field_validator("email", "password", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return blank_to_none(v)

    @field_validator("subjects", "classes", mode="before")
    @classmethod
    def split_lists(cls, v):
        return csv_field(v)


class TeacherResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    school_id: int
    name: str
    email: str
    subjects: List[str]
    classes: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def subjects_display(self) -> str:
        return join_csv(self.subjects)

    @computed_field
    @property
    def classes_display(self) -> str:
        return join_csv(self.classes)
