from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from schooldesk.schemas.common import csv_field
from schooldesk.utils.text import join_csv, split_csv


class TeacherSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class ClassCreateRequest(BaseModel):
    name: Optional[str] = None
    grade: Optional[str] = None
    section: Optional[str] = None
    student_count: int = Field(default=0, ge=0)
    subjects: List[str] = Field(default_factory=list)
    teacher_ids: List[int] = Field(default_factory=list)

    @field_validator("subjects", mode="before")
    @classmethod
    def split_subjects(cls, v):
        return split_csv(v)


class ClassUpdateRequest(BaseModel):
    """Only supplied fields are written; teacher_ids replaces the assignment set"""
    name: Optional[str] = None
    grade: Optional[str] = None
    section: Optional[str] = None
    student_count: Optional[int] = Field(default=None, ge=0)
    subjects: Optional[List[str]] = None
    teacher_ids: Optional[List[int]] = None

    @field_validator("subjects", mode="before")
    @classmethod
    def split_subjects(cls, v):
        return csv_field(v)


class ClassResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    school_id: int
    name: str
    grade: str
    section: str
    student_count: int
    subjects: List[str]
    teachers: List[TeacherSummary] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def subjects_display(self) -> str:
        return join_csv(self.subjects)

    @computed_field
    @property
    def teachers_display(self) -> str:
        return join_csv([t.name for t in self.teachers]) or "Not assigned"
