from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class StudentCreateRequest(BaseModel):
    name: Optional[str] = None
    roll_no: Optional[str] = None
    class_id: Optional[int] = None
    status: str = "active"


class StudentUpdateRequest(BaseModel):
    name: Optional[str] = None
    roll_no: Optional[str] = None
    class_id: Optional[int] = None
    status: Optional[str] = None


class StudentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    school_id: int
    class_id: int
    class_name: Optional[str] = None
    name: str
    roll_no: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
