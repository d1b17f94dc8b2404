from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from schooldesk.core.dependencies import get_student_service
from schooldesk.core.errors import ConfirmationRequired
from schooldesk.schemas import (
    ListResponse,
    MessageResponse,
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest
)
from schooldesk.services import StudentService

router = APIRouter(
    responses={
        401: {"description": "Sign-in required"},
        404: {"description": "Not found"},
        409: {"description": "Roll number already used in this school"}
    }
)


@router.get("", response_model=ListResponse[StudentResponse])
async def list_students(
    class_id: Optional[int] = Query(None, description="Only students of this class"),
    service: StudentService = Depends(get_student_service)
):
    """Students of the school, newest first."""
    items = [StudentResponse.model_validate(s) for s in await service.list(class_id=class_id)]
    return ListResponse[StudentResponse](
        items=items,
        total=len(items),
        message=None if items else "No students found"
    )


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(student_id: int, service: StudentService = Depends(get_student_service)):
    return await service.get(student_id)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreateRequest,
    service: StudentService = Depends(get_student_service)
):
    return await service.create(student_data.model_dump())


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    student_data: StudentUpdateRequest,
    service: StudentService = Depends(get_student_service)
):
    return await service.update(student_id, student_data.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{student_id}", response_model=MessageResponse)
async def delete_student(
    student_id: int,
    confirm: bool = Query(False, description="Must be true to delete"),
    service: StudentService = Depends(get_student_service)
):
    if not confirm:
        raise ConfirmationRequired("Are you sure you want to delete this student?")
    await service.delete(student_id)
    return MessageResponse(message="Student deleted successfully")
