from fastapi import APIRouter, Depends, Query, status

from schooldesk.core.dependencies import get_teacher_service
from schooldesk.core.errors import ConfirmationRequired
from schooldesk.schemas import (
    ListResponse,
    MessageResponse,
    TeacherCreateRequest,
    TeacherResponse,
    TeacherUpdateRequest
)
from schooldesk.services import TeacherService

router = APIRouter(
    responses={
        401: {"description": "Sign-in required"},
        404: {"description": "Not found"}
    }
)


@router.get("", response_model=ListResponse[TeacherResponse])
async def list_teachers(service: TeacherService = Depends(get_teacher_service)):
    items = [TeacherResponse.model_validate(t) for t in await service.list()]
    return ListResponse[TeacherResponse](
        items=items,
        total=len(items),
        message=None if items else "No teachers found"
    )


@router.get("/{teacher_id}", response_model=TeacherResponse)
async def get_teacher(teacher_id: int, service: TeacherService = Depends(get_teacher_service)):
    return await service.get(teacher_id)


@router.post("", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    teacher_data: TeacherCreateRequest,
    service: TeacherService = Depends(get_teacher_service)
):
    """Add a teacher. A password, when given, also creates their sign-in account."""
    return await service.create(teacher_data.model_dump())


@router.patch("/{teacher_id}", response_model=TeacherResponse)
async def update_teacher(
    teacher_id: int,
    teacher_data: TeacherUpdateRequest,
    service: TeacherService = Depends(get_teacher_service)
):
    return await service.update(teacher_id, teacher_data.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{teacher_id}", response_model=MessageResponse)
async def delete_teacher(
    teacher_id: int,
    confirm: bool = Query(False, description="Must be true to delete"),
    service: TeacherService = Depends(get_teacher_service)
):
    if not confirm:
        raise ConfirmationRequired("Are you sure you want to delete this teacher?")
    await service.delete(teacher_id)
    return MessageResponse(message="Teacher deleted successfully")
