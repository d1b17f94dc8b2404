from fastapi import APIRouter, Depends, Query, status

from schooldesk.core.dependencies import get_class_service, require_session
from schooldesk.core.errors import ConfirmationRequired
from schooldesk.schemas import (
    ClassCreateRequest,
    ClassResponse,
    ClassUpdateRequest,
    ListResponse,
    MessageResponse,
    SessionIdentity
)
from schooldesk.services import ClassService

router = APIRouter(
    responses={
        401: {"description": "Sign-in required"},
        404: {"description": "Not found"}
    }
)


def class_list(classes) -> ListResponse[ClassResponse]:
    items = [ClassResponse.model_validate(c) for c in classes]
    return ListResponse[ClassResponse](
        items=items,
        total=len(items),
        message=None if items else "No classes found"
    )


@router.get("", response_model=ListResponse[ClassResponse])
async def list_classes(service: ClassService = Depends(get_class_service)):
    """Classes of the school with their assigned teachers."""
    return class_list(await service.list())


@router.get("/assigned", response_model=ListResponse[ClassResponse])
async def list_assigned_classes(
    session: SessionIdentity = Depends(require_session),
    service: ClassService = Depends(get_class_service)
):
    """Classes assigned to the signed-in teacher."""
    return class_list(await service.list_assigned(session.email))


@router.get("/{class_id}", response_model=ClassResponse)
async def get_class(class_id: int, service: ClassService = Depends(get_class_service)):
    return await service.get(class_id)


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    class_data: ClassCreateRequest,
    service: ClassService = Depends(get_class_service)
):
    return await service.create(class_data.model_dump())


@router.patch("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: int,
    class_data: ClassUpdateRequest,
    service: ClassService = Depends(get_class_service)
):
    return await service.update(class_id, class_data.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{class_id}", response_model=MessageResponse)
async def delete_class(
    class_id: int,
    confirm: bool = Query(False, description="Must be true to delete"),
    service: ClassService = Depends(get_class_service)
):
    """Delete a class together with its enrolled students and teacher assignments."""
    if not confirm:
        raise ConfirmationRequired("Are you sure you want to delete this class?")
    await service.delete(class_id)
    return MessageResponse(message="Class deleted successfully")
