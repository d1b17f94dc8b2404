from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from schooldesk.models import Teacher, class_teachers
from schooldesk.services.auth_service import AuthService
from schooldesk.services.base_service import TenantScopedService


class TeacherService(TenantScopedService[Teacher]):
    model = Teacher
    entity_name = "teacher"
    entity_plural = "teachers"
    required_fields = ("name", "email")

    def __init__(self, db: AsyncSession, school_id: int):
        super().__init__(db, school_id)
        self.auth_service = AuthService(db)

    def ordering(self) -> List[Any]:
        return [func.lower(Teacher.name), Teacher.id]

    async def before_write(self, record: Optional[Teacher], data: Dict[str, Any]) -> None:
        if isinstance(data.get("email"), str):
            data["email"] = data["email"].strip().lower()

    async def after_write(self, record: Teacher, data: Dict[str, Any]) -> None:
        # Optional password on create or update gives the teacher a sign-in
        # account; an existing account keeps its password
        if data.get("password"):
            await self.auth_service.ensure_account(record.email, data["password"])

    async def before_delete(self, record: Teacher) -> None:
        await self.db.execute(delete(class_teachers).where(class_teachers.c.teacher_id == record.id))
