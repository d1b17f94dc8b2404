from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from schooldesk.core.errors import BaseAPIError, DuplicateRollNumberError, ValidationError
from schooldesk.models import Class, Student
from schooldesk.services.base_service import TenantScopedService, is_unique_violation
from schooldesk.utils.text import is_blank


class StudentService(TenantScopedService[Student]):
    model = Student
    entity_name = "student"
    entity_plural = "students"
    required_fields = ("name", "roll_no", "class_id")

    FIELD_MESSAGES = {
        "name": "Please enter student name",
        "roll_no": "Please enter roll number",
        "class_id": "Please select a class",
    }

    def required_field_message(self, field: str) -> str:
        return self.FIELD_MESSAGES.get(field, super().required_field_message(field))

    def load_options(self) -> List[Any]:
        return [selectinload(Student.student_class)]

    def ordering(self) -> List[Any]:
        return [Student.created_at.desc(), Student.id.desc()]

    async def list(self, class_id: Optional[int] = None) -> List[Student]:
        if class_id is None:
            return await super().list()
        stmt = (
            self.scoped_query()
            .where(Student.class_id == class_id)
            .options(*self.load_options())
            .order_by(*self.ordering())
        )
        result = await self._execute(stmt)
        return result.scalars().all()

    def translate_integrity_error(self, error: IntegrityError) -> BaseAPIError:
        if is_unique_violation(error):
            return DuplicateRollNumberError()
        return super().translate_integrity_error(error)

    async def before_write(self, record: Optional[Student], data: Dict[str, Any]) -> None:
        if isinstance(data.get("roll_no"), str):
            data["roll_no"] = data["roll_no"].strip()
        if "status" in data and is_blank(data["status"]):
            data["status"] = "active"
        if data.get("class_id") is None:
            return
        result = await self._execute(
            select(Class.id).where(
                Class.id == data["class_id"],
                Class.school_id == self.school_id
            )
        )
        if result.scalar_one_or_none() is None:
            raise ValidationError("Please select a class")
