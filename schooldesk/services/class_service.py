from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import selectinload

from schooldesk.core.errors import ValidationError
from schooldesk.core.logging import logger
from schooldesk.models import Class, Student, Teacher, class_teachers
from schooldesk.services.base_service import TenantScopedService


class ClassService(TenantScopedService[Class]):
    model = Class
    entity_name = "class"
    entity_plural = "classes"
    required_fields = ("name", "grade", "section")

    def load_options(self) -> List[Any]:
        return [selectinload(Class.teachers)]

    def ordering(self) -> List[Any]:
        return [Class.name, Class.id]

    async def _tenant_teacher_ids(self, teacher_ids: List[int]) -> List[int]:
        """Keep the caller's order, reject ids from another school"""
        wanted = list(dict.fromkeys(teacher_ids))
        if not wanted:
            return []
        result = await self._execute(
            select(Teacher.id).where(
                Teacher.school_id == self.school_id,
                Teacher.id.in_(wanted)
            )
        )
        found = set(result.scalars().all())
        missing = [teacher_id for teacher_id in wanted if teacher_id not in found]
        if missing:
            raise ValidationError(
                "Selected teachers do not belong to this school",
                details={"teacher_ids": missing}
            )
        return wanted

    async def before_write(self, record: Optional[Class], data: Dict[str, Any]) -> None:
        if data.get("teacher_ids") is not None:
            data["teacher_ids"] = await self._tenant_teacher_ids(data["teacher_ids"])

    async def after_write(self, record: Class, data: Dict[str, Any]) -> None:
        teacher_ids = data.get("teacher_ids")
        if teacher_ids is None:
            return
        # Replace the whole assignment set
        await self.db.execute(delete(class_teachers).where(class_teachers.c.class_id == record.id))
        if teacher_ids:
            await self.db.execute(
                insert(class_teachers),
                [{"class_id": record.id, "teacher_id": teacher_id} for teacher_id in teacher_ids]
            )

    async def before_delete(self, record: Class) -> None:
        # Students enrolled in the class and its assignments go with it
        removed = await self.db.execute(
            delete(Student).where(
                Student.class_id == record.id,
                Student.school_id == self.school_id
            )
        )
        await self.db.execute(delete(class_teachers).where(class_teachers.c.class_id == record.id))
        logger.info(f"Removing class {record.id} with {removed.rowcount} enrolled students")

    async def list_assigned(self, teacher_email: str) -> List[Class]:
        """Classes of this school assigned to the teacher with the given email"""
        stmt = (
            self.scoped_query()
            .join(class_teachers, class_teachers.c.class_id == Class.id)
            .join(Teacher, Teacher.id == class_teachers.c.teacher_id)
            .where(Teacher.school_id == self.school_id)
            .where(func.lower(Teacher.email) == teacher_email.strip().lower())
            .options(*self.load_options())
            .order_by(*self.ordering())
            .distinct()
        )
        result = await self._execute(stmt)
        return result.scalars().all()
