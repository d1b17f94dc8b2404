from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schooldesk.core.errors import DatabaseError, NotFoundError, ValidationError
from schooldesk.core.logging import logger, log_function_call
from schooldesk.models import School
from schooldesk.services.base_service import REQUIRED_FIELDS_MESSAGE, backend_message
from schooldesk.services.class_service import ClassService
from schooldesk.services.student_service import StudentService
from schooldesk.services.teacher_service import TeacherService
from schooldesk.utils.text import is_blank

NO_PROFILE_MESSAGE = "No school profile found. Save your school information first."

PROFILE_FIELDS = (
    "name",
    "address",
    "phone",
    "email",
    "principal",
    "logo_url",
    "established_year",
    "description",
    "total_students",
    "total_teachers",
)


class SchoolService:
    """
    School profile reads and writes.

    total_students and total_teachers are stored exactly as typed in; they
    are never recomputed from the student and teacher tables.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_owned(self, account_id: int) -> Optional[School]:
        try:
            result = await self.db.execute(select(School).where(School.owner_id == account_id))
        except SQLAlchemyError as e:
            logger.error(f"Error fetching school profile: {backend_message(e)}", exc_info=True)
            raise DatabaseError(backend_message(e))
        return result.scalar_one_or_none()

    async def require_owned(self, account_id: int) -> School:
        school = await self.get_owned(account_id)
        if school is None:
            raise NotFoundError(NO_PROFILE_MESSAGE)
        return school

    async def get_by_id(self, school_id: int) -> School:
        try:
            school = await self.db.get(School, school_id, populate_existing=True)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching school: {backend_message(e)}", exc_info=True)
            raise DatabaseError(backend_message(e))
        if school is None:
            raise NotFoundError("School not found")
        return school

    @staticmethod
    def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
        values = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
        for field, value in values.items():
            if isinstance(value, str):
                values[field] = value.strip() or None
        if "name" in values and is_blank(values["name"]):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)
        return values

    async def _write(self, school: School) -> School:
        try:
            self.db.add(school)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error saving school information: {backend_message(e)}", exc_info=True)
            raise DatabaseError(f"Error saving school information: {backend_message(e)}")
        return await self.get_by_id(school.id)

    @log_function_call(logger)
    async def save_profile(self, account_id: int, data: Dict[str, Any]) -> School:
        """Create or update the profile owned by account_id"""
        values = self._clean(data)
        school = await self.get_owned(account_id)
        if school is None:
            if "name" not in values:
                raise ValidationError(REQUIRED_FIELDS_MESSAGE)
            school = School(owner_id=account_id, **values)
            logger.info(f"Creating school profile for account {account_id}")
        else:
            for field, value in values.items():
                setattr(school, field, value)
        return await self._write(school)

    @log_function_call(logger)
    async def update_profile(self, school_id: int, data: Dict[str, Any]) -> School:
        values = self._clean(data)
        school = await self.get_by_id(school_id)
        for field, value in values.items():
            setattr(school, field, value)
        return await self._write(school)

    async def counts(self, school_id: int) -> Dict[str, int]:
        return {
            "students": await StudentService(self.db, school_id).count(),
            "classes": await ClassService(self.db, school_id).count(),
            "teachers": await TeacherService(self.db, school_id).count(),
        }
