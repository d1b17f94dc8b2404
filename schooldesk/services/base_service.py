# schooldesk/services/base_service.py
from contextlib import asynccontextmanager
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schooldesk.core.errors import BaseAPIError, ConflictError, DatabaseError, NotFoundError, ValidationError
from schooldesk.core.logging import logger
from schooldesk.models.base import TenantModel
from schooldesk.utils.text import is_blank

ModelType = TypeVar("ModelType", bound=TenantModel)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


def backend_message(error: SQLAlchemyError) -> str:
    """The driver's own message when there is one, otherwise SQLAlchemy's"""
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


def is_unique_violation(error: IntegrityError) -> bool:
    orig = getattr(error, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == "23505":
        return True
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return "UNIQUE constraint failed" in str(orig) or "duplicate key value" in str(orig)


class TenantScopedService(Generic[ModelType]):
    """
    Generic list/get/create/update/delete over one tenant-owned table.

    Every statement is filtered by the school id the service was built
    with. Backend failures are logged and re-raised as DatabaseError
    carrying the backend message; unique violations go through
    translate_integrity_error so subclasses can map them.
    """

    model: Type[ModelType]
    entity_name: str = "record"
    entity_plural: str = "records"
    required_fields: Sequence[str] = ()

    def __init__(self, db: AsyncSession, school_id: int):
        self.db = db
        self.school_id = school_id

    @asynccontextmanager
    async def transaction(self):
        """Context manager for transaction handling"""
        try:
            yield
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Integrity error on {self.entity_plural}: {backend_message(e)}")
            raise self.translate_integrity_error(e)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error on {self.entity_plural}: {backend_message(e)}", exc_info=True)
            raise DatabaseError(backend_message(e))
        except Exception:
            await self.db.rollback()
            raise

    def translate_integrity_error(self, error: IntegrityError) -> BaseAPIError:
        if is_unique_violation(error):
            return ConflictError(backend_message(error))
        return DatabaseError(backend_message(error))

    def scoped_query(self):
        return select(self.model).where(self.model.school_id == self.school_id)

    def load_options(self) -> List[Any]:
        return []

    def ordering(self) -> List[Any]:
        return [self.model.id]

    def validate(self, data: Dict[str, Any], partial: bool = False) -> None:
        """
        Reject blank required fields. With partial=True only the fields
        present in data are checked.
        """
        for field in self.required_fields:
            if partial and field not in data:
                continue
            if is_blank(data.get(field)):
                raise ValidationError(self.required_field_message(field))

    def column_values(self, data: Dict[str, Any]) -> Dict[str, Any]:
        columns = self.model.__table__.columns.keys()
        return {k: v for k, v in data.items() if k in columns and k not in ("id", "school_id")}

    def required_field_message(self, field: str) -> str:
        return REQUIRED_FIELDS_MESSAGE

    @property
    def empty_message(self) -> str:
        return f"No {self.entity_plural} found"

    async def _execute(self, stmt):
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.entity_plural}: {backend_message(e)}", exc_info=True)
            raise DatabaseError(backend_message(e))

    async def list(self) -> List[ModelType]:
        stmt = self.scoped_query().options(*self.load_options()).order_by(*self.ordering())
        result = await self._execute(stmt)
        return result.scalars().all()

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model).where(self.model.school_id == self.school_id)
        result = await self._execute(stmt)
        return result.scalar_one()

    async def get(self, record_id: int) -> ModelType:
        stmt = (
            self.scoped_query()
            .where(self.model.id == record_id)
            .options(*self.load_options())
            .execution_options(populate_existing=True)
        )
        result = await self._execute(stmt)
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(f"{self.entity_name.capitalize()} not found")
        return record

    async def before_write(self, record: Optional[ModelType], data: Dict[str, Any]) -> None:
        """Hook for cross-row checks (foreign keys inside the tenant)"""

    async def create(self, data: Dict[str, Any]) -> ModelType:
        self.validate(data)
        await self.before_write(None, data)
        record = self.model(**self.column_values(data))
        # Attached server side; never taken from the caller
        record.school_id = self.school_id
        async with self.transaction():
            self.db.add(record)
            await self.db.flush()
            await self.after_write(record, data)
        logger.info(f"Created {self.entity_name} {record.id} for school {self.school_id}")
        return await self.get(record.id)

    async def update(self, record_id: int, data: Dict[str, Any]) -> ModelType:
        self.validate(data, partial=True)
        record = await self.get(record_id)
        await self.before_write(record, data)
        async with self.transaction():
            for field, value in self.column_values(data).items():
                setattr(record, field, value)
            await self.db.flush()
            await self.after_write(record, data)
        return await self.get(record_id)

    async def after_write(self, record: ModelType, data: Dict[str, Any]) -> None:
        """Hook run inside the write transaction, after the row is flushed"""

    async def delete(self, record_id: int) -> None:
        record = await self.get(record_id)
        async with self.transaction():
            await self.before_delete(record)
            await self.db.execute(
                delete(self.model).where(
                    self.model.id == record.id,
                    self.model.school_id == self.school_id
                )
            )
        logger.info(f"Deleted {self.entity_name} {record_id} for school {self.school_id}")

    async def before_delete(self, record: ModelType) -> None:
        """Hook for dependent rows that must go with the record"""
