from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from schooldesk.models import School, Teacher


class TenantDirectory:
    """Read-only lookups the tenant resolver needs. Errors propagate."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_schools_by_name(self, name: str) -> List[School]:
        result = await self.db.execute(
            select(School)
            .where(func.lower(School.name) == name.strip().lower())
            .order_by(School.id)
        )
        return list(result.scalars().all())

    async def find_teacher(self, email: str, school_id: int) -> Optional[Teacher]:
        # Several rows for one email are tolerated; any match is membership
        result = await self.db.execute(
            select(Teacher)
            .where(
                func.lower(Teacher.email) == email.strip().lower(),
                Teacher.school_id == school_id
            )
            .order_by(Teacher.id)
            .limit(1)
        )
        return result.scalars().first()
