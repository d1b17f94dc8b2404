from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from .base import Base


class School(Base):
    """
    School model. This is the root of the tenant hierarchy.

    `name` doubles as the routable tenant identifier. It is matched
    case-insensitively and is not constrained unique here.
    """
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True)

    # Basic information
    name = Column(String(255), nullable=False, index=True)
    address = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    principal = Column(String(255), nullable=True)
    logo_url = Column(String(500), nullable=True)
    established_year = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)

    # Counters typed in by staff; not derived from the rows below
    total_students = Column(Integer, nullable=True)
    total_teachers = Column(Integer, nullable=True)

    # Account that owns the single-tenant profile
    owner_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, unique=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    classes = relationship(
        "Class",
        back_populates="school",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy='select'
    )

    students = relationship(
        "Student",
        back_populates="school",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy='select'
    )

    teachers = relationship(
        "Teacher",
        back_populates="school",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy='select'
    )

    def __repr__(self):
        return f"<School(id={self.id}, name={self.name})>"
