from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import Base, TenantModel

class_teachers = Table(
    "class_teachers",
    Base.metadata,
    Column("class_id", Integer, ForeignKey("classes.id", ondelete="CASCADE"), primary_key=True),
    Column("teacher_id", Integer, ForeignKey("teachers.id", ondelete="CASCADE"), primary_key=True),
)

class Class(TenantModel):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)  # e.g., "Mathematics A"
    grade = Column(String, nullable=False)
    section = Column(String, nullable=False)
    student_count = Column(Integer, nullable=False, default=0)
    subjects = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    school = relationship("School", back_populates="classes")
    teachers = relationship("Teacher", secondary=class_teachers, back_populates="assigned_classes", lazy="selectin")
    students = relationship("Student", back_populates="student_class", passive_deletes=True)

    def __repr__(self):
        # Access __dict__ directly to avoid loading attributes
        name = self.__dict__.get('name', '<detached>')
        school_id = self.__dict__.get('school_id', '<detached>')
        return f"<Class(name={name}, school_id={school_id})>"
