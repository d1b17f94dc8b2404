from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import TenantModel

class Student(TenantModel):
    __tablename__ = "students"
    __table_args__ = (
        UniqueConstraint("school_id", "roll_no", name="uq_students_school_roll_no"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    roll_no = Column(String, nullable=False)
    status = Column(String, nullable=False, default="active")
    class_id = Column(Integer, ForeignKey('classes.id', ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    student_class = relationship("Class", back_populates="students")
    school = relationship("School", back_populates="students")

    def __repr__(self):
        return f"<Student(roll_no={self.roll_no}, school_id={self.school_id})>"

    @property
    def class_name(self):
        # Read through __dict__ so an unloaded relationship never triggers lazy IO
        student_class = self.__dict__.get("student_class")
        return student_class.name if student_class is not None else None
