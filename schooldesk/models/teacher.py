# teacher.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import TenantModel
from .class_ import class_teachers

class Teacher(TenantModel):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    subjects = Column(JSON, nullable=False, default=list)
    classes = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    school = relationship("School", back_populates="teachers")
    assigned_classes = relationship("Class", secondary=class_teachers, back_populates="teachers")

    def __repr__(self):
        return f"<Teacher(name={self.name}, email={self.email})>"
