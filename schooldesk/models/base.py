# base.py
from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, Integer, ForeignKey

Base = declarative_base()

class TenantModel(Base):
    """
    Base for every row owned by a school (tenant).
    Queries against these tables are always filtered by school_id.
    """
    __abstract__ = True

    school_id = Column(Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
