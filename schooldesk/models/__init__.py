from .base import Base, TenantModel
from .account import Account, RevokedToken
from .school import School
from .class_ import Class, class_teachers
from .teacher import Teacher
from .student import Student

__all__ = [
    'Base',
    'TenantModel',
    'Account',
    'RevokedToken',
    'School',
    'Class',
    'class_teachers',
    'Teacher',
    'Student'
]
