from .auth_service import AuthService
from .email_service import EmailService, get_email_service
from .tenant_service import TenantDirectory
from .base_service import TenantScopedService
from .class_service import ClassService
from .student_service import StudentService
from .teacher_service import TeacherService
from .school_service import SchoolService

__all__ = [
    'AuthService',
    'EmailService',
    'get_email_service',
    'TenantDirectory',
    'TenantScopedService',
    'ClassService',
    'StudentService',
    'TeacherService',
    'SchoolService'
]
