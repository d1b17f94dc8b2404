from . import auth, dashboard, classes, students, teachers

__all__ = ["auth", "dashboard", "classes", "students", "teachers"]
