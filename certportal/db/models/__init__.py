"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from certportal.db.models.college import College
from certportal.db.models.course import Course
from certportal.db.models.company import Company
from certportal.db.models.student import Student
from certportal.db.models.template import Template
from certportal.db.models.user import User, UserRole

__all__ = [
    "College",
    "Course",
    "Company",
    "Student",
    "Template",
    "User",
    "UserRole",
]
