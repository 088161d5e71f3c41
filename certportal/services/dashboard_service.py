"""
Admin dashboard statistics.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from certportal.db.models.college import College
from certportal.db.models.company import Company
from certportal.db.models.course import Course
from certportal.db.models.student import Student
from certportal.db.models.template import Template
from certportal.schemas.dashboard import DashboardStats


def _count(db: Session, column, *filters) -> int:
    return db.query(func.count(column)).filter(*filters).scalar() or 0


def get_stats(db: Session) -> DashboardStats:
    return DashboardStats(
        students=_count(db, Student.id),
        eligible_students=_count(db, Student.id, Student.eligible.is_(True)),
        approved_certificates=_count(db, Student.id, Student.certificate_approved.is_(True)),
        courses=_count(db, Course.id),
        colleges=_count(db, College.id),
        companies=_count(db, Company.id),
        templates=_count(db, Template.id),
        companies_with_templates=_count(db, func.distinct(Template.company_id)),
    )
