"""
Student eligibility updates.

Eligibility is written through its own endpoint because the students table
carries triggers; a trigger that still references a dropped column makes
the update fail with a store error, which is reported with the
TRIGGER_ERROR_PREFIX so clients can tell it apart from other failures.
"""
import logging

from sqlalchemy.orm import Session

from certportal.core.errors import TRIGGER_ERROR_PREFIX, StoreError, is_trigger_error
from certportal.db.models.student import Student
from certportal.services.entity_service import commit_or_raise, get_row

logger = logging.getLogger(__name__)


def describe_store_error(error: StoreError) -> str:
    """User-facing text for a failed eligibility write."""
    if is_trigger_error(error.message):
        return f"{TRIGGER_ERROR_PREFIX}: {error.message}"
    return f"Failed to update eligibility: {error.message}"


def set_eligibility(db: Session, student_id: int, eligible: bool) -> Student:
    """
    Set a student's eligibility flag.

    Raises:
        EntityNotFound: unknown student
        StoreError: the store rejected the update
    """
    student = get_row(db, Student, student_id)
    student.eligible = eligible
    try:
        commit_or_raise(db, f"eligibility update of student id={student_id}")
    except StoreError as e:
        if is_trigger_error(e.message):
            logger.error(f"Eligibility update hit a stale trigger: student_id={student_id}, message={e.message}")
        raise
    db.refresh(student)
    logger.info(f"Student eligibility {'enabled' if eligible else 'disabled'}: student_id={student_id}")
    return student
