"""
Student self-service endpoints (Student Info and Downloads pages).
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from certportal.api.errors import service_errors
from certportal.core.auth_dependency import get_db, require_student
from certportal.db.models.student import Student
from certportal.db.models.user import User
from certportal.schemas.student import StudentResponse
from certportal.services import certificate_service
from certportal.services.pdf_converter import PDF_MIME_TYPE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/me", tags=["Me"])


def get_own_student(user: User = Depends(require_student), db: Session = Depends(get_db)) -> Student:
    student = db.query(Student).filter(Student.id == user.student_id).first() if user.student_id else None
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student record not found")
    return student


@router.get("/student", response_model=StudentResponse)
def my_student(student: Student = Depends(get_own_student)):
    return StudentResponse.model_validate(student)


@router.get("/certificate")
def download_my_certificate(student: Student = Depends(get_own_student), db: Session = Depends(get_db)):
    """Download the caller's certificate as a PDF; counts the download."""
    with service_errors(db, "download certificate"):
        pdf = certificate_service.download_for_student(db, student)
    filename = f"{student.name.replace(' ', '_')}_certificate.pdf"
    return Response(
        content=pdf,
        media_type=PDF_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
