"""
Student endpoints for the admin Certificates page.

Provides CRUD over students plus certificate upload, approval, and preview.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session, joinedload

from certportal.api.errors import service_errors
from certportal.core.auth_dependency import get_db, require_admin
from certportal.db.models.student import Student
from certportal.schemas.student import (
    ApprovalUpdate,
    CertificateData,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from certportal.services import certificate_service, entity_service
from certportal.services.pdf_converter import PDF_MIME_TYPE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["Students"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[StudentResponse])
def list_students(db: Session = Depends(get_db)):
    """List all students ordered by id, with their college name."""
    with service_errors(db, "fetch students data"):
        students = (
            db.query(Student)
            .options(joinedload(Student.college))
            .order_by(Student.id.asc())
            .all()
        )
        return [StudentResponse.model_validate(student) for student in students]


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(student_id: int, db: Session = Depends(get_db)):
    with service_errors(db, "fetch student"):
        return StudentResponse.model_validate(entity_service.get_row(db, Student, student_id))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=StudentResponse)
def create_student(student_data: StudentCreate, db: Session = Depends(get_db)):
    """
    Add a student.

    New students start out not eligible, with no certificate.
    """
    with service_errors(db, "add student"):
        values = student_data.model_dump()
        values["eligible"] = False
        student = entity_service.create_row(db, Student, values)
        return StudentResponse.model_validate(student)


@router.put("/{student_id}", response_model=StudentResponse)
def update_student(student_id: int, student_data: StudentUpdate, db: Session = Depends(get_db)):
    """Update only the provided fields of a student."""
    with service_errors(db, "update student"):
        student = entity_service.update_row(
            db, Student, student_id, student_data.model_dump(exclude_unset=True)
        )
        return StudentResponse.model_validate(student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: int, db: Session = Depends(get_db)):
    with service_errors(db, "delete student"):
        entity_service.delete_row(db, Student, student_id)
    return None


@router.get("/{student_id}/certificate", response_model=CertificateData)
def get_certificate(student_id: int, db: Session = Depends(get_db)):
    """Certificate flags and the base64 image, as used by the preview pipeline."""
    with service_errors(db, "fetch student certificate data"):
        student = entity_service.get_row(db, Student, student_id)
        return CertificateData(
            student_id=student.id,
            name=student.name,
            eligible=bool(student.eligible),
            certificate_approved=bool(student.certificate_approved),
            certificate=certificate_service.encode_certificate(student),
        )


@router.put("/{student_id}/certificate", response_model=StudentResponse)
async def upload_certificate(student_id: int, file: UploadFile = File(...), db: Session = Depends(get_db)):
    """Attach a certificate image (image/*, max 5MB) to a student."""
    content = await file.read()
    with service_errors(db, "upload certificate"):
        student = certificate_service.store_certificate(db, student_id, content, file.content_type)
        return StudentResponse.model_validate(student)


@router.put("/{student_id}/approval", response_model=StudentResponse)
def update_approval(student_id: int, approval: ApprovalUpdate, db: Session = Depends(get_db)):
    with service_errors(db, "update certificate approval"):
        student = certificate_service.set_approval(db, student_id, approval.approved)
        return StudentResponse.model_validate(student)


@router.get("/{student_id}/certificate/preview")
def preview_certificate(student_id: int, db: Session = Depends(get_db)):
    """Render the student's certificate as an inline PDF."""
    with service_errors(db, "preview certificate"):
        pdf = certificate_service.render_pdf(db, student_id)
    return Response(
        content=pdf,
        media_type=PDF_MIME_TYPE,
        headers={"Content-Disposition": f'inline; filename="certificate_{student_id}.pdf"'},
    )
