"""
Certificate service.

A certificate is handed out only when three conditions hold, checked in
this order: the student is eligible, the certificate is approved, and an
image is stored. Each failed condition has its own code, title and message
so the console can show a specific toast.
"""
import base64
import logging
from typing import Optional

from sqlalchemy.orm import Session

from certportal.core.config import MAX_UPLOAD_BYTES
from certportal.db.models.student import Student
from certportal.services.entity_service import commit_or_raise, get_row
from certportal.services.pdf_converter import image_mime_type, image_to_pdf
from certportal.services.template_service import UploadRejected, validate_image_upload

logger = logging.getLogger(__name__)

NOT_ELIGIBLE = "NOT_ELIGIBLE"
NOT_APPROVED = "NOT_APPROVED"
NO_CERTIFICATE = "NO_CERTIFICATE"

REASONS = {
    NOT_ELIGIBLE: ("Not Eligible", "This student is not eligible for a certificate."),
    NOT_APPROVED: ("Certificate Not Approved", "This student's certificate has not been approved yet."),
    NO_CERTIFICATE: ("No Certificate", "No certificate data found for this student."),
}


class CertificateUnavailable(Exception):
    """The certificate cannot be handed out; ``code`` is one of the REASONS keys."""

    def __init__(self, code: str):
        self.code = code
        self.title, self.message = REASONS[code]
        super().__init__(self.message)

    def to_detail(self) -> dict:
        return {"code": self.code, "title": self.title, "message": self.message}


def unavailable_reason(eligible: bool, approved: bool, certificate) -> Optional[str]:
    """Return the first failed condition, or None when the certificate can be issued."""
    if not eligible:
        return NOT_ELIGIBLE
    if not approved:
        return NOT_APPROVED
    if not certificate:
        return NO_CERTIFICATE
    return None


def ensure_available(student: Student) -> bytes:
    """Return the stored certificate image or raise CertificateUnavailable."""
    reason = unavailable_reason(student.eligible, student.certificate_approved, student.certificate)
    if reason:
        logger.info(f"Certificate unavailable: student_id={student.id}, reason={reason}")
        raise CertificateUnavailable(reason)
    return student.certificate


def encode_certificate(student: Student) -> Optional[str]:
    if not student.certificate:
        return None
    return base64.b64encode(student.certificate).decode("ascii")


def render_pdf(db: Session, student_id: int) -> bytes:
    """Convert a student's certificate to PDF after the availability checks."""
    student = get_row(db, Student, student_id)
    return image_to_pdf(ensure_available(student))


def download_for_student(db: Session, student: Student) -> bytes:
    """Render a student's own certificate and count the download."""
    pdf = image_to_pdf(ensure_available(student))
    student.downloaded_count = (student.downloaded_count or 0) + 1
    commit_or_raise(db, f"download count of student id={student.id}")
    logger.info(f"Certificate downloaded: student_id={student.id}, count={student.downloaded_count}")
    return pdf


def store_certificate(db: Session, student_id: int, content: bytes, content_type: Optional[str]) -> Student:
    """
    Attach a certificate image to a student.

    The declared content type must be an image, and the bytes themselves
    must be a format the PDF converter understands.
    """
    validate_image_upload(content_type, len(content), MAX_UPLOAD_BYTES)
    if image_mime_type(content) is None:
        raise UploadRejected("Unsupported image format")

    student = get_row(db, Student, student_id)
    student.certificate = content
    commit_or_raise(db, f"certificate upload for student id={student_id}")
    db.refresh(student)
    logger.info(f"Certificate stored: student_id={student_id}, size={len(content)}")
    return student


def set_approval(db: Session, student_id: int, approved: bool) -> Student:
    student = get_row(db, Student, student_id)
    student.certificate_approved = approved
    commit_or_raise(db, f"approval update of student id={student_id}")
    db.refresh(student)
    logger.info(f"Certificate {'approved' if approved else 'unapproved'}: student_id={student_id}")
    return student
