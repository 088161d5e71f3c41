"""
Certificate template service.

Templates are company backgrounds stored as base64 data URLs. A company
has at most one template; uploads must be images no larger than
MAX_UPLOAD_BYTES.
"""
import base64
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from certportal.core.config import MAX_UPLOAD_BYTES
from certportal.db.models.company import Company
from certportal.db.models.template import Template
from certportal.services.entity_service import (
    EntityNotFound,
    commit_or_raise,
    get_row,
)

logger = logging.getLogger(__name__)

DUPLICATE_TEMPLATE_MESSAGE = (
    "A template already exists for this company. Please delete the existing one first."
)


class UploadRejected(ValueError):
    """Raised when an uploaded file fails the type or size check."""


class TemplateConflict(ValueError):
    """Raised when a company already has a template."""


def validate_image_upload(content_type: Optional[str], size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """
    Check an upload before anything is stored.

    Raises:
        UploadRejected: not an image/* type, or larger than max_bytes
    """
    if not content_type or not content_type.startswith("image/"):
        raise UploadRejected("Please select an image file")
    if size > max_bytes:
        raise UploadRejected(f"File size must be less than {max_bytes // (1024 * 1024)}MB")


def to_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def list_templates(db: Session) -> List[Template]:
    """All templates, newest first, with their company loaded."""
    return (
        db.query(Template)
        .options(joinedload(Template.company))
        .order_by(Template.created_at.desc(), Template.id.desc())
        .all()
    )


def create_template(db: Session, company_id: int, content: bytes, content_type: str) -> Template:
    """
    Store a new template for a company.

    Raises:
        UploadRejected: invalid file
        EntityNotFound: unknown company
        TemplateConflict: the company already has a template
        StoreError: the store rejected the insert
    """
    validate_image_upload(content_type, len(content))

    if db.query(Company.id).filter(Company.id == company_id).first() is None:
        raise EntityNotFound("Company", company_id)

    existing = db.query(Template).filter(Template.company_id == company_id).first()
    if existing:
        logger.warning(f"Rejected duplicate template: company_id={company_id}, existing_id={existing.id}")
        raise TemplateConflict(DUPLICATE_TEMPLATE_MESSAGE)

    template = Template(template=to_data_url(content, content_type), company_id=company_id)
    db.add(template)
    commit_or_raise(db, f"insert into templates company_id={company_id}")
    db.refresh(template)
    logger.info(f"Template created: template_id={template.id}, company_id={company_id}, size={len(content)}")
    return template


def set_selected(db: Session, template_id: int, is_selected: bool) -> Template:
    template = get_row(db, Template, template_id)
    template.is_selected = is_selected
    commit_or_raise(db, f"selection update of template id={template_id}")
    db.refresh(template)
    logger.info(f"Template {'selected' if is_selected else 'deselected'}: template_id={template_id}")
    return template
