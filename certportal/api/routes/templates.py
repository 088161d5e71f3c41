"""
Certificate template endpoints for the admin Templates page.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from certportal.api.errors import service_errors
from certportal.core.auth_dependency import get_db, require_admin
from certportal.db.models.template import Template
from certportal.schemas.template import TemplateResponse, TemplateSelectionUpdate
from certportal.services import entity_service, template_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["Templates"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[TemplateResponse])
def list_templates(db: Session = Depends(get_db)):
    """List templates, newest first, with their company name."""
    with service_errors(db, "fetch templates"):
        return [TemplateResponse.model_validate(t) for t in template_service.list_templates(db)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TemplateResponse)
async def upload_template(
    company_id: int = Form(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """
    Upload a template image for a company.

    Rejects non-image files and files over 5MB, and companies that already
    have a template.
    """
    content = await file.read()
    with service_errors(db, "upload template"):
        template = template_service.create_template(db, company_id, content, file.content_type)
        return TemplateResponse.model_validate(template)


@router.put("/{template_id}/selection", response_model=TemplateResponse)
def update_selection(template_id: int, payload: TemplateSelectionUpdate, db: Session = Depends(get_db)):
    with service_errors(db, "update template selection"):
        template = template_service.set_selected(db, template_id, payload.is_selected)
        return TemplateResponse.model_validate(template)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: int, db: Session = Depends(get_db)):
    with service_errors(db, "delete template"):
        entity_service.delete_row(db, Template, template_id)
    return None
