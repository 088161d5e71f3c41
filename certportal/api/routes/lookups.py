"""
Courses, colleges and companies.

The three lookup tables share one shape (id + unique name) and one set of
admin-only CRUD endpoints, built by make_lookup_router.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from certportal.api.errors import service_errors
from certportal.core.auth_dependency import get_db, require_admin
from certportal.db.models.college import College
from certportal.db.models.company import Company
from certportal.db.models.course import Course
from certportal.schemas.common import NamedEntityCreate, NamedEntityResponse
from certportal.services import entity_service


def make_lookup_router(model, prefix: str, tag: str, label: str, order_by) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag], dependencies=[Depends(require_admin)])

    @router.get("", response_model=List[NamedEntityResponse])
    def list_entities(db: Session = Depends(get_db)):
        with service_errors(db, f"fetch {label}s"):
            return entity_service.list_rows(db, model, order_by=order_by)

    @router.get("/{entity_id}", response_model=NamedEntityResponse)
    def get_entity(entity_id: int, db: Session = Depends(get_db)):
        with service_errors(db, f"fetch {label}"):
            return entity_service.get_row(db, model, entity_id)

    @router.post("", status_code=status.HTTP_201_CREATED, response_model=NamedEntityResponse)
    def create_entity(payload: NamedEntityCreate, db: Session = Depends(get_db)):
        with service_errors(db, f"add {label}"):
            return entity_service.create_row(db, model, payload.model_dump())

    @router.put("/{entity_id}", response_model=NamedEntityResponse)
    def update_entity(entity_id: int, payload: NamedEntityCreate, db: Session = Depends(get_db)):
        with service_errors(db, f"update {label}"):
            return entity_service.update_row(db, model, entity_id, payload.model_dump())

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_entity(entity_id: int, db: Session = Depends(get_db)):
        with service_errors(db, f"delete {label}"):
            entity_service.delete_row(db, model, entity_id)
        return None

    return router


courses_router = make_lookup_router(Course, "/courses", "Courses", "course", Course.name.asc())
colleges_router = make_lookup_router(College, "/colleges", "Colleges", "college", College.id.asc())
companies_router = make_lookup_router(Company, "/companies", "Companies", "company", Company.name.asc())
