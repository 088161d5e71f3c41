"""
Uniform CRUD over the portal's row-backed entities.

Every entity page does the same four things (list, add, edit, delete), so
the routes share these helpers. Store-side failures are classified into
StoreError and the transaction is rolled back before re-raising.
"""
import logging
from typing import Any, Dict, List, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from certportal.core.errors import StoreError, classify_integrity_error
from certportal.core.logging_config import sanitize_log_data

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class EntityNotFound(LookupError):
    """Raised when a row with the requested primary key does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


def _entity_name(model: Type[Any]) -> str:
    return model.__name__


def list_rows(db: Session, model: Type[ModelT], order_by=None) -> List[ModelT]:
    """Fetch all rows of a model, ordered by the given column (primary key by default)."""
    query = db.query(model)
    query = query.order_by(order_by if order_by is not None else model.id.asc())
    return query.all()


def get_row(db: Session, model: Type[ModelT], row_id: int) -> ModelT:
    row = db.query(model).filter(model.id == row_id).first()
    if row is None:
        raise EntityNotFound(_entity_name(model), row_id)
    return row


def commit_or_raise(db: Session, action: str) -> None:
    """Commit the session; on a store failure roll back and raise StoreError."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        error = classify_integrity_error(e)
        logger.warning(f"Store rejected {action}: code={error.code}, message={error.message}")
        raise error from e


def create_row(db: Session, model: Type[ModelT], values: Dict[str, Any]) -> ModelT:
    row = model(**values)
    db.add(row)
    commit_or_raise(db, f"insert into {model.__tablename__}")
    db.refresh(row)
    logger.info(f"{_entity_name(model)} created: id={row.id}, values={sanitize_log_data(values)}")
    return row


def update_row(db: Session, model: Type[ModelT], row_id: int, values: Dict[str, Any]) -> ModelT:
    """Apply only the provided fields to an existing row."""
    row = get_row(db, model, row_id)
    for field, value in values.items():
        setattr(row, field, value)
    commit_or_raise(db, f"update of {model.__tablename__} id={row_id}")
    db.refresh(row)
    logger.info(f"{_entity_name(model)} updated: id={row_id}, fields={sorted(values)}")
    return row


def delete_row(db: Session, model: Type[ModelT], row_id: int) -> None:
    row = get_row(db, model, row_id)
    db.delete(row)
    commit_or_raise(db, f"delete from {model.__tablename__} id={row_id}")
    logger.info(f"{_entity_name(model)} deleted: id={row_id}")


__all__ = [
    "EntityNotFound",
    "StoreError",
    "list_rows",
    "get_row",
    "create_row",
    "update_row",
    "delete_row",
    "commit_or_raise",
]
