"""
Store error classification.

Database errors are reduced to a ``{code, message}`` pair using PostgreSQL
SQLSTATE codes, so routes and the console can check the code explicitly
whatever database sits behind the portal.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
UNDEFINED_COLUMN = "42703"
STORE_ERROR = "STORE_ERROR"

TRIGGER_ERROR_PREFIX = "Database trigger error"

# Messages emitted when a trigger still references a dropped column
_TRIGGER_PATTERNS = (
    re.compile(r"has no field", re.IGNORECASE),
    re.compile(r"column .* does not exist", re.IGNORECASE),
    re.compile(r"no such column", re.IGNORECASE),
)

_SQLITE_CODES = (
    ("UNIQUE constraint failed", UNIQUE_VIOLATION),
    ("FOREIGN KEY constraint failed", FOREIGN_KEY_VIOLATION),
    ("NOT NULL constraint failed", NOT_NULL_VIOLATION),
)


@dataclass(eq=False)
class StoreError(Exception):
    """An error reported by the relational store."""
    code: str
    message: str

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


def _driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def classify_integrity_error(exc: SQLAlchemyError) -> StoreError:
    """Map a SQLAlchemy error to a StoreError carrying a SQLSTATE-style code."""
    message = _driver_message(exc)
    pgcode: Optional[str] = getattr(getattr(exc, "orig", None), "pgcode", None)
    if pgcode:
        return StoreError(code=pgcode, message=message)

    for needle, code in _SQLITE_CODES:
        if needle in message:
            return StoreError(code=code, message=message)

    if isinstance(exc, IntegrityError):
        return StoreError(code=STORE_ERROR, message=message)
    if is_trigger_error(message):
        return StoreError(code=UNDEFINED_COLUMN, message=message)
    return StoreError(code=STORE_ERROR, message=message)


def is_trigger_error(message: Optional[str]) -> bool:
    """True when a store message points at a trigger referencing a dropped column."""
    if not message:
        return False
    return any(pattern.search(message) for pattern in _TRIGGER_PATTERNS)


def store_http_exception(error: StoreError) -> HTTPException:
    """HTTP error for a store failure: constraint violations are conflicts, the rest are 500s."""
    if error.code in (UNIQUE_VIOLATION, FOREIGN_KEY_VIOLATION, NOT_NULL_VIOLATION):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=status_code, detail=error.to_detail())
