"""
Versioned eligibility endpoint.

PUT /v1/students/{student_id}/eligibility with {"eligible": bool}.
Error responses on /v1 use the {"error": "..."} body (see main.py).
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from certportal.core.auth_dependency import get_db, require_admin
from certportal.core.errors import StoreError
from certportal.schemas.student import EligibilityResponse, EligibilityUpdate
from certportal.services.eligibility_service import describe_store_error, set_eligibility
from certportal.services.entity_service import EntityNotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/students", tags=["Eligibility"], dependencies=[Depends(require_admin)])


@router.put("/{student_id}/eligibility", response_model=EligibilityResponse)
def update_eligibility(student_id: int, payload: EligibilityUpdate, db: Session = Depends(get_db)):
    try:
        student = set_eligibility(db, student_id, payload.eligible)
        return EligibilityResponse(student_id=student.id, eligible=student.eligible)

    except EntityNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=describe_store_error(e)
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update eligibility: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update eligibility"
        )
