"""
Translation of service-layer exceptions into HTTP errors.
"""
import logging
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from certportal.core.errors import StoreError, store_http_exception
from certportal.services.certificate_service import CertificateUnavailable
from certportal.services.entity_service import EntityNotFound
from certportal.services.pdf_converter import ConversionError
from certportal.services.template_service import TemplateConflict, UploadRejected

logger = logging.getLogger(__name__)


@contextmanager
def service_errors(db: Session, action: str):
    """
    Run a service call, mapping its exceptions to HTTPException.

    Anything unexpected is rolled back, logged and reported as
    "Failed to <action>" with status 500.
    """
    try:
        yield
    except HTTPException:
        raise
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreError as e:
        raise store_http_exception(e)
    except UploadRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TemplateConflict as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "TEMPLATE_EXISTS", "message": str(e)},
        )
    except CertificateUnavailable as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.to_detail())
    except ConversionError as e:
        logger.error(f"Certificate conversion failed during {action}: {e}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}"
        )
