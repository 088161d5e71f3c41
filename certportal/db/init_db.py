import logging
from sqlalchemy.engine import Engine

from certportal.db.base import Base

logger = logging.getLogger(__name__)


def init_db(bind: Engine = None) -> None:
    """Create every table registered on Base.metadata."""
    # Registers all models on Base.metadata
    import certportal.db.models  # noqa: F401
    from certportal.db.session import engine

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info(f"Database tables ensured on {target.url.render_as_string(hide_password=True)}")
