from collections.abc import Iterator
from contextlib import contextmanager
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, action: str) -> Iterator[Session]:
    """Run a unit of work: everything inside commits together or not at all.

    On a database error the session is rolled back, so the caller's objects
    are expired back to their stored state, and a StoreError carrying the
    driver's message is raised.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        message = str(getattr(exc, "orig", None) or exc)
        logger.warning("%s failed: %s", action, message)
        raise StoreError(message) from exc
    except Exception:
        db.rollback()
        raise
