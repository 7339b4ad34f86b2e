import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fieldtrack.core.errors import NotFoundError, TimerStateError, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def user_action(db: Optional[Session], failure_message: str, **context) -> Iterator[None]:
    """Map service errors raised inside one user action to HTTP responses.

    Database failures roll back, log once with ``context`` and surface as 500
    with ``failure_message`` as the user-facing detail.
    """
    try:
        yield
    except TimerStateError as exc:
        if db is not None:
            db.rollback()
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValidationError as exc:
        if db is not None:
            db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        if db is not None:
            db.rollback()
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        if db is not None:
            db.rollback()
        logger.exception(failure_message, extra=context)
        raise HTTPException(status_code=500, detail=failure_message) from exc
