"""
stockroom/utils/db.py
─────────────────────
Turns SQLAlchemy faults into StoreError and leaves the session clean.
"""
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from stockroom.errors import StoreError, ConstraintViolation


@contextmanager
def store_errors(session, action: str):
    """
    Wrap a block of store work.

    Any SQLAlchemy error rolls the session back (so the pooled connection
    goes back clean) and is re-raised as StoreError with the driver error
    chained for logging.
    """
    try:
        yield
    except IntegrityError as exc:
        session.rollback()
        raise ConstraintViolation(f'Could not {action}: constraint violated.') from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise StoreError(f'Could not {action}.') from exc
