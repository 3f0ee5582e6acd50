import logging
from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from exceptions import InternalError, LedgerError

log = logging.getLogger("ledger.transaction")


def _context(values: dict) -> str:
    return " ".join(f"{key}={value}" for key, value in values.items())


@contextmanager
def atomic(db: Session, operation: str, **context):
    """Run a multi-step write as one unit: commit at the end, roll back on any error.

    Business errors are re-raised untouched; persistence errors (including a
    failing commit) are logged with full context and surfaced as InternalError.
    """
    try:
        yield db
        db.commit()
    except LedgerError as exc:
        db.rollback()
        log.warning("%s_rejected %s error=%s", operation, _context(context), exc.to_dict())
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("%s_failed %s", operation, _context(context), exc_info=True)
        raise InternalError() from exc
    except Exception:
        db.rollback()
        log.error("%s_failed %s", operation, _context(context), exc_info=True)
        raise
