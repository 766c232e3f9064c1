from contextlib import contextmanager
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import RentalError, TransactionFailure, ConstraintViolation

logger = logging.getLogger(__name__)


@contextmanager
def atomic(session):
    """Commit everything done in the block, or roll all of it back.

    Domain errors are re-raised untouched. Constraint violations become
    ``ConstraintViolation``; any other storage error becomes
    ``TransactionFailure``, which callers may retry.
    """
    try:
        yield session
        session.commit()
    except RentalError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        logger.info("Constraint violation, unit of work rolled back: %s", e.orig)
        raise ConstraintViolation(str(e.orig)) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning("Storage failure, unit of work rolled back: %s", e)
        raise TransactionFailure("The change could not be saved; nothing was committed. Please retry.") from e
    except Exception:
        session.rollback()
        raise
