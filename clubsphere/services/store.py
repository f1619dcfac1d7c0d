"""Store helpers shared by the ledger and grant services.

- insert_if_absent: existence check, then insert, with the table's UNIQUE
  transaction_id constraint as the tiebreaker when two writers race.
- increment: single-statement `SET col = col + 1`.
- store_errors: translate SQLAlchemy connectivity/timeout failures into
  DependencyUnavailable / DependencyTimeout.

Each helper commits its own unit of work. Nothing here spans tables.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import exc

from clubsphere.errors import DependencyTimeout, DependencyUnavailable
from clubsphere.extensions import db

logger = logging.getLogger(__name__)


def _is_timeout(e):
    text = str(getattr(e, "orig", None) or e).lower()
    return "timeout" in text or "timed out" in text


@contextmanager
def store_errors(action):
    """Roll back and re-raise store failures as dependency errors."""
    try:
        yield
    except exc.TimeoutError as e:
        db.session.rollback()
        raise DependencyTimeout(f"store timed out during {action}", dependency="store") from e
    except exc.OperationalError as e:
        db.session.rollback()
        if _is_timeout(e):
            raise DependencyTimeout(f"store timed out during {action}", dependency="store") from e
        raise DependencyUnavailable(f"store unavailable during {action}: {e}", dependency="store") from e
    except exc.SQLAlchemyError as e:
        db.session.rollback()
        raise DependencyUnavailable(f"store failed during {action}: {e}", dependency="store") from e


def find_by_transaction_id(model, transaction_id):
    return model.query.filter_by(transaction_id=transaction_id).first()


def insert_if_absent(model, transaction_id, **fields):
    """Insert a row keyed by transaction_id unless one already exists.

    Returns True if this call created the row, False if it was already
    there (including when a concurrent writer won the unique insert).
    """
    name = model.__tablename__
    with store_errors(f"{name} insert"):
        if find_by_transaction_id(model, transaction_id) is not None:
            logger.info(f"{name}: {transaction_id} already recorded, skipping insert")
            return False

        db.session.add(model(transaction_id=transaction_id, **fields))
        try:
            db.session.commit()
        except exc.IntegrityError:
            db.session.rollback()
            # Lost the race: the winner's row must now be visible
            if find_by_transaction_id(model, transaction_id) is None:
                raise
            logger.info(f"{name}: concurrent insert of {transaction_id} won elsewhere")
            return False

    logger.info(f"{name}: recorded {transaction_id}")
    return True


def increment(model, row_id, column):
    """Atomically add one to `column` on the row with primary key row_id.

    Returns the number of rows updated (0 when the row doesn't exist).
    """
    with store_errors(f"{model.__tablename__}.{column.key} increment"):
        updated = (
            model.query
            .filter(model.id == row_id)
            .update({column: column + 1}, synchronize_session=False)
        )
        db.session.commit()
    return updated
