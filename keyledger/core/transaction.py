# keyledger/core/transaction.py

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from keyledger.errors import KeyLedgerError, PersistenceFailure

logger = logging.getLogger(__name__)


@contextmanager
def transaction(engine: Engine, action: str) -> Iterator[Connection]:
    """
    Run a block on one connection inside BEGIN ... COMMIT.

    Any exception rolls the whole block back and the connection is returned
    to the pool on every path. Storage errors surface as PersistenceFailure
    ("Failed to <action>") with the driver message as details.
    """
    try:
        with engine.begin() as conn:
            yield conn
    except KeyLedgerError as exc:
        logger.info("Rolled back %s: %s", action, exc.message)
        raise
    except SQLAlchemyError as exc:
        logger.exception("Failed to %s", action)
        details = str(getattr(exc, "orig", None) or exc)
        raise PersistenceFailure(f"Failed to {action}", details) from exc
