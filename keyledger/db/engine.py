# keyledger/db/engine.py

from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from keyledger.config import settings


def build_engine(url: str) -> Engine:
    # echo=True if you want to see SQL printed in the terminal
    engine = create_engine(url, future=True)

    if engine.dialect.name == "sqlite":
        # SQLite ignores REFERENCES clauses unless asked per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return build_engine(settings.DATABASE_URL)
