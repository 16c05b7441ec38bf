import os
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg


def get_database_url() -> str:
    """Get the database URL from environment variables."""
    url = os.environ["DATABASE_URL"]
    return url


def get_sqlalchemy_database_url() -> str:
    """Get the database URL formatted for SQLAlchemy (used by Alembic).

    Automatically converts postgresql:// to postgresql+psycopg://
    to ensure psycopg3 is used instead of psycopg2.
    """
    url = get_database_url()
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


@contextmanager
def get_db_connection() -> Iterator[psycopg.Connection]:
    """Get a database connection context manager.

    Explicitly closes the connection to ensure proper cleanup in serverless environments.
    """
    url = get_database_url()
    conn = psycopg.connect(url)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def get_db_cursor() -> Iterator[psycopg.Cursor]:
    """Get a database cursor context manager.

    Automatically commits the transaction on successful completion,
    or rolls back on exception.
    """
    with get_db_connection() as conn:
        with conn.cursor() as cursor:
            try:
                yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise


@contextmanager
def use_cursor(cursor: Optional[psycopg.Cursor] = None) -> Iterator[psycopg.Cursor]:
    """Reuse the caller's cursor, or open a fresh transaction if there is none.

    Lets the directory run several storage calls inside one transaction while
    the same functions still work standalone.
    """
    if cursor is not None:
        yield cursor
        return
    with get_db_cursor() as new_cursor:
        yield new_cursor
