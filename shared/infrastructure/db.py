"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.
"""

import os
import re
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker, Session

from shared.config.settings import DATABASE_URL


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def _engine_options(url: str) -> dict:
    # SQLite (local development) has no connection pool sizing or connect_timeout
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": _calculate_pool_size(),
        "max_overflow": 15,
        "pool_timeout": 30,  # Wait max 30s for connection from pool
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "connect_args": {"connect_timeout": 10},
    }


engine = create_engine(DATABASE_URL, echo=False, **_engine_options(DATABASE_URL))

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/orders")
        def list_orders(db: Session = Depends(get_db)):
            ...

    The session is automatically closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            OrderActions(db).get_order(business_unit_id, order_id)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


# =============================================================================
# Unique constraint violations
# =============================================================================


_PG_UNIQUE_VIOLATION = "23505"
_SQLITE_UNIQUE_PREFIX = "UNIQUE constraint failed:"
_PG_KEY_DETAIL = re.compile(r"Key \((?P<columns>[^)]*)\)=")


@dataclass(frozen=True)
class UniqueViolation:
    """A unique constraint violation reported by the storage engine."""

    constraint: str | None = None
    columns: frozenset[str] = field(default_factory=frozenset)

    def involves(self, column: str, constraint: str | None = None) -> bool:
        """True if the violation is on ``column`` or on the named constraint."""
        if constraint is not None and self.constraint == constraint:
            return True
        return column in self.columns


def parse_unique_violation(exc: IntegrityError) -> UniqueViolation | None:
    """
    Translate a driver IntegrityError into a UniqueViolation.

    Returns None when the error is not a unique violation (FK, NOT NULL,
    CHECK, ...). Supports psycopg / psycopg2 (SQLSTATE 23505) and SQLite.
    """
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None

    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        if sqlstate != _PG_UNIQUE_VIOLATION:
            return None
        diag = getattr(orig, "diag", None)
        constraint = getattr(diag, "constraint_name", None)
        detail = getattr(diag, "message_detail", None) or ""
        match = _PG_KEY_DETAIL.search(detail)
        columns = (
            frozenset(col.strip() for col in match.group("columns").split(","))
            if match
            else frozenset()
        )
        return UniqueViolation(constraint=constraint, columns=columns)

    message = str(orig)
    if message.startswith(_SQLITE_UNIQUE_PREFIX):
        qualified = message[len(_SQLITE_UNIQUE_PREFIX):].split(",")
        # "restaurant_order.order_number" -> "order_number"
        columns = frozenset(col.strip().rsplit(".", 1)[-1] for col in qualified)
        return UniqueViolation(columns=columns)

    return None
