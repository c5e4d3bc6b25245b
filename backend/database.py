from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend.core import config
from backend.core.errors import StoreFailure, ValidationConflict


engine = create_engine(config.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_transaction(
    db: Session,
    failure_message: str,
    conflict_message: str | None = None,
    conflict_on: str | None = None,
) -> Iterator[Session]:
    """Run a unit of work and commit it.

    Any exception rolls the session back. A constraint violation whose driver
    message mentions ``conflict_on`` becomes ``ValidationConflict(conflict_message)``;
    every other driver error becomes ``StoreFailure(failure_message)``. Domain
    errors propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is None or not _violates(exc, conflict_on):
            raise StoreFailure(failure_message) from exc
        raise ValidationConflict(conflict_message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure(failure_message) from exc
    except Exception:
        db.rollback()
        raise


def _violates(exc: IntegrityError, constraint_hint: str | None) -> bool:
    if constraint_hint is None:
        return True
    return constraint_hint.lower() in str(exc.orig).lower()
