"""Persistence for users and their tracked courses.

Tracked courses live in a per-user list column. Mutations lock the user row
for the duration of the transaction so that the existence check and the
update cannot interleave with a concurrent request.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.errors import NotFound, StoreFailure
from backend.database import store_transaction
from backend.models.user import User

logger = logging.getLogger(__name__)

USER_NOT_FOUND = 'User not found.'


def _locked_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).with_for_update().first()
    if user is None:
        raise NotFound(USER_NOT_FOUND)
    return user


def create_user(db: Session, email: str, password_hash: str) -> User:
    user = User(email=email, password_hash=password_hash, verified=False, tracked_courses=[])
    with store_transaction(
        db,
        'Failed to create user.',
        conflict_message='Email already exists.',
        conflict_on='email',
    ):
        db.add(user)
    db.refresh(user)
    logger.info('Registered user %s (%s)', user.id, user.email)
    return user


def get_user(db: Session, user_id: int) -> User:
    try:
        user = db.get(User, user_id)
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch user.') from exc
    if user is None:
        raise NotFound(USER_NOT_FOUND)
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    try:
        return db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch user.') from exc


def user_exists(db: Session, user_id: int) -> bool:
    try:
        return db.query(User.id).filter(User.id == user_id).first() is not None
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch user.') from exc


def list_users(db: Session, verified: bool | None = None) -> list[User]:
    query = db.query(User)
    if verified is not None:
        query = query.filter(User.verified.is_(verified))
    try:
        return query.order_by(User.id.asc()).all()
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch users.') from exc


def verify_user(db: Session, user_id: int) -> User:
    with store_transaction(db, 'Failed to verify user.'):
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.verified: True}, synchronize_session=False)
        )
        if updated == 0:
            raise NotFound(USER_NOT_FOUND)

    user = get_user(db, user_id)
    db.refresh(user)
    logger.info('Verified user %s', user_id)
    return user


def add_tracked_course(db: Session, user_id: int, course_id: int) -> list[int]:
    """Append ``course_id`` to the user's tracked list.

    Duplicates are kept: tracking the same course twice stores it twice.
    """
    with store_transaction(db, 'Failed to add course to tracked list.'):
        user = _locked_user(db, user_id)
        tracked = [*(user.tracked_courses or []), course_id]
        user.tracked_courses = tracked

    logger.info('User %s tracked course %s', user_id, course_id)
    return tracked


def remove_tracked_course(db: Session, user_id: int, course_id: int) -> list[int]:
    """Remove every occurrence of ``course_id``; absent ids are a no-op."""
    with store_transaction(db, 'Failed to remove course from tracked list.'):
        user = _locked_user(db, user_id)
        current = list(user.tracked_courses or [])
        tracked = [tracked_id for tracked_id in current if tracked_id != course_id]
        if len(tracked) != len(current):
            user.tracked_courses = tracked

    logger.info('User %s untracked course %s', user_id, course_id)
    return tracked


def get_tracked_courses(db: Session, user_id: int) -> list[int]:
    try:
        row = db.query(User.tracked_courses).filter(User.id == user_id).first()
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch tracked courses.') from exc
    if row is None:
        raise NotFound(USER_NOT_FOUND)
    return list(row.tracked_courses or [])
