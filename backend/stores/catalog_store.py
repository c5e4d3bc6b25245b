"""Persistence for courses and assignments."""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.errors import NotFound, StoreFailure
from backend.database import store_transaction
from backend.models.assignment import Assignment
from backend.models.course import Course

logger = logging.getLogger(__name__)

COURSE_NOT_FOUND = 'Course not found.'
ASSIGNMENT_NOT_FOUND = 'Assignment not found.'
UNKNOWN_COURSE = 'Assignment references a course that does not exist.'


def create_course(db: Session, name: str, description: str | None, instructor: str | None) -> Course:
    course = Course(name=name, description=description, instructor=instructor)
    with store_transaction(db, 'Failed to create course.'):
        db.add(course)
    db.refresh(course)
    return course


def list_courses(db: Session) -> list[Course]:
    try:
        return db.query(Course).order_by(Course.id.asc()).all()
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch courses.') from exc


def get_course(db: Session, course_id: int) -> Course:
    try:
        course = db.get(Course, course_id)
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch course.') from exc
    if course is None:
        raise NotFound(COURSE_NOT_FOUND)
    return course


def update_course(
    db: Session,
    course_id: int,
    name: str,
    description: str | None,
    instructor: str | None,
) -> Course:
    with store_transaction(db, 'Failed to update course.'):
        course = db.query(Course).filter(Course.id == course_id).with_for_update().first()
        if course is None:
            raise NotFound(COURSE_NOT_FOUND)
        course.name = name
        course.description = description
        course.instructor = instructor
    db.refresh(course)
    return course


def delete_course(db: Session, course_id: int) -> None:
    """Delete a course.

    Users' tracked lists are left alone, so ids of deleted courses may remain
    in them. Assignments of the course keep existing with ``course_id`` unset.
    """
    with store_transaction(db, 'Failed to delete course.'):
        db.query(Assignment).filter(Assignment.course_id == course_id).update(
            {Assignment.course_id: None},
            synchronize_session=False,
        )
        deleted = db.query(Course).filter(Course.id == course_id).delete(synchronize_session=False)
        if deleted == 0:
            raise NotFound(COURSE_NOT_FOUND)
    logger.info('Deleted course %s', course_id)


def create_assignment(
    db: Session,
    title: str,
    description: str | None,
    due_date: datetime | None,
    course_id: int | None,
) -> Assignment:
    assignment = Assignment(title=title, description=description, due_date=due_date, course_id=course_id)
    with store_transaction(
        db,
        'Failed to create assignment.',
        conflict_message=UNKNOWN_COURSE,
        conflict_on='foreign key',
    ):
        db.add(assignment)
    db.refresh(assignment)
    return assignment


def list_assignments(db: Session, course_id: int | None = None) -> list[Assignment]:
    query = db.query(Assignment)
    if course_id is not None:
        query = query.filter(Assignment.course_id == course_id)
    try:
        return query.order_by(Assignment.id.asc()).all()
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch assignments.') from exc


def get_assignment(db: Session, assignment_id: int) -> Assignment:
    try:
        assignment = db.get(Assignment, assignment_id)
    except SQLAlchemyError as exc:
        raise StoreFailure('Failed to fetch assignment.') from exc
    if assignment is None:
        raise NotFound(ASSIGNMENT_NOT_FOUND)
    return assignment


def update_assignment(
    db: Session,
    assignment_id: int,
    title: str,
    description: str | None,
    due_date: datetime | None,
    course_id: int | None,
) -> Assignment:
    with store_transaction(
        db,
        'Failed to update assignment.',
        conflict_message=UNKNOWN_COURSE,
        conflict_on='foreign key',
    ):
        assignment = db.query(Assignment).filter(Assignment.id == assignment_id).with_for_update().first()
        if assignment is None:
            raise NotFound(ASSIGNMENT_NOT_FOUND)
        assignment.title = title
        assignment.description = description
        assignment.due_date = due_date
        assignment.course_id = course_id
    db.refresh(assignment)
    return assignment


def attach_assignment_file(db: Session, assignment_id: int, file_path: str) -> Assignment:
    with store_transaction(db, 'Failed to attach file to assignment.'):
        assignment = db.query(Assignment).filter(Assignment.id == assignment_id).with_for_update().first()
        if assignment is None:
            raise NotFound(ASSIGNMENT_NOT_FOUND)
        assignment.file_path = file_path
    db.refresh(assignment)
    logger.info('Attached %s to assignment %s', file_path, assignment_id)
    return assignment


def delete_assignment(db: Session, assignment_id: int) -> None:
    with store_transaction(db, 'Failed to delete assignment.'):
        deleted = db.query(Assignment).filter(Assignment.id == assignment_id).delete(synchronize_session=False)
        if deleted == 0:
            raise NotFound(ASSIGNMENT_NOT_FOUND)
    logger.info('Deleted assignment %s', assignment_id)
