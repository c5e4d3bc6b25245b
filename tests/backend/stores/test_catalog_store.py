from datetime import datetime

import pytest

from backend.core.errors import NotFound, ValidationConflict
from backend.models.assignment import Assignment
from backend.stores import catalog_store


def test_create_course_returns_persisted_row(db) -> None:
    course = catalog_store.create_course(db, 'Databases', 'Relational systems', 'Dr. Codd')

    assert course.id is not None
    assert (course.name, course.description, course.instructor) == ('Databases', 'Relational systems', 'Dr. Codd')
    assert catalog_store.get_course(db, course.id).name == 'Databases'


def test_update_course_replaces_fields(db) -> None:
    course = catalog_store.create_course(db, 'Databases', 'Relational systems', 'Dr. Codd')

    updated = catalog_store.update_course(db, course.id, 'Advanced Databases', None, 'Dr. Gray')

    assert (updated.name, updated.description, updated.instructor) == ('Advanced Databases', None, 'Dr. Gray')


@pytest.mark.parametrize(
    'operation',
    [
        lambda db: catalog_store.get_course(db, 999),
        lambda db: catalog_store.update_course(db, 999, 'Name', None, None),
        lambda db: catalog_store.delete_course(db, 999),
    ],
)
def test_course_operations_raise_not_found(db, operation) -> None:
    with pytest.raises(NotFound) as exception_info:
        operation(db)

    assert exception_info.value.message == 'Course not found.'


def test_delete_course_detaches_its_assignments(db) -> None:
    course = catalog_store.create_course(db, 'Compilers', None, None)
    assignment = catalog_store.create_assignment(db, 'Lexer', None, None, course.id)

    catalog_store.delete_course(db, course.id)

    assert catalog_store.list_courses(db) == []
    remaining = catalog_store.get_assignment(db, assignment.id)
    assert remaining.course_id is None


def test_create_assignment_with_unknown_course_is_a_conflict(db) -> None:
    with pytest.raises(ValidationConflict):
        catalog_store.create_assignment(db, 'Orphan', None, None, 999)

    assert db.query(Assignment).count() == 0


def test_assignment_lifecycle(db) -> None:
    course = catalog_store.create_course(db, 'Networks', None, None)
    due = datetime(2026, 11, 1, 23, 59)

    assignment = catalog_store.create_assignment(db, 'Sockets', 'Echo server', due, course.id)
    assert assignment.due_date == due
    assert assignment.file_path is None

    updated = catalog_store.update_assignment(db, assignment.id, 'Sockets v2', None, None, course.id)
    assert (updated.title, updated.description, updated.due_date) == ('Sockets v2', None, None)

    attached = catalog_store.attach_assignment_file(db, assignment.id, 'uploads/1/report.pdf')
    assert attached.file_path == 'uploads/1/report.pdf'

    assert [item.id for item in catalog_store.list_assignments(db, course_id=course.id)] == [assignment.id]

    assignment_id = assignment.id
    catalog_store.delete_assignment(db, assignment_id)
    with pytest.raises(NotFound):
        catalog_store.get_assignment(db, assignment_id)


@pytest.mark.parametrize(
    'operation',
    [
        lambda db: catalog_store.get_assignment(db, 999),
        lambda db: catalog_store.update_assignment(db, 999, 'Title', None, None, None),
        lambda db: catalog_store.attach_assignment_file(db, 999, 'uploads/x'),
        lambda db: catalog_store.delete_assignment(db, 999),
    ],
)
def test_assignment_operations_raise_not_found(db, operation) -> None:
    with pytest.raises(NotFound) as exception_info:
        operation(db)

    assert exception_info.value.message == 'Assignment not found.'
