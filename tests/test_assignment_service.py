from datetime import timedelta

import pytest

from gradebook.errors import ForbiddenError, NotFoundError, StateConflictError, ValidationFailedError
from gradebook.models import UserRole
from gradebook.services.assignments import AssignmentService


@pytest.fixture
def service(stores, clock):
    return AssignmentService(*stores, clock=clock)


@pytest.fixture
def assignment(service, course, teacher, clock):
    return service.create_assignment(
        course.id,
        teacher.id,
        title="Essay",
        description="Write about spring",
        due_date=clock.now + timedelta(days=7),
        submission_type="TEXT",
    )


def test_create_assignment(service, assignment, course, teacher):
    loaded = service.get_assignment(assignment.id, teacher.id)
    assert loaded.title == "Essay"
    assert loaded.course_id == course.id
    assert loaded.grading_started is False


def test_create_requires_course_teacher(service, course, make_user, clock):
    outsider = make_user("teacher2", UserRole.TEACHER)
    with pytest.raises(ForbiddenError) as excinfo:
        service.create_assignment(
            course.id,
            outsider.id,
            title="x",
            description="y",
            due_date=clock.now + timedelta(days=1),
            submission_type="TEXT",
        )
    assert excinfo.value.code == "FORBIDDEN_ROLE"


def test_create_rejects_past_due_date(service, course, teacher, clock):
    with pytest.raises(ValidationFailedError) as excinfo:
        service.create_assignment(
            course.id,
            teacher.id,
            title="x",
            description="y",
            due_date=clock.now - timedelta(seconds=1),
            submission_type="TEXT",
        )
    assert excinfo.value.code == "INVALID_DATE"


def test_create_rejects_blank_file_format(service, course, teacher, clock):
    with pytest.raises(ValidationFailedError, match="file formats"):
        service.create_assignment(
            course.id,
            teacher.id,
            title="x",
            description="y",
            due_date=clock.now + timedelta(days=1),
            submission_type="FILE",
            accepted_file_formats=[".pdf", " "],
        )


def test_update_within_edit_window(service, assignment, teacher):
    updated = service.update_assignment(assignment.id, teacher.id, title="Essay v2")
    assert updated.title == "Essay v2"
    assert service.get_assignment(assignment.id, teacher.id).title == "Essay v2"


def test_update_requires_a_field(service, assignment, teacher):
    with pytest.raises(ValidationFailedError, match="At least one field"):
        service.update_assignment(assignment.id, teacher.id)


def test_update_after_due_date(service, assignment, teacher, clock):
    clock.advance(days=8)
    with pytest.raises(StateConflictError, match="Cannot edit assignment after due date") as excinfo:
        service.update_assignment(assignment.id, teacher.id, title="x")
    assert excinfo.value.code == "ASSIGNMENT_PAST_DUE"


def test_update_after_grading_started(service, stores, assignment, teacher):
    assignments, _, _ = stores
    assignment.start_grading()
    assignments.update(assignment)
    with pytest.raises(StateConflictError) as excinfo:
        service.update_assignment(assignment.id, teacher.id, description="new")
    assert excinfo.value.code == "ASSIGNMENT_CLOSED"


def test_delete_assignment(service, assignment, teacher, enrolled_student):
    with pytest.raises(ForbiddenError):
        service.delete_assignment(assignment.id, enrolled_student.id)
    service.delete_assignment(assignment.id, teacher.id)
    with pytest.raises(NotFoundError):
        service.get_assignment(assignment.id, teacher.id)


def test_visibility(service, assignment, course, enrolled_student, make_user):
    assert [a.id for a in service.list_assignments(course.id, enrolled_student.id)] == [assignment.id]
    stranger = make_user("student9")
    with pytest.raises(ForbiddenError):
        service.get_assignment(assignment.id, stranger.id)
