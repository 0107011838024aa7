from datetime import datetime, timedelta, timezone

import pytest

from gradebook.domain import Assignment, Submission, SubmissionStatus, VersionConflictError
from gradebook.models import SubmissionRecord
from gradebook.repositories import DuplicateRecordError, RecordNotFoundError

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def assignment(stores, course):
    assignments, _, _ = stores
    assignment = Assignment.create(
        id="a-1",
        course_id=course.id,
        title="Essay",
        description="desc",
        due_date=NOW + timedelta(days=7),
        submission_type="TEXT",
        accepted_file_formats=[],
        now=NOW,
    )
    return assignments.save(assignment)


@pytest.fixture
def saved_submission(stores, assignment, student):
    _, submissions, _ = stores
    submission = Submission.create(
        id="s-1",
        assignment_id=assignment.id,
        student_id=student.id,
        status=SubmissionStatus.SUBMITTED,
        content="answer",
        now=NOW,
    )
    return submissions.save(submission)


def test_save_and_load_roundtrip(stores, saved_submission, assignment, student):
    _, submissions, _ = stores
    loaded = submissions.find_by_assignment_and_student(assignment.id, student.id)
    assert loaded.id == saved_submission.id
    assert loaded.status is SubmissionStatus.SUBMITTED
    assert loaded.persisted_version == 0
    assert loaded.submitted_at == NOW


def test_duplicate_pair_rejected(stores, saved_submission, assignment, student):
    _, submissions, _ = stores
    duplicate = Submission.create(
        id="s-2",
        assignment_id=assignment.id,
        student_id=student.id,
        status=SubmissionStatus.SUBMITTED,
        now=NOW,
    )
    with pytest.raises(DuplicateRecordError):
        submissions.save(duplicate)


def test_racing_writes_on_same_version_only_one_wins(stores, saved_submission, session):
    _, submissions, _ = stores
    first = submissions.find_by_id("s-1")
    second = submissions.find_by_id("s-1")

    first.assign_grade(90, None, expected_version=0, now=NOW)
    second.assign_grade(70, None, expected_version=0, now=NOW)

    submissions.update(first)
    with pytest.raises(VersionConflictError):
        submissions.update(second)

    stored = session.get(SubmissionRecord, "s-1", populate_existing=True)
    assert stored.grade == 90
    assert stored.version == 1


def test_update_without_expected_version_still_compares_loaded_version(stores, saved_submission):
    _, submissions, _ = stores
    stale = submissions.find_by_id("s-1")
    fresh = submissions.find_by_id("s-1")
    fresh.resubmit(False, now=NOW)
    submissions.update(fresh)

    stale.assign_grade(50, None, now=NOW)
    with pytest.raises(VersionConflictError):
        submissions.update(stale)


def test_update_missing_row_reports_not_found(stores, saved_submission, session):
    _, submissions, _ = stores
    loaded = submissions.find_by_id("s-1")
    session.delete(session.get(SubmissionRecord, "s-1"))
    session.commit()

    loaded.resubmit(False, now=NOW)
    with pytest.raises(RecordNotFoundError):
        submissions.update(loaded)


def test_update_marks_entity_persisted(stores, saved_submission):
    _, submissions, _ = stores
    loaded = submissions.find_by_id("s-1")
    loaded.resubmit(True, now=NOW)
    submissions.update(loaded)
    assert loaded.persisted_version == 1

    # 同一实体可以连续更新
    loaded.assign_grade(88, "good", expected_version=1, now=NOW)
    submissions.update(loaded)
    assert submissions.find_by_id("s-1").version == 2


def test_delete_assignment_cascades_submissions(stores, saved_submission, assignment):
    assignments, submissions, _ = stores
    assignments.delete(assignment.id)
    assert assignments.find_by_id(assignment.id) is None
    assert submissions.find_by_id("s-1") is None


def test_assignment_update_of_missing_row(stores, assignment):
    assignments, _, _ = stores
    ghost = Assignment.reconstitute(
        id="missing",
        course_id=assignment.course_id,
        title="x",
        description="y",
        due_date=NOW,
        submission_type="TEXT",
    )
    with pytest.raises(RecordNotFoundError):
        assignments.update(ghost)
