import math
from datetime import datetime, timedelta, timezone

import pytest

from gradebook.domain import (
    DomainValidationError,
    InvalidStateError,
    Submission,
    SubmissionStatus,
    VersionConflictError,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _submitted(version=0):
    return Submission.reconstitute(
        id="s-1",
        assignment_id="a-1",
        student_id="u-1",
        status=SubmissionStatus.SUBMITTED,
        version=version,
        content="answer",
        submitted_at=NOW,
        created_at=NOW,
    )


def _graded(version=1, grade=80):
    submission = _submitted(version=version - 1)
    submission.assign_grade(grade, "ok", now=NOW)
    return submission


def _snapshot(submission):
    return (
        submission.status,
        submission.content,
        submission.grade,
        submission.feedback,
        submission.version,
        submission.is_late,
        submission.updated_at,
    )


def test_create_submitted_stamps_submitted_at():
    submission = Submission.create(
        id="s-1", assignment_id="a-1", student_id="u-1", status="SUBMITTED", now=NOW
    )
    assert submission.status is SubmissionStatus.SUBMITTED
    assert submission.submitted_at == NOW
    assert submission.version == 0
    assert submission.persisted_version is None


def test_create_rejects_graded_status():
    with pytest.raises(DomainValidationError):
        Submission.create(id="s-1", assignment_id="a-1", student_id="u-1", status="GRADED")


def test_reconstitute_rejects_graded_without_grade():
    with pytest.raises(DomainValidationError, match="must have a grade"):
        Submission.reconstitute(
            id="s-1", assignment_id="a-1", student_id="u-1", status="GRADED", version=1
        )


def test_submit_only_from_not_submitted():
    submission = Submission.create(id="s-1", assignment_id="a-1", student_id="u-1", now=NOW)
    submission.submit(is_late=True, now=NOW)
    assert submission.status is SubmissionStatus.SUBMITTED
    assert submission.is_late is True
    with pytest.raises(InvalidStateError):
        submission.submit(is_late=False, now=NOW)


def test_version_increments_by_one_per_mutation():
    submission = _submitted()
    versions = [submission.version]
    submission.resubmit(False, now=NOW)
    versions.append(submission.version)
    submission.resubmit(True, expected_version=1, now=NOW)
    versions.append(submission.version)
    submission.assign_grade(70, None, expected_version=2, now=NOW)
    versions.append(submission.version)
    submission.update_grade(75, "better", now=NOW)
    versions.append(submission.version)
    assert versions == [0, 1, 2, 3, 4]


@pytest.mark.parametrize(
    "mutate",
    [
        lambda s: s.resubmit(False, expected_version=7, now=NOW),
        lambda s: s.assign_grade(50, "fine", expected_version=7, now=NOW),
        # 成绩非法时仍先报版本冲突
        lambda s: s.assign_grade(500, "fine", expected_version=7, now=NOW),
        lambda s: s.assign_grade("abc", None, expected_version=7, now=NOW),
    ],
)
def test_version_mismatch_leaves_submission_untouched(mutate):
    submission = _submitted(version=2)
    before = _snapshot(submission)
    with pytest.raises(VersionConflictError, match="modified by another user"):
        mutate(submission)
    assert _snapshot(submission) == before


def test_update_grade_version_mismatch_reported_before_status():
    submission = _submitted(version=3)
    with pytest.raises(VersionConflictError):
        submission.update_grade(60, None, expected_version=1, now=NOW)


@pytest.mark.parametrize("grade", [0, 0.5, 50, 99.99, 100])
def test_grade_in_range_accepted(grade):
    submission = _submitted()
    submission.assign_grade(grade, None, now=NOW)
    assert submission.status is SubmissionStatus.GRADED
    assert submission.grade == grade
    assert submission.graded_at == NOW


@pytest.mark.parametrize(
    "grade", [-0.01, 100.01, 101, math.nan, math.inf, -math.inf, "85", None, True]
)
def test_grade_out_of_range_rejected_without_mutation(grade):
    submission = _submitted(version=1)
    before = _snapshot(submission)
    with pytest.raises(DomainValidationError):
        submission.assign_grade(grade, None, now=NOW)
    assert _snapshot(submission) == before


def test_grade_range_checked_before_status():
    submission = Submission.create(id="s-1", assignment_id="a-1", student_id="u-1", now=NOW)
    with pytest.raises(DomainValidationError):
        submission.assign_grade(150, None, now=NOW)
    with pytest.raises(InvalidStateError, match="not been submitted"):
        submission.assign_grade(50, None, now=NOW)


def test_update_grade_requires_graded():
    submission = _submitted()
    with pytest.raises(InvalidStateError, match="has not been graded"):
        submission.update_grade(50, None, now=NOW)


def test_graded_is_terminal_for_content():
    submission = _graded()
    before = _snapshot(submission)
    with pytest.raises(InvalidStateError, match="Cannot resubmit after grading has started"):
        submission.resubmit(False, now=NOW)
    with pytest.raises(InvalidStateError):
        submission.update_content("new", None, None, now=NOW)
    assert _snapshot(submission) == before

    submission.update_grade(95, "revised", now=NOW + timedelta(hours=1))
    assert submission.grade == 95
    assert submission.status is SubmissionStatus.GRADED


def test_resubmit_rejects_unsubmitted():
    submission = Submission.create(id="s-1", assignment_id="a-1", student_id="u-1", now=NOW)
    with pytest.raises(InvalidStateError):
        submission.resubmit(False, now=NOW)


def test_mark_persisted_tracks_current_version():
    submission = _submitted(version=4)
    assert submission.persisted_version == 4
    submission.resubmit(False, now=NOW)
    assert submission.persisted_version == 4
    submission.mark_persisted()
    assert submission.persisted_version == 5
