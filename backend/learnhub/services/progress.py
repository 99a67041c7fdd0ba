"""
Enrollment progress tracking for LearnHub.

Records per-lesson completion for an enrollment and derives aggregate
progress from it. The percentage and completion helpers are pure; the
tracker owns the write path and keeps the cached ``is_completed`` flag in
line with the course's real lesson count.
"""

from threading import Lock
from typing import Dict, Mapping, Union
import logging

from learnhub.core.exceptions import NotFound
from learnhub.schemas import EnrollmentRead, ProgressSummary
from learnhub.storage import Storage


logger = logging.getLogger(__name__)


ProgressSource = Union[EnrollmentRead, Mapping[str, bool]]


def _progress_of(enrollment: ProgressSource) -> Mapping[str, bool]:
    if isinstance(enrollment, EnrollmentRead):
        return enrollment.progress
    return enrollment


def count_completed(enrollment: ProgressSource) -> int:
    """Number of lessons whose completion flag is true."""
    return sum(1 for done in _progress_of(enrollment).values() if done)


def compute_completion_percentage(enrollment: ProgressSource, total_lessons: int) -> int:
    """
    Integer completion percentage in 0..100.

    ``round(100 * completed / total)`` with halves rounded up, and 0 for a
    course without lessons.
    """
    if total_lessons <= 0:
        return 0
    completed = count_completed(enrollment)
    percentage = (200 * completed + total_lessons) // (2 * total_lessons)
    return min(percentage, 100)


def is_fully_completed(enrollment: ProgressSource, total_lessons: int) -> bool:
    return total_lessons > 0 and count_completed(enrollment) == total_lessons


# enrollment id -> lock held across the write and the completion recompute
_enrollment_locks: Dict[int, Lock] = {}
_enrollment_locks_guard = Lock()


def _enrollment_lock(enrollment_id: int) -> Lock:
    with _enrollment_locks_guard:
        return _enrollment_locks.setdefault(enrollment_id, Lock())


class ProgressTracker:
    """Write path for the progress mapping of enrollments."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def mark_lesson_progress(
        self, enrollment_id: int, lesson_id: int, completed: bool
    ) -> EnrollmentRead:
        """
        Set ``progress[lesson_id] = completed`` for one enrollment.

        The caller has already checked that the acting user owns the
        enrollment. Raises NotFound if the enrollment does not exist.

        Writes to one enrollment are serialised within the process, so the
        completion flag left by the last writer reflects every lesson written
        before it.
        """
        with _enrollment_lock(enrollment_id):
            enrollment = self.storage.upsert_lesson_progress(enrollment_id, lesson_id, completed)
            if enrollment is None:
                raise NotFound("Enrollment not found")

            total_lessons = self.storage.count_lessons_by_course(enrollment.course_id)
            is_completed = is_fully_completed(enrollment, total_lessons)
            if is_completed != enrollment.is_completed:
                enrollment = self.storage.set_enrollment_completed(enrollment_id, is_completed)
                if enrollment is None:
                    raise NotFound("Enrollment not found")
                logger.info(
                    f"Enrollment {enrollment_id} completion changed to {is_completed} "
                    f"({total_lessons} lessons)"
                )

        return enrollment

    def summarize(self, enrollment: EnrollmentRead) -> ProgressSummary:
        """Progress figures recomputed against the current lesson count."""
        total_lessons = self.storage.count_lessons_by_course(enrollment.course_id)
        return ProgressSummary(
            completed_lessons=count_completed(enrollment),
            total_lessons=total_lessons,
            percentage=compute_completion_percentage(enrollment, total_lessons),
            is_completed=is_fully_completed(enrollment, total_lessons),
        )
