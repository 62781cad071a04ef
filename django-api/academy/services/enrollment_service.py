"""Enrollment ledger - the only place capacity and uniqueness rules are enforced.

The ledger:
- Depends only on the student/class directories and the enrollment store
- Derives the enrollment count from the store on every check, never caches it
- Runs the precondition chain and the insert as one unit of work, retried a
  bounded number of times when the store reports a concurrent write
"""

import logging

from academy.domain import (
    ClassId,
    ClassRoster,
    EnrolledClass,
    Enrollment,
    StudentId,
)
from academy.domain.errors import (
    ClassFullError,
    ClassNotFoundError,
    ConcurrentWriteError,
    DuplicateEnrollmentError,
    EnrollmentNotFoundError,
    StudentNotFoundError,
)
from academy.stores.interfaces import (
    ClassDirectory,
    EnrollmentStore,
    StudentDirectory,
    WriteConflict,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class EnrollmentService:
    """Service for enrolling students into classes."""

    def __init__(
        self,
        students: StudentDirectory,
        classes: ClassDirectory,
        enrollments: EnrollmentStore,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._students = students
        self._classes = classes
        self._enrollments = enrollments
        self._max_attempts = max_attempts

    def enroll(self, student_id: int, class_id: int) -> Enrollment:
        """Enroll a student into a class.

        Checks run in a fixed order so the first failing one decides the error.

        Raises:
            StudentNotFoundError: If the student does not exist.
            ClassNotFoundError: If the class does not exist.
            DuplicateEnrollmentError: If the student is already enrolled.
            ClassFullError: If the class has reached its max capacity.
            ConcurrentWriteError: If every attempt lost a race with another writer.
        """
        sid, cid = StudentId(student_id), ClassId(class_id)
        for attempt in range(1, self._max_attempts + 1):
            try:
                with self._enrollments.atomic():
                    enrollment = self._enroll_once(sid, cid)
            except WriteConflict as exc:
                logger.warning(
                    "Enrollment of student %s in class %s conflicted (attempt %d/%d): %s",
                    student_id,
                    class_id,
                    attempt,
                    self._max_attempts,
                    exc,
                )
                continue
            logger.info(
                "Enrolled student %s in class %s (enrollment %s)",
                student_id,
                class_id,
                enrollment.id.value,
            )
            return enrollment
        raise ConcurrentWriteError(student_id, class_id)

    def _enroll_once(self, student_id: StudentId, class_id: ClassId) -> Enrollment:
        if not self._students.student_exists(student_id):
            raise StudentNotFoundError(student_id.value)
        capacity = self._classes.get_capacity(class_id, lock=True)
        if capacity is None:
            raise ClassNotFoundError(class_id.value)
        if self._enrollments.find_enrollment(student_id, class_id) is not None:
            raise DuplicateEnrollmentError(student_id.value, class_id.value)
        if self._enrollments.count_for_class(class_id) >= capacity:
            raise ClassFullError(class_id.value, capacity)
        return self._enrollments.insert_enrollment(student_id, class_id)

    def unenroll(self, student_id: int, class_id: int) -> bool:
        """Remove a student from a class.

        A second call for the same pair fails instead of silently succeeding.

        Raises:
            StudentNotFoundError: If the student does not exist.
            ClassNotFoundError: If the class does not exist.
            EnrollmentNotFoundError: If the student is not enrolled in the class.
        """
        sid, cid = StudentId(student_id), ClassId(class_id)
        with self._enrollments.atomic():
            if not self._students.student_exists(sid):
                raise StudentNotFoundError(student_id)
            if not self._classes.class_exists(cid):
                raise ClassNotFoundError(class_id)
            enrollment = self._enrollments.find_enrollment(sid, cid)
            if enrollment is None:
                raise EnrollmentNotFoundError(student_id, class_id)
            self._enrollments.delete_enrollment(enrollment.id)
        logger.info("Unenrolled student %s from class %s", student_id, class_id)
        return True

    def count_enrollments(self, class_id: int) -> int:
        return self._enrollments.count_for_class(ClassId(class_id))

    def list_enrollments_for_student(self, student_id: int) -> list[EnrolledClass]:
        """Return the student's enrollments; empty for an unknown student."""
        return self._enrollments.list_for_student(StudentId(student_id))

    def list_enrollments_for_class(self, class_id: int) -> ClassRoster:
        """Return the class roster. Callers check that the class exists."""
        cid = ClassId(class_id)
        return ClassRoster(class_id=cid, students=tuple(self._enrollments.list_for_class(cid)))

    def on_class_deleted(self, class_id: int) -> int:
        """Remove every enrollment in a class.

        Must run inside the unit of work that deletes the class row.
        """
        with self._enrollments.atomic():
            removed = self._enrollments.delete_for_class(ClassId(class_id))
        logger.info("Removed %d enrollments of deleted class %s", removed, class_id)
        return removed

    def on_student_deleted(self, student_id: int) -> int:
        """Remove every enrollment of a student.

        Must run inside the unit of work that deletes the student row.
        """
        with self._enrollments.atomic():
            removed = self._enrollments.delete_for_student(StudentId(student_id))
        logger.info("Removed %d enrollments of deleted student %s", removed, student_id)
        return removed
