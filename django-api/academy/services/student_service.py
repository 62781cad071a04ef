"""Student service."""

import logging
from typing import Any

from academy.domain import NewStudent, Student, StudentId, StudentWithClasses
from academy.domain.errors import StudentNotFoundError
from academy.services.enrollment_service import EnrollmentService
from academy.stores.interfaces import EnrollmentStore, StudentStore

logger = logging.getLogger(__name__)


class StudentService:
    """Service for managing students."""

    def __init__(
        self,
        store: StudentStore,
        enrollments: EnrollmentStore,
        ledger: EnrollmentService,
    ) -> None:
        self._store = store
        self._enrollments = enrollments
        self._ledger = ledger

    def list_students(self) -> list[Student]:
        return self._store.list_students()

    def get_student(self, student_id: int) -> Student:
        """Return a student by ID.

        Raises:
            StudentNotFoundError: If the student does not exist.
        """
        student = self._store.get_student(StudentId(student_id))
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def get_student_with_classes(self, student_id: int) -> StudentWithClasses:
        student = self.get_student(student_id)
        enrolled = self._ledger.list_enrollments_for_student(student_id)
        return StudentWithClasses(
            student=student,
            enrolled_classes=tuple(item.details for item in enrolled),
        )

    def create_student(self, full_name: str, phone_number: str, email: str) -> Student:
        student = self._store.create_student(
            NewStudent(full_name=full_name, phone_number=phone_number, email=email)
        )
        logger.info("Created student %s (%s)", student.id.value, student.full_name)
        return student

    def update_student(self, student_id: int, **changes: Any) -> Student:
        student = self.get_student(student_id)
        if not changes:
            return student
        return self._store.update_student(student.id, changes)

    def delete_student(self, student_id: int) -> None:
        """Delete a student together with all of their enrollments.

        Raises:
            StudentNotFoundError: If the student does not exist.
        """
        sid = StudentId(student_id)
        with self._enrollments.atomic():
            if not self._store.student_exists(sid):
                raise StudentNotFoundError(student_id)
            self._ledger.on_student_deleted(student_id)
            self._store.delete_student(sid)
        logger.info("Deleted student %s", student_id)
