"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any

from academy.domain import (
    ClassDetails,
    ClassId,
    EnrolledClass,
    EnrolledStudent,
    Enrollment,
    EnrollmentId,
    Level,
    Location,
    LocationId,
    NewClass,
    NewLocation,
    NewStudent,
    NewTeacher,
    SchoolClass,
    Student,
    StudentId,
    Teacher,
    TeacherId,
)


class WriteConflict(Exception):
    """A concurrent writer invalidated the current unit of work.

    Raised for unique-constraint races and for serialization or lock failures
    reported by the database. The unit of work has been rolled back and may
    be retried from the start.
    """


class LocationStore(ABC):
    """Interface for room persistence operations."""

    @abstractmethod
    def list_locations(self) -> list[Location]:
        """Return all locations ordered by id."""
        ...

    @abstractmethod
    def get_location(self, location_id: LocationId) -> Location | None:
        """Return a location by ID, or None if not found."""
        ...

    @abstractmethod
    def create_location(self, draft: NewLocation) -> Location: ...

    @abstractmethod
    def update_location(self, location_id: LocationId, changes: Mapping[str, Any]) -> Location: ...

    @abstractmethod
    def delete_location(self, location_id: LocationId) -> None: ...

    @abstractmethod
    def count_classes_at_location(self, location_id: LocationId) -> int: ...

    @abstractmethod
    def count_locations(self) -> int: ...


class TeacherStore(ABC):
    """Interface for teacher persistence operations."""

    @abstractmethod
    def list_teachers(self) -> list[Teacher]:
        """Return all teachers ordered by id."""
        ...

    @abstractmethod
    def get_teacher(self, teacher_id: TeacherId) -> Teacher | None:
        """Return a teacher by ID, or None if not found."""
        ...

    @abstractmethod
    def create_teacher(self, draft: NewTeacher) -> Teacher: ...

    @abstractmethod
    def update_teacher(self, teacher_id: TeacherId, changes: Mapping[str, Any]) -> Teacher: ...

    @abstractmethod
    def delete_teacher(self, teacher_id: TeacherId) -> None: ...

    @abstractmethod
    def count_classes_for_teacher(self, teacher_id: TeacherId) -> int: ...

    @abstractmethod
    def count_teachers(self) -> int: ...


class StudentDirectory(ABC):
    """Read-only view of students consumed by the enrollment ledger."""

    @abstractmethod
    def student_exists(self, student_id: StudentId) -> bool:
        """Check if a student exists."""
        ...


class StudentStore(StudentDirectory):
    """Interface for student persistence operations."""

    @abstractmethod
    def list_students(self) -> list[Student]:
        """Return all students ordered by id."""
        ...

    @abstractmethod
    def get_student(self, student_id: StudentId) -> Student | None:
        """Return a student by ID, or None if not found."""
        ...

    @abstractmethod
    def create_student(self, draft: NewStudent) -> Student: ...

    @abstractmethod
    def update_student(self, student_id: StudentId, changes: Mapping[str, Any]) -> Student: ...

    @abstractmethod
    def delete_student(self, student_id: StudentId) -> None:
        """Delete the student row. Its enrollments must already be gone."""
        ...

    @abstractmethod
    def count_students(self) -> int: ...


class ClassDirectory(ABC):
    """Read-only view of classes consumed by the enrollment ledger."""

    @abstractmethod
    def class_exists(self, class_id: ClassId) -> bool:
        """Check if a class exists."""
        ...

    @abstractmethod
    def get_capacity(self, class_id: ClassId, *, lock: bool = False) -> int | None:
        """Return the class's max capacity, or None if the class does not exist.

        With ``lock=True`` the class row stays locked until the surrounding
        unit of work ends, serialising concurrent enrollments into the class.
        """
        ...


class ClassStore(ClassDirectory):
    """Interface for class persistence operations."""

    @abstractmethod
    def get_class(self, class_id: ClassId) -> SchoolClass | None:
        """Return a class by ID, or None if not found."""
        ...

    @abstractmethod
    def list_class_details(
        self,
        *,
        level: Level | None = None,
        teacher_id: TeacherId | None = None,
        location_id: LocationId | None = None,
    ) -> list[ClassDetails]:
        """Return classes with teacher, location, roster and count, ordered by id."""
        ...

    @abstractmethod
    def create_class(self, draft: NewClass) -> SchoolClass: ...

    @abstractmethod
    def update_class(self, class_id: ClassId, changes: Mapping[str, Any]) -> SchoolClass: ...

    @abstractmethod
    def delete_class(self, class_id: ClassId) -> None:
        """Delete the class row. Its enrollments must already be gone."""
        ...

    @abstractmethod
    def count_classes(self) -> int: ...


class EnrollmentStore(ABC):
    """Interface for enrollment persistence operations."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[Any]:
        """Return a context manager wrapping one unit of work.

        Everything performed inside commits together or not at all. A
        conflicting concurrent write surfaces as WriteConflict on exit.
        """
        ...

    @abstractmethod
    def find_enrollment(self, student_id: StudentId, class_id: ClassId) -> Enrollment | None: ...

    @abstractmethod
    def count_for_class(self, class_id: ClassId) -> int:
        """Return the current number of enrollments in a class."""
        ...

    @abstractmethod
    def insert_enrollment(self, student_id: StudentId, class_id: ClassId) -> Enrollment:
        """Persist a new enrollment stamped with the current time.

        Raises:
            WriteConflict: If the pair was inserted concurrently.
        """
        ...

    @abstractmethod
    def delete_enrollment(self, enrollment_id: EnrollmentId) -> None: ...

    @abstractmethod
    def delete_for_class(self, class_id: ClassId) -> int:
        """Delete every enrollment in a class and return how many were removed."""
        ...

    @abstractmethod
    def delete_for_student(self, student_id: StudentId) -> int:
        """Delete every enrollment of a student and return how many were removed."""
        ...

    @abstractmethod
    def list_for_student(self, student_id: StudentId) -> list[EnrolledClass]:
        """Return a student's enrollments with class details, in enrollment order."""
        ...

    @abstractmethod
    def list_for_class(self, class_id: ClassId) -> list[EnrolledStudent]:
        """Return a class's enrollments with student data, in enrollment order."""
        ...
