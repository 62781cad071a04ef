"""Domain error codes for the academy module."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    STUDENT_NOT_FOUND = "STUDENT_NOT_FOUND"
    CLASS_NOT_FOUND = "CLASS_NOT_FOUND"
    ENROLLMENT_NOT_FOUND = "ENROLLMENT_NOT_FOUND"
    TEACHER_NOT_FOUND = "TEACHER_NOT_FOUND"
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
    DUPLICATE_ENROLLMENT = "DUPLICATE_ENROLLMENT"
    CLASS_FULL = "CLASS_FULL"
    CONCURRENT_WRITE = "CONCURRENT_WRITE"
    TEACHER_HAS_CLASSES = "TEACHER_HAS_CLASSES"
    LOCATION_IN_USE = "LOCATION_IN_USE"
    CAPACITY_BELOW_ENROLLMENT = "CAPACITY_BELOW_ENROLLMENT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code, user-safe message and the ids involved."""

    code: ErrorCode
    message: str
    details: Mapping[str, int] = field(default_factory=dict, compare=False, hash=False)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """A referenced record does not exist."""


class ConflictError(DomainError):
    """The request contradicts the current state of the records."""


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: int) -> None:
        super().__init__(
            code=ErrorCode.STUDENT_NOT_FOUND,
            message=f"Student with ID {student_id} not found",
            details={"student_id": student_id},
        )


class ClassNotFoundError(NotFoundError):
    def __init__(self, class_id: int) -> None:
        super().__init__(
            code=ErrorCode.CLASS_NOT_FOUND,
            message=f"Class with ID {class_id} not found",
            details={"class_id": class_id},
        )


class EnrollmentNotFoundError(NotFoundError):
    def __init__(self, student_id: int, class_id: int) -> None:
        super().__init__(
            code=ErrorCode.ENROLLMENT_NOT_FOUND,
            message=f"Student with ID {student_id} is not enrolled in class with ID {class_id}",
            details={"student_id": student_id, "class_id": class_id},
        )


class TeacherNotFoundError(NotFoundError):
    def __init__(self, teacher_id: int) -> None:
        super().__init__(
            code=ErrorCode.TEACHER_NOT_FOUND,
            message=f"Teacher with ID {teacher_id} not found",
            details={"teacher_id": teacher_id},
        )


class LocationNotFoundError(NotFoundError):
    def __init__(self, location_id: int) -> None:
        super().__init__(
            code=ErrorCode.LOCATION_NOT_FOUND,
            message=f"Location with ID {location_id} not found",
            details={"location_id": location_id},
        )


class DuplicateEnrollmentError(ConflictError):
    def __init__(self, student_id: int, class_id: int) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_ENROLLMENT,
            message=f"Student is already enrolled in class {class_id}",
            details={"student_id": student_id, "class_id": class_id},
        )


class ClassFullError(ConflictError):
    def __init__(self, class_id: int, max_capacity: int) -> None:
        super().__init__(
            code=ErrorCode.CLASS_FULL,
            message=f"Class {class_id} is at full capacity ({max_capacity} students)",
            details={"class_id": class_id, "max_capacity": max_capacity},
        )


class ConcurrentWriteError(ConflictError):
    """Raised when concurrent enrollments kept invalidating the attempt."""

    def __init__(self, student_id: int, class_id: int) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENT_WRITE,
            message=f"Enrollment in class {class_id} conflicted with concurrent changes, try again",
            details={"student_id": student_id, "class_id": class_id},
        )


class TeacherHasClassesError(ConflictError):
    def __init__(self, teacher_id: int, class_count: int) -> None:
        super().__init__(
            code=ErrorCode.TEACHER_HAS_CLASSES,
            message=(
                f"Cannot delete teacher with id {teacher_id}. "
                f"Teacher has {class_count} active classes"
            ),
            details={"teacher_id": teacher_id, "class_count": class_count},
        )


class LocationInUseError(ConflictError):
    def __init__(self, location_id: int, class_count: int) -> None:
        super().__init__(
            code=ErrorCode.LOCATION_IN_USE,
            message=(
                f"Cannot delete location with id {location_id}. "
                f"It hosts {class_count} classes"
            ),
            details={"location_id": location_id, "class_count": class_count},
        )


class CapacityBelowEnrollmentError(ConflictError):
    def __init__(self, class_id: int, max_capacity: int, enrolled: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_BELOW_ENROLLMENT,
            message=(
                f"Class {class_id} already has {enrolled} students, "
                f"capacity cannot be lowered to {max_capacity}"
            ),
            details={"class_id": class_id, "max_capacity": max_capacity, "enrolled": enrolled},
        )
