"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in academy/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime, time

from academy.domain.value_objects import (
    Capacity,
    ClassId,
    DayOfWeek,
    EnrollmentId,
    Level,
    LocationId,
    StudentId,
    TeacherId,
)


@dataclass(frozen=True)
class Location:
    """Domain representation of a room in the branch."""

    id: LocationId
    name: str
    branch: str
    created_at: datetime


@dataclass(frozen=True)
class Teacher:
    """Domain representation of a Teacher."""

    id: TeacherId
    full_name: str
    subjects: tuple[str, ...]
    created_at: datetime


@dataclass(frozen=True)
class Student:
    """Domain representation of a Student."""

    id: StudentId
    full_name: str
    phone_number: str
    email: str
    created_at: datetime


@dataclass(frozen=True)
class SchoolClass:
    """Domain representation of a scheduled class."""

    id: ClassId
    name: str
    level: Level
    teacher_id: TeacherId
    location_id: LocationId
    start_time: time
    end_time: time
    days: tuple[DayOfWeek, ...]
    max_capacity: Capacity
    created_at: datetime


@dataclass(frozen=True)
class Enrollment:
    """Membership of one student in one class."""

    id: EnrollmentId
    student_id: StudentId
    class_id: ClassId
    enrolled_at: datetime


@dataclass(frozen=True)
class ClassDetails:
    """A class together with its teacher, room and enrollment figures.

    ``enrolled_students`` is None when the roster was not loaded.
    """

    school_class: SchoolClass
    teacher: Teacher
    location: Location
    enrolled_count: int
    enrolled_students: tuple[Student, ...] | None = None

    @property
    def is_full(self) -> bool:
        return not self.school_class.max_capacity.has_room_for(self.enrolled_count)


@dataclass(frozen=True)
class EnrolledClass:
    enrollment: Enrollment
    details: ClassDetails


@dataclass(frozen=True)
class EnrolledStudent:
    enrollment: Enrollment
    student: Student


@dataclass(frozen=True)
class ClassRoster:
    """Students currently enrolled in a class, in enrollment order."""

    class_id: ClassId
    students: tuple[EnrolledStudent, ...]

    @property
    def count(self) -> int:
        return len(self.students)


@dataclass(frozen=True)
class StudentWithClasses:
    student: Student
    enrolled_classes: tuple[ClassDetails, ...]


@dataclass(frozen=True)
class Schedule:
    """Classes grouped by day of week, each day sorted by start time."""

    days: dict[DayOfWeek, tuple[ClassDetails, ...]]
    total_classes: int
    total_enrollments: int

    @property
    def active_days(self) -> int:
        return sum(1 for classes in self.days.values() if classes)


@dataclass(frozen=True)
class DashboardSummary:
    classes: int
    students: int
    teachers: int
    locations: int


# Drafts carry already-validated input for new records.


@dataclass(frozen=True)
class NewLocation:
    name: str
    branch: str


@dataclass(frozen=True)
class NewTeacher:
    full_name: str
    subjects: tuple[str, ...]


@dataclass(frozen=True)
class NewStudent:
    full_name: str
    phone_number: str
    email: str


@dataclass(frozen=True)
class NewClass:
    name: str
    level: Level
    teacher_id: TeacherId
    location_id: LocationId
    start_time: time
    end_time: time
    days: tuple[DayOfWeek, ...]
    max_capacity: Capacity
