"""Pytest configuration and shared fixtures."""

import itertools
import threading
import time as clock
from collections.abc import Callable
from datetime import datetime, time, timezone

import pytest
from rest_framework.test import APIClient

from academy.domain import (
    Capacity,
    ClassDetails,
    ClassId,
    DayOfWeek,
    EnrolledClass,
    EnrolledStudent,
    Enrollment,
    EnrollmentId,
    Level,
    Location,
    LocationId,
    SchoolClass,
    Student,
    StudentId,
    Teacher,
    TeacherId,
)
from academy.services.enrollment_service import EnrollmentService
from academy.stores.interfaces import (
    ClassDirectory,
    EnrollmentStore,
    StudentDirectory,
    WriteConflict,
)

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryLedgerStore(StudentDirectory, ClassDirectory, EnrollmentStore):
    """Students, classes and enrollments held in dicts.

    One re-entrant lock stands in for the database transaction, so a unit of
    work runs alone. ``conflicts`` makes the next N inserts raise WriteConflict,
    ``on_conflict`` runs just before such a conflict is raised, and
    ``insert_delay`` widens the window between the checks and the insert.
    """

    def __init__(self) -> None:
        self.students: dict[int, Student] = {}
        self.classes: dict[int, SchoolClass] = {}
        self.rows: dict[int, Enrollment] = {}
        self.conflicts = 0
        self.on_conflict: Callable[[], None] | None = None
        self.insert_delay = 0.0
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def add_student(self, student_id: int) -> Student:
        student = Student(
            id=StudentId(student_id),
            full_name=f"Student {student_id}",
            phone_number="081234567890",
            email=f"student{student_id}@example.com",
            created_at=EPOCH,
        )
        self.students[student_id] = student
        return student

    def add_class(self, class_id: int, max_capacity: int) -> SchoolClass:
        school_class = SchoolClass(
            id=ClassId(class_id),
            name=f"Class {class_id}",
            level=Level.BEGINNER,
            teacher_id=TeacherId(1),
            location_id=LocationId(1),
            start_time=time(9, 0),
            end_time=time(11, 0),
            days=(DayOfWeek.SENIN, DayOfWeek.RABU),
            max_capacity=Capacity(max_capacity),
            created_at=EPOCH,
        )
        self.classes[class_id] = school_class
        return school_class

    def remove_class(self, class_id: int) -> None:
        del self.classes[class_id]

    def remove_student(self, student_id: int) -> None:
        del self.students[student_id]

    def student_exists(self, student_id: StudentId) -> bool:
        return student_id.value in self.students

    def class_exists(self, class_id: ClassId) -> bool:
        return class_id.value in self.classes

    def get_capacity(self, class_id: ClassId, *, lock: bool = False) -> int | None:
        school_class = self.classes.get(class_id.value)
        return school_class.max_capacity.value if school_class else None

    def atomic(self) -> threading.RLock:
        return self._lock

    def find_enrollment(self, student_id: StudentId, class_id: ClassId) -> Enrollment | None:
        for row in self.rows.values():
            if row.student_id == student_id and row.class_id == class_id:
                return row
        return None

    def count_for_class(self, class_id: ClassId) -> int:
        return sum(1 for row in self.rows.values() if row.class_id == class_id)

    def insert_enrollment(self, student_id: StudentId, class_id: ClassId) -> Enrollment:
        if self.insert_delay:
            clock.sleep(self.insert_delay)
        if self.conflicts:
            self.conflicts -= 1
            if self.on_conflict is not None:
                self.on_conflict()
            raise WriteConflict("simulated concurrent write")
        row = Enrollment(
            id=EnrollmentId(next(self._ids)),
            student_id=student_id,
            class_id=class_id,
            enrolled_at=datetime.now(timezone.utc),
        )
        self.rows[row.id.value] = row
        return row

    def delete_enrollment(self, enrollment_id: EnrollmentId) -> None:
        del self.rows[enrollment_id.value]

    def delete_for_class(self, class_id: ClassId) -> int:
        doomed = [key for key, row in self.rows.items() if row.class_id == class_id]
        for key in doomed:
            del self.rows[key]
        return len(doomed)

    def delete_for_student(self, student_id: StudentId) -> int:
        doomed = [key for key, row in self.rows.items() if row.student_id == student_id]
        for key in doomed:
            del self.rows[key]
        return len(doomed)

    def list_for_student(self, student_id: StudentId) -> list[EnrolledClass]:
        return [
            EnrolledClass(enrollment=row, details=self._details(row.class_id))
            for row in self.rows.values()
            if row.student_id == student_id
        ]

    def list_for_class(self, class_id: ClassId) -> list[EnrolledStudent]:
        return [
            EnrolledStudent(enrollment=row, student=self.students[row.student_id.value])
            for row in self.rows.values()
            if row.class_id == class_id
        ]

    def _details(self, class_id: ClassId) -> ClassDetails:
        return ClassDetails(
            school_class=self.classes[class_id.value],
            teacher=Teacher(id=TeacherId(1), full_name="Teacher", subjects=("English",), created_at=EPOCH),
            location=Location(id=LocationId(1), name="Room A", branch="Sidoarjo", created_at=EPOCH),
            enrolled_count=self.count_for_class(class_id),
        )


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def ledger_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(ledger_store: InMemoryLedgerStore) -> EnrollmentService:
    return EnrollmentService(ledger_store, ledger_store, ledger_store, max_attempts=3)
