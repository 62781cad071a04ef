"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, time, timezone

import pytest

from academy.domain import (
    Capacity,
    ClassDetails,
    ClassId,
    DayOfWeek,
    Level,
    Location,
    LocationId,
    Schedule,
    SchoolClass,
    StudentId,
    Teacher,
    TeacherId,
)
from academy.domain.errors import (
    ClassFullError,
    ConflictError,
    DomainError,
    ErrorCode,
    NotFoundError,
    StudentNotFoundError,
)

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_details(max_capacity: int, enrolled: int) -> ClassDetails:
    school_class = SchoolClass(
        id=ClassId(1),
        name="Speaking Club",
        level=Level.INTERMEDIATE,
        teacher_id=TeacherId(1),
        location_id=LocationId(1),
        start_time=time(16, 0),
        end_time=time(17, 30),
        days=(DayOfWeek.SELASA,),
        max_capacity=Capacity(max_capacity),
        created_at=EPOCH,
    )
    return ClassDetails(
        school_class=school_class,
        teacher=Teacher(id=TeacherId(1), full_name="Rina", subjects=("English",), created_at=EPOCH),
        location=Location(id=LocationId(1), name="Room A", branch="Sidoarjo", created_at=EPOCH),
        enrolled_count=enrolled,
    )


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        assert Capacity(12).value == 12

    def test_capacity_rejects_zero(self):
        with pytest.raises(ValueError):
            Capacity(0)

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-3)

    def test_has_room_until_full(self):
        capacity = Capacity(2)

        assert capacity.has_room_for(1)
        assert not capacity.has_room_for(2)
        assert not capacity.has_room_for(3)


class TestIds:
    def test_ids_compare_by_value(self):
        assert StudentId(7) == StudentId(7)
        assert ClassId(7) != ClassId(8)

    def test_ids_are_hashable(self):
        assert len({StudentId(1), StudentId(1), StudentId(2)}) == 2


class TestEnums:
    def test_level_renders_as_value(self):
        assert str(Level.BEGINNER) == "Beginner"
        assert Level("Advanced") is Level.ADVANCED

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            Level("Expert")

    def test_days_are_in_week_order(self):
        assert [day.value for day in DayOfWeek] == [
            "Senin",
            "Selasa",
            "Rabu",
            "Kamis",
            "Jumat",
            "Sabtu",
            "Minggu",
        ]


class TestClassDetails:
    def test_not_full_below_capacity(self):
        assert not make_details(max_capacity=3, enrolled=2).is_full

    def test_full_at_capacity(self):
        assert make_details(max_capacity=3, enrolled=3).is_full


class TestSchedule:
    def test_active_days_counts_days_with_classes(self):
        details = make_details(max_capacity=3, enrolled=1)
        days = {day: () for day in DayOfWeek}
        days[DayOfWeek.SELASA] = (details,)
        days[DayOfWeek.KAMIS] = (details,)

        schedule = Schedule(days=days, total_classes=1, total_enrollments=1)

        assert schedule.active_days == 2


class TestDomainErrors:
    def test_str_includes_code_and_message(self):
        error = StudentNotFoundError(5)

        assert str(error) == "STUDENT_NOT_FOUND: Student with ID 5 not found"

    def test_error_carries_ids(self):
        error = ClassFullError(3, 20)

        assert error.code is ErrorCode.CLASS_FULL
        assert error.message == "Class 3 is at full capacity (20 students)"
        assert error.details == {"class_id": 3, "max_capacity": 20}

    def test_error_families(self):
        assert isinstance(StudentNotFoundError(1), NotFoundError)
        assert isinstance(ClassFullError(1, 1), ConflictError)
        assert isinstance(ClassFullError(1, 1), DomainError)
