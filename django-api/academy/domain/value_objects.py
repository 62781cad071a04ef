"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class LocationId:
    """Unique identifier for a Location (room)."""

    value: int


@dataclass(frozen=True)
class TeacherId:
    """Unique identifier for a Teacher."""

    value: int


@dataclass(frozen=True)
class StudentId:
    """Unique identifier for a Student."""

    value: int


@dataclass(frozen=True)
class ClassId:
    """Unique identifier for a SchoolClass."""

    value: int


@dataclass(frozen=True)
class EnrollmentId:
    """Unique identifier for an Enrollment."""

    value: int


@dataclass(frozen=True)
class Capacity:
    """Positive integer representing the maximum number of seats in a class."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Capacity must be positive")

    def has_room_for(self, enrolled: int) -> bool:
        return enrolled < self.value


class Level(StrEnum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class DayOfWeek(StrEnum):
    """Days of the week as used by the branch timetable, Monday first."""

    SENIN = "Senin"
    SELASA = "Selasa"
    RABU = "Rabu"
    KAMIS = "Kamis"
    JUMAT = "Jumat"
    SABTU = "Sabtu"
    MINGGU = "Minggu"
