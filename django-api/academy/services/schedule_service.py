"""Schedule and dashboard views over the class catalog."""

from collections.abc import Iterable

from academy.domain import (
    ClassDetails,
    DashboardSummary,
    DayOfWeek,
    Level,
    LocationId,
    Schedule,
    TeacherId,
)
from academy.stores.interfaces import ClassStore, LocationStore, StudentStore, TeacherStore


def group_by_day(classes: Iterable[ClassDetails]) -> dict[DayOfWeek, tuple[ClassDetails, ...]]:
    """Place each class under every day it meets, earliest start first.

    Every day of the week is present in the result, in week order.
    """
    grouped: dict[DayOfWeek, list[ClassDetails]] = {day: [] for day in DayOfWeek}
    for details in classes:
        for day in details.school_class.days:
            grouped[day].append(details)
    return {
        day: tuple(sorted(entries, key=lambda details: details.school_class.start_time))
        for day, entries in grouped.items()
    }


class ScheduleService:
    """Read-only views used by the branch dashboard."""

    def __init__(
        self,
        classes: ClassStore,
        students: StudentStore,
        teachers: TeacherStore,
        locations: LocationStore,
    ) -> None:
        self._classes = classes
        self._students = students
        self._teachers = teachers
        self._locations = locations

    def build_schedule(
        self,
        *,
        day: DayOfWeek | None = None,
        level: Level | None = None,
        teacher_id: int | None = None,
        location_id: int | None = None,
    ) -> Schedule:
        """Return the weekly schedule for the classes matching every given filter."""
        classes = self._classes.list_class_details(
            level=level,
            teacher_id=TeacherId(teacher_id) if teacher_id is not None else None,
            location_id=LocationId(location_id) if location_id is not None else None,
        )
        if day is not None:
            classes = [details for details in classes if day in details.school_class.days]
        return Schedule(
            days=group_by_day(classes),
            total_classes=len(classes),
            total_enrollments=sum(details.enrolled_count for details in classes),
        )

    def dashboard(self) -> DashboardSummary:
        return DashboardSummary(
            classes=self._classes.count_classes(),
            students=self._students.count_students(),
            teachers=self._teachers.count_teachers(),
            locations=self._locations.count_locations(),
        )
