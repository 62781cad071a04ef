"""Class service - scheduling data for classes and the queries built on it."""

import logging
from collections.abc import Sequence
from datetime import time
from typing import Any

from academy.domain import (
    Capacity,
    ClassDetails,
    ClassId,
    DayOfWeek,
    Level,
    LocationId,
    NewClass,
    SchoolClass,
    TeacherId,
)
from academy.domain.errors import (
    CapacityBelowEnrollmentError,
    ClassNotFoundError,
    LocationNotFoundError,
    TeacherNotFoundError,
)
from academy.services.enrollment_service import EnrollmentService
from academy.stores.interfaces import ClassStore, EnrollmentStore, LocationStore, TeacherStore

logger = logging.getLogger(__name__)


class ClassService:
    """Service for managing classes."""

    def __init__(
        self,
        classes: ClassStore,
        teachers: TeacherStore,
        locations: LocationStore,
        enrollments: EnrollmentStore,
        ledger: EnrollmentService,
    ) -> None:
        self._classes = classes
        self._teachers = teachers
        self._locations = locations
        self._enrollments = enrollments
        self._ledger = ledger

    def list_classes(self) -> list[ClassDetails]:
        """Return every class with teacher, room, roster and enrolled count."""
        return self._classes.list_class_details()

    def get_class(self, class_id: int) -> SchoolClass:
        """Return a class by ID.

        Raises:
            ClassNotFoundError: If the class does not exist.
        """
        school_class = self._classes.get_class(ClassId(class_id))
        if school_class is None:
            raise ClassNotFoundError(class_id)
        return school_class

    def create_class(
        self,
        name: str,
        level: Level,
        teacher_id: int,
        location_id: int,
        start_time: time,
        end_time: time,
        days: Sequence[DayOfWeek],
        max_capacity: int,
    ) -> SchoolClass:
        """Create a class held by an existing teacher in an existing room.

        Raises:
            TeacherNotFoundError: If the teacher does not exist.
            LocationNotFoundError: If the location does not exist.
        """
        self._require_teacher(teacher_id)
        self._require_location(location_id)
        school_class = self._classes.create_class(
            NewClass(
                name=name,
                level=Level(level),
                teacher_id=TeacherId(teacher_id),
                location_id=LocationId(location_id),
                start_time=start_time,
                end_time=end_time,
                days=tuple(DayOfWeek(day) for day in days),
                max_capacity=Capacity(max_capacity),
            )
        )
        logger.info("Created class %s (%s)", school_class.id.value, school_class.name)
        return school_class

    def update_class(self, class_id: int, **changes: Any) -> SchoolClass:
        """Apply a partial update.

        The capacity may not drop below the number of students already enrolled.

        Raises:
            ClassNotFoundError: If the class does not exist.
            TeacherNotFoundError: If a new teacher_id does not exist.
            LocationNotFoundError: If a new location_id does not exist.
            CapacityBelowEnrollmentError: If max_capacity is lower than the enrollment count.
        """
        cid = ClassId(class_id)
        updates = self._domain_changes(changes)
        with self._enrollments.atomic():
            if self._classes.get_capacity(cid, lock=True) is None:
                raise ClassNotFoundError(class_id)
            if "teacher_id" in updates:
                self._require_teacher(updates["teacher_id"].value)
            if "location_id" in updates:
                self._require_location(updates["location_id"].value)
            if "max_capacity" in updates:
                enrolled = self._enrollments.count_for_class(cid)
                if updates["max_capacity"].value < enrolled:
                    raise CapacityBelowEnrollmentError(
                        class_id, updates["max_capacity"].value, enrolled
                    )
            school_class = self._classes.update_class(cid, updates)
        if updates:
            logger.info("Updated class %s: %s", class_id, ", ".join(sorted(updates)))
        return school_class

    def delete_class(self, class_id: int) -> None:
        """Delete a class together with all of its enrollments.

        The class row stays locked from the existence check to the delete, so
        no enrollment can slip in after the cascade.

        Raises:
            ClassNotFoundError: If the class does not exist.
        """
        cid = ClassId(class_id)
        with self._enrollments.atomic():
            if self._classes.get_capacity(cid, lock=True) is None:
                raise ClassNotFoundError(class_id)
            self._ledger.on_class_deleted(class_id)
            self._classes.delete_class(cid)
        logger.info("Deleted class %s", class_id)

    def classes_by_teacher(self, teacher_id: int) -> list[ClassDetails]:
        """Return a teacher's classes with rosters.

        Raises:
            TeacherNotFoundError: If the teacher does not exist.
        """
        self._require_teacher(teacher_id)
        return self._classes.list_class_details(teacher_id=TeacherId(teacher_id))

    def classes_by_student(self, student_id: int) -> list[ClassDetails]:
        """Return the classes a student is enrolled in; empty for an unknown student."""
        return [item.details for item in self._ledger.list_enrollments_for_student(student_id)]

    def available_classes(
        self, level: Level | None = None, day: DayOfWeek | None = None
    ) -> list[ClassDetails]:
        """Return classes with at least one free seat, optionally filtered."""
        classes = self._classes.list_class_details(level=level)
        return [
            details
            for details in classes
            if not details.is_full and (day is None or day in details.school_class.days)
        ]

    def _require_teacher(self, teacher_id: int) -> None:
        if self._teachers.get_teacher(TeacherId(teacher_id)) is None:
            raise TeacherNotFoundError(teacher_id)

    def _require_location(self, location_id: int) -> None:
        if self._locations.get_location(LocationId(location_id)) is None:
            raise LocationNotFoundError(location_id)

    @staticmethod
    def _domain_changes(changes: dict[str, Any]) -> dict[str, Any]:
        converters = {
            "level": Level,
            "teacher_id": TeacherId,
            "location_id": LocationId,
            "days": lambda days: tuple(DayOfWeek(day) for day in days),
            "max_capacity": Capacity,
        }
        return {
            name: converters[name](value) if name in converters else value
            for name, value in changes.items()
        }
