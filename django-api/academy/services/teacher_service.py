"""Teacher service."""

import logging
from collections.abc import Sequence
from typing import Any

from academy.domain import NewTeacher, Teacher, TeacherId
from academy.domain.errors import TeacherHasClassesError, TeacherNotFoundError
from academy.stores.interfaces import TeacherStore

logger = logging.getLogger(__name__)


class TeacherService:
    """Service for managing teachers."""

    def __init__(self, store: TeacherStore) -> None:
        self._store = store

    def list_teachers(self) -> list[Teacher]:
        return self._store.list_teachers()

    def get_teacher(self, teacher_id: int) -> Teacher:
        """Return a teacher by ID.

        Raises:
            TeacherNotFoundError: If the teacher does not exist.
        """
        teacher = self._store.get_teacher(TeacherId(teacher_id))
        if teacher is None:
            raise TeacherNotFoundError(teacher_id)
        return teacher

    def create_teacher(self, full_name: str, subjects: Sequence[str]) -> Teacher:
        teacher = self._store.create_teacher(
            NewTeacher(full_name=full_name, subjects=tuple(subjects))
        )
        logger.info("Created teacher %s (%s)", teacher.id.value, teacher.full_name)
        return teacher

    def update_teacher(self, teacher_id: int, **changes: Any) -> Teacher:
        teacher = self.get_teacher(teacher_id)
        if "subjects" in changes:
            changes["subjects"] = tuple(changes["subjects"])
        if not changes:
            return teacher
        return self._store.update_teacher(teacher.id, changes)

    def delete_teacher(self, teacher_id: int) -> None:
        """Delete a teacher without classes.

        Raises:
            TeacherNotFoundError: If the teacher does not exist.
            TeacherHasClassesError: If the teacher still teaches classes.
        """
        teacher = self.get_teacher(teacher_id)
        class_count = self._store.count_classes_for_teacher(teacher.id)
        if class_count:
            raise TeacherHasClassesError(teacher_id, class_count)
        self._store.delete_teacher(teacher.id)
        logger.info("Deleted teacher %s", teacher_id)
