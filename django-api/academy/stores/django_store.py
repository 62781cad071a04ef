"""Django ORM implementations of the academy stores."""

from collections.abc import Iterable, Mapping
from dataclasses import fields
from enum import StrEnum
from typing import Any

from django.db import IntegrityError, OperationalError, transaction
from django.db.models import Count, Prefetch

from academy import models
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
from academy.stores.interfaces import (
    ClassStore,
    EnrollmentStore,
    LocationStore,
    StudentStore,
    TeacherStore,
    WriteConflict,
)

# serialization_failure, deadlock_detected
_CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})
# SQLITE_BUSY, SQLITE_LOCKED (primary result codes)
_SQLITE_CONFLICT_CODES = frozenset({5, 6})
_SQLITE_CONFLICT_MESSAGES = ("database is locked", "database table is locked")


def _is_write_conflict(exc: OperationalError) -> bool:
    cause = exc.__cause__
    sqlstate = getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)
    if sqlstate in _CONFLICT_SQLSTATES:
        return True
    sqlite_code = getattr(cause, "sqlite_errorcode", None)
    if sqlite_code is not None and (sqlite_code & 0xFF) in _SQLITE_CONFLICT_CODES:
        return True
    return any(message in str(exc) for message in _SQLITE_CONFLICT_MESSAGES)


class _Atomic:
    """transaction.atomic() that reports lock and serialization failures as WriteConflict.

    A constraint failing at commit is a conflict too: deferred foreign keys
    are checked there, after a concurrent delete removed a parent row.
    """

    def __init__(self) -> None:
        self._atomic = transaction.atomic()

    def __enter__(self) -> None:
        self._atomic.__enter__()

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            suppressed = self._atomic.__exit__(exc_type, exc, tb)
        except OperationalError as commit_error:
            if _is_write_conflict(commit_error):
                raise WriteConflict(str(commit_error)) from commit_error
            raise
        except IntegrityError as commit_error:
            raise WriteConflict(str(commit_error)) from commit_error
        if isinstance(exc, OperationalError) and _is_write_conflict(exc):
            raise WriteConflict(str(exc)) from exc
        return bool(suppressed)


def _column(value: Any) -> Any:
    if isinstance(value, (LocationId, TeacherId, Capacity)):
        return value.value
    if isinstance(value, StrEnum):
        return value.value
    if isinstance(value, tuple):
        return [_column(item) for item in value]
    return value


def _columns(values: Mapping[str, Any]) -> dict[str, Any]:
    return {name: _column(value) for name, value in values.items()}


def _draft_columns(draft: Any) -> dict[str, Any]:
    return _columns({field.name: getattr(draft, field.name) for field in fields(draft)})


def _save_changes(row: Any, changes: Mapping[str, Any]) -> None:
    columns = _columns(changes)
    if not columns:
        return
    for name, value in columns.items():
        setattr(row, name, value)
    row.save(update_fields=list(columns))


def _to_location(row: models.Location) -> Location:
    return Location(
        id=LocationId(row.id),
        name=row.name,
        branch=row.branch,
        created_at=row.created_at,
    )


def _to_teacher(row: models.Teacher) -> Teacher:
    return Teacher(
        id=TeacherId(row.id),
        full_name=row.full_name,
        subjects=tuple(row.subjects),
        created_at=row.created_at,
    )


def _to_student(row: models.Student) -> Student:
    return Student(
        id=StudentId(row.id),
        full_name=row.full_name,
        phone_number=row.phone_number,
        email=row.email,
        created_at=row.created_at,
    )


def _to_school_class(row: models.SchoolClass) -> SchoolClass:
    return SchoolClass(
        id=ClassId(row.id),
        name=row.name,
        level=Level(row.level),
        teacher_id=TeacherId(row.teacher_id),
        location_id=LocationId(row.location_id),
        start_time=row.start_time,
        end_time=row.end_time,
        days=tuple(DayOfWeek(day) for day in row.days),
        max_capacity=Capacity(row.max_capacity),
        created_at=row.created_at,
    )


def _to_enrollment(row: models.Enrollment) -> Enrollment:
    return Enrollment(
        id=EnrollmentId(row.id),
        student_id=StudentId(row.student_id),
        class_id=ClassId(row.school_class_id),
        enrolled_at=row.enrolled_at,
    )


def _to_details(
    row: models.SchoolClass,
    enrolled_count: int,
    students: Iterable[models.Student] | None = None,
) -> ClassDetails:
    return ClassDetails(
        school_class=_to_school_class(row),
        teacher=_to_teacher(row.teacher),
        location=_to_location(row.location),
        enrolled_count=enrolled_count,
        enrolled_students=None if students is None else tuple(_to_student(s) for s in students),
    )


class DjangoLocationStore(LocationStore):
    """Location store backed by the Django ORM."""

    def list_locations(self) -> list[Location]:
        return [_to_location(row) for row in models.Location.objects.order_by("id")]

    def get_location(self, location_id: LocationId) -> Location | None:
        row = models.Location.objects.filter(pk=location_id.value).first()
        return _to_location(row) if row else None

    def create_location(self, draft: NewLocation) -> Location:
        return _to_location(models.Location.objects.create(**_draft_columns(draft)))

    def update_location(self, location_id: LocationId, changes: Mapping[str, Any]) -> Location:
        row = models.Location.objects.get(pk=location_id.value)
        _save_changes(row, changes)
        return _to_location(row)

    def delete_location(self, location_id: LocationId) -> None:
        models.Location.objects.filter(pk=location_id.value).delete()

    def count_classes_at_location(self, location_id: LocationId) -> int:
        return models.SchoolClass.objects.filter(location_id=location_id.value).count()

    def count_locations(self) -> int:
        return models.Location.objects.count()


class DjangoTeacherStore(TeacherStore):
    """Teacher store backed by the Django ORM."""

    def list_teachers(self) -> list[Teacher]:
        return [_to_teacher(row) for row in models.Teacher.objects.order_by("id")]

    def get_teacher(self, teacher_id: TeacherId) -> Teacher | None:
        row = models.Teacher.objects.filter(pk=teacher_id.value).first()
        return _to_teacher(row) if row else None

    def create_teacher(self, draft: NewTeacher) -> Teacher:
        return _to_teacher(models.Teacher.objects.create(**_draft_columns(draft)))

    def update_teacher(self, teacher_id: TeacherId, changes: Mapping[str, Any]) -> Teacher:
        row = models.Teacher.objects.get(pk=teacher_id.value)
        _save_changes(row, changes)
        return _to_teacher(row)

    def delete_teacher(self, teacher_id: TeacherId) -> None:
        models.Teacher.objects.filter(pk=teacher_id.value).delete()

    def count_classes_for_teacher(self, teacher_id: TeacherId) -> int:
        return models.SchoolClass.objects.filter(teacher_id=teacher_id.value).count()

    def count_teachers(self) -> int:
        return models.Teacher.objects.count()


class DjangoStudentStore(StudentStore):
    """Student store backed by the Django ORM."""

    def student_exists(self, student_id: StudentId) -> bool:
        return models.Student.objects.filter(pk=student_id.value).exists()

    def list_students(self) -> list[Student]:
        return [_to_student(row) for row in models.Student.objects.order_by("id")]

    def get_student(self, student_id: StudentId) -> Student | None:
        row = models.Student.objects.filter(pk=student_id.value).first()
        return _to_student(row) if row else None

    def create_student(self, draft: NewStudent) -> Student:
        return _to_student(models.Student.objects.create(**_draft_columns(draft)))

    def update_student(self, student_id: StudentId, changes: Mapping[str, Any]) -> Student:
        row = models.Student.objects.get(pk=student_id.value)
        _save_changes(row, changes)
        return _to_student(row)

    def delete_student(self, student_id: StudentId) -> None:
        models.Student.objects.filter(pk=student_id.value).delete()

    def count_students(self) -> int:
        return models.Student.objects.count()


class DjangoClassStore(ClassStore):
    """Class store backed by the Django ORM."""

    def class_exists(self, class_id: ClassId) -> bool:
        return models.SchoolClass.objects.filter(pk=class_id.value).exists()

    def get_capacity(self, class_id: ClassId, *, lock: bool = False) -> int | None:
        queryset = models.SchoolClass.objects.filter(pk=class_id.value)
        if lock:
            queryset = queryset.select_for_update()
        return queryset.values_list("max_capacity", flat=True).first()

    def get_class(self, class_id: ClassId) -> SchoolClass | None:
        row = models.SchoolClass.objects.filter(pk=class_id.value).first()
        return _to_school_class(row) if row else None

    def list_class_details(
        self,
        *,
        level: Level | None = None,
        teacher_id: TeacherId | None = None,
        location_id: LocationId | None = None,
    ) -> list[ClassDetails]:
        queryset = (
            models.SchoolClass.objects.select_related("teacher", "location")
            .annotate(enrolled_count=Count("enrollments"))
            .prefetch_related(
                Prefetch(
                    "enrollments",
                    queryset=models.Enrollment.objects.select_related("student").order_by("id"),
                )
            )
            .order_by("id")
        )
        if level is not None:
            queryset = queryset.filter(level=level.value)
        if teacher_id is not None:
            queryset = queryset.filter(teacher_id=teacher_id.value)
        if location_id is not None:
            queryset = queryset.filter(location_id=location_id.value)
        return [
            _to_details(
                row,
                row.enrolled_count,
                [enrollment.student for enrollment in row.enrollments.all()],
            )
            for row in queryset
        ]

    def create_class(self, draft: NewClass) -> SchoolClass:
        return _to_school_class(models.SchoolClass.objects.create(**_draft_columns(draft)))

    def update_class(self, class_id: ClassId, changes: Mapping[str, Any]) -> SchoolClass:
        row = models.SchoolClass.objects.get(pk=class_id.value)
        _save_changes(row, changes)
        return _to_school_class(row)

    def delete_class(self, class_id: ClassId) -> None:
        models.SchoolClass.objects.filter(pk=class_id.value).delete()

    def count_classes(self) -> int:
        return models.SchoolClass.objects.count()


class DjangoEnrollmentStore(EnrollmentStore):
    """Enrollment store backed by the Django ORM.

    Uniqueness of (student, class) is backed by a database constraint; an
    insert that loses the race is reported as WriteConflict.
    """

    def atomic(self) -> _Atomic:
        return _Atomic()

    def find_enrollment(self, student_id: StudentId, class_id: ClassId) -> Enrollment | None:
        row = models.Enrollment.objects.filter(
            student_id=student_id.value, school_class_id=class_id.value
        ).first()
        return _to_enrollment(row) if row else None

    def count_for_class(self, class_id: ClassId) -> int:
        return models.Enrollment.objects.filter(school_class_id=class_id.value).count()

    def insert_enrollment(self, student_id: StudentId, class_id: ClassId) -> Enrollment:
        try:
            with transaction.atomic():
                row = models.Enrollment.objects.create(
                    student_id=student_id.value, school_class_id=class_id.value
                )
        except IntegrityError as exc:
            raise WriteConflict(
                f"Enrollment of student {student_id.value} in class {class_id.value} "
                f"was rejected by the database"
            ) from exc
        return _to_enrollment(row)

    def delete_enrollment(self, enrollment_id: EnrollmentId) -> None:
        models.Enrollment.objects.filter(pk=enrollment_id.value).delete()

    def delete_for_class(self, class_id: ClassId) -> int:
        deleted, _ = models.Enrollment.objects.filter(school_class_id=class_id.value).delete()
        return deleted

    def delete_for_student(self, student_id: StudentId) -> int:
        deleted, _ = models.Enrollment.objects.filter(student_id=student_id.value).delete()
        return deleted

    def list_for_student(self, student_id: StudentId) -> list[EnrolledClass]:
        rows = list(
            models.Enrollment.objects.filter(student_id=student_id.value)
            .select_related("school_class__teacher", "school_class__location")
            .order_by("id")
        )
        counts = self._counts_by_class(row.school_class_id for row in rows)
        return [
            EnrolledClass(
                enrollment=_to_enrollment(row),
                details=_to_details(row.school_class, counts.get(row.school_class_id, 0)),
            )
            for row in rows
        ]

    def list_for_class(self, class_id: ClassId) -> list[EnrolledStudent]:
        rows = (
            models.Enrollment.objects.filter(school_class_id=class_id.value)
            .select_related("student")
            .order_by("id")
        )
        return [
            EnrolledStudent(enrollment=_to_enrollment(row), student=_to_student(row.student))
            for row in rows
        ]

    @staticmethod
    def _counts_by_class(class_ids: Iterable[int]) -> dict[int, int]:
        rows = (
            models.Enrollment.objects.filter(school_class_id__in=set(class_ids))
            .values("school_class_id")
            .annotate(total=Count("id"))
            .order_by()
            .values_list("school_class_id", "total")
        )
        return dict(rows)
