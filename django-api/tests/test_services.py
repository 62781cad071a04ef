"""Service tests against the Django stores.

These exercise the services the HTTP handlers use, on a real database.
Run with: pytest tests/test_services.py -v
"""

import threading
from datetime import time

import pytest
from django.db import OperationalError, connection

from academy import models
from academy.domain import ClassId, DayOfWeek, Enrollment, Level, StudentId
from academy.domain.errors import (
    CapacityBelowEnrollmentError,
    ClassFullError,
    ClassNotFoundError,
    DomainError,
    DuplicateEnrollmentError,
    ErrorCode,
    LocationInUseError,
    LocationNotFoundError,
    StudentNotFoundError,
    TeacherHasClassesError,
    TeacherNotFoundError,
)
from academy.handlers import dependencies
from academy.services.class_service import ClassService
from academy.stores.django_store import (
    DjangoClassStore,
    DjangoEnrollmentStore,
    DjangoLocationStore,
    DjangoTeacherStore,
)
from academy.stores.interfaces import WriteConflict


class LockRecordingClassStore(DjangoClassStore):
    """Remembers which class rows were read under a row lock."""

    def __init__(self) -> None:
        self.locked: list[ClassId] = []

    def get_capacity(self, class_id: ClassId, *, lock: bool = False) -> int | None:
        if lock:
            self.locked.append(class_id)
        return super().get_capacity(class_id, lock=lock)


@pytest.fixture
def teacher():
    return dependencies.teacher_service().create_teacher("Rina Kartika", ["English", "TOEFL"])


@pytest.fixture
def room():
    return dependencies.location_service().create_location("Room A")


@pytest.fixture
def make_class(teacher, room):
    def make(
        name="General English",
        level=Level.BEGINNER,
        days=(DayOfWeek.SENIN, DayOfWeek.RABU),
        start_time=time(9, 0),
        max_capacity=2,
        teacher_id=None,
    ):
        return dependencies.class_service().create_class(
            name=name,
            level=level,
            teacher_id=teacher_id or teacher.id.value,
            location_id=room.id.value,
            start_time=start_time,
            end_time=time(start_time.hour + 1, 30),
            days=days,
            max_capacity=max_capacity,
        )

    return make


@pytest.fixture
def make_student():
    counter = iter(range(1, 100))

    def make():
        n = next(counter)
        return dependencies.student_service().create_student(
            full_name=f"Student {n}",
            phone_number=f"0812000000{n:02d}",
            email=f"student{n}@example.com",
        )

    return make


@pytest.mark.django_db
class TestEnrollmentLedger:
    """The enrollment ledger on the Django stores."""

    def test_fills_class_then_rejects(self, make_class, make_student):
        school_class = make_class(max_capacity=2)
        first, second, third = make_student(), make_student(), make_student()
        ledger = dependencies.enrollment_service()
        cid = school_class.id.value

        ledger.enroll(first.id.value, cid)
        ledger.enroll(second.id.value, cid)
        with pytest.raises(ClassFullError):
            ledger.enroll(third.id.value, cid)

        assert ledger.count_enrollments(cid) == 2
        assert models.Enrollment.objects.filter(school_class_id=cid).count() == 2

    def test_duplicate_rejected(self, make_class, make_student):
        school_class = make_class()
        student = make_student()
        ledger = dependencies.enrollment_service()

        ledger.enroll(student.id.value, school_class.id.value)
        with pytest.raises(DuplicateEnrollmentError):
            ledger.enroll(student.id.value, school_class.id.value)

        assert models.Enrollment.objects.count() == 1

    def test_missing_class_creates_nothing(self, make_student):
        student = make_student()

        with pytest.raises(ClassNotFoundError):
            dependencies.enrollment_service().enroll(student.id.value, 999)

        assert models.Enrollment.objects.count() == 0

    def test_missing_student(self, make_class):
        school_class = make_class()

        with pytest.raises(StudentNotFoundError):
            dependencies.enrollment_service().enroll(999, school_class.id.value)

    def test_unique_constraint_reports_write_conflict(self, make_class, make_student):
        school_class = make_class()
        student = make_student()
        store = DjangoEnrollmentStore()
        store.insert_enrollment(StudentId(student.id.value), ClassId(school_class.id.value))

        with pytest.raises(WriteConflict):
            store.insert_enrollment(StudentId(student.id.value), ClassId(school_class.id.value))

        assert models.Enrollment.objects.count() == 1

    def test_roster_in_enrollment_order(self, make_class, make_student):
        school_class = make_class(max_capacity=5)
        first, second = make_student(), make_student()
        ledger = dependencies.enrollment_service()
        ledger.enroll(second.id.value, school_class.id.value)
        ledger.enroll(first.id.value, school_class.id.value)

        roster = ledger.list_enrollments_for_class(school_class.id.value)

        assert roster.count == 2
        assert [item.student.id for item in roster.students] == [second.id, first.id]

    def test_student_listing_carries_class_counts(self, make_class, make_student):
        school_class = make_class(max_capacity=5)
        first, second = make_student(), make_student()
        ledger = dependencies.enrollment_service()
        ledger.enroll(first.id.value, school_class.id.value)
        ledger.enroll(second.id.value, school_class.id.value)

        enrolled = ledger.list_enrollments_for_student(first.id.value)

        assert len(enrolled) == 1
        assert enrolled[0].details.school_class.id == school_class.id
        assert enrolled[0].details.enrolled_count == 2
        assert enrolled[0].details.teacher.full_name == "Rina Kartika"


@pytest.mark.django_db
class TestClassService:
    def test_create_requires_teacher(self, room):
        with pytest.raises(TeacherNotFoundError):
            dependencies.class_service().create_class(
                name="Grammar",
                level=Level.ADVANCED,
                teacher_id=999,
                location_id=room.id.value,
                start_time=time(9, 0),
                end_time=time(10, 0),
                days=[DayOfWeek.KAMIS],
                max_capacity=10,
            )

    def test_create_requires_location(self, teacher):
        with pytest.raises(LocationNotFoundError):
            dependencies.class_service().create_class(
                name="Grammar",
                level=Level.ADVANCED,
                teacher_id=teacher.id.value,
                location_id=999,
                start_time=time(9, 0),
                end_time=time(10, 0),
                days=[DayOfWeek.KAMIS],
                max_capacity=10,
            )

    def test_create_stores_days_and_level(self, make_class):
        school_class = make_class(level=Level.INTERMEDIATE, days=(DayOfWeek.JUMAT,))

        row = models.SchoolClass.objects.get(pk=school_class.id.value)
        assert row.level == "Intermediate"
        assert row.days == ["Jumat"]

    def test_update_changes_fields(self, make_class):
        school_class = make_class(max_capacity=2)

        updated = dependencies.class_service().update_class(
            school_class.id.value, name="Conversation", max_capacity=8
        )

        assert updated.name == "Conversation"
        assert updated.max_capacity.value == 8

    def test_capacity_cannot_drop_below_enrollment(self, make_class, make_student):
        school_class = make_class(max_capacity=3)
        ledger = dependencies.enrollment_service()
        for _ in range(2):
            ledger.enroll(make_student().id.value, school_class.id.value)

        with pytest.raises(CapacityBelowEnrollmentError):
            dependencies.class_service().update_class(school_class.id.value, max_capacity=1)

        assert dependencies.class_service().update_class(
            school_class.id.value, max_capacity=2
        ).max_capacity.value == 2

    def test_update_unknown_class(self):
        with pytest.raises(ClassNotFoundError):
            dependencies.class_service().update_class(999, name="Nope")

    def test_update_to_unknown_teacher(self, make_class):
        school_class = make_class()

        with pytest.raises(TeacherNotFoundError):
            dependencies.class_service().update_class(school_class.id.value, teacher_id=999)

    def test_delete_removes_enrollments(self, make_class, make_student):
        doomed, kept = make_class(), make_class(name="Kept")
        student = make_student()
        ledger = dependencies.enrollment_service()
        ledger.enroll(student.id.value, doomed.id.value)
        ledger.enroll(student.id.value, kept.id.value)

        dependencies.class_service().delete_class(doomed.id.value)

        assert not models.SchoolClass.objects.filter(pk=doomed.id.value).exists()
        assert list(models.Enrollment.objects.values_list("school_class_id", flat=True)) == [
            kept.id.value
        ]

    def test_delete_locks_class_row_before_cascade(self, make_class):
        school_class = make_class()
        classes = LockRecordingClassStore()
        service = ClassService(
            classes,
            DjangoTeacherStore(),
            DjangoLocationStore(),
            DjangoEnrollmentStore(),
            dependencies.enrollment_service(),
        )

        service.delete_class(school_class.id.value)

        assert classes.locked == [school_class.id]
        assert not models.SchoolClass.objects.filter(pk=school_class.id.value).exists()

    def test_delete_unknown_class(self):
        with pytest.raises(ClassNotFoundError):
            dependencies.class_service().delete_class(999)

    def test_classes_by_teacher(self, make_class):
        other = dependencies.teacher_service().create_teacher("Budi", ["Mandarin"])
        mine = make_class(name="Mine")
        make_class(name="Theirs", teacher_id=other.id.value)

        classes = dependencies.class_service().classes_by_teacher(mine.teacher_id.value)

        assert [details.school_class.name for details in classes] == ["Mine"]
        assert classes[0].enrolled_students == ()

    def test_classes_by_unknown_teacher(self):
        with pytest.raises(TeacherNotFoundError):
            dependencies.class_service().classes_by_teacher(999)

    def test_classes_by_student(self, make_class, make_student):
        school_class = make_class()
        make_class(name="Other")
        student = make_student()
        dependencies.enrollment_service().enroll(student.id.value, school_class.id.value)

        classes = dependencies.class_service().classes_by_student(student.id.value)

        assert [details.school_class.id for details in classes] == [school_class.id]

    def test_available_classes_skip_full_ones(self, make_class, make_student):
        full = make_class(name="Full", max_capacity=1)
        make_class(name="Open", max_capacity=1)
        dependencies.enrollment_service().enroll(make_student().id.value, full.id.value)

        available = dependencies.class_service().available_classes()

        assert [details.school_class.name for details in available] == ["Open"]

    def test_available_classes_filters(self, make_class):
        make_class(name="Monday beginners", level=Level.BEGINNER, days=(DayOfWeek.SENIN,))
        make_class(name="Monday advanced", level=Level.ADVANCED, days=(DayOfWeek.SENIN,))
        make_class(name="Friday advanced", level=Level.ADVANCED, days=(DayOfWeek.JUMAT,))

        available = dependencies.class_service().available_classes(
            level=Level.ADVANCED, day=DayOfWeek.SENIN
        )

        assert [details.school_class.name for details in available] == ["Monday advanced"]


@pytest.mark.django_db
class TestStudentService:
    def test_delete_removes_enrollments(self, make_class, make_student):
        school_class = make_class()
        leaving, staying = make_student(), make_student()
        ledger = dependencies.enrollment_service()
        ledger.enroll(leaving.id.value, school_class.id.value)
        ledger.enroll(staying.id.value, school_class.id.value)

        dependencies.student_service().delete_student(leaving.id.value)

        assert not models.Student.objects.filter(pk=leaving.id.value).exists()
        assert ledger.count_enrollments(school_class.id.value) == 1

    def test_delete_unknown_student(self):
        with pytest.raises(StudentNotFoundError):
            dependencies.student_service().delete_student(999)

    def test_student_with_classes(self, make_class, make_student):
        school_class = make_class()
        student = make_student()
        dependencies.enrollment_service().enroll(student.id.value, school_class.id.value)

        result = dependencies.student_service().get_student_with_classes(student.id.value)

        assert result.student.id == student.id
        assert [details.school_class.id for details in result.enrolled_classes] == [
            school_class.id
        ]

    def test_update_student(self, make_student):
        student = make_student()

        updated = dependencies.student_service().update_student(
            student.id.value, phone_number="089999999999"
        )

        assert updated.phone_number == "089999999999"
        assert updated.full_name == student.full_name


@pytest.mark.django_db
class TestTeacherService:
    def test_teacher_with_classes_cannot_be_deleted(self, make_class):
        school_class = make_class()

        with pytest.raises(TeacherHasClassesError) as excinfo:
            dependencies.teacher_service().delete_teacher(school_class.teacher_id.value)

        assert excinfo.value.details["class_count"] == 1

    def test_delete_teacher(self, teacher):
        dependencies.teacher_service().delete_teacher(teacher.id.value)

        assert not models.Teacher.objects.exists()

    def test_update_subjects(self, teacher):
        updated = dependencies.teacher_service().update_teacher(
            teacher.id.value, subjects=["IELTS"]
        )

        assert updated.subjects == ("IELTS",)


@pytest.mark.django_db
class TestLocationService:
    def test_branch_defaults_from_settings(self, settings):
        settings.ACADEMY_DEFAULT_BRANCH = "Surabaya"

        location = dependencies.location_service().create_location("Room B")

        assert location.branch == "Surabaya"

    def test_explicit_branch_kept(self):
        location = dependencies.location_service().create_location("Room C", branch="Malang")

        assert location.branch == "Malang"

    def test_location_in_use_cannot_be_deleted(self, make_class, room):
        make_class()

        with pytest.raises(LocationInUseError):
            dependencies.location_service().delete_location(room.id.value)

    def test_delete_unknown_location(self):
        with pytest.raises(LocationNotFoundError):
            dependencies.location_service().delete_location(999)


@pytest.mark.django_db
class TestScheduleService:
    def test_classes_grouped_by_day_in_start_order(self, make_class):
        late = make_class(name="Late", days=(DayOfWeek.SENIN,), start_time=time(15, 0))
        early = make_class(
            name="Early", days=(DayOfWeek.SENIN, DayOfWeek.KAMIS), start_time=time(8, 0)
        )

        schedule = dependencies.schedule_service().build_schedule()

        assert list(schedule.days) == list(DayOfWeek)
        assert [d.school_class.id for d in schedule.days[DayOfWeek.SENIN]] == [early.id, late.id]
        assert [d.school_class.id for d in schedule.days[DayOfWeek.KAMIS]] == [early.id]
        assert schedule.days[DayOfWeek.MINGGU] == ()
        assert schedule.total_classes == 2
        assert schedule.active_days == 2

    def test_enrollments_counted_once_per_class(self, make_class, make_student):
        school_class = make_class(days=(DayOfWeek.SENIN, DayOfWeek.RABU), max_capacity=5)
        ledger = dependencies.enrollment_service()
        for _ in range(3):
            ledger.enroll(make_student().id.value, school_class.id.value)

        schedule = dependencies.schedule_service().build_schedule()

        assert schedule.total_enrollments == 3

    def test_filters_combine(self, make_class):
        make_class(name="A", level=Level.BEGINNER, days=(DayOfWeek.SELASA,))
        make_class(name="B", level=Level.ADVANCED, days=(DayOfWeek.SELASA,))
        make_class(name="C", level=Level.ADVANCED, days=(DayOfWeek.SABTU,))

        schedule = dependencies.schedule_service().build_schedule(
            day=DayOfWeek.SELASA, level=Level.ADVANCED
        )

        assert schedule.total_classes == 1
        assert [d.school_class.name for d in schedule.days[DayOfWeek.SELASA]] == ["B"]

    def test_dashboard_counts(self, make_class, make_student):
        make_class()
        make_student()
        make_student()

        summary = dependencies.schedule_service().dashboard()

        assert (summary.classes, summary.students, summary.teachers, summary.locations) == (
            1,
            2,
            1,
            1,
        )


@pytest.mark.django_db
class TestWriteConflictClassification:
    """Database lock failures inside a unit of work surface as WriteConflict."""

    @pytest.mark.parametrize(
        "message",
        ["database is locked", "database table is locked: academy_enrollment"],
    )
    def test_sqlite_lock_errors_are_conflicts(self, message):
        with pytest.raises(WriteConflict):
            with DjangoEnrollmentStore().atomic():
                raise OperationalError(message)

    def test_other_operational_errors_propagate(self):
        with pytest.raises(OperationalError):
            with DjangoEnrollmentStore().atomic():
                raise OperationalError("no such table: academy_missing")


@pytest.mark.django_db(transaction=True)
class TestConcurrentEnrollment:
    """Enrollments committed from several connections at once."""

    def test_three_threads_for_two_seats(self, make_class, make_student):
        school_class = make_class(max_capacity=2)
        student_ids = [make_student().id.value for _ in range(3)]
        outcomes: list[object] = []
        start = threading.Barrier(len(student_ids))

        def attempt(student_id: int) -> None:
            start.wait()
            try:
                outcomes.append(
                    dependencies.enrollment_service().enroll(student_id, school_class.id.value)
                )
            except DomainError as exc:
                outcomes.append(exc.code)
            finally:
                connection.close()

        threads = [threading.Thread(target=attempt, args=(sid,)) for sid in student_ids]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        enrolled = [outcome for outcome in outcomes if isinstance(outcome, Enrollment)]
        assert len(outcomes) == 3
        assert len(enrolled) == 2
        assert outcomes.count(ErrorCode.CLASS_FULL) == 1
        assert models.Enrollment.objects.filter(school_class_id=school_class.id.value).count() == 2

    def test_foreign_key_failure_at_commit_is_a_conflict(self, make_class):
        school_class = make_class()
        store = DjangoEnrollmentStore()

        # The student row is gone by the time the deferred check runs at commit.
        with pytest.raises(WriteConflict):
            with store.atomic():
                store.insert_enrollment(StudentId(999), ClassId(school_class.id.value))

        assert not models.Enrollment.objects.exists()
