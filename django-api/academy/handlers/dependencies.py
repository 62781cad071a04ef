"""Builds services on top of the Django stores for the HTTP handlers."""

from django.conf import settings

from academy.services.class_service import ClassService
from academy.services.enrollment_service import EnrollmentService
from academy.services.location_service import LocationService
from academy.services.schedule_service import ScheduleService
from academy.services.student_service import StudentService
from academy.services.teacher_service import TeacherService
from academy.stores.django_store import (
    DjangoClassStore,
    DjangoEnrollmentStore,
    DjangoLocationStore,
    DjangoStudentStore,
    DjangoTeacherStore,
)


def enrollment_service() -> EnrollmentService:
    return EnrollmentService(
        DjangoStudentStore(),
        DjangoClassStore(),
        DjangoEnrollmentStore(),
        max_attempts=settings.ACADEMY_ENROLL_MAX_ATTEMPTS,
    )


def location_service() -> LocationService:
    return LocationService(DjangoLocationStore(), default_branch=settings.ACADEMY_DEFAULT_BRANCH)


def teacher_service() -> TeacherService:
    return TeacherService(DjangoTeacherStore())


def student_service() -> StudentService:
    return StudentService(DjangoStudentStore(), DjangoEnrollmentStore(), enrollment_service())


def class_service() -> ClassService:
    return ClassService(
        DjangoClassStore(),
        DjangoTeacherStore(),
        DjangoLocationStore(),
        DjangoEnrollmentStore(),
        enrollment_service(),
    )


def schedule_service() -> ScheduleService:
    return ScheduleService(
        DjangoClassStore(),
        DjangoStudentStore(),
        DjangoTeacherStore(),
        DjangoLocationStore(),
    )
