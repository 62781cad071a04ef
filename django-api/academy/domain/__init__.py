from academy.domain.models import (
    ClassDetails,
    ClassRoster,
    DashboardSummary,
    EnrolledClass,
    EnrolledStudent,
    Enrollment,
    Location,
    NewClass,
    NewLocation,
    NewStudent,
    NewTeacher,
    Schedule,
    SchoolClass,
    Student,
    StudentWithClasses,
    Teacher,
)
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

__all__ = [
    "Location",
    "Teacher",
    "Student",
    "SchoolClass",
    "Enrollment",
    "ClassDetails",
    "ClassRoster",
    "EnrolledClass",
    "EnrolledStudent",
    "StudentWithClasses",
    "Schedule",
    "DashboardSummary",
    "NewLocation",
    "NewTeacher",
    "NewStudent",
    "NewClass",
    "LocationId",
    "TeacherId",
    "StudentId",
    "ClassId",
    "EnrollmentId",
    "Capacity",
    "Level",
    "DayOfWeek",
]
