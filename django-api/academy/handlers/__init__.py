from academy.handlers.views import (
    AvailableClassListView,
    ClassDetailView,
    ClassListView,
    ClassStudentsView,
    DashboardView,
    EnrollView,
    HealthcheckView,
    LocationDetailView,
    LocationListView,
    ScheduleView,
    StudentClassesView,
    StudentDetailView,
    StudentListView,
    TeacherClassesView,
    TeacherDetailView,
    TeacherListView,
    UnenrollView,
)

__all__ = [
    "AvailableClassListView",
    "ClassDetailView",
    "ClassListView",
    "ClassStudentsView",
    "DashboardView",
    "EnrollView",
    "HealthcheckView",
    "LocationDetailView",
    "LocationListView",
    "ScheduleView",
    "StudentClassesView",
    "StudentDetailView",
    "StudentListView",
    "TeacherClassesView",
    "TeacherDetailView",
    "TeacherListView",
    "UnenrollView",
]
