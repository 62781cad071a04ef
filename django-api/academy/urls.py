from django.urls import path

from academy.handlers import (
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

urlpatterns = [
    path("healthcheck", HealthcheckView.as_view(), name="healthcheck"),
    path("dashboard", DashboardView.as_view(), name="dashboard"),
    path("schedule", ScheduleView.as_view(), name="schedule"),
    path("locations", LocationListView.as_view(), name="location-list"),
    path("locations/<int:location_id>", LocationDetailView.as_view(), name="location-detail"),
    path("teachers", TeacherListView.as_view(), name="teacher-list"),
    path("teachers/<int:teacher_id>", TeacherDetailView.as_view(), name="teacher-detail"),
    path(
        "teachers/<int:teacher_id>/classes",
        TeacherClassesView.as_view(),
        name="teacher-classes",
    ),
    path("students", StudentListView.as_view(), name="student-list"),
    path("students/<int:student_id>", StudentDetailView.as_view(), name="student-detail"),
    path(
        "students/<int:student_id>/classes",
        StudentClassesView.as_view(),
        name="student-classes",
    ),
    path("classes", ClassListView.as_view(), name="class-list"),
    path("classes/available", AvailableClassListView.as_view(), name="class-available"),
    path("classes/<int:class_id>", ClassDetailView.as_view(), name="class-detail"),
    path(
        "classes/<int:class_id>/students",
        ClassStudentsView.as_view(),
        name="class-students",
    ),
    path("enrollments", EnrollView.as_view(), name="enrollment-create"),
    path("enrollments/unenroll", UnenrollView.as_view(), name="enrollment-unenroll"),
]
