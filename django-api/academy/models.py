"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

from django.db import models

from academy.domain.value_objects import Level


class Location(models.Model):
    """Persistence model for rooms."""

    name = models.CharField(max_length=255)
    branch = models.CharField(max_length=255, default="Sidoarjo")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.branch})"


class Teacher(models.Model):
    """Persistence model for teachers."""

    full_name = models.CharField(max_length=255)
    subjects = models.JSONField(default=list)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.full_name


class Student(models.Model):
    """Persistence model for students."""

    full_name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=50)
    email = models.EmailField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.full_name


class SchoolClass(models.Model):
    """Persistence model for scheduled classes."""

    name = models.CharField(max_length=255)
    level = models.CharField(max_length=20, choices=[(level.value, level.value) for level in Level])
    teacher = models.ForeignKey(Teacher, on_delete=models.PROTECT, related_name="classes")
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name="classes")
    start_time = models.TimeField()
    end_time = models.TimeField()
    # List of DayOfWeek values
    days = models.JSONField(default=list)
    max_capacity = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "classes"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_capacity__gte=1),
                name="schoolclass_max_capacity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.level})"


class Enrollment(models.Model):
    """Persistence model for student-class enrollments.

    Parents are protected: enrollments must be removed explicitly, in the same
    transaction, before their student or class is deleted.
    """

    student = models.ForeignKey(Student, on_delete=models.PROTECT, related_name="enrollments")
    school_class = models.ForeignKey(
        SchoolClass, on_delete=models.PROTECT, related_name="enrollments"
    )
    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "school_class"],
                name="unique_student_class_enrollment",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student_id} -> {self.school_class_id}"
