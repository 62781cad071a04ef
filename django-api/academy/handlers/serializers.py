"""Serializers for request input and for rendering domain models as API responses."""

from typing import Any

from rest_framework import serializers

from academy.domain import (
    ClassDetails,
    ClassRoster,
    DayOfWeek,
    EnrolledStudent,
    Level,
    Schedule,
    StudentWithClasses,
)

LEVEL_CHOICES = [level.value for level in Level]
DAY_CHOICES = [day.value for day in DayOfWeek]
CLOCK_FORMAT = "%H:%M"


# Responses


class LocationSerializer(serializers.Serializer):
    """Serializer for Location domain model."""

    id = serializers.IntegerField(source="id.value")
    name = serializers.CharField()
    branch = serializers.CharField()
    created_at = serializers.DateTimeField()


class TeacherSerializer(serializers.Serializer):
    """Serializer for Teacher domain model."""

    id = serializers.IntegerField(source="id.value")
    full_name = serializers.CharField()
    subjects = serializers.ListField(child=serializers.CharField())
    created_at = serializers.DateTimeField()


class StudentSerializer(serializers.Serializer):
    """Serializer for Student domain model."""

    id = serializers.IntegerField(source="id.value")
    full_name = serializers.CharField()
    phone_number = serializers.CharField()
    email = serializers.EmailField()
    created_at = serializers.DateTimeField()


class SchoolClassSerializer(serializers.Serializer):
    """Serializer for SchoolClass domain model."""

    id = serializers.IntegerField(source="id.value")
    name = serializers.CharField()
    level = serializers.CharField()
    teacher_id = serializers.IntegerField(source="teacher_id.value")
    location_id = serializers.IntegerField(source="location_id.value")
    start_time = serializers.TimeField(format=CLOCK_FORMAT)
    end_time = serializers.TimeField(format=CLOCK_FORMAT)
    days = serializers.ListField(child=serializers.CharField())
    max_capacity = serializers.IntegerField(source="max_capacity.value")
    created_at = serializers.DateTimeField()


class ClassDetailsSerializer(serializers.BaseSerializer):
    """Flattens a class with its teacher, room and roster."""

    def to_representation(self, instance: ClassDetails) -> dict[str, Any]:
        data = SchoolClassSerializer(instance.school_class).data
        data["teacher"] = TeacherSerializer(instance.teacher).data
        data["location"] = LocationSerializer(instance.location).data
        data["enrolled_count"] = instance.enrolled_count
        if instance.enrolled_students is not None:
            data["enrolled_students"] = StudentSerializer(instance.enrolled_students, many=True).data
        return data


class EnrollmentSerializer(serializers.Serializer):
    """Serializer for Enrollment domain model."""

    id = serializers.IntegerField(source="id.value")
    student_id = serializers.IntegerField(source="student_id.value")
    class_id = serializers.IntegerField(source="class_id.value")
    enrolled_at = serializers.DateTimeField()


class EnrolledStudentSerializer(serializers.BaseSerializer):
    def to_representation(self, instance: EnrolledStudent) -> dict[str, Any]:
        data = StudentSerializer(instance.student).data
        data["enrollment_id"] = instance.enrollment.id.value
        data["enrolled_at"] = serializers.DateTimeField().to_representation(
            instance.enrollment.enrolled_at
        )
        return data


class ClassRosterSerializer(serializers.BaseSerializer):
    def to_representation(self, instance: ClassRoster) -> dict[str, Any]:
        return {
            "class_id": instance.class_id.value,
            "count": instance.count,
            "students": EnrolledStudentSerializer(instance.students, many=True).data,
        }


class StudentWithClassesSerializer(serializers.BaseSerializer):
    def to_representation(self, instance: StudentWithClasses) -> dict[str, Any]:
        data = StudentSerializer(instance.student).data
        data["enrolled_classes"] = ClassDetailsSerializer(instance.enrolled_classes, many=True).data
        return data


class ScheduleSerializer(serializers.BaseSerializer):
    def to_representation(self, instance: Schedule) -> dict[str, Any]:
        return {
            "days": {
                day.value: ClassDetailsSerializer(classes, many=True).data
                for day, classes in instance.days.items()
            },
            "summary": {
                "total_classes": instance.total_classes,
                "total_enrollments": instance.total_enrollments,
                "active_days": instance.active_days,
            },
        }


class DashboardSerializer(serializers.Serializer):
    classes = serializers.IntegerField()
    students = serializers.IntegerField()
    teachers = serializers.IntegerField()
    locations = serializers.IntegerField()


# Requests


class LocationInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    branch = serializers.CharField(max_length=255, required=False)


class TeacherInputSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255)
    subjects = serializers.ListField(
        child=serializers.CharField(max_length=100),
        allow_empty=False,
        error_messages={"empty": "At least one subject is required"},
    )


class StudentInputSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255)
    phone_number = serializers.CharField(max_length=50)
    email = serializers.EmailField()


class ClassInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    level = serializers.ChoiceField(choices=LEVEL_CHOICES)
    teacher_id = serializers.IntegerField(min_value=1)
    location_id = serializers.IntegerField(min_value=1)
    start_time = serializers.TimeField(input_formats=[CLOCK_FORMAT])
    end_time = serializers.TimeField(input_formats=[CLOCK_FORMAT])
    days = serializers.ListField(
        child=serializers.ChoiceField(choices=DAY_CHOICES),
        allow_empty=False,
        error_messages={"empty": "At least one day is required"},
    )
    max_capacity = serializers.IntegerField(min_value=1)

    def validate_level(self, value: str) -> Level:
        return Level(value)

    def validate_days(self, value: list[str]) -> tuple[DayOfWeek, ...]:
        # dict keeps first-seen order while dropping repeats
        return tuple(dict.fromkeys(DayOfWeek(day) for day in value))


class EnrollmentInputSerializer(serializers.Serializer):
    student_id = serializers.IntegerField(min_value=1)
    class_id = serializers.IntegerField(min_value=1)


class AvailableClassesQuerySerializer(serializers.Serializer):
    level = serializers.ChoiceField(choices=LEVEL_CHOICES, required=False)
    day = serializers.ChoiceField(choices=DAY_CHOICES, required=False)

    def validate_level(self, value: str) -> Level:
        return Level(value)

    def validate_day(self, value: str) -> DayOfWeek:
        return DayOfWeek(value)


class ScheduleQuerySerializer(AvailableClassesQuerySerializer):
    teacher_id = serializers.IntegerField(min_value=1, required=False)
    location_id = serializers.IntegerField(min_value=1, required=False)
