"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to the exception handler in handlers/errors.py
- Never contain business logic
"""

from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.handlers import dependencies
from academy.handlers.serializers import (
    AvailableClassesQuerySerializer,
    ClassDetailsSerializer,
    ClassInputSerializer,
    ClassRosterSerializer,
    DashboardSerializer,
    EnrollmentInputSerializer,
    EnrollmentSerializer,
    LocationInputSerializer,
    LocationSerializer,
    ScheduleQuerySerializer,
    ScheduleSerializer,
    SchoolClassSerializer,
    StudentInputSerializer,
    StudentSerializer,
    StudentWithClassesSerializer,
    TeacherInputSerializer,
    TeacherSerializer,
)


def _validated(serializer_class, data, *, partial: bool = False) -> dict:
    serializer = serializer_class(data=data, partial=partial)
    serializer.is_valid(raise_exception=True)
    return dict(serializer.validated_data)


SUCCESS = {"success": True}


@extend_schema(tags=["System"])
class HealthcheckView(APIView):
    """Handler for GET /api/healthcheck"""

    def get(self, request: Request) -> Response:
        return Response({"status": "ok", "timestamp": timezone.now().isoformat()})


@extend_schema(tags=["Dashboard"])
class DashboardView(APIView):
    """Handler for GET /api/dashboard"""

    def get(self, request: Request) -> Response:
        summary = dependencies.schedule_service().dashboard()
        return Response(DashboardSerializer(summary).data)


@extend_schema(tags=["Dashboard"], parameters=[ScheduleQuerySerializer])
class ScheduleView(APIView):
    """Handler for GET /api/schedule"""

    def get(self, request: Request) -> Response:
        filters = _validated(ScheduleQuerySerializer, request.query_params)
        schedule = dependencies.schedule_service().build_schedule(**filters)
        return Response(ScheduleSerializer(schedule).data)


@extend_schema(tags=["Locations"])
class LocationListView(APIView):
    """Handler for GET/POST /api/locations"""

    def get(self, request: Request) -> Response:
        locations = dependencies.location_service().list_locations()
        return Response(LocationSerializer(locations, many=True).data)

    @extend_schema(request=LocationInputSerializer, responses=LocationSerializer)
    def post(self, request: Request) -> Response:
        data = _validated(LocationInputSerializer, request.data)
        location = dependencies.location_service().create_location(**data)
        return Response(LocationSerializer(location).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Locations"])
class LocationDetailView(APIView):
    """Handler for PATCH/DELETE /api/locations/{location_id}"""

    @extend_schema(request=LocationInputSerializer, responses=LocationSerializer)
    def patch(self, request: Request, location_id: int) -> Response:
        changes = _validated(LocationInputSerializer, request.data, partial=True)
        location = dependencies.location_service().update_location(location_id, **changes)
        return Response(LocationSerializer(location).data)

    def delete(self, request: Request, location_id: int) -> Response:
        dependencies.location_service().delete_location(location_id)
        return Response(SUCCESS)


@extend_schema(tags=["Teachers"])
class TeacherListView(APIView):
    """Handler for GET/POST /api/teachers"""

    def get(self, request: Request) -> Response:
        teachers = dependencies.teacher_service().list_teachers()
        return Response(TeacherSerializer(teachers, many=True).data)

    @extend_schema(request=TeacherInputSerializer, responses=TeacherSerializer)
    def post(self, request: Request) -> Response:
        data = _validated(TeacherInputSerializer, request.data)
        teacher = dependencies.teacher_service().create_teacher(**data)
        return Response(TeacherSerializer(teacher).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Teachers"])
class TeacherDetailView(APIView):
    """Handler for PATCH/DELETE /api/teachers/{teacher_id}"""

    @extend_schema(request=TeacherInputSerializer, responses=TeacherSerializer)
    def patch(self, request: Request, teacher_id: int) -> Response:
        changes = _validated(TeacherInputSerializer, request.data, partial=True)
        teacher = dependencies.teacher_service().update_teacher(teacher_id, **changes)
        return Response(TeacherSerializer(teacher).data)

    def delete(self, request: Request, teacher_id: int) -> Response:
        dependencies.teacher_service().delete_teacher(teacher_id)
        return Response(SUCCESS)


@extend_schema(tags=["Teachers"])
class TeacherClassesView(APIView):
    """Handler for GET /api/teachers/{teacher_id}/classes"""

    def get(self, request: Request, teacher_id: int) -> Response:
        classes = dependencies.class_service().classes_by_teacher(teacher_id)
        return Response(ClassDetailsSerializer(classes, many=True).data)


@extend_schema(tags=["Students"])
class StudentListView(APIView):
    """Handler for GET/POST /api/students"""

    def get(self, request: Request) -> Response:
        students = dependencies.student_service().list_students()
        return Response(StudentSerializer(students, many=True).data)

    @extend_schema(request=StudentInputSerializer, responses=StudentSerializer)
    def post(self, request: Request) -> Response:
        data = _validated(StudentInputSerializer, request.data)
        student = dependencies.student_service().create_student(**data)
        return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Students"])
class StudentDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/students/{student_id}"""

    def get(self, request: Request, student_id: int) -> Response:
        student = dependencies.student_service().get_student_with_classes(student_id)
        return Response(StudentWithClassesSerializer(student).data)

    @extend_schema(request=StudentInputSerializer, responses=StudentSerializer)
    def patch(self, request: Request, student_id: int) -> Response:
        changes = _validated(StudentInputSerializer, request.data, partial=True)
        student = dependencies.student_service().update_student(student_id, **changes)
        return Response(StudentSerializer(student).data)

    def delete(self, request: Request, student_id: int) -> Response:
        dependencies.student_service().delete_student(student_id)
        return Response(SUCCESS)


@extend_schema(tags=["Students"])
class StudentClassesView(APIView):
    """Handler for GET /api/students/{student_id}/classes"""

    def get(self, request: Request, student_id: int) -> Response:
        classes = dependencies.class_service().classes_by_student(student_id)
        return Response(ClassDetailsSerializer(classes, many=True).data)


@extend_schema(tags=["Classes"])
class ClassListView(APIView):
    """Handler for GET/POST /api/classes"""

    def get(self, request: Request) -> Response:
        classes = dependencies.class_service().list_classes()
        return Response(ClassDetailsSerializer(classes, many=True).data)

    @extend_schema(request=ClassInputSerializer, responses=SchoolClassSerializer)
    def post(self, request: Request) -> Response:
        data = _validated(ClassInputSerializer, request.data)
        school_class = dependencies.class_service().create_class(**data)
        return Response(SchoolClassSerializer(school_class).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Classes"])
class ClassDetailView(APIView):
    """Handler for PATCH/DELETE /api/classes/{class_id}"""

    @extend_schema(request=ClassInputSerializer, responses=SchoolClassSerializer)
    def patch(self, request: Request, class_id: int) -> Response:
        changes = _validated(ClassInputSerializer, request.data, partial=True)
        school_class = dependencies.class_service().update_class(class_id, **changes)
        return Response(SchoolClassSerializer(school_class).data)

    def delete(self, request: Request, class_id: int) -> Response:
        dependencies.class_service().delete_class(class_id)
        return Response(SUCCESS)


@extend_schema(tags=["Classes"], parameters=[AvailableClassesQuerySerializer])
class AvailableClassListView(APIView):
    """Handler for GET /api/classes/available"""

    def get(self, request: Request) -> Response:
        filters = _validated(AvailableClassesQuerySerializer, request.query_params)
        classes = dependencies.class_service().available_classes(**filters)
        return Response(ClassDetailsSerializer(classes, many=True).data)


@extend_schema(tags=["Classes"])
class ClassStudentsView(APIView):
    """Handler for GET /api/classes/{class_id}/students"""

    def get(self, request: Request, class_id: int) -> Response:
        dependencies.class_service().get_class(class_id)
        roster = dependencies.enrollment_service().list_enrollments_for_class(class_id)
        return Response(ClassRosterSerializer(roster).data)


@extend_schema(tags=["Enrollments"])
class EnrollView(APIView):
    """Handler for POST /api/enrollments"""

    @extend_schema(request=EnrollmentInputSerializer, responses=EnrollmentSerializer)
    def post(self, request: Request) -> Response:
        data = _validated(EnrollmentInputSerializer, request.data)
        enrollment = dependencies.enrollment_service().enroll(**data)
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Enrollments"])
class UnenrollView(APIView):
    """Handler for POST /api/enrollments/unenroll"""

    @extend_schema(request=EnrollmentInputSerializer)
    def post(self, request: Request) -> Response:
        data = _validated(EnrollmentInputSerializer, request.data)
        success = dependencies.enrollment_service().unenroll(**data)
        return Response({"success": success})
