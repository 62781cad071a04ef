from django.contrib import admin

from academy.models import Enrollment, Location, SchoolClass, Student, Teacher


class EnrollmentInline(admin.TabularInline):
    """Enrollments are created and removed through the enrollment API only."""

    model = Enrollment
    extra = 0
    can_delete = False
    readonly_fields = ["student", "school_class", "enrolled_at"]

    def has_add_permission(self, request, obj=None):
        return False


class SchoolClassInline(admin.TabularInline):
    model = SchoolClass
    extra = 0
    fields = ["name", "level", "start_time", "end_time", "max_capacity"]
    show_change_link = True


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ["name", "branch", "created_at"]
    search_fields = ["name", "branch"]


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ["full_name", "created_at"]
    search_fields = ["full_name"]
    inlines = [SchoolClassInline]


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ["full_name", "phone_number", "email", "created_at"]
    search_fields = ["full_name", "email"]
    inlines = [EnrollmentInline]


@admin.register(SchoolClass)
class SchoolClassAdmin(admin.ModelAdmin):
    list_display = ["name", "level", "teacher", "location", "start_time", "end_time", "max_capacity"]
    list_filter = ["level", "location"]
    inlines = [EnrollmentInline]


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ["student", "school_class", "enrolled_at"]
    list_filter = ["school_class__level"]
    readonly_fields = ["student", "school_class", "enrolled_at"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
