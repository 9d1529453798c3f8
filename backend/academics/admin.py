from django.contrib import admin
from .models import YearGroup, Department, Student, Class, ClassStudent, ClassSchedule, WorkRecord


@admin.register(YearGroup)
class YearGroupAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "display_order")
    ordering = ("display_order", "name")


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("id", "name")
    search_fields = ("name",)
    filter_horizontal = ("teachers",)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("id", "full_name", "year_group", "school_year_group", "created_at")
    list_filter = ("year_group",)
    search_fields = ("full_name", "school_year_group", "parent_name", "parent_email")


class ClassStudentInline(admin.TabularInline):
    model = ClassStudent
    extra = 0
    autocomplete_fields = ("student",)


class ClassScheduleInline(admin.TabularInline):
    model = ClassSchedule
    extra = 0


@admin.register(Class)
class ClassAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "teacher", "subject", "year_group", "department")
    list_filter = ("year_group", "department")
    search_fields = ("name", "teacher__full_name", "teacher__email")
    inlines = [ClassStudentInline, ClassScheduleInline]


@admin.register(WorkRecord)
class WorkRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "student", "klass", "teacher", "work_type", "work_title", "assigned_date", "percentage", "status")
    list_filter = ("work_type", "status", "assigned_date")
    search_fields = ("work_title", "student__full_name", "klass__name")
    date_hierarchy = "assigned_date"
    readonly_fields = ("percentage",)
