from django.contrib import admin
from .models import Qualification, ExamBoard, Subject, Topic, Subtopic


@admin.register(Qualification)
class QualificationAdmin(admin.ModelAdmin):
    list_display = ("id", "name")
    search_fields = ("name",)


@admin.register(ExamBoard)
class ExamBoardAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "qualification")
    list_filter = ("qualification",)
    search_fields = ("name",)


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "exam_board")
    list_filter = ("exam_board__qualification",)
    search_fields = ("name",)


@admin.register(Topic)
class TopicAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "subject")
    search_fields = ("name", "subject__name")


@admin.register(Subtopic)
class SubtopicAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "topic")
    search_fields = ("name", "topic__name")
