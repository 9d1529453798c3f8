from django.urls import path
from rest_framework.routers import DefaultRouter
from .views import (
    QualificationViewSet, ExamBoardViewSet, SubjectViewSet, TopicViewSet, SubtopicViewSet, import_taxonomy,
)

router = DefaultRouter()
router.register('qualifications', QualificationViewSet)
router.register('exam-boards', ExamBoardViewSet)
router.register('subjects', SubjectViewSet)
router.register('topics', TopicViewSet)
router.register('subtopics', SubtopicViewSet)

urlpatterns = [
    path('import/', import_taxonomy, name='taxonomy-import'),
] + router.urls
