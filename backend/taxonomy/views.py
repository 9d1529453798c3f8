from django.db.models.deletion import ProtectedError
from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsAdminOrReadOnly
from imports.http import run_import
from .models import Qualification, ExamBoard, Subject, Topic, Subtopic
from .serializers import (
    QualificationSerializer, ExamBoardSerializer, SubjectSerializer, TopicSerializer, SubtopicSerializer,
)
from .services import import_taxonomy_csv


class TaxonomyViewSet(viewsets.ModelViewSet):
    """Read for any signed-in user, write for admins.
    `parent_param` names the query parameter that narrows a level to one parent.
    """
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None
    parent_param = None
    parent_field = None

    def get_queryset(self):
        qs = super().get_queryset()
        if self.parent_param:
            parent_id = self.request.query_params.get(self.parent_param)
            if parent_id:
                qs = qs.filter(**{f'{self.parent_field}_id': parent_id})
        return qs

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return Response(
                {'detail': 'Cannot delete: work records still refer to this entry'},
                status=status.HTTP_400_BAD_REQUEST,
            )


class QualificationViewSet(TaxonomyViewSet):
    queryset = Qualification.objects.all()
    serializer_class = QualificationSerializer


class ExamBoardViewSet(TaxonomyViewSet):
    queryset = ExamBoard.objects.select_related('qualification')
    serializer_class = ExamBoardSerializer
    parent_param = 'qualification_id'
    parent_field = 'qualification'


class SubjectViewSet(TaxonomyViewSet):
    queryset = Subject.objects.select_related('exam_board')
    serializer_class = SubjectSerializer
    parent_param = 'exam_board_id'
    parent_field = 'exam_board'


class TopicViewSet(TaxonomyViewSet):
    queryset = Topic.objects.select_related('subject')
    serializer_class = TopicSerializer
    parent_param = 'subject_id'
    parent_field = 'subject'


class SubtopicViewSet(TaxonomyViewSet):
    queryset = Subtopic.objects.select_related('topic')
    serializer_class = SubtopicSerializer
    parent_param = 'topic_id'
    parent_field = 'topic'


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsAdmin])
@parser_classes([MultiPartParser, FormParser])
def import_taxonomy(request):
    """Create missing taxonomy entries from a Qualification, Exam Board, Subject[, Topic, Subtopic] CSV."""
    return run_import(request, import_taxonomy_csv, 'taxonomy entries')
