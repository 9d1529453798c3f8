from datetime import timedelta

from django.db.models import Avg, Count, Q
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from academics.models import WorkRecord


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def analytics(request):
    """Work-record statistics for the dashboards.
    Teachers only see their own records; `?class_id=` and `?student_id=` narrow further.
    """
    qs = WorkRecord.objects.all()
    if not request.user.is_admin:
        qs = qs.filter(teacher=request.user)
    class_id = request.query_params.get('class_id')
    if class_id:
        qs = qs.filter(klass_id=class_id)
    student_id = request.query_params.get('student_id')
    if student_id:
        qs = qs.filter(student_id=student_id)

    totals = qs.aggregate(
        total=Count('id'),
        average=Avg('percentage'),
        homework=Count('id', filter=Q(work_type=WorkRecord.WorkType.HOMEWORK)),
        classwork=Count('id', filter=Q(work_type=WorkRecord.WorkType.CLASSWORK)),
    )

    by_subject = (
        qs.values('subject__name')
        .annotate(count=Count('id'), average=Avg('percentage'))
        .order_by('subject__name')
    )
    subject_performance = [
        {'name': row['subject__name'] or 'Unknown', 'count': row['count'], 'average': row['average'] or 0}
        for row in by_subject
    ]

    since = timezone.localdate() - timedelta(days=30)
    recent = qs.filter(assigned_date__gte=since).order_by('assigned_date', 'id').values_list('assigned_date', 'percentage')
    performance_over_time = [
        {'date': assigned.isoformat(), 'percentage': percentage or 0}
        for assigned, percentage in recent
    ]

    return Response({
        'totalRecords': totals['total'],
        'averagePercentage': totals['average'] or 0,
        'homeworkCount': totals['homework'],
        'classworkCount': totals['classwork'],
        'subjectPerformance': subject_performance,
        'performanceOverTime': performance_over_time,
    })
