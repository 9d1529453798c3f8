import logging

from django.db import transaction
from django.db.models import Count
from django_filters import rest_framework as filters
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsAdminOrReadOnly, IsTeacherOrReadOnly
from imports.http import run_import
from .models import YearGroup, Department, Student, Class, ClassSchedule, WorkRecord
from .serializers import (
    YearGroupSerializer, DepartmentSerializer, DepartmentMemberSerializer, TeacherUserSerializer,
    StudentSerializer, ClassSerializer, ClassLiteSerializer,
    ClassScheduleSerializer, ScheduleReplaceSerializer, ScheduleUpdateSerializer, WorkRecordSerializer,
)
from .services.schedule_import import import_classcard_schedule_csv
from .services.student_import import import_classcard_student_csv, import_student_csv
from .services.work_records import apply_derived_fields

logger = logging.getLogger(__name__)


class IsTeacherOrAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role in ('teacher', 'admin'))


class IsRecordOwner(permissions.BasePermission):
    """Teachers may only touch their own work records; admins may read any."""
    message = 'Unauthorized'

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS and request.user.is_admin:
            return True
        return obj.teacher_id == request.user.id


class YearGroupViewSet(viewsets.ModelViewSet):
    queryset = YearGroup.objects.all()
    serializer_class = YearGroupSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    def destroy(self, request, *args, **kwargs):
        year_group = self.get_object()
        if year_group.students.exists():
            return Response(
                {'detail': 'Cannot delete year group that is assigned to students'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        year_group.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class DepartmentViewSet(viewsets.ModelViewSet):
    """Departments; readable by any signed-in user for dropdowns, managed by admins.
    `/departments/{id}/teachers/` lists (GET), adds (POST {user_id}) and removes
    (DELETE ?user_id=) the teachers of a department.
    """
    queryset = Department.objects.all()
    serializer_class = DepartmentSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    def get_permissions(self):
        if getattr(self, 'action', None) == 'teachers':
            return [IsAdmin()]
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):
        department = self.get_object()
        if department.classes.exists():
            return Response(
                {'detail': 'Cannot delete department that is assigned to classes'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        department.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get', 'post', 'delete'])
    def teachers(self, request, pk=None):
        department = self.get_object()
        if request.method == 'GET':
            return Response(TeacherUserSerializer(department.teachers.order_by('full_name', 'id'), many=True).data)

        if request.method == 'DELETE':
            user_id = request.query_params.get('user_id')
            if not user_id or not user_id.isdigit():
                return Response({'detail': 'User ID is required'}, status=status.HTTP_400_BAD_REQUEST)
            department.teachers.remove(int(user_id))
            return Response(status=status.HTTP_204_NO_CONTENT)

        ser = DepartmentMemberSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        teacher = ser.validated_data['user_id']
        if department.teachers.filter(pk=teacher.pk).exists():
            return Response({'detail': 'Teacher is already in this department'}, status=status.HTTP_400_BAD_REQUEST)
        department.teachers.add(teacher)
        return Response(TeacherUserSerializer(teacher).data, status=status.HTTP_201_CREATED)


class StudentViewSet(viewsets.ModelViewSet):
    queryset = Student.objects.select_related('year_group')
    serializer_class = StudentSerializer
    permission_classes = [IsAdmin]

    def get_queryset(self):
        qs = super().get_queryset()
        q = (self.request.query_params.get('q') or '').strip()
        if q:
            qs = qs.filter(full_name__icontains=q)
        year_group = self.request.query_params.get('year_group')
        if year_group:
            qs = qs.filter(year_group_id=year_group)
        return qs

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @action(detail=False, methods=['post'], url_path='bulk-import', parser_classes=[MultiPartParser, FormParser])
    def bulk_import(self, request):
        """Import students from a CSV with Full Name and Year Group columns."""
        return run_import(request, lambda text: import_student_csv(text, created_by=request.user), 'students')

    @action(detail=False, methods=['post'], url_path='classcard-import', parser_classes=[MultiPartParser, FormParser])
    def classcard_import(self, request):
        """Import the Active students of a class-card export."""
        return run_import(request, lambda text: import_classcard_student_csv(text, created_by=request.user), 'students')


class ClassViewSet(viewsets.ModelViewSet):
    queryset = Class.objects.select_related('teacher', 'subject', 'year_group', 'department')
    serializer_class = ClassSerializer
    permission_classes = [IsAdmin]

    def get_permissions(self):
        # Teachers open their own classes
        if getattr(self, 'action', None) in ('mine', 'retrieve'):
            return [IsTeacherOrAdmin()]
        return super().get_permissions()

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if not user.is_admin:
            qs = qs.filter(teacher=user)
        if getattr(self, 'action', None) in ('list', 'mine'):
            qs = qs.annotate(student_count=Count('memberships'))
        else:
            qs = qs.prefetch_related('students')
        return qs

    def get_serializer_class(self):
        if getattr(self, 'action', None) in ('list', 'mine'):
            return ClassLiteSerializer
        return ClassSerializer

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @action(detail=False, methods=['get'], url_path='mine')
    def mine(self, request):
        """Classes the requester teaches (all classes for admins)."""
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    @action(detail=False, methods=['post'], url_path='classcard-schedule-import', parser_classes=[MultiPartParser, FormParser])
    def classcard_schedule_import(self, request):
        """Sync classes, members and weekly slots from the Marked lessons of a class-card schedule export."""
        return run_import(request, lambda text: import_classcard_schedule_csv(text, created_by=request.user), 'classes')


class ClassScheduleViewSet(viewsets.ModelViewSet):
    """Weekly timetable slots.
    POST replaces every slot of one class: body {class_id, schedules: [{day_of_week, start_time, end_time}]}.
    PUT/PATCH updates a slot and, with `teacher_id`, reassigns the class teacher.
    """
    queryset = ClassSchedule.objects.select_related('klass')
    serializer_class = ClassScheduleSerializer
    permission_classes = [IsAdmin]
    pagination_class = None

    def get_queryset(self):
        qs = super().get_queryset()
        class_id = self.request.query_params.get('class_id')
        if class_id:
            qs = qs.filter(klass_id=class_id)
        return qs

    def get_serializer_class(self):
        if getattr(self, 'action', None) in ('update', 'partial_update'):
            return ScheduleUpdateSerializer
        return ClassScheduleSerializer

    def create(self, request, *args, **kwargs):
        ser = ScheduleReplaceSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        klass = ser.validated_data['class_id']
        slots = ser.validated_data['schedules']
        for slot in slots:
            if slot['end_time'] <= slot['start_time']:
                return Response({'detail': 'End time must be after start time'}, status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            klass.schedules.all().delete()
            created = ClassSchedule.objects.bulk_create([ClassSchedule(klass=klass, **slot) for slot in slots])
        logger.info("Replaced schedule of class %s with %d slots", klass.pk, len(created))
        return Response(
            ClassScheduleSerializer(klass.schedules.all(), many=True).data,
            status=status.HTTP_201_CREATED,
        )


class WorkRecordFilter(filters.FilterSet):
    class_id = filters.NumberFilter(field_name='klass_id')
    student_id = filters.NumberFilter(field_name='student_id')
    work_type = filters.ChoiceFilter(choices=WorkRecord.WorkType.choices)
    status = filters.ChoiceFilter(choices=WorkRecord.Status.choices)

    class Meta:
        model = WorkRecord
        fields = ['class_id', 'student_id', 'work_type', 'status']


class WorkRecordViewSet(viewsets.ModelViewSet):
    """Scored homework, classwork and past papers.
    Teachers list only the records they created; admins list all.
    Only the owning teacher may create, change or delete a record.
    """
    queryset = WorkRecord.objects.select_related('klass', 'student', 'subject', 'topic', 'subtopic')
    serializer_class = WorkRecordSerializer
    permission_classes = [IsTeacherOrReadOnly, IsRecordOwner]
    filter_backends = [DjangoFilterBackend]
    filterset_class = WorkRecordFilter

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if getattr(self, 'action', None) == 'list' and not user.is_admin:
            qs = qs.filter(teacher=user)
        return qs

    def perform_create(self, serializer):
        derived = apply_derived_fields(serializer.validated_data)
        serializer.save(teacher=self.request.user, **derived)

    def perform_update(self, serializer):
        data = dict(serializer.validated_data)
        if serializer.partial:
            # PATCH: omitted fields keep their stored values, status included
            for field in ('work_type', 'assigned_date', 'total_marks', 'marks_obtained', 'status'):
                data.setdefault(field, getattr(serializer.instance, field))
        derived = apply_derived_fields(data, current_title=serializer.instance.work_title)
        serializer.save(**derived)
