import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from imports.http import run_import
from worktrack.pagination import CustomPageNumberPagination
from .identity import IdentityProviderError, get_identity_provider
from .importers import import_classcard_staff_csv, import_teacher_csv
from .permissions import IsAdmin
from .serializers import TeacherCreateSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def me(request):
    return Response(UserSerializer(request.user).data)


@api_view(["GET"])
@permission_classes([IsAuthenticated, IsAdmin])
def users(request):
    """List users, teachers by default.
    Supports `?role=teacher|admin` and a free-text `?q=` over name and email.
    """
    role = request.query_params.get('role', User.Roles.TEACHER)
    q = (request.query_params.get('q') or '').strip()
    qs = User.objects.all()
    if role:
        qs = qs.filter(role=role)
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(email__icontains=q))
    qs = qs.order_by('full_name', 'id')

    paginator = CustomPageNumberPagination()
    page = paginator.paginate_queryset(qs, request)
    if page is not None:
        return paginator.get_paginated_response(UserSerializer(page, many=True).data)
    return Response(UserSerializer(qs, many=True).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsAdmin])
def create_user(request):
    """Admin creates a teacher account. Body: email, full_name, password (optional)."""
    ser = TeacherCreateSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    data = ser.validated_data
    try:
        user = get_identity_provider().create_user(
            email=data['email'],
            full_name=data['full_name'],
            role=User.Roles.TEACHER,
            password=data.get('password') or settings.DEFAULT_TEACHER_PASSWORD,
        )
    except IdentityProviderError as e:
        return Response({"detail": str(e)}, status=400)
    return Response(UserSerializer(user).data, status=201)


@api_view(["DELETE"])
@permission_classes([IsAuthenticated, IsAdmin])
def delete_user(request, user_id):
    if request.user.pk == user_id:
        return Response({"detail": "You cannot delete your own account"}, status=400)
    try:
        get_identity_provider().delete_user(user_id)
    except IdentityProviderError as e:
        return Response({"detail": str(e)}, status=404)
    logger.info("User %s deleted by %s", user_id, request.user.pk)
    return Response(status=204)


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsAdmin])
@parser_classes([MultiPartParser, FormParser])
def bulk_import_teachers(request):
    """Create teacher accounts from a CSV with Email and Full Name columns."""
    return run_import(request, import_teacher_csv, 'teachers')


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsAdmin])
@parser_classes([MultiPartParser, FormParser])
def classcard_import_teachers(request):
    """Create teacher accounts from a class-card staff export; only Role = Teacher rows are used."""
    return run_import(request, import_classcard_staff_csv, 'teachers')
