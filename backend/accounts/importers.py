"""Teacher account imports (generic and class-card staff exports)."""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import connections

from imports.batch import PendingRow, import_concurrently
from imports.exceptions import DuplicateIdentityError, NoQualifyingRowsError
from imports.parsers import parse_classcard_staff_csv, parse_teacher_csv
from imports.validators import validate_classcard_staff_rows, validate_teacher_rows
from .identity import get_identity_provider

logger = logging.getLogger(__name__)


def provision_teachers(rows, provider=None):
    """Create a teacher account per TeacherRow; return the ImportOutcome.

    Each row checks for an existing account with the same email first, so a
    duplicate is reported without calling the provider.
    """
    User = get_user_model()
    provider = provider or get_identity_provider()
    password = settings.DEFAULT_TEACHER_PASSWORD

    def create(row):
        email = row.email.strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise DuplicateIdentityError(f'Email already exists: {row.email}')
        provider.create_user(email=email, full_name=row.full_name, role=User.Roles.TEACHER, password=password)

    pending = [PendingRow(row.row_number, row) for row in rows]
    logger.info("Provisioning %d teacher accounts", len(pending))
    return import_concurrently(
        pending,
        create,
        batch_size=settings.IMPORT_IDENTITY_BATCH_SIZE,
        max_workers=settings.IMPORT_IDENTITY_WORKERS,
        worker_cleanup=connections.close_all,
    )


def import_teacher_csv(text, provider=None):
    rows = parse_teacher_csv(text)
    validate_teacher_rows(rows).raise_for_errors()
    return provision_teachers(rows, provider=provider)


def import_classcard_staff_csv(text, provider=None):
    rows = parse_classcard_staff_csv(text)
    validate_classcard_staff_rows(rows).raise_for_errors()
    teachers = [row.as_teacher_row() for row in rows if row.is_teacher]
    if not teachers:
        raise NoQualifyingRowsError('No teachers found in CSV. Make sure Role column contains "Teacher"')
    return provision_teachers(teachers, provider=provider)
