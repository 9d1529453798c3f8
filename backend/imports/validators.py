import re
from dataclasses import dataclass

from .exceptions import StructuralValidationError

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
EMPTY_FILE_ERROR = 'CSV file is empty or contains no valid data'


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: tuple

    def raise_for_errors(self):
        if not self.valid:
            raise StructuralValidationError(self.errors)


def _report(errors):
    return ValidationReport(valid=not errors, errors=tuple(errors))


def _check_email(row_number, email, seen, errors):
    if not email:
        errors.append(f'Row {row_number}: Email is required')
    elif not EMAIL_RE.match(email):
        errors.append(f'Row {row_number}: Invalid email format: {email}')
    elif email.lower() in seen:
        errors.append(f'Row {row_number}: Duplicate email: {email}')
    else:
        seen.add(email.lower())


def validate_student_rows(rows):
    errors = [] if rows else [EMPTY_FILE_ERROR]
    for row in rows:
        if not row.full_name:
            errors.append(f'Row {row.row_number}: Full Name is required')
        if not row.year_group:
            errors.append(f'Row {row.row_number}: Year Group is required')
    return _report(errors)


def validate_teacher_rows(rows):
    errors = [] if rows else [EMPTY_FILE_ERROR]
    seen = set()
    for row in rows:
        _check_email(row.row_number, row.email, seen, errors)
        if not row.full_name:
            errors.append(f'Row {row.row_number}: Full Name is required')
    return _report(errors)


def validate_classcard_student_rows(rows):
    errors = [] if rows else [EMPTY_FILE_ERROR]
    for row in rows:
        if not row.name:
            errors.append(f'Row {row.row_number}: Name is required')
        if not row.status:
            errors.append(f'Row {row.row_number}: Status is required')
    return _report(errors)


def validate_classcard_staff_rows(rows):
    """Every row needs a name and a role; only teacher rows must carry a usable email,
    since the rest are filtered out before import."""
    errors = [] if rows else [EMPTY_FILE_ERROR]
    seen = set()
    for row in rows:
        if not row.name:
            errors.append(f'Row {row.row_number}: Name is required')
        if not row.role:
            errors.append(f'Row {row.row_number}: Role is required')
        elif row.is_teacher:
            _check_email(row.row_number, row.email, seen, errors)
    return _report(errors)


def validate_taxonomy_rows(rows):
    errors = [] if rows else [EMPTY_FILE_ERROR]
    for row in rows:
        if not row.qualification:
            errors.append(f'Row {row.row_number}: Qualification is required')
        if not row.exam_board:
            errors.append(f'Row {row.row_number}: Exam Board is required')
        if not row.subject:
            errors.append(f'Row {row.row_number}: Subject is required')
    return _report(errors)


def validate_classcard_schedule_rows(rows):
    """Only Marked lessons are synced, so only they must name a class, a teacher and a slot."""
    errors = [] if rows else [EMPTY_FILE_ERROR]
    for row in rows:
        if not row.is_marked:
            continue
        if not row.class_title:
            errors.append(f'Row {row.row_number}: Class Title is required')
        if not row.staff:
            errors.append(f'Row {row.row_number}: Staff is required')
        if not row.day:
            errors.append(f'Row {row.row_number}: Day is required')
        if not row.time:
            errors.append(f'Row {row.row_number}: Time is required')
    return _report(errors)
