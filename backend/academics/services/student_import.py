"""Student CSV imports: the app's own layout and the class-card export."""
import logging

from django.conf import settings

from imports.batch import ImportOutcome, PendingRow, import_in_chunks
from imports.exceptions import NoQualifyingRowsError
from imports.parsers import parse_classcard_student_csv, parse_student_csv
from imports.store import model_inserters
from imports.validators import validate_classcard_student_rows, validate_student_rows
from imports.year_groups import build_lookup, resolve_year_group, unresolved_message
from ..models import Student, YearGroup

logger = logging.getLogger(__name__)


def import_students(rows, created_by=None):
    """Insert one Student per StudentRow and return the ImportOutcome.

    A year group label that matches no YearGroup is a warning, not an error:
    the student is still created with no year group and the raw label kept in
    ``school_year_group``.
    """
    year_groups = list(YearGroup.objects.values_list('id', 'name'))
    lookup = build_lookup(year_groups)
    names = dict(year_groups)
    outcome = ImportOutcome()
    pending = []
    for row in rows:
        extracted, year_group_id = resolve_year_group(row.year_group, lookup)
        if extracted and year_group_id is None:
            outcome.warn(row.row_number, unresolved_message(row.year_group, extracted))
        pending.append(PendingRow(row.row_number, {
            'full_name': row.full_name,
            'year_group_id': year_group_id,
            'school_year_group': names[year_group_id] if year_group_id else (row.year_group or extracted),
            'created_by': created_by,
        }))
    logger.info("Importing %d students (%d year group warnings)", len(pending), len(outcome.errors))
    insert_many, insert_one = model_inserters(Student)
    return import_in_chunks(pending, insert_many, insert_one, settings.IMPORT_BATCH_SIZE, outcome=outcome)


def import_student_csv(text, created_by=None):
    rows = parse_student_csv(text)
    validate_student_rows(rows).raise_for_errors()
    return import_students(rows, created_by=created_by)


def import_classcard_student_csv(text, created_by=None):
    rows = parse_classcard_student_csv(text)
    validate_classcard_student_rows(rows).raise_for_errors()
    active = [row.as_student_row() for row in rows if row.is_active]
    if not active:
        raise NoQualifyingRowsError('No active students found in CSV. Make sure Status column contains "Active"')
    return import_students(active, created_by=created_by)
