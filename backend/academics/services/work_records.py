"""Derived fields of a work record.

Applied by the work-record endpoints on create and on update, before the
record is handed to the ORM.
"""
from datetime import timedelta

DUE_AFTER = timedelta(days=7)
PASS_PERCENTAGE = 80

WORK_TYPE_LABELS = {
    'homework': 'Homework',
    'classwork': 'Classwork',
}


def calculate_due_date(assigned_date):
    return assigned_date + DUE_AFTER


def default_work_title(work_type, assigned_date):
    label = WORK_TYPE_LABELS.get(work_type, 'Past Paper')
    return f"{label} - {assigned_date.month}/{assigned_date.day}/{assigned_date.year}"


def calculate_percentage(obtained, total):
    if not total:
        return 0
    return round(obtained / total * 100, 2)


def derive_status(marks_obtained, total_marks, supplied=None):
    """Status from the score when both marks are positive, else the supplied one.

    The computed status replaces any supplied status, for every work type.
    """
    status = supplied or 'not_submitted'
    if marks_obtained > 0 and total_marks > 0:
        percentage = marks_obtained / total_marks * 100
        status = 'submitted' if percentage >= PASS_PERCENTAGE else 'resit'
    return status


def apply_derived_fields(data, current_title=None):
    """Return the field values to store on top of validated ``data``.

    ``current_title`` is the stored title when updating; an update without a
    title keeps it.
    """
    work_type = data['work_type']
    assigned_date = data['assigned_date']
    derived = {
        'due_date': calculate_due_date(assigned_date),
        'work_title': data.get('work_title') or current_title or default_work_title(work_type, assigned_date),
        'status': derive_status(data.get('marks_obtained', 0), data['total_marks'], data.get('status')),
    }
    if work_type == 'past_paper':
        derived['topic'] = None
        derived['subtopic'] = None
    return derived
