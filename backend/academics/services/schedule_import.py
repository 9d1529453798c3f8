"""Class-card schedule sync.

A schedule export lists dated lessons. Marked lessons are grouped by
(class title, staff name) into classes; each class is created, or found by
name, teacher and subject and then has its members and weekly slots replaced
to match the export. Every class is synced in its own transaction, so one
failing class is reported against its first row and the rest still apply.
"""
import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction

from imports.batch import MAX_REPORTED_ERRORS, ImportOutcome
from imports.exceptions import NoQualifyingRowsError
from imports.parsers import parse_classcard_schedule_csv
from imports.schedules import (
    build_subject_lookup, day_number, extract_subject, parse_time_range, resolve_subject, year_group_from_title,
)
from imports.validators import validate_classcard_schedule_rows
from imports.year_groups import build_lookup
from taxonomy.models import Subject
from ..models import Class, ClassSchedule, ClassStudent, Student, YearGroup

logger = logging.getLogger(__name__)


@dataclass
class ScheduleSyncOutcome(ImportOutcome):
    classes_created: int = 0
    classes_updated: int = 0
    schedules_created: int = 0
    students_linked: int = 0

    def to_payload(self, noun='classes', limit=MAX_REPORTED_ERRORS):
        return {
            'message': (
                f'Sync completed: {self.classes_created} classes created, '
                f'{self.classes_updated} classes updated, {self.schedules_created} schedules synced, '
                f'{self.students_linked} students linked, {self.error_count} errors'
            ),
            'classesCreated': self.classes_created,
            'classesUpdated': self.classes_updated,
            'schedulesCreated': self.schedules_created,
            'studentsLinked': self.students_linked,
            'errorCount': self.error_count,
            'errors': self.errors[:limit],
        }


def _name_lookup(pairs):
    lookup = {}
    for pk, name in pairs:
        lookup.setdefault(name.strip().lower(), pk)
    return lookup


def _members(title, rows, students, outcome):
    student_ids = []
    seen = set()
    for row in rows:
        for name in row.student_names:
            key = name.lower()
            if key in seen:
                continue
            seen.add(key)
            student_id = students.get(key)
            if student_id is None:
                outcome.warn(row.row_number, f'Student not found: "{name}" (in class "{title}")')
            else:
                student_ids.append(student_id)
    return student_ids


def _slots(title, rows, outcome):
    # one weekly slot per distinct (day, start, end); the export repeats it for every date
    slots = []
    for row in rows:
        day = day_number(row.day)
        if day is None:
            outcome.warn(row.row_number, f'Invalid day: "{row.day}" (in class "{title}")')
            continue
        times = parse_time_range(row.time)
        if times is None:
            outcome.warn(row.row_number, f'Invalid time format: "{row.time}" (in class "{title}")')
            continue
        slot = (day, *times)
        if slot not in slots:
            slots.append(slot)
    return slots


def _sync_class(title, teacher_id, subject_id, year_group_id, student_ids, slots, created_by):
    """Create or refresh one class; returns True when it was created."""
    klass = Class.objects.filter(name=title, teacher_id=teacher_id, subject_id=subject_id).first()
    created = klass is None
    if created:
        klass = Class.objects.create(
            name=title, teacher_id=teacher_id, subject_id=subject_id,
            year_group_id=year_group_id, created_by=created_by,
        )
    else:
        if year_group_id and klass.year_group_id != year_group_id:
            klass.year_group_id = year_group_id
            klass.save(update_fields=['year_group'])
        klass.memberships.all().delete()
        klass.schedules.all().delete()
    ClassStudent.objects.bulk_create([ClassStudent(klass=klass, student_id=pk) for pk in student_ids])
    ClassSchedule.objects.bulk_create([
        ClassSchedule(klass=klass, day_of_week=day, start_time=start, end_time=end)
        for day, start, end in slots
    ])
    return created


def sync_classcard_schedule(rows, created_by=None):
    """Sync classes, members and weekly slots from Marked ClassCardScheduleRows."""
    User = get_user_model()
    teachers = _name_lookup(User.objects.filter(role=User.Roles.TEACHER).values_list('id', 'full_name'))
    students = _name_lookup(Student.objects.order_by('id').values_list('id', 'full_name'))
    subjects = build_subject_lookup(Subject.objects.order_by('id').values_list('id', 'name'))
    year_groups = build_lookup(YearGroup.objects.values_list('id', 'name'))

    groups = {}
    for row in rows:
        groups.setdefault((row.class_title, row.staff), []).append(row)
    logger.info("Syncing %d classes from %d marked lessons", len(groups), len(rows))

    outcome = ScheduleSyncOutcome()
    for (title, staff), group in groups.items():
        first = group[0]
        teacher_id = teachers.get(staff.lower())
        if teacher_id is None:
            outcome.record_error(first.row_number, f'Teacher not found: "{staff}"')
            continue
        subject_name = extract_subject(title, first.class_subject)
        subject_id = resolve_subject(subject_name, subjects)
        if subject_id is None:
            outcome.record_error(first.row_number, f'Subject not found: "{subject_name}" (from class "{title}")')
            continue
        year_group_id = year_groups.get(year_group_from_title(title) or None)

        student_ids = _members(title, group, students, outcome)
        slots = _slots(title, group, outcome)
        try:
            with transaction.atomic():
                created = _sync_class(title, teacher_id, subject_id, year_group_id, student_ids, slots, created_by)
        except DatabaseError as exc:
            outcome.record_error(first.row_number, f'Error syncing class "{title}": {exc}')
            continue

        if created:
            outcome.classes_created += 1
        else:
            outcome.classes_updated += 1
        outcome.students_linked += len(student_ids)
        outcome.schedules_created += len(slots)
        outcome.record_success()
    return outcome


def import_classcard_schedule_csv(text, created_by=None):
    rows = parse_classcard_schedule_csv(text)
    validate_classcard_schedule_rows(rows).raise_for_errors()
    marked = [row for row in rows if row.is_marked]
    if not marked:
        raise NoQualifyingRowsError(
            'No marked classes found in CSV. Make sure Attendance Status column contains "Marked"'
        )
    return sync_classcard_schedule(marked, created_by=created_by)
