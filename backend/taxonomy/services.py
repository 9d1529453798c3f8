"""Taxonomy CSV import.

Each row names a path Qualification > Exam Board > Subject [> Topic [> Subtopic]].
Levels are filled top-down: every level is loaded into a lookup keyed by
``(parent_id, lowercase name)``, the missing entries are bulk-created, and the
refreshed lookup feeds the next level. Names match case-insensitively under
the same parent, so re-importing a file creates nothing.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, transaction

from imports.batch import ImportOutcome, chunked
from imports.exceptions import PersistenceError
from imports.parsers import parse_taxonomy_csv
from imports.validators import validate_taxonomy_rows
from .models import Qualification, ExamBoard, Subject, Topic, Subtopic

logger = logging.getLogger(__name__)


def _lookup(model, parent_field):
    if parent_field is None:
        return {(None, name.lower()): pk for name, pk in model.objects.values_list('name', 'id')}
    return {
        (parent_id, name.lower()): pk
        for parent_id, name, pk in model.objects.values_list(f'{parent_field}_id', 'name', 'id')
    }


def _fill_level(model, parent_field, wanted, batch_size):
    """Create the ``(parent_id, name)`` pairs of ``wanted`` that do not exist yet.

    Returns the refreshed lookup and the number of rows created. The first
    spelling of a name in the file is the one stored.
    """
    lookup = _lookup(model, parent_field)
    missing = {}
    for parent_id, name in wanted:
        key = (parent_id, name.lower())
        if key not in lookup and key not in missing:
            missing[key] = name
    if not missing:
        return lookup, 0
    records = [
        model(name=name, **({f'{parent_field}_id': parent_id} if parent_field else {}))
        for (parent_id, _), name in missing.items()
    ]
    for chunk in chunked(records, batch_size):
        model.objects.bulk_create(chunk)
    return _lookup(model, parent_field), len(records)


def import_taxonomy_rows(rows, batch_size=None):
    batch_size = batch_size or settings.IMPORT_BATCH_SIZE
    created = {}
    try:
        with transaction.atomic():
            quals, created['qualifications'] = _fill_level(
                Qualification, None, [(None, r.qualification) for r in rows], batch_size)

            def qual_id(r):
                return quals[(None, r.qualification.lower())]

            boards, created['exam_boards'] = _fill_level(
                ExamBoard, 'qualification', [(qual_id(r), r.exam_board) for r in rows], batch_size)

            def board_id(r):
                return boards[(qual_id(r), r.exam_board.lower())]

            subjects, created['subjects'] = _fill_level(
                Subject, 'exam_board', [(board_id(r), r.subject) for r in rows], batch_size)

            def subject_id(r):
                return subjects[(board_id(r), r.subject.lower())]

            with_topic = [r for r in rows if r.topic]
            topics, created['topics'] = _fill_level(
                Topic, 'subject', [(subject_id(r), r.topic) for r in with_topic], batch_size)

            with_subtopic = [r for r in with_topic if r.subtopic]
            _, created['subtopics'] = _fill_level(
                Subtopic, 'topic',
                [(topics[(subject_id(r), r.topic.lower())], r.subtopic) for r in with_subtopic],
                batch_size,
            )
    except DatabaseError as exc:
        logger.exception("Taxonomy import rolled back")
        raise PersistenceError(str(exc)) from exc

    logger.info("Taxonomy import of %d rows created %s", len(rows), created)
    outcome = ImportOutcome()
    outcome.record_success(sum(created.values()))
    return outcome


def import_taxonomy_csv(text):
    rows = parse_taxonomy_csv(text)
    validate_taxonomy_rows(rows).raise_for_errors()
    return import_taxonomy_rows(rows)
