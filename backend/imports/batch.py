"""Chunked persistence of validated import rows.

Two strategies share one accounting object:

* ``import_in_chunks``: one bulk insert per chunk, falling back to
  row-by-row inserts for a chunk whose bulk insert fails.
* ``import_concurrently``: for rows whose creation goes through the identity
  provider. Every row of a chunk is dispatched at once, the chunk is awaited
  as a whole, then results are folded into the outcome in row order.

Neither wraps more than one chunk in a transaction; a partly applied import
is reported through the counts, not rolled back.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 50


@dataclass(frozen=True)
class PendingRow:
    row_number: int  # file-relative, header is row 1
    data: Any


@dataclass(frozen=True)
class RowResult:
    row_number: int
    error: str | None = None


@dataclass
class ImportOutcome:
    success_count: int = 0
    error_count: int = 0
    errors: list = field(default_factory=list)

    def record_success(self, count=1):
        self.success_count += count

    def record_error(self, row_number, message):
        self.errors.append(f'Row {row_number}: {message}')
        self.error_count += 1

    def warn(self, row_number, message):
        # listed alongside errors but not counted as a failed row
        self.errors.append(f'Row {row_number}: {message}')

    def to_payload(self, noun, limit=MAX_REPORTED_ERRORS):
        return {
            'message': f'Import completed: {self.success_count} {noun} created, {self.error_count} errors',
            'successCount': self.success_count,
            'errorCount': self.error_count,
            'errors': self.errors[:limit],
        }


def chunked(rows, size):
    if size < 1:
        raise ValueError('batch size must be at least 1')
    rows = list(rows)
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def import_in_chunks(rows, insert_many, insert_one, batch_size, outcome=None):
    """Persist ``rows`` (PendingRow) with ``insert_many`` per chunk and ``insert_one`` as fallback.

    Both callables raise ``PersistenceError`` on rejection.
    """
    outcome = outcome if outcome is not None else ImportOutcome()
    for chunk in chunked(rows, batch_size):
        try:
            insert_many([row.data for row in chunk])
        except PersistenceError as exc:
            logger.warning(
                "Bulk insert of %d rows from row %d failed, retrying one by one: %s",
                len(chunk), chunk[0].row_number, exc,
            )
            for row in chunk:
                try:
                    insert_one(row.data)
                except PersistenceError as row_exc:
                    outcome.record_error(row.row_number, str(row_exc))
                else:
                    outcome.record_success()
        else:
            outcome.record_success(len(chunk))
    return outcome


def _attempt(task, row):
    try:
        task(row.data)
    except PersistenceError as exc:
        return RowResult(row.row_number, str(exc))
    except Exception as exc:
        logger.exception("Row %d failed unexpectedly", row.row_number)
        return RowResult(row.row_number, str(exc))
    return RowResult(row.row_number)


def _attempt_in_worker(task, worker_cleanup, row):
    try:
        return _attempt(task, row)
    finally:
        if worker_cleanup is not None:
            worker_cleanup()


def _run_chunk(chunk, task, max_workers, worker_cleanup):
    if max_workers <= 1 or len(chunk) == 1:
        return [_attempt(task, row) for row in chunk]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(chunk))) as executor:
        # map() yields in submission order, whatever order the rows finish in
        return list(executor.map(partial(_attempt_in_worker, task, worker_cleanup), chunk))


def import_concurrently(rows, task, batch_size, max_workers=1, worker_cleanup=None, outcome=None):
    """Run ``task(row.data)`` for every row, one chunk of concurrent calls at a time.

    ``worker_cleanup`` runs on the worker thread after each task (e.g. closing
    the thread's database connections).
    """
    outcome = outcome if outcome is not None else ImportOutcome()
    for chunk in chunked(rows, batch_size):
        results = _run_chunk(chunk, task, max_workers, worker_cleanup)
        for result in results:
            if result.error is None:
                outcome.record_success()
            else:
                outcome.record_error(result.row_number, result.error)
    return outcome
