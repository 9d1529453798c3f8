from __future__ import annotations

import threading
import time

import pytest

from imports.batch import ImportOutcome, PendingRow, chunked, import_concurrently, import_in_chunks
from imports.exceptions import DuplicateIdentityError, PersistenceError


def pending(n, start=2):
    return [PendingRow(start + i, {"n": i}) for i in range(n)]


class FakeStore:
    def __init__(self, fail_bulk=False, bad=()):
        self.fail_bulk = fail_bulk
        self.bad = set(bad)
        self.bulk_calls = []
        self.single_calls = []

    def insert_many(self, records):
        self.bulk_calls.append(len(records))
        if self.fail_bulk or any(r["n"] in self.bad for r in records):
            raise PersistenceError("bulk rejected")

    def insert_one(self, record):
        self.single_calls.append(record["n"])
        if record["n"] in self.bad:
            raise PersistenceError(f"bad value {record['n']}")


def test_chunked_preserves_order():
    assert list(chunked(range(5), 2)) == [[0, 1], [2, 3], [4]]


def test_chunked_rejects_zero():
    with pytest.raises(ValueError):
        list(chunked([1], 0))


def test_all_chunks_succeed():
    store = FakeStore()
    outcome = import_in_chunks(pending(250), store.insert_many, store.insert_one, batch_size=100)
    assert store.bulk_calls == [100, 100, 50]
    assert store.single_calls == []
    assert (outcome.success_count, outcome.error_count, outcome.errors) == (250, 0, [])


def test_failed_chunk_falls_back_to_one_insert_per_row():
    store = FakeStore(fail_bulk=True)
    outcome = import_in_chunks(pending(100), store.insert_many, store.insert_one, batch_size=100)
    assert len(store.single_calls) == 100
    assert store.single_calls == list(range(100))
    assert outcome.success_count + outcome.error_count == 100


def test_bad_row_only_fails_itself():
    store = FakeStore(bad={3})
    outcome = import_in_chunks(pending(10), store.insert_many, store.insert_one, batch_size=5)
    # second chunk never fell back
    assert store.single_calls == [0, 1, 2, 3, 4]
    assert outcome.success_count == 9
    assert outcome.error_count == 1
    assert outcome.errors == ["Row 5: bad value 3"]


def test_error_list_truncated_but_counts_exact():
    store = FakeStore(bad=set(range(75)))
    outcome = import_in_chunks(pending(80), store.insert_many, store.insert_one, batch_size=100)
    payload = outcome.to_payload("students")
    assert len(payload["errors"]) == 50
    assert payload["errorCount"] == 75
    assert payload["successCount"] == 5
    assert payload["message"] == "Import completed: 5 students created, 75 errors"


def test_existing_outcome_keeps_warnings():
    outcome = ImportOutcome()
    outcome.warn(2, "Year group not found: \"Reception\"")
    store = FakeStore()
    import_in_chunks(pending(3), store.insert_many, store.insert_one, batch_size=10, outcome=outcome)
    assert outcome.success_count == 3
    assert outcome.error_count == 0
    assert outcome.errors == ['Row 2: Year group not found: "Reception"']


def test_concurrent_results_folded_in_row_order():
    def task(data):
        # later rows finish first
        time.sleep(0.01 * (5 - data["n"]))
        if data["n"] % 2:
            raise DuplicateIdentityError(f"Email already exists: {data['n']}")

    outcome = import_concurrently(pending(5), task, batch_size=5, max_workers=5)
    assert outcome.success_count == 3
    assert outcome.error_count == 2
    assert outcome.errors == ["Row 3: Email already exists: 1", "Row 5: Email already exists: 3"]


def test_concurrent_chunks_run_one_after_another():
    active = []
    peak = []
    lock = threading.Lock()

    def task(data):
        with lock:
            active.append(data["n"])
            peak.append(len(active))
        time.sleep(0.005)
        with lock:
            active.remove(data["n"])

    outcome = import_concurrently(pending(9), task, batch_size=3, max_workers=8)
    assert outcome.success_count == 9
    assert max(peak) <= 3


def test_worker_cleanup_runs_after_each_threaded_task():
    cleaned = []
    outcome = import_concurrently(
        pending(4), lambda data: None, batch_size=4, max_workers=2, worker_cleanup=lambda: cleaned.append(1),
    )
    assert outcome.success_count == 4
    assert len(cleaned) == 4


def test_inline_when_single_worker():
    threads = set()

    def task(data):
        threads.add(threading.get_ident())

    import_concurrently(pending(6), task, batch_size=3, max_workers=1)
    assert threads == {threading.get_ident()}


def test_unexpected_exceptions_are_collected_against_their_row():
    def task(data):
        if data["n"] == 1:
            raise RuntimeError("database is locked")

    outcome = import_concurrently(pending(3), task, batch_size=3, max_workers=1)
    assert outcome.success_count == 2
    assert outcome.error_count == 1
    assert outcome.errors == ["Row 3: database is locked"]


def test_unexpected_exceptions_in_worker_threads_are_collected():
    def task(data):
        if data["n"] == 0:
            raise KeyError("email")

    outcome = import_concurrently(pending(3), task, batch_size=3, max_workers=3)
    assert (outcome.success_count, outcome.error_count) == (2, 1)
    assert outcome.errors[0].startswith("Row 2: ")
