from __future__ import annotations

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from academics.models import Student
import academics.services.student_import as student_import
from academics.services.student_import import import_students
from imports.exceptions import PersistenceError
from imports.parsers import StudentRow

pytestmark = pytest.mark.django_db

BULK_URL = "/api/academics/students/bulk-import/"
CLASSCARD_URL = "/api/academics/students/classcard-import/"


def upload(text):
    return {"file": SimpleUploadedFile("students.csv", text.encode("utf-8"), content_type="text/csv")}


def test_imports_students_and_resolves_year_groups(admin_client, admin_user, year_groups):
    text = "Full Name,Year Group\nAlice Johnson,Y10\nBob Smith,Year 7\nCara Diaz,Reception\n"
    resp = admin_client.post(BULK_URL, upload(text), format="multipart")
    assert resp.status_code == 200
    body = resp.json()
    assert body["successCount"] == 3
    assert body["errorCount"] == 0
    assert body["errors"] == ['Row 4: Year group not found: "Reception"']

    alice = Student.objects.get(full_name="Alice Johnson")
    assert alice.year_group == year_groups["Year 10"]
    assert alice.school_year_group == "Year 10"
    assert alice.created_by == admin_user
    cara = Student.objects.get(full_name="Cara Diaz")
    assert cara.year_group is None
    assert cara.school_year_group == "Reception"
    assert cara.year_group_name == "Reception"


def test_validation_errors_block_import(admin_client, year_groups):
    resp = admin_client.post(BULK_URL, upload("Full Name,Year Group\nAlice,\n,Year 7\n"), format="multipart")
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["Row 2: Year Group is required", "Row 3: Full Name is required"]
    assert Student.objects.count() == 0


def test_empty_file(admin_client):
    resp = admin_client.post(BULK_URL, upload("Full Name,Year Group\n"), format="multipart")
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["CSV file is empty or contains no valid data"]


def test_teacher_cannot_import(teacher_client):
    resp = teacher_client.post(BULK_URL, upload("Full Name,Year Group\nA,Year 7\n"), format="multipart")
    assert resp.status_code == 403


def test_classcard_imports_active_students_only(admin_client, year_groups):
    text = (
        "Name,Status,Current Year Group\n"
        "Alice Johnson,Active,Y10 Chemistry\n"
        "Bob Smith,Left,Y11\n"
        "Cara Diaz,active,Y9\n"
    )
    resp = admin_client.post(CLASSCARD_URL, upload(text), format="multipart")
    assert resp.status_code == 200
    body = resp.json()
    assert body["successCount"] == 2
    assert body["errors"] == ['Row 4: Year group not found: "year 9" (from "Y9")']
    assert set(Student.objects.values_list("full_name", flat=True)) == {"Alice Johnson", "Cara Diaz"}
    assert Student.objects.get(full_name="Cara Diaz").school_year_group == "Y9"


def test_classcard_without_active_students(admin_client):
    resp = admin_client.post(CLASSCARD_URL, upload("Name,Status,Current Year Group\nBob,Left,Y11\n"), format="multipart")
    assert resp.status_code == 400
    assert resp.json() == {"detail": 'No active students found in CSV. Make sure Status column contains "Active"'}


def test_failed_batch_falls_back_per_row(settings, year_groups, monkeypatch):
    settings.IMPORT_BATCH_SIZE = 2
    rows = [StudentRow(2, "Alice", "Year 7"), StudentRow(3, "Bob", "Year 7"), StudentRow(4, "Cara", "Year 10")]
    real_inserters = student_import.model_inserters

    def rejecting_bob(model):
        insert_many, insert_one = real_inserters(model)

        def many(records):
            if any(r["full_name"] == "Bob" for r in records):
                raise PersistenceError("chunk rejected")
            insert_many(records)

        def one(record):
            if record["full_name"] == "Bob":
                raise PersistenceError("value rejected")
            insert_one(record)

        return many, one

    monkeypatch.setattr(student_import, "model_inserters", rejecting_bob)
    outcome = import_students(rows)
    assert outcome.success_count == 2
    assert outcome.error_count == 1
    assert outcome.errors == ["Row 3: value rejected"]
    assert set(Student.objects.values_list("full_name", flat=True)) == {"Alice", "Cara"}
