from __future__ import annotations

from datetime import date

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from academics.models import WorkRecord
from taxonomy.models import ExamBoard, Qualification, Subject, Subtopic, Topic
from taxonomy.services import import_taxonomy_csv

pytestmark = pytest.mark.django_db

CSV = (
    "Qualification,Exam Board,Subject,Topic,Subtopic\n"
    "GCSE,AQA,Chemistry,Bonding,Ionic\n"
    "gcse,aqa,chemistry,bonding,Covalent\n"
    "GCSE,AQA,Chemistry,Atomic Structure,\n"
    "GCSE,OCR,Chemistry,,\n"
    "A Level,AQA,Physics,Mechanics,Forces\n"
)


def upload(text):
    return {"file": SimpleUploadedFile("taxonomy.csv", text.encode("utf-8"), content_type="text/csv")}


def test_import_builds_tree_case_insensitively():
    outcome = import_taxonomy_csv(CSV)
    assert sorted(Qualification.objects.values_list("name", flat=True)) == ["A Level", "GCSE"]
    assert ExamBoard.objects.count() == 3
    assert Subject.objects.count() == 3
    assert sorted(Topic.objects.values_list("name", flat=True)) == ["Atomic Structure", "Bonding", "Mechanics"]
    assert sorted(Subtopic.objects.values_list("name", flat=True)) == ["Covalent", "Forces", "Ionic"]
    assert outcome.success_count == 2 + 3 + 3 + 3 + 3


def test_reimport_creates_nothing():
    import_taxonomy_csv(CSV)
    outcome = import_taxonomy_csv(CSV.upper())
    assert outcome.success_count == 0
    assert Qualification.objects.count() == 2


def test_same_name_under_different_parents_is_distinct():
    import_taxonomy_csv(CSV)
    assert Subject.objects.filter(name="Chemistry").count() == 2


def test_import_endpoint(admin_client):
    resp = admin_client.post("/api/taxonomy/import/", upload(CSV), format="multipart")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Import completed: 14 taxonomy entries created, 0 errors"


def test_import_endpoint_validation(admin_client):
    resp = admin_client.post("/api/taxonomy/import/", upload("Qualification,Exam Board,Subject\nGCSE,,\n"), format="multipart")
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["Row 2: Exam Board is required", "Row 2: Subject is required"]


def test_read_open_to_teachers_write_admin_only(teacher_client, taxonomy_path):
    assert teacher_client.get("/api/taxonomy/qualifications/").status_code == 200
    assert teacher_client.post("/api/taxonomy/qualifications/", {"name": "BTEC"}, format="json").status_code == 403


def test_parent_filters(admin_client, taxonomy_path):
    other = Subject.objects.create(exam_board=taxonomy_path["exam_board"], name="Biology")
    Topic.objects.create(subject=other, name="Cells")
    resp = admin_client.get("/api/taxonomy/topics/", {"subject_id": taxonomy_path["subject"].id})
    assert [t["name"] for t in resp.json()] == ["Bonding"]
    resp = admin_client.get("/api/taxonomy/subjects/", {"exam_board_id": taxonomy_path["exam_board"].id})
    assert sorted(s["name"] for s in resp.json()) == ["Biology", "Chemistry"]


def test_crud(admin_client, taxonomy_path):
    resp = admin_client.post("/api/taxonomy/exam-boards/", {"name": "Edexcel", "qualification": taxonomy_path["qualification"].id}, format="json")
    assert resp.status_code == 201
    board_id = resp.json()["id"]
    resp = admin_client.patch(f"/api/taxonomy/exam-boards/{board_id}/", {"name": "Pearson Edexcel"}, format="json")
    assert resp.json()["name"] == "Pearson Edexcel"
    assert admin_client.delete(f"/api/taxonomy/exam-boards/{board_id}/").status_code == 204


def test_delete_in_use_is_refused(admin_client, taxonomy_path, klass, teacher):
    WorkRecord.objects.create(
        klass=klass, student=klass.students.first(), teacher=teacher, work_type="homework", work_title="t",
        qualification=taxonomy_path["qualification"], exam_board=taxonomy_path["exam_board"],
        subject=taxonomy_path["subject"], assigned_date=date(2024, 3, 1), due_date=date(2024, 3, 8),
        marks_obtained=5, total_marks=10,
    )
    resp = admin_client.delete(f"/api/taxonomy/qualifications/{taxonomy_path['qualification'].id}/")
    assert resp.status_code == 400
    assert Qualification.objects.filter(pk=taxonomy_path["qualification"].pk).exists()
