from __future__ import annotations

import pytest

from academics.models import Class, ClassSchedule, Student, YearGroup

pytestmark = pytest.mark.django_db


def test_year_groups_ordered_by_display_order(teacher_client):
    YearGroup.objects.create(name="Year 11", display_order=2)
    YearGroup.objects.create(name="Year 10", display_order=1)
    resp = teacher_client.get("/api/academics/year-groups/")
    assert resp.status_code == 200
    assert [y["name"] for y in resp.json()] == ["Year 10", "Year 11"]


def test_teacher_cannot_create_year_group(teacher_client):
    resp = teacher_client.post("/api/academics/year-groups/", {"name": "Year 12"}, format="json")
    assert resp.status_code == 403


def test_year_group_in_use_cannot_be_deleted(admin_client, year_groups):
    Student.objects.create(full_name="Alice", year_group=year_groups["Year 7"])
    resp = admin_client.delete(f"/api/academics/year-groups/{year_groups['Year 7'].id}/")
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Cannot delete year group that is assigned to students"}
    resp = admin_client.delete(f"/api/academics/year-groups/{year_groups['Year 11'].id}/")
    assert resp.status_code == 204


def test_student_create_copies_year_group_name(admin_client, admin_user, year_groups):
    resp = admin_client.post(
        "/api/academics/students/",
        {"full_name": "Alice Johnson", "year_group": year_groups["Year 10"].id, "parent_email": "mum@home.test"},
        format="json",
    )
    assert resp.status_code == 201
    student = Student.objects.get(pk=resp.json()["id"])
    assert student.school_year_group == "Year 10"
    assert student.created_by == admin_user
    assert resp.json()["year_group_name"] == "Year 10"


def test_student_list_year_group_name_fallbacks(admin_client, year_groups):
    Student.objects.create(full_name="Linked", year_group=year_groups["Year 7"])
    Student.objects.create(full_name="Free text", school_year_group="Reception")
    Student.objects.create(full_name="Nothing")
    resp = admin_client.get("/api/academics/students/", {"page_size": 10})
    names = {s["full_name"]: s["year_group_name"] for s in resp.json()["results"]}
    assert names == {"Linked": "Year 7", "Free text": "Reception", "Nothing": "N/A"}


def test_students_are_admin_only(teacher_client):
    assert teacher_client.get("/api/academics/students/").status_code == 403


def test_create_class_with_students(admin_client, teacher, taxonomy_path, year_groups):
    a = Student.objects.create(full_name="A", year_group=year_groups["Year 10"])
    b = Student.objects.create(full_name="B", year_group=year_groups["Year 10"])
    resp = admin_client.post("/api/academics/classes/", {
        "name": "Chemistry 10A",
        "teacher": teacher.id,
        "subject": taxonomy_path["subject"].id,
        "year_group": year_groups["Year 10"].id,
        "student_ids": [a.id, b.id],
    }, format="json")
    assert resp.status_code == 201
    klass = Class.objects.get(pk=resp.json()["id"])
    assert set(klass.students.values_list("full_name", flat=True)) == {"A", "B"}

    detail = admin_client.get(f"/api/academics/classes/{klass.id}/").json()
    assert sorted(s["full_name"] for s in detail["students"]) == ["A", "B"]
    assert detail["teacher_detail"]["email"] == teacher.email


def test_class_requires_students(admin_client, teacher, taxonomy_path):
    resp = admin_client.post("/api/academics/classes/", {
        "name": "Empty", "teacher": teacher.id, "subject": taxonomy_path["subject"].id, "student_ids": [],
    }, format="json")
    assert resp.status_code == 400


def test_teacher_sees_only_own_classes(api_client, klass, other_teacher):
    api_client.force_authenticate(other_teacher)
    assert api_client.get("/api/academics/classes/mine/").json() == []
    assert api_client.get(f"/api/academics/classes/{klass.id}/").status_code == 404

    api_client.force_authenticate(klass.teacher)
    mine = api_client.get("/api/academics/classes/mine/").json()
    assert [c["id"] for c in mine] == [klass.id]
    assert mine[0]["student_count"] == 2
    assert api_client.get(f"/api/academics/classes/{klass.id}/").status_code == 200


def test_delete_class(admin_client, klass):
    assert admin_client.delete(f"/api/academics/classes/{klass.id}/").status_code == 204
    assert not Class.objects.filter(pk=klass.pk).exists()


def test_replace_schedule(admin_client, klass):
    ClassSchedule.objects.create(klass=klass, day_of_week=1, start_time="09:00", end_time="10:00")
    resp = admin_client.post("/api/academics/schedules/", {
        "class_id": klass.id,
        "schedules": [
            {"day_of_week": 3, "start_time": "13:00", "end_time": "14:00"},
            {"day_of_week": 2, "start_time": "09:30", "end_time": "10:30"},
        ],
    }, format="json")
    assert resp.status_code == 201
    assert [(s["day_of_week"], s["start_time"]) for s in resp.json()] == [(2, "09:30"), (3, "13:00")]
    assert klass.schedules.count() == 2


@pytest.mark.parametrize("slot", [
    {"day_of_week": 7, "start_time": "09:00", "end_time": "10:00"},
    {"day_of_week": 1, "start_time": "9am", "end_time": "10:00"},
    {"day_of_week": 1, "start_time": "11:00", "end_time": "10:00"},
])
def test_replace_schedule_rejects_bad_slots(admin_client, klass, slot):
    resp = admin_client.post("/api/academics/schedules/", {"class_id": klass.id, "schedules": [slot]}, format="json")
    assert resp.status_code == 400


def test_update_schedule_and_reassign_teacher(admin_client, klass, other_teacher):
    slot = ClassSchedule.objects.create(klass=klass, day_of_week=1, start_time="09:00", end_time="10:00")
    resp = admin_client.put(f"/api/academics/schedules/{slot.id}/", {
        "day_of_week": 4, "start_time": "11:00", "end_time": "12:00", "teacher_id": other_teacher.id,
    }, format="json")
    assert resp.status_code == 200
    slot.refresh_from_db()
    klass.refresh_from_db()
    assert slot.day_of_week == 4
    assert klass.teacher == other_teacher


def test_list_and_delete_schedules(admin_client, klass):
    slot = ClassSchedule.objects.create(klass=klass, day_of_week=1, start_time="09:00", end_time="10:00")
    resp = admin_client.get("/api/academics/schedules/", {"class_id": klass.id})
    assert [s["id"] for s in resp.json()] == [slot.id]
    assert admin_client.delete(f"/api/academics/schedules/{slot.id}/").status_code == 204
