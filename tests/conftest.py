# Shared pytest fixtures
from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def fast_settings(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    # Worker threads cannot see rows created inside a test transaction;
    # threaded imports are tested with transaction=True
    settings.IMPORT_IDENTITY_WORKERS = 1
    return settings


@pytest.fixture()
def admin_user(django_user_model):
    return django_user_model.objects.create_user(
        username="admin@school.test", email="admin@school.test", password="pw-admin-123",
        full_name="Ada Admin", role="admin",
    )


@pytest.fixture()
def teacher(django_user_model):
    return django_user_model.objects.create_user(
        username="teacher@school.test", email="teacher@school.test", password="pw-teacher-123",
        full_name="Tom Teacher", role="teacher",
    )


@pytest.fixture()
def other_teacher(django_user_model):
    return django_user_model.objects.create_user(
        username="other@school.test", email="other@school.test", password="pw-other-123",
        full_name="Olive Other", role="teacher",
    )


@pytest.fixture()
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture()
def admin_client(api_client, admin_user):
    api_client.force_authenticate(admin_user)
    return api_client


@pytest.fixture()
def teacher_client(api_client, teacher):
    api_client.force_authenticate(teacher)
    return api_client


@pytest.fixture()
def taxonomy_path(db):
    from taxonomy.models import Qualification, ExamBoard, Subject, Topic, Subtopic
    qual = Qualification.objects.create(name="GCSE")
    board = ExamBoard.objects.create(qualification=qual, name="AQA")
    subject = Subject.objects.create(exam_board=board, name="Chemistry")
    topic = Topic.objects.create(subject=subject, name="Bonding")
    subtopic = Subtopic.objects.create(topic=topic, name="Ionic bonding")
    return {"qualification": qual, "exam_board": board, "subject": subject, "topic": topic, "subtopic": subtopic}


@pytest.fixture()
def year_groups(db):
    from academics.models import YearGroup
    return {
        name: YearGroup.objects.create(name=name, display_order=i)
        for i, name in enumerate(["Year 7", "Year 10", "Year 11"])
    }


@pytest.fixture()
def klass(db, teacher, taxonomy_path, year_groups):
    from academics.models import Class, ClassStudent, Student
    k = Class.objects.create(
        name="Chemistry - Year 10", teacher=teacher, subject=taxonomy_path["subject"], year_group=year_groups["Year 10"],
    )
    for name in ("Alice Johnson", "Bob Smith"):
        student = Student.objects.create(full_name=name, year_group=year_groups["Year 10"])
        ClassStudent.objects.create(klass=k, student=student)
    return k
