from __future__ import annotations

import pytest

from imports.exceptions import StructuralValidationError
from imports.parsers import (
    ClassCardScheduleRow, ClassCardStaffRow, ClassCardStudentRow, StudentRow, TaxonomyRow, TeacherRow,
)
from imports.validators import (
    EMPTY_FILE_ERROR,
    validate_classcard_schedule_rows,
    validate_classcard_staff_rows,
    validate_classcard_student_rows,
    validate_student_rows,
    validate_taxonomy_rows,
    validate_teacher_rows,
)


def test_valid_student_rows():
    report = validate_student_rows([StudentRow(2, "Alice", "Year 7")])
    assert report.valid
    assert report.errors == ()


def test_student_errors_use_file_row_numbers():
    report = validate_student_rows([StudentRow(2, "Alice", "Year 7"), StudentRow(3, "", ""), StudentRow(5, "Bob", "")])
    assert not report.valid
    assert list(report.errors) == [
        "Row 3: Full Name is required",
        "Row 3: Year Group is required",
        "Row 5: Year Group is required",
    ]


def test_empty_row_set_is_invalid():
    report = validate_student_rows([])
    assert report.errors == (EMPTY_FILE_ERROR,)


def test_teacher_email_rules():
    report = validate_teacher_rows([
        TeacherRow(2, "ann@school.test", "Ann"),
        TeacherRow(3, "not-an-email", "Bo"),
        TeacherRow(4, "ANN@school.test", "Ann Again"),
        TeacherRow(5, "", ""),
    ])
    assert list(report.errors) == [
        "Row 3: Invalid email format: not-an-email",
        "Row 4: Duplicate email: ANN@school.test",
        "Row 5: Email is required",
        "Row 5: Full Name is required",
    ]


def test_classcard_student_requires_name_and_status():
    report = validate_classcard_student_rows([ClassCardStudentRow(2, "", "", "Y10")])
    assert list(report.errors) == ["Row 2: Name is required", "Row 2: Status is required"]


def test_classcard_staff_checks_email_for_teachers_only():
    report = validate_classcard_staff_rows([
        ClassCardStaffRow(2, "Ann", "Teacher", "ann@school.test"),
        ClassCardStaffRow(3, "Bo", "Cleaner", ""),
        ClassCardStaffRow(4, "Cy", "teacher", "bad"),
        ClassCardStaffRow(5, "", "", ""),
    ])
    assert list(report.errors) == [
        "Row 4: Invalid email format: bad",
        "Row 5: Name is required",
        "Row 5: Role is required",
    ]


def test_taxonomy_requires_three_levels():
    report = validate_taxonomy_rows([TaxonomyRow(2, "GCSE", "", "")])
    assert list(report.errors) == ["Row 2: Exam Board is required", "Row 2: Subject is required"]


def test_raise_for_errors_carries_messages():
    report = validate_student_rows([StudentRow(2, "", "Year 7")])
    with pytest.raises(StructuralValidationError) as exc_info:
        report.raise_for_errors()
    assert exc_info.value.errors == ["Row 2: Full Name is required"]


def test_raise_for_errors_is_silent_when_valid():
    validate_student_rows([StudentRow(2, "Alice", "Year 7")]).raise_for_errors()


def test_classcard_schedule_checks_only_marked_rows():
    report = validate_classcard_schedule_rows([
        ClassCardScheduleRow(2, "Monday", "09:00 - 10:00", "Y10 Chemistry", "Tom Teacher", "Marked"),
        ClassCardScheduleRow(3, "", "", "", "", "Cancelled"),
        ClassCardScheduleRow(4, "", "", "Y11 Physics", "", "marked"),
    ])
    assert list(report.errors) == [
        "Row 4: Staff is required",
        "Row 4: Day is required",
        "Row 4: Time is required",
    ]


def test_classcard_schedule_empty_file():
    assert list(validate_classcard_schedule_rows([]).errors) == [EMPTY_FILE_ERROR]
