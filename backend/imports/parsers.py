"""CSV parsing for the bulk import endpoints.

Each supported layout maps its fields to a tuple of accepted header spellings.
Headers are matched case-insensitively after trimming, so ``Full Name``,
``fullname`` and ``Name`` all land in the same field.

Data rows are never dropped for being incomplete: a short row comes back with
empty strings so the validator can point at it by row number. Only a header
that lacks a required column raises ``CSVFormatError``.
"""
import csv
import io
from dataclasses import dataclass

from .exceptions import CSVFormatError

# Row 1 is the header, so the first data row is row 2.
FIRST_DATA_ROW = 2


@dataclass(frozen=True)
class StudentRow:
    row_number: int
    full_name: str
    year_group: str


@dataclass(frozen=True)
class TeacherRow:
    row_number: int
    email: str
    full_name: str


@dataclass(frozen=True)
class ClassCardStudentRow:
    row_number: int
    name: str
    status: str
    current_year_group: str

    @property
    def is_active(self):
        return self.status.strip().lower() == 'active'

    def as_student_row(self):
        return StudentRow(row_number=self.row_number, full_name=self.name, year_group=self.current_year_group)


@dataclass(frozen=True)
class ClassCardStaffRow:
    row_number: int
    name: str
    role: str
    email: str

    @property
    def is_teacher(self):
        return self.role.strip().lower() == 'teacher'

    def as_teacher_row(self):
        return TeacherRow(row_number=self.row_number, email=self.email, full_name=self.name)


@dataclass(frozen=True)
class ClassCardScheduleRow:
    """One dated lesson from a class-card schedule export."""
    row_number: int
    day: str
    time: str
    class_title: str
    staff: str
    attendance_status: str
    date: str = ''
    class_subject: str = ''
    students: str = ''

    @property
    def is_marked(self):
        return self.attendance_status.strip().lower() == 'marked'

    @property
    def student_names(self):
        return [name.strip() for name in self.students.split(',') if name.strip()]


@dataclass(frozen=True)
class TaxonomyRow:
    row_number: int
    qualification: str
    exam_board: str
    subject: str
    topic: str = ''
    subtopic: str = ''


NAME_HEADERS = ('full name', 'fullname', 'name')

STUDENT_COLUMNS = {
    'full_name': NAME_HEADERS,
    'year_group': ('year group', 'yeargroup', 'year'),
}
TEACHER_COLUMNS = {
    'email': ('email',),
    'full_name': NAME_HEADERS,
}
CLASSCARD_STUDENT_COLUMNS = {
    'name': ('name', 'full name'),
    'status': ('status',),
    'current_year_group': ('current year group', 'year group'),
}
CLASSCARD_STAFF_COLUMNS = {
    'name': ('name', 'full name'),
    'role': ('role',),
    'email': ('email', 'email address'),
}
CLASSCARD_SCHEDULE_COLUMNS = {
    'day': ('day',),
    'time': ('time',),
    'class_title': ('class title', 'class'),
    'staff': ('staff', 'teacher'),
    'attendance_status': ('attendance status', 'attendance'),
}
CLASSCARD_SCHEDULE_OPTIONAL_COLUMNS = {
    'date': ('date',),
    'class_subject': ('class subject', 'subject'),
    'students': ('students',),
}
TAXONOMY_COLUMNS = {
    'qualification': ('qualification',),
    'exam_board': ('exam board',),
    'subject': ('subject',),
}
TAXONOMY_OPTIONAL_COLUMNS = {
    'topic': ('topic',),
    'subtopic': ('subtopic',),
}


def _is_blank(values):
    return not any(v.strip() for v in values)


def _read(text):
    """Split CSV text into a normalized header and numbered data rows.

    Blank lines are skipped and do not consume a row number.
    """
    reader = csv.reader(io.StringIO(text.lstrip('\ufeff')))
    header = None
    rows = []
    for values in reader:
        if _is_blank(values):
            continue
        if header is None:
            header = [h.strip().lower() for h in values]
            continue
        rows.append((FIRST_DATA_ROW + len(rows), values))
    return header, rows


def _locate(header, columns, error_message):
    positions = {}
    for field, spellings in columns.items():
        index = next((i for i, h in enumerate(header) if h in spellings), None)
        if index is None:
            raise CSVFormatError(error_message)
        positions[field] = index
    return positions


def _locate_optional(header, columns):
    positions = {}
    for field, spellings in columns.items():
        index = next((i for i, h in enumerate(header) if h in spellings), None)
        if index is not None:
            positions[field] = index
    return positions


def _cell(values, index):
    if index is None or index >= len(values):
        return ''
    return values[index].strip()


def _parse(text, row_type, columns, error_message, optional=None):
    header, rows = _read(text)
    if header is None:
        return []
    positions = _locate(header, columns, error_message)
    positions.update(_locate_optional(header, optional or {}))
    return [
        row_type(row_number=row_number, **{field: _cell(values, index) for field, index in positions.items()})
        for row_number, values in rows
    ]


def parse_student_csv(text):
    return _parse(
        text, StudentRow, STUDENT_COLUMNS,
        'CSV must contain columns: Full Name (or Name), Year Group (or Year)',
    )


def parse_teacher_csv(text):
    return _parse(
        text, TeacherRow, TEACHER_COLUMNS,
        'CSV must contain columns: Email, Full Name (or Name)',
    )


def parse_classcard_student_csv(text):
    return _parse(
        text, ClassCardStudentRow, CLASSCARD_STUDENT_COLUMNS,
        'CSV must contain columns: Name, Status, Current Year Group',
    )


def parse_classcard_staff_csv(text):
    return _parse(
        text, ClassCardStaffRow, CLASSCARD_STAFF_COLUMNS,
        'CSV must contain columns: Name, Role, Email',
    )


def parse_classcard_schedule_csv(text):
    return _parse(
        text, ClassCardScheduleRow, CLASSCARD_SCHEDULE_COLUMNS,
        'CSV must contain columns: Day, Time, Class Title, Staff, Attendance Status',
        optional=CLASSCARD_SCHEDULE_OPTIONAL_COLUMNS,
    )


def parse_taxonomy_csv(text):
    return _parse(
        text, TaxonomyRow, TAXONOMY_COLUMNS,
        'CSV must contain columns: Qualification, Exam Board, Subject',
        optional=TAXONOMY_OPTIONAL_COLUMNS,
    )
