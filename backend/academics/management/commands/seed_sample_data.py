from datetime import timedelta
import random

from django.conf import settings
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from faker import Faker

from academics.models import YearGroup, Student, Class, ClassStudent, ClassSchedule, WorkRecord
from academics.services.work_records import apply_derived_fields
from taxonomy.models import Qualification, ExamBoard, Subject, Topic, Subtopic

User = get_user_model()

YEAR_GROUPS = ['Year 7', 'Year 8', 'Year 9', 'Year 10', 'Year 11', 'Year 12', 'Year 13']

# qualification -> exam board -> subject -> topics
TAXONOMY = {
    'GCSE': {
        'AQA': {
            'Chemistry': ['Atomic Structure', 'Bonding', 'Quantitative Chemistry'],
            'Mathematics': ['Algebra', 'Geometry', 'Statistics'],
        },
    },
    'A Level': {
        'OCR': {
            'Biology': ['Cell Structure', 'Genetics'],
            'Physics': ['Mechanics', 'Electricity'],
        },
    },
}
SUBTOPICS = ['Part 1', 'Part 2']
TOTAL_MARKS = [50, 60, 75, 100, 80]


class Command(BaseCommand):
    help = "Seed year groups, taxonomy, teachers, students, classes, schedules and work records for a demo."

    def add_arguments(self, parser):
        parser.add_argument('--teachers', type=int, default=4, help='Number of teachers to create (default: 4)')
        parser.add_argument('--students-per-class', type=int, default=8, help='Students per class (default: 8)')
        parser.add_argument('--records-per-student', type=int, default=3, help='Work records per student per class (default: 3)')
        parser.add_argument('--seed', type=int, default=42, help='Random seed')

    @transaction.atomic
    def handle(self, *args, **options):
        fake = Faker('en_GB')
        Faker.seed(options['seed'])
        random.seed(options['seed'])

        year_groups = []
        for order, name in enumerate(YEAR_GROUPS):
            yg, _ = YearGroup.objects.get_or_create(name=name, defaults={'display_order': order})
            year_groups.append(yg)
        self.stdout.write(self.style.NOTICE(f"Year groups ready: {len(year_groups)}"))

        subjects = []
        for qual_name, boards in TAXONOMY.items():
            qual, _ = Qualification.objects.get_or_create(name=qual_name)
            for board_name, subject_map in boards.items():
                board, _ = ExamBoard.objects.get_or_create(qualification=qual, name=board_name)
                for subject_name, topic_names in subject_map.items():
                    subject, _ = Subject.objects.get_or_create(exam_board=board, name=subject_name)
                    for topic_name in topic_names:
                        topic, _ = Topic.objects.get_or_create(subject=subject, name=topic_name)
                        for sub in SUBTOPICS:
                            Subtopic.objects.get_or_create(topic=topic, name=f"{topic_name} {sub}")
                    subjects.append(subject)
        self.stdout.write(self.style.NOTICE(f"Taxonomy ready: {len(subjects)} subjects"))

        teachers = []
        for _ in range(options['teachers']):
            full_name = fake.name()
            email = f"{full_name.lower().replace(' ', '.').replace(chr(39), '')}.{fake.unique.random_int(100, 999)}@school.test"
            teachers.append(User.objects.create_user(
                username=email, email=email, password=settings.DEFAULT_TEACHER_PASSWORD,
                full_name=full_name, role=User.Roles.TEACHER,
            ))
        self.stdout.write(self.style.SUCCESS(f"Created {len(teachers)} teachers (password: {settings.DEFAULT_TEACHER_PASSWORD})"))

        today = timezone.localdate()
        classes = records = students_created = 0
        for idx, subject in enumerate(subjects):
            if not teachers:
                break
            teacher = teachers[idx % len(teachers)]
            year_group = year_groups[3 + idx % 4]
            klass = Class.objects.create(
                name=f"{subject.name} - {year_group.name}", teacher=teacher, subject=subject, year_group=year_group,
            )
            classes += 1
            ClassSchedule.objects.create(
                klass=klass, day_of_week=1 + idx % 5,
                start_time=f"{9 + idx % 6:02d}:00", end_time=f"{10 + idx % 6:02d}:00",
            )

            topics = list(Topic.objects.filter(subject=subject).prefetch_related('subtopics'))
            for _ in range(options['students_per_class']):
                student = Student.objects.create(full_name=fake.name(), year_group=year_group)
                students_created += 1
                ClassStudent.objects.create(klass=klass, student=student)

                for i in range(options['records_per_student']):
                    work_type = random.choice(WorkRecord.WorkType.values)
                    total = TOTAL_MARKS[i % len(TOTAL_MARKS)]
                    topic = random.choice(topics) if topics else None
                    subtopics = list(topic.subtopics.all()) if topic else []
                    data = {
                        'work_type': work_type,
                        'assigned_date': today - timedelta(days=random.randint(0, 45)),
                        'marks_obtained': random.randint(0, total),
                        'total_marks': total,
                        'topic': topic,
                        'subtopic': random.choice(subtopics) if subtopics else None,
                    }
                    data.update(apply_derived_fields(data))
                    WorkRecord.objects.create(
                        klass=klass, student=student, teacher=teacher,
                        qualification=subject.exam_board.qualification, exam_board=subject.exam_board,
                        subject=subject, year=today.year, **data,
                    )
                    records += 1

        self.stdout.write(self.style.SUCCESS(
            f"Done. Classes: {classes}; Students: {students_created}; Work records: {records}"
        ))
