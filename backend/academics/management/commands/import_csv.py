from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

from accounts.importers import import_classcard_staff_csv, import_teacher_csv
from academics.services.schedule_import import import_classcard_schedule_csv
from academics.services.student_import import import_classcard_student_csv, import_student_csv
from imports.exceptions import BulkImportError, StructuralValidationError
from taxonomy.services import import_taxonomy_csv

User = get_user_model()

# kind -> (pipeline, noun, takes created_by)
PIPELINES = {
    'students': (import_student_csv, 'students', True),
    'classcard-students': (import_classcard_student_csv, 'students', True),
    'teachers': (import_teacher_csv, 'teachers', False),
    'classcard-staff': (import_classcard_staff_csv, 'teachers', False),
    'taxonomy': (import_taxonomy_csv, 'taxonomy entries', False),
    'classcard-schedule': (import_classcard_schedule_csv, 'classes', True),
}


class Command(BaseCommand):
    help = "Run one of the CSV bulk imports from a file on disk, as the admin screens do."

    def add_arguments(self, parser):
        parser.add_argument('kind', choices=sorted(PIPELINES), help='Which import to run')
        parser.add_argument('path', help='Path to the CSV file (UTF-8)')
        parser.add_argument(
            '--created-by', type=str, default=None,
            help='Email of the admin recorded as creator of imported students and classes',
        )

    def handle(self, *args, **options):
        pipeline, noun, takes_creator = PIPELINES[options['kind']]

        try:
            with open(options['path'], encoding='utf-8-sig') as fh:
                text = fh.read()
        except (OSError, UnicodeDecodeError) as e:
            raise CommandError(f"Cannot read {options['path']}: {e}")

        kwargs = {}
        if takes_creator and options['created_by']:
            creator = User.objects.filter(email__iexact=options['created_by']).first()
            if creator is None:
                raise CommandError(f"No user with email {options['created_by']}")
            kwargs['created_by'] = creator

        try:
            outcome = pipeline(text, **kwargs)
        except StructuralValidationError as e:
            for message in e.errors:
                self.stdout.write(self.style.ERROR(message))
            raise CommandError('Validation failed; nothing was imported')
        except BulkImportError as e:
            raise CommandError(str(e))

        payload = outcome.to_payload(noun)
        for message in payload['errors']:
            self.stdout.write(self.style.WARNING(message))
        style = self.style.SUCCESS if outcome.error_count == 0 else self.style.WARNING
        self.stdout.write(style(payload['message']))
