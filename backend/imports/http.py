import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

from .exceptions import BulkImportError, CSVFormatError, StructuralValidationError

logger = logging.getLogger(__name__)


def read_csv_upload(request, field='file'):
    """Return the uploaded file under ``field`` as text, or None when nothing was sent."""
    upload = request.FILES.get(field)
    if not upload:
        return None
    try:
        return upload.read().decode('utf-8-sig')
    except UnicodeDecodeError as exc:
        raise CSVFormatError('File must be UTF-8 encoded CSV text') from exc


def run_import(request, pipeline, noun):
    """Shared request handling for the import endpoints.

    ``pipeline(text)`` returns an ``ImportOutcome``. Pre-flight failures map
    to 400; row-level failures are part of a 200 outcome payload.
    """
    try:
        text = read_csv_upload(request)
        if text is None:
            return Response({'detail': 'No file provided'}, status=status.HTTP_400_BAD_REQUEST)
        outcome = pipeline(text)
    except StructuralValidationError as exc:
        return Response({'errors': exc.errors}, status=status.HTTP_400_BAD_REQUEST)
    except BulkImportError as exc:
        return Response({'detail': str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    logger.info(
        "%s import by %s: %d created, %d errors",
        noun, request.user.pk, outcome.success_count, outcome.error_count,
    )
    return Response(outcome.to_payload(noun, limit=settings.IMPORT_MAX_REPORTED_ERRORS))
