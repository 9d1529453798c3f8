from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction

from .exceptions import PersistenceError


def model_inserters(model):
    """Return ``(insert_many, insert_one)`` callables for ``import_in_chunks``.

    Each call runs in its own atomic block, so a failed chunk leaves nothing
    behind and does not poison the connection for the row-by-row retry.
    """
    def insert_many(records):
        try:
            with transaction.atomic():
                model.objects.bulk_create([model(**record) for record in records])
        except (DatabaseError, DjangoValidationError) as exc:
            raise PersistenceError(str(exc)) from exc

    def insert_one(record):
        try:
            with transaction.atomic():
                model.objects.create(**record)
        except (DatabaseError, DjangoValidationError) as exc:
            raise PersistenceError(str(exc)) from exc

    return insert_many, insert_one
