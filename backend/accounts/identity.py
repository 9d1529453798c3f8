"""Account provisioning.

Creating a login account goes through an identity provider, selected with the
``IDENTITY_PROVIDER`` setting. The default provider keeps accounts in
Django's own user table; a hosted auth service can be swapped in with a class
exposing the same two methods.
"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.utils.module_loading import import_string

from imports.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class IdentityProviderError(PersistenceError):
    pass


class DjangoIdentityProvider:
    def create_user(self, email, full_name, role, password):
        User = get_user_model()
        email = email.strip().lower()
        if User.objects.filter(username__iexact=email).exists():
            raise IdentityProviderError('A user with this email address has already been registered')
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    full_name=full_name,
                    role=role,
                )
        except (DatabaseError, DjangoValidationError) as e:
            raise IdentityProviderError(str(e)) from e
        logger.info("Created %s account %s", role, email)
        return user

    def delete_user(self, user_id):
        User = get_user_model()
        deleted, _ = User.objects.filter(pk=user_id).delete()
        if not deleted:
            raise IdentityProviderError('User not found')


def get_identity_provider():
    return import_string(settings.IDENTITY_PROVIDER)()
