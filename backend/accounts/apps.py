import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'

    def ready(self):
        # Create the first admin only AFTER migrations when DB is ready
        import os
        from django.contrib.auth import get_user_model
        from django.db.models.signals import post_migrate

        def ensure_superuser(sender, **kwargs):
            username = os.environ.get('DJANGO_SUPERUSER_USERNAME')
            email = os.environ.get('DJANGO_SUPERUSER_EMAIL')
            password = os.environ.get('DJANGO_SUPERUSER_PASSWORD')

            if not all([username, email, password]):
                return

            User = get_user_model()
            if User.objects.filter(username=username).exists():
                return
            User.objects.create_superuser(username=username, email=email, password=password, role=User.Roles.ADMIN)
            logger.info("Superuser '%s' created after migrations.", username)

        post_migrate.connect(ensure_superuser, sender=self)
