from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    class Roles(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        TEACHER = 'teacher', 'Teacher'

    role = models.CharField(max_length=20, choices=Roles.choices, default=Roles.TEACHER)
    full_name = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['-date_joined']

    @property
    def is_admin(self):
        return self.role == self.Roles.ADMIN or self.is_staff or self.is_superuser

    def __str__(self):
        return self.full_name or self.email or self.username
