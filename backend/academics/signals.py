from django.db.models.signals import pre_save
from django.dispatch import receiver


@receiver(pre_save, sender='academics.Student')
def copy_year_group_name(sender, instance, **kwargs):
    """Mirror the structured year group's name into school_year_group.
    Lists and exports read the free-text column when no YearGroup is linked.
    """
    if instance.year_group_id:
        instance.school_year_group = instance.year_group.name
