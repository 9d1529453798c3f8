from django.db import models
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator

from .services.work_records import calculate_percentage


class YearGroup(models.Model):
    name = models.CharField(max_length=100, unique=True)
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['display_order', 'name']

    def __str__(self):
        return self.name


class Department(models.Model):
    name = models.CharField(max_length=150, unique=True)
    teachers = models.ManyToManyField(settings.AUTH_USER_MODEL, related_name='departments', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Student(models.Model):
    full_name = models.CharField(max_length=255)
    year_group = models.ForeignKey(YearGroup, on_delete=models.PROTECT, null=True, blank=True, related_name='students')
    # Free-text year group as written on import; kept when no YearGroup matched
    school_year_group = models.CharField(max_length=100, blank=True, default='')
    parent_name = models.CharField(max_length=255, blank=True, null=True)
    parent_email = models.EmailField(blank=True, null=True)
    parent_phone = models.CharField(max_length=50, blank=True, null=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='students_created')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    @property
    def year_group_name(self):
        if self.year_group_id:
            return self.year_group.name
        return self.school_year_group or 'N/A'

    def __str__(self):
        return self.full_name


class Class(models.Model):
    name = models.CharField(max_length=200)
    teacher = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='classes_taught')
    subject = models.ForeignKey('taxonomy.Subject', on_delete=models.SET_NULL, null=True, blank=True, related_name='classes')
    year_group = models.ForeignKey(YearGroup, on_delete=models.SET_NULL, null=True, blank=True, related_name='classes')
    department = models.ForeignKey(Department, on_delete=models.SET_NULL, null=True, blank=True, related_name='classes')
    students = models.ManyToManyField(Student, through='ClassStudent', related_name='classes', blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='classes_created')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'classes'

    def __str__(self):
        return self.name


class ClassStudent(models.Model):
    klass = models.ForeignKey(Class, on_delete=models.CASCADE, related_name='memberships')
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='memberships')
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('klass', 'student')

    def __str__(self):
        return f"{self.student} in {self.klass}"


class ClassSchedule(models.Model):
    DAY_CHOICES = (
        (0, 'Sunday'),
        (1, 'Monday'),
        (2, 'Tuesday'),
        (3, 'Wednesday'),
        (4, 'Thursday'),
        (5, 'Friday'),
        (6, 'Saturday'),
    )
    klass = models.ForeignKey(Class, on_delete=models.CASCADE, related_name='schedules')
    day_of_week = models.PositiveSmallIntegerField(choices=DAY_CHOICES, validators=[MinValueValidator(0), MaxValueValidator(6)])
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta:
        ordering = ['day_of_week', 'start_time']

    def __str__(self):
        return f"{self.klass} {self.get_day_of_week_display()} {self.start_time:%H:%M}-{self.end_time:%H:%M}"


class WorkRecord(models.Model):
    class WorkType(models.TextChoices):
        HOMEWORK = 'homework', 'Homework'
        CLASSWORK = 'classwork', 'Classwork'
        PAST_PAPER = 'past_paper', 'Past Paper'

    class Status(models.TextChoices):
        NOT_SUBMITTED = 'not_submitted', 'Not submitted'
        SUBMITTED = 'submitted', 'Submitted'
        RESIT = 'resit', 'Resit'
        RE_ASSIGNED = 're_assigned', 'Re-assigned'

    klass = models.ForeignKey(Class, on_delete=models.CASCADE, related_name='work_records')
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='work_records')
    teacher = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='work_records')
    work_type = models.CharField(max_length=20, choices=WorkType.choices)
    work_title = models.CharField(max_length=255)
    qualification = models.ForeignKey('taxonomy.Qualification', on_delete=models.PROTECT, related_name='work_records')
    exam_board = models.ForeignKey('taxonomy.ExamBoard', on_delete=models.PROTECT, related_name='work_records')
    subject = models.ForeignKey('taxonomy.Subject', on_delete=models.PROTECT, related_name='work_records')
    topic = models.ForeignKey('taxonomy.Topic', on_delete=models.SET_NULL, null=True, blank=True, related_name='work_records')
    subtopic = models.ForeignKey('taxonomy.Subtopic', on_delete=models.SET_NULL, null=True, blank=True, related_name='work_records')
    assigned_date = models.DateField()
    due_date = models.DateField()
    marks_obtained = models.FloatField(default=0)
    total_marks = models.FloatField()
    percentage = models.FloatField(default=0)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NOT_SUBMITTED)
    year = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-assigned_date', '-id']
        indexes = [
            models.Index(fields=['teacher', 'assigned_date'], name='academics_w_teacher_6a1f0e_idx'),
            models.Index(fields=['klass', 'student'], name='academics_w_klass_i_3c9b2d_idx'),
        ]

    def save(self, *args, **kwargs):
        self.percentage = calculate_percentage(self.marks_obtained, self.total_marks)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.student} - {self.work_title}"
