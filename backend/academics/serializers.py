from rest_framework import serializers
from django.contrib.auth import get_user_model
from .models import YearGroup, Department, Student, Class, ClassStudent, ClassSchedule, WorkRecord

User = get_user_model()


class YearGroupSerializer(serializers.ModelSerializer):
    class Meta:
        model = YearGroup
        fields = ['id', 'name', 'display_order']


class DepartmentSerializer(serializers.ModelSerializer):
    teacher_count = serializers.IntegerField(source='teachers.count', read_only=True)

    class Meta:
        model = Department
        fields = ['id', 'name', 'teacher_count']


class StudentSerializer(serializers.ModelSerializer):
    year_group_name = serializers.CharField(read_only=True)

    class Meta:
        model = Student
        fields = [
            'id', 'full_name', 'year_group', 'year_group_name', 'school_year_group',
            'parent_name', 'parent_email', 'parent_phone', 'created_at',
        ]
        read_only_fields = ['school_year_group', 'created_at']
        extra_kwargs = {
            'year_group': {'required': True, 'allow_null': False},
        }


class StudentLiteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = ['id', 'full_name', 'school_year_group']


class TeacherUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'full_name', 'email']


class DepartmentMemberSerializer(serializers.Serializer):
    user_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role='teacher'),
        error_messages={'required': 'User ID is required', 'null': 'User ID is required'},
    )


class ClassSerializer(serializers.ModelSerializer):
    teacher = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(role='teacher'))
    teacher_detail = TeacherUserSerializer(source='teacher', read_only=True)
    subject_name = serializers.CharField(source='subject.name', read_only=True, default=None)
    year_group_name = serializers.CharField(source='year_group.name', read_only=True, default=None)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    student_ids = serializers.PrimaryKeyRelatedField(
        queryset=Student.objects.all(), many=True, write_only=True, source='students', allow_empty=False,
    )
    students = StudentLiteSerializer(many=True, read_only=True)

    class Meta:
        model = Class
        fields = [
            'id', 'name', 'teacher', 'teacher_detail', 'subject', 'subject_name',
            'year_group', 'year_group_name', 'department', 'department_name', 'student_ids', 'students', 'created_at',
        ]
        read_only_fields = ['created_at']
        extra_kwargs = {
            'subject': {'required': True, 'allow_null': False},
        }

    def create(self, validated_data):
        students = validated_data.pop('students', [])
        klass = Class.objects.create(**validated_data)
        ClassStudent.objects.bulk_create([ClassStudent(klass=klass, student=s) for s in students])
        return klass

    def update(self, instance, validated_data):
        students = validated_data.pop('students', None)
        instance = super().update(instance, validated_data)
        if students is not None:
            instance.memberships.exclude(student__in=students).delete()
            existing = set(instance.memberships.values_list('student_id', flat=True))
            ClassStudent.objects.bulk_create(
                [ClassStudent(klass=instance, student=s) for s in students if s.id not in existing]
            )
        return instance


class ClassLiteSerializer(serializers.ModelSerializer):
    teacher_name = serializers.CharField(source='teacher.full_name', read_only=True, default=None)
    subject_name = serializers.CharField(source='subject.name', read_only=True, default=None)
    year_group_name = serializers.CharField(source='year_group.name', read_only=True, default=None)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    student_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Class
        fields = ['id', 'name', 'teacher', 'teacher_name', 'subject', 'subject_name', 'year_group', 'year_group_name', 'department', 'department_name', 'student_count', 'created_at']


TIME_FORMAT = {'format': '%H:%M', 'input_formats': ['%H:%M']}


class ClassScheduleSerializer(serializers.ModelSerializer):
    class_name = serializers.CharField(source='klass.name', read_only=True)
    start_time = serializers.TimeField(**TIME_FORMAT)
    end_time = serializers.TimeField(**TIME_FORMAT)

    class Meta:
        model = ClassSchedule
        fields = ['id', 'klass', 'class_name', 'day_of_week', 'start_time', 'end_time']
        read_only_fields = ['klass']

    def validate(self, attrs):
        start = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'end_time': 'End time must be after start time'})
        return attrs


class ScheduleSlotSerializer(serializers.Serializer):
    day_of_week = serializers.IntegerField(min_value=0, max_value=6)
    start_time = serializers.TimeField(**TIME_FORMAT)
    end_time = serializers.TimeField(**TIME_FORMAT)


class ScheduleReplaceSerializer(serializers.Serializer):
    """Body of the replace-all call: the class and its complete weekly timetable."""
    class_id = serializers.PrimaryKeyRelatedField(queryset=Class.objects.all())
    schedules = ScheduleSlotSerializer(many=True)


class ScheduleUpdateSerializer(ClassScheduleSerializer):
    teacher_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role='teacher'), required=False, write_only=True,
    )

    class Meta(ClassScheduleSerializer.Meta):
        fields = ClassScheduleSerializer.Meta.fields + ['teacher_id']

    def update(self, instance, validated_data):
        teacher = validated_data.pop('teacher_id', None)
        instance = super().update(instance, validated_data)
        if teacher is not None:
            instance.klass.teacher = teacher
            instance.klass.save(update_fields=['teacher'])
        return instance


class WorkRecordSerializer(serializers.ModelSerializer):
    class_name = serializers.CharField(source='klass.name', read_only=True)
    student_name = serializers.CharField(source='student.full_name', read_only=True)
    subject_name = serializers.CharField(source='subject.name', read_only=True)
    topic_name = serializers.CharField(source='topic.name', read_only=True, default=None)
    subtopic_name = serializers.CharField(source='subtopic.name', read_only=True, default=None)
    work_title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    marks_obtained = serializers.FloatField(min_value=0)
    total_marks = serializers.FloatField(min_value=1)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False, allow_null=True)

    class Meta:
        model = WorkRecord
        fields = [
            'id', 'klass', 'class_name', 'student', 'student_name', 'teacher', 'work_type', 'work_title',
            'qualification', 'exam_board', 'subject', 'subject_name', 'topic', 'topic_name',
            'subtopic', 'subtopic_name', 'assigned_date', 'due_date', 'marks_obtained', 'total_marks',
            'percentage', 'status', 'year', 'created_at', 'updated_at',
        ]
        read_only_fields = ['teacher', 'due_date', 'percentage', 'created_at', 'updated_at']
