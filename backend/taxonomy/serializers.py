from rest_framework import serializers
from .models import Qualification, ExamBoard, Subject, Topic, Subtopic


class QualificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Qualification
        fields = ['id', 'name', 'created_at']


class ExamBoardSerializer(serializers.ModelSerializer):
    qualification_name = serializers.CharField(source='qualification.name', read_only=True)

    class Meta:
        model = ExamBoard
        fields = ['id', 'name', 'qualification', 'qualification_name', 'created_at']


class SubjectSerializer(serializers.ModelSerializer):
    exam_board_name = serializers.CharField(source='exam_board.name', read_only=True)

    class Meta:
        model = Subject
        fields = ['id', 'name', 'exam_board', 'exam_board_name', 'created_at']


class TopicSerializer(serializers.ModelSerializer):
    subject_name = serializers.CharField(source='subject.name', read_only=True)

    class Meta:
        model = Topic
        fields = ['id', 'name', 'subject', 'subject_name', 'created_at']


class SubtopicSerializer(serializers.ModelSerializer):
    topic_name = serializers.CharField(source='topic.name', read_only=True)

    class Meta:
        model = Subtopic
        fields = ['id', 'name', 'topic', 'topic_name', 'created_at']
