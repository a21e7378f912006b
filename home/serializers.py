import os
from rest_framework import serializers
from .models import Note
from .reactions import disliked_by, liked_by

ALLOWED_NOTE_EXTENSIONS = ('.pdf', '.docx')


# Note serializer; keeps the field names the front end already reads
class NoteSerializer(serializers.ModelSerializer):
    _id = serializers.CharField(source='pk', read_only=True)
    uploaderUid = serializers.CharField(source='uploader_uid', read_only=True)
    fileUrl = serializers.CharField(source='file_url', read_only=True)
    likedBy = serializers.SerializerMethodField()
    dislikedBy = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Note
        fields = [
            '_id', 'title', 'filename', 'uploader', 'uploaderUid', 'fileUrl',
            'year', 'semester', 'subject', 'description',
            'likes', 'dislikes', 'likedBy', 'dislikedBy', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields

    def get_likedBy(self, obj):
        return liked_by(obj)

    def get_dislikedBy(self, obj):
        return disliked_by(obj)


class NoteUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    title = serializers.CharField(max_length=255)
    year = serializers.CharField(max_length=50)
    semester = serializers.CharField(max_length=50)
    subject = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_file(self, value):
        ext = os.path.splitext(value.name)[1].lower()
        if ext not in ALLOWED_NOTE_EXTENSIONS:
            raise serializers.ValidationError("Only PDF and DOCX notes can be uploaded.")
        return value


# Owner edits; only the fields present in the request are changed
class NoteUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Note
        fields = ['title', 'filename', 'year', 'semester', 'subject', 'description']
        extra_kwargs = {
            'description': {'allow_blank': True},
        }


class NoteBrowseSerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1)
    q = serializers.CharField(required=False, allow_blank=True)
    year = serializers.CharField(required=False)
    semester = serializers.CharField(required=False)
    subject = serializers.CharField(required=False)
    uploader = serializers.CharField(required=False)
