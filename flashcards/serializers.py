from rest_framework import serializers


class FlashcardRequestSerializer(serializers.Serializer):
    noteContent = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    noteId = serializers.IntegerField(required=False)

    def validate(self, attrs):
        if not attrs.get("noteContent") and attrs.get("noteId") is None:
            raise serializers.ValidationError("noteContent is required and must be a string")
        return attrs

    def to_internal_value(self, data):
        if hasattr(data, "get") and "noteContent" in data and not isinstance(data.get("noteContent"), str):
            # CharField would coerce numbers to text
            raise serializers.ValidationError({"non_field_errors": ["noteContent is required and must be a string"]})
        return super().to_internal_value(data)


class AskQuestionSerializer(serializers.Serializer):
    noteId = serializers.IntegerField()
    question = serializers.CharField(max_length=2000)


class FlashcardSerializer(serializers.Serializer):
    question = serializers.CharField()
    answer = serializers.CharField()
