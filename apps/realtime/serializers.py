from rest_framework import serializers

from .services import DEFAULT_BROADCAST_EVENT


# =============================================================================
# Input Serializers
# =============================================================================

class ChangesQuerySerializer(serializers.Serializer):
    after_id = serializers.IntegerField(min_value=0, default=0, help_text='Last event ID already seen')
    limit = serializers.IntegerField(min_value=1, max_value=500, default=100)


class BroadcastSerializer(serializers.Serializer):
    event = serializers.SlugField(max_length=50, default=DEFAULT_BROADCAST_EVENT)
    payload = serializers.JSONField(required=False, default=dict)

    def validate_payload(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Payload must be an object')
        return value


# =============================================================================
# Response Serializers
# =============================================================================

class ChangeEventSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    channel = serializers.CharField()
    table = serializers.CharField(allow_blank=True)
    action = serializers.CharField()
    object_id = serializers.CharField(allow_blank=True)
    event = serializers.CharField(allow_blank=True)
    payload = serializers.JSONField()
    created_at = serializers.DateTimeField()


class RefreshHintSerializer(serializers.Serializer):
    topic = serializers.CharField()
    channel = serializers.CharField()
    count = serializers.IntegerField()
    burst = serializers.BooleanField()
    first_id = serializers.IntegerField()
    last_id = serializers.IntegerField()
    last_at = serializers.DateTimeField()


class ChangeFeedSerializer(serializers.Serializer):
    events = ChangeEventSerializer(many=True)
    hints = RefreshHintSerializer(many=True)
    last_id = serializers.IntegerField()
    has_more = serializers.BooleanField()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
