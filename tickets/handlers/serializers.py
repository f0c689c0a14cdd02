"""Serializers for request validation and domain model responses."""

from rest_framework import serializers

from tickets.services.credentials import MAX_PAYLOAD_LENGTH


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    owner = serializers.CharField()
    created_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    sold = serializers.IntegerField(source="sold.value")
    scanned = serializers.IntegerField(source="scanned.value")


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.CharField()
    token_id = serializers.CharField()
    event_id = serializers.CharField()
    address = serializers.CharField()
    purchased_at = serializers.DateTimeField()
    scanned = serializers.BooleanField()
    scanned_at = serializers.DateTimeField(allow_null=True)


class VerificationResultSerializer(serializers.Serializer):
    """Serializer for a gate verdict."""

    verdict = serializers.CharField(source="verdict.value")
    reason = serializers.SerializerMethodField()
    message = serializers.CharField()
    granted = serializers.BooleanField()
    address = serializers.CharField(allow_null=True)
    token_id = serializers.CharField(allow_null=True)
    event_id = serializers.CharField(allow_null=True)

    def get_reason(self, obj) -> str | None:
        return obj.reason.value if obj.reason else None


class CreateEventSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    expires_at = serializers.DateTimeField()
    owner = serializers.CharField(max_length=42)


class IssueTicketSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=42)


class VerifyRequestSerializer(serializers.Serializer):
    payload = serializers.CharField(
        trim_whitespace=False, allow_blank=True, max_length=MAX_PAYLOAD_LENGTH
    )
    event_id = serializers.CharField()
