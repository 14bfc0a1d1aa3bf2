"""Serializers for notification dispatches and incidents."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Incident, NotificationDispatch


class NotificationDispatchSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationDispatch
        fields = ["id", "kind", "recipient", "status", "attempts", "last_error", "created_at", "sent_at"]
        read_only_fields = fields


class IncidentSerializer(serializers.ModelSerializer):
    """Incidente asociado a una reserva."""

    reservation_code = serializers.ReadOnlyField(source="reservation.code")

    class Meta:
        model = Incident
        fields = [
            "id",
            "reservation",
            "reservation_code",
            "kind",
            "message",
            "is_resolved",
            "resolved_at",
            "created_at",
        ]
        read_only_fields = fields
