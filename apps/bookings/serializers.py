"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.notifications.serializers import IncidentSerializer, NotificationDispatchSerializer

from .availability import RESOURCE_HALL, RESOURCE_ROOM
from .models import DateChange, Reservation


class GuestSerializer(serializers.Serializer):
    """Datos de contacto del huésped."""

    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30)
    document = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    country = serializers.CharField(max_length=60, required=False, allow_blank=True, default="Colombia")
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class EventSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    type = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    start_time = serializers.TimeField(required=False, allow_null=True, default=None)
    end_time = serializers.TimeField(required=False, allow_null=True, default=None)


class TariffInputSerializer(serializers.Serializer):
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    tax = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    total = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)


class AvailabilityQuerySerializer(serializers.Serializer):
    resource_type = serializers.ChoiceField(choices=[RESOURCE_ROOM, RESOURCE_HALL])
    resource = serializers.IntegerField(min_value=1)
    start = serializers.DateField()
    end = serializers.DateField()


class ReservationCreateSerializer(serializers.Serializer):
    """Entrada para crear una reserva de habitación o salón."""

    resource_type = serializers.ChoiceField(choices=[RESOURCE_ROOM, RESOURCE_HALL])
    resource = serializers.IntegerField(min_value=1)
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests_count = serializers.IntegerField(min_value=1, default=1)
    guest = GuestSerializer()
    event = EventSerializer(required=False)
    tariff = TariffInputSerializer(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    policies_accepted = serializers.BooleanField(default=False)


class DateChangeSerializer(serializers.ModelSerializer):
    class Meta:
        model = DateChange
        fields = [
            "previous_check_in",
            "previous_check_out",
            "new_check_in",
            "new_check_out",
            "previous_total",
            "new_total",
            "changed_at",
        ]
        read_only_fields = fields


class ReservationSerializer(serializers.ModelSerializer):
    """Detalle de una reserva."""

    hotel_name = serializers.ReadOnlyField(source="hotel.name")
    resource_type = serializers.SerializerMethodField()
    resource_label = serializers.ReadOnlyField()
    guest = serializers.SerializerMethodField()
    tariff = serializers.SerializerMethodField()
    event = serializers.SerializerMethodField()
    cancellation = serializers.SerializerMethodField()
    date_changes = DateChangeSerializer(many=True, read_only=True)
    incidents = IncidentSerializer(many=True, read_only=True)
    notifications = NotificationDispatchSerializer(many=True, read_only=True)
    notification_warning = serializers.SerializerMethodField()

    class Meta:
        model = Reservation
        fields = [
            "id",
            "code",
            "kind",
            "state",
            "hotel",
            "hotel_name",
            "resource_type",
            "room",
            "hall",
            "resource_label",
            "check_in",
            "check_out",
            "guests_count",
            "guest",
            "tariff",
            "event",
            "notes",
            "package_code",
            "parent",
            "confirmed_at",
            "hotel_notes",
            "cancellation",
            "date_changes",
            "notifications",
            "incidents",
            "notification_warning",
            "version",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_resource_type(self, obj: Reservation) -> str:
        return RESOURCE_ROOM if obj.room_id else RESOURCE_HALL

    def get_guest(self, obj: Reservation) -> dict:
        return {
            "first_name": obj.guest_first_name,
            "last_name": obj.guest_last_name,
            "email": obj.guest_email,
            "phone": obj.guest_phone,
            "document": obj.guest_document,
            "country": obj.guest_country,
            "city": obj.guest_city,
        }

    def get_tariff(self, obj: Reservation) -> dict:
        return {
            "unit_price": obj.unit_price,
            "units": obj.units,
            "subtotal": obj.subtotal,
            "tax": obj.tax,
            "total": obj.total,
            "currency": obj.currency,
        }

    def get_event(self, obj: Reservation) -> dict | None:
        if not (obj.event_name or obj.event_start_time):
            return None
        return {
            "name": obj.event_name,
            "type": obj.event_type,
            "start_time": obj.event_start_time,
            "end_time": obj.event_end_time,
        }

    def get_cancellation(self, obj: Reservation) -> dict | None:
        if obj.cancelled_at is None:
            return None
        return {
            "cancelled_at": obj.cancelled_at,
            "reason": obj.cancellation_reason,
            "penalty_percent": obj.penalty_percent,
            "penalty": obj.penalty_amount,
            "refund": obj.refund_amount,
            "hours_before_checkin": obj.hours_before_checkin,
            "within_free_window": obj.within_free_window,
        }

    def get_notification_warning(self, obj: Reservation) -> str | None:
        if not any(not incident.is_resolved for incident in obj.incidents.all()):
            return None
        return "La reserva está registrada, pero no se pudo enviar la notificación por correo."


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    acknowledge_penalty = serializers.BooleanField(default=False)


class ModifyDatesSerializer(serializers.Serializer):
    new_start = serializers.DateField()
    new_end = serializers.DateField()


class ApproveSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
