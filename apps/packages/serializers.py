"""Serializers for corporate packages."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.models import Reservation
from apps.bookings.serializers import GuestSerializer, ReservationSerializer

from .models import PackageBooking
from .services import PackageRequest, build_request


class RoomRequestSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=50)
    count = serializers.IntegerField(min_value=1)


class CateringRequestSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=50)
    guests = serializers.IntegerField(min_value=1)


class PackageValidateSerializer(serializers.Serializer):
    """Salón, habitaciones y catering solicitados para un rango de fechas."""

    hotel = serializers.IntegerField(min_value=1)
    hall = serializers.IntegerField(min_value=1)
    start = serializers.DateField()
    end = serializers.DateField()
    rooms = RoomRequestSerializer(many=True, required=False, default=list)
    catering = CateringRequestSerializer(required=False, allow_null=True, default=None)
    event_start_time = serializers.TimeField(required=False, allow_null=True, default=None)
    event_end_time = serializers.TimeField(required=False, allow_null=True, default=None)
    attendees = serializers.IntegerField(min_value=1, default=1)

    def to_request(self) -> PackageRequest:
        data = self.validated_data
        return build_request(
            hotel_id=data["hotel"],
            hall_id=data["hall"],
            start=data["start"],
            end=data["end"],
            rooms=data["rooms"],
            catering=data["catering"],
            event_start_time=data["event_start_time"],
            event_end_time=data["event_end_time"],
            attendees=data["attendees"],
        )


class PackageConfirmSerializer(PackageValidateSerializer):
    contact = GuestSerializer()
    event_name = serializers.CharField(max_length=255)
    event_type = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    responsible_name = serializers.CharField(max_length=150)
    responsible_phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    policies_accepted = serializers.BooleanField(default=False)


class PackageOptionsQuerySerializer(serializers.Serializer):
    hotel = serializers.IntegerField(min_value=1)
    start = serializers.DateField()
    end = serializers.DateField()


class PackageBookingSerializer(serializers.ModelSerializer):
    """Paquete corporativo con su reserva principal y sus habitaciones."""

    parent = ReservationSerializer(read_only=True)
    rooms = serializers.SerializerMethodField()
    pricing = serializers.SerializerMethodField()
    catering = serializers.SerializerMethodField()

    class Meta:
        model = PackageBooking
        fields = [
            "id",
            "package_code",
            "status",
            "hotel",
            "attendees",
            "responsible_name",
            "responsible_phone",
            "room_requests",
            "catering",
            "pricing",
            "parent",
            "rooms",
            "failed_components",
            "created_at",
        ]
        read_only_fields = fields

    def get_rooms(self, obj: PackageBooking) -> list[dict]:
        children = obj.parent.children.select_related("room").order_by("id")
        return [
            {
                "id": child.pk,
                "code": child.code,
                "room_id": child.room_id,
                "room_number": child.room.number,
                "type": child.room.room_type,
                "state": child.state,
            }
            for child in children
            if child.kind == Reservation.Kind.ROOM
        ]

    def get_pricing(self, obj: PackageBooking) -> dict:
        return {
            "hall_cost": obj.hall_cost,
            "rooms_cost": obj.rooms_cost,
            "catering_cost": obj.catering_cost,
            "total_before_discount": obj.total_before_discount,
            "discount_percent": obj.discount_percent,
            "discount": obj.discount_amount,
            "subtotal": obj.subtotal,
            "tax": obj.tax,
            "total": obj.total,
        }

    def get_catering(self, obj: PackageBooking) -> dict:
        if not obj.catering_type:
            return {"included": False}
        return {
            "included": True,
            "type": obj.catering_type,
            "guests": obj.catering_guests,
            "price_per_person": obj.catering_price_per_person,
        }
