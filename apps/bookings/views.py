"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsHotelManager, IsReservationStakeholder, is_chain_staff

from . import services
from .availability import get_resource, is_available
from .domain.tariff import Tariff, TariffError
from .exceptions import ReservationValidationError
from .filters import ReservationFilterSet
from .models import Reservation
from .serializers import (
    ApproveSerializer,
    AvailabilityQuerySerializer,
    CancelSerializer,
    ModifyDatesSerializer,
    RejectSerializer,
    ReservationCreateSerializer,
    ReservationSerializer,
)


class AvailabilityView(APIView):
    """Consulta pública de disponibilidad de una habitación o salón."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        resource = get_resource(data["resource_type"], data["resource"])
        result = is_available(resource, data["start"], data["end"])
        return Response(
            {
                "available": result.available,
                "resource_type": data["resource_type"],
                "resource": resource.pk,
                "start": data["start"],
                "end": data["end"],
                "conflicts": [reservation.conflict_summary() for reservation in result.conflicts],
            }
        )


class ReservationViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Creación, consulta, cambio de fechas y cancelación de reservas."""

    queryset = Reservation.objects.select_related("hotel", "room", "hall").prefetch_related(
        "incidents", "notifications", "date_changes"
    )
    serializer_class = ReservationSerializer
    filterset_class = ReservationFilterSet
    permission_classes = [permissions.IsAuthenticated, IsReservationStakeholder]

    def get_permissions(self):  # type: ignore
        if self.action in ("create", "by_code"):
            return [permissions.AllowAny()]
        if self.action in ("approve", "reject"):
            return [IsHotelManager()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReservationCreateSerializer
        return ReservationSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if is_chain_staff(user):
            return qs
        if hasattr(user, "is_hotel_admin") and user.is_hotel_admin():
            return qs.filter(hotel_id=user.hotel_id)
        return qs.filter(user=user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        resource = get_resource(data["resource_type"], data["resource"])

        tariff = None
        if data.get("tariff"):
            try:
                tariff = Tariff.from_amounts(units=(data["check_out"] - data["check_in"]).days, **data["tariff"])
            except TariffError as exc:
                raise ReservationValidationError(str(exc), code="invalid_tariff")

        event = None
        if data.get("event"):
            event_data = data["event"]
            event = services.EventInfo(
                name=event_data["name"],
                type=event_data["type"],
                start_time=event_data["start_time"],
                end_time=event_data["end_time"],
            )

        reservation = services.confirm_reservation(
            resource,
            data["check_in"],
            data["check_out"],
            data["guest"],
            user=request.user,
            guests_count=data["guests_count"],
            tariff=tariff,
            event=event,
            notes=data["notes"],
            policies_accepted=data["policies_accepted"],
        )
        reservation = self._reload(reservation.pk)
        read_serializer = ReservationSerializer(reservation, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def _reload(self, pk: int) -> Reservation:
        return Reservation.objects.select_related("hotel", "room", "hall").prefetch_related(
            "incidents", "notifications", "date_changes"
        ).get(pk=pk)

    @action(detail=False, methods=["get"], url_path=r"by-code/(?P<code>[A-Za-z0-9]+)")
    def by_code(self, request, code=None):  # type: ignore
        """
        Lookup by reservation code.

        Anonymous callers must also pass the guest email used to book.
        """
        reservation = self.queryset.filter(code__iexact=code).first()
        if reservation is None:
            raise NotFound("Reserva no encontrada.")
        user = request.user
        allowed = False
        if user.is_authenticated:
            allowed = IsReservationStakeholder().has_object_permission(request, self, reservation)
        if not allowed:
            email = request.query_params.get("email", "")
            allowed = bool(email) and email.strip().lower() == reservation.guest_email.lower()
        if not allowed:
            raise NotFound("Reserva no encontrada.")
        return Response(ReservationSerializer(reservation, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["put"])
    def cancel(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = CancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quote = services.cancel_reservation(
            reservation,
            reason=serializer.validated_data["reason"],
            acknowledge_penalty=serializer.validated_data["acknowledge_penalty"],
            cancelled_by=request.user,
        )
        reservation = self._reload(reservation.pk)
        return Response(
            {
                "code": reservation.code,
                "state": reservation.state,
                "penalty": quote.penalty_amount,
                "refund": quote.refund_amount,
                "penalty_percent": quote.penalty_percent,
                "hours_until_checkin": quote.hours_until_checkin,
                "within_free_window": quote.within_free_window,
                "reservation": ReservationSerializer(reservation, context=self.get_serializer_context()).data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["get"], url_path="cancellation-policy")
    def cancellation_policy(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        quote = services.quote_cancellation(reservation)
        data = quote.to_dict()
        data["total"] = reservation.total
        data["checkin_at"] = reservation.checkin_at
        data["requires_acknowledgement"] = quote.allowed and quote.penalty_amount > 0
        return Response(data)

    @action(detail=True, methods=["put"])
    def dates(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = ModifyDatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        previous_total = reservation.total
        reservation = services.modify_dates(
            reservation,
            serializer.validated_data["new_start"],
            serializer.validated_data["new_end"],
            changed_by=request.user,
        )
        reservation = self._reload(reservation.pk)
        data = ReservationSerializer(reservation, context=self.get_serializer_context()).data
        data["price_difference"] = reservation.total - previous_total
        return Response(data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="modification-policy")
    def modification_policy(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        return Response(services.can_modify(reservation).to_dict())

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        """Confirm a pending reservation (hotel administrators and chain staff)."""
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = ApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = services.approve_reservation(
            reservation,
            notes=serializer.validated_data["notes"],
            approved_by=request.user,
        )
        reservation = self._reload(reservation.pk)
        return Response(ReservationSerializer(reservation, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        """Reject a pending reservation; nothing is charged."""
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = services.reject_reservation(
            reservation,
            reason=serializer.validated_data["reason"],
            notes=serializer.validated_data["notes"],
            rejected_by=request.user,
        )
        reservation = self._reload(reservation.pk)
        return Response(ReservationSerializer(reservation, context=self.get_serializer_context()).data)
