"""API views for notification incidents."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import is_chain_staff

from .models import Incident, NotificationDispatch
from .serializers import IncidentSerializer, NotificationDispatchSerializer
from .services import schedule_notification


class IncidentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Incidents visible to chain staff and to the administrators of the hotel."""

    serializer_class = IncidentSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["kind", "is_resolved"]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = Incident.objects.select_related("reservation")
        if is_chain_staff(user):
            return qs
        if hasattr(user, "is_hotel_admin") and user.is_hotel_admin():
            return qs.filter(reservation__hotel_id=user.hotel_id)
        return qs.none()

    @action(detail=True, methods=["post"])
    def resolve(self, request, pk=None):  # type: ignore
        incident = self.get_object()
        incident.resolve()
        return Response(IncidentSerializer(incident).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"])
    def resend(self, request, pk=None):  # type: ignore
        """Queue the failed notice again; the incident closes once it is sent."""
        incident = self.get_object()
        kind = incident.dispatch.kind if incident.dispatch else NotificationDispatch.Kind.CONFIRMATION
        dispatch = schedule_notification(incident.reservation, kind)
        dispatch.refresh_from_db()
        if dispatch.status == NotificationDispatch.Status.SENT:
            incident.resolve()
        return Response(
            {
                "incident": IncidentSerializer(incident).data,
                "dispatch": NotificationDispatchSerializer(dispatch).data,
            },
            status=status.HTTP_202_ACCEPTED,
        )
