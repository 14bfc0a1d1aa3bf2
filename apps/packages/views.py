"""API views for corporate packages."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.hotels.models import Hotel
from apps.users.permissions import CanBookPackages, is_chain_staff

from . import services
from .models import PackageBooking
from .serializers import (
    PackageBookingSerializer,
    PackageConfirmSerializer,
    PackageOptionsQuerySerializer,
    PackageValidateSerializer,
)


class PackageViewSet(viewsets.GenericViewSet):
    """Validación y confirmación de paquetes corporativos."""

    queryset = PackageBooking.objects.select_related("parent", "parent__hotel", "hotel")
    serializer_class = PackageBookingSerializer
    lookup_field = "package_code"
    permission_classes = [permissions.IsAuthenticated]

    def get_permissions(self):  # type: ignore
        if self.action in ("validate", "package_options"):
            return [permissions.AllowAny()]
        if self.action == "confirm":
            return [CanBookPackages()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if is_chain_staff(user):
            return qs
        if hasattr(user, "is_hotel_admin") and user.is_hotel_admin():
            return qs.filter(hotel_id=user.hotel_id)
        return qs.filter(user=user)

    def retrieve(self, request, package_code=None):  # type: ignore
        package = self.get_queryset().filter(package_code__iexact=package_code).first()
        if package is None:
            raise NotFound("Paquete no encontrado.")
        return Response(PackageBookingSerializer(package).data)

    @action(detail=False, methods=["get"], url_path="options", url_name="options")
    def package_options(self, request):  # type: ignore
        query = PackageOptionsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        hotel = Hotel.objects.filter(pk=query.validated_data["hotel"], is_active=True).first()
        if hotel is None:
            raise NotFound("Hotel no encontrado.")
        data = services.package_options(hotel, query.validated_data["start"], query.validated_data["end"])
        return Response(data)

    @action(detail=False, methods=["post"])
    def validate(self, request):  # type: ignore
        serializer = PackageValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validation = services.validate_package(serializer.to_request())
        return Response(validation.to_dict(), status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"])
    def confirm(self, request):  # type: ignore
        serializer = PackageConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        package = services.confirm_package(
            serializer.to_request(),
            contact=data["contact"],
            event_name=data["event_name"],
            event_type=data["event_type"],
            responsible_name=data["responsible_name"],
            responsible_phone=data["responsible_phone"],
            user=request.user,
            policies_accepted=data["policies_accepted"],
        )
        return Response(PackageBookingSerializer(package).data, status=status.HTTP_201_CREATED)
