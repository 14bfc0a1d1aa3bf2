"""FilterSet definitions for reservation listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Reservation


class ReservationFilterSet(django_filters.FilterSet):
    code = django_filters.CharFilter(field_name="code", lookup_expr="iexact")
    package_code = django_filters.CharFilter(field_name="package_code", lookup_expr="iexact")
    check_in_from = django_filters.DateFilter(field_name="check_in", lookup_expr="gte")
    check_in_to = django_filters.DateFilter(field_name="check_in", lookup_expr="lte")

    class Meta:
        model = Reservation
        fields = ["state", "kind", "hotel", "room", "hall", "code", "package_code"]
