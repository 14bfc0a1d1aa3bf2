"""Admin registration for corporate packages."""

from __future__ import annotations

from django.contrib import admin

from .models import PackageBooking


@admin.register(PackageBooking)
class PackageBookingAdmin(admin.ModelAdmin):
    list_display = ("package_code", "hotel", "status", "attendees", "total", "created_at")
    list_filter = ("status", "hotel")
    search_fields = ("package_code", "responsible_name", "parent__code")
    readonly_fields = (
        "package_code",
        "parent",
        "failed_components",
        "hall_cost",
        "rooms_cost",
        "catering_cost",
        "total_before_discount",
        "discount_amount",
        "subtotal",
        "tax",
        "total",
        "created_at",
        "updated_at",
    )
