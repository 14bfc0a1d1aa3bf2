"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import CodeSequence, DateChange, Reservation


class DateChangeInline(admin.TabularInline):
    model = DateChange
    extra = 0
    can_delete = False
    readonly_fields = (
        "previous_check_in",
        "previous_check_out",
        "new_check_in",
        "new_check_out",
        "previous_total",
        "new_total",
        "changed_by",
        "changed_at",
    )


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "kind",
        "hotel",
        "room",
        "hall",
        "state",
        "check_in",
        "check_out",
        "total",
        "package_code",
        "created_at",
    )
    list_filter = ("state", "kind", "hotel", "check_in")
    search_fields = ("code", "package_code", "guest_email", "guest_last_name")
    readonly_fields = (
        "code",
        "version",
        "created_at",
        "updated_at",
        "subtotal",
        "tax",
        "total",
        "penalty_amount",
        "refund_amount",
    )
    inlines = [DateChangeInline]

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(CodeSequence)
class CodeSequenceAdmin(admin.ModelAdmin):
    list_display = ("key", "value")
    search_fields = ("key",)
