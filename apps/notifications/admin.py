"""Admin registrations for notifications."""

from __future__ import annotations

from django.contrib import admin

from .models import Incident, NotificationDispatch


@admin.register(NotificationDispatch)
class NotificationDispatchAdmin(admin.ModelAdmin):
    list_display = ("reservation", "kind", "recipient", "status", "attempts", "created_at", "sent_at")
    list_filter = ("kind", "status")
    search_fields = ("reservation__code", "recipient")


@admin.register(Incident)
class IncidentAdmin(admin.ModelAdmin):
    list_display = ("reservation", "kind", "is_resolved", "created_at")
    list_filter = ("kind", "is_resolved")
    search_fields = ("reservation__code", "message")
