"""App configuration for notifications."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class NotificationsConfig(AppConfig):
    name = "apps.notifications"
    label = "notifications"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self) -> None:
        from .handlers import register_handlers

        register_handlers()
