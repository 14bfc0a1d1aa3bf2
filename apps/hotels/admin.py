"""Admin registrations for the hotel catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Hall, Hotel, Room


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ("number", "room_type", "capacity", "nightly_price", "is_active")


class HallInline(admin.TabularInline):
    model = Hall
    extra = 0
    fields = ("name", "capacity", "daily_price", "is_active")


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "check_in_time", "check_out_time", "is_active")
    list_filter = ("city", "is_active")
    search_fields = ("name", "city")
    inlines = [RoomInline, HallInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("number", "hotel", "room_type", "capacity", "nightly_price", "is_active")
    list_filter = ("hotel", "room_type", "is_active")
    search_fields = ("number", "hotel__name")


@admin.register(Hall)
class HallAdmin(admin.ModelAdmin):
    list_display = ("name", "hotel", "capacity", "daily_price", "is_active")
    list_filter = ("hotel", "is_active")
    search_fields = ("name", "hotel__name")
