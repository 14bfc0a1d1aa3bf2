import datetime
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Hotel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="Nombre")),
                ("city", models.CharField(max_length=100, verbose_name="Ciudad")),
                ("address", models.CharField(blank=True, max_length=255, verbose_name="Dirección")),
                ("phone", models.CharField(blank=True, max_length=20, verbose_name="Teléfono")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                (
                    "check_in_time",
                    models.TimeField(
                        default=datetime.time(15, 0),
                        help_text="Hora a partir de la cual se cuenta el inicio de la estadía.",
                        verbose_name="Hora de check-in",
                    ),
                ),
                ("check_out_time", models.TimeField(default=datetime.time(12, 0), verbose_name="Hora de check-out")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Hotel",
                "verbose_name_plural": "Hoteles",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Hall",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150, verbose_name="Nombre")),
                (
                    "capacity",
                    models.PositiveIntegerField(
                        default=50,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Capacidad",
                    ),
                ),
                (
                    "daily_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("500000.00"),
                        max_digits=12,
                        verbose_name="Precio por día",
                    ),
                ),
                ("equipment", models.JSONField(blank=True, default=list, verbose_name="Equipamiento")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="halls",
                        to="hotels.hotel",
                    ),
                ),
            ],
            options={
                "verbose_name": "Salón",
                "verbose_name_plural": "Salones",
                "ordering": ["hotel", "name"],
                "constraints": [
                    models.UniqueConstraint(fields=("hotel", "name"), name="hall_unique_name_per_hotel"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.CharField(max_length=20, verbose_name="Número")),
                (
                    "room_type",
                    models.CharField(
                        db_index=True,
                        help_text="estandar, doble, suite, etc.",
                        max_length=50,
                        verbose_name="Tipo",
                    ),
                ),
                (
                    "capacity",
                    models.PositiveSmallIntegerField(
                        default=2,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Capacidad",
                    ),
                ),
                (
                    "nightly_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("100000.00"),
                        max_digits=12,
                        verbose_name="Precio por noche",
                    ),
                ),
                ("amenities", models.JSONField(blank=True, default=list, verbose_name="Servicios")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rooms",
                        to="hotels.hotel",
                    ),
                ),
            ],
            options={
                "verbose_name": "Habitación",
                "verbose_name_plural": "Habitaciones",
                "ordering": ["hotel", "number"],
                "indexes": [
                    models.Index(fields=["hotel", "room_type", "is_active"], name="room_hotel_type_active_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("hotel", "number"), name="room_unique_number_per_hotel"),
                ],
            },
        ),
    ]
