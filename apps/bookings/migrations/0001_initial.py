from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hotels", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=32, unique=True)),
                ("value", models.PositiveIntegerField(default=0)),
            ],
            options={
                "verbose_name": "Secuencia de códigos",
                "verbose_name_plural": "Secuencias de códigos",
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(editable=False, max_length=16, unique=True)),
                (
                    "kind",
                    models.CharField(
                        choices=[("room", "Habitación"), ("hall", "Salón"), ("package", "Paquete corporativo")],
                        default="room",
                        max_length=10,
                    ),
                ),
                ("package_code", models.CharField(blank=True, db_index=True, max_length=16)),
                ("check_in", models.DateField()),
                ("check_out", models.DateField()),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("pending", "Pendiente"),
                            ("confirmed", "Confirmada"),
                            ("cancelled", "Cancelada"),
                            ("completed", "Completada"),
                        ],
                        default="confirmed",
                        max_length=16,
                    ),
                ),
                ("guest_first_name", models.CharField(max_length=100, verbose_name="Nombre")),
                ("guest_last_name", models.CharField(max_length=100, verbose_name="Apellido")),
                ("guest_email", models.EmailField(max_length=254, verbose_name="Email")),
                ("guest_phone", models.CharField(max_length=30, verbose_name="Teléfono")),
                ("guest_document", models.CharField(blank=True, max_length=30, verbose_name="Documento")),
                ("guest_country", models.CharField(default="Colombia", max_length=60, verbose_name="País")),
                ("guest_city", models.CharField(blank=True, max_length=100, verbose_name="Ciudad")),
                ("guests_count", models.PositiveIntegerField(default=1)),
                (
                    "units",
                    models.PositiveIntegerField(default=1, help_text="Noches para habitaciones, días para salones."),
                ),
                ("unit_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("currency", models.CharField(default="COP", max_length=3)),
                ("notes", models.TextField(blank=True)),
                ("event_name", models.CharField(blank=True, max_length=255)),
                ("event_type", models.CharField(blank=True, max_length=100)),
                ("event_start_time", models.TimeField(blank=True, null=True)),
                ("event_end_time", models.TimeField(blank=True, null=True)),
                ("policies_accepted_at", models.DateTimeField(blank=True, null=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("hotel_notes", models.TextField(blank=True, help_text="Notas del hotel al aprobar o rechazar.")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                ("penalty_percent", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("penalty_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("refund_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                (
                    "hours_before_checkin",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True),
                ),
                ("within_free_window", models.BooleanField(blank=True, null=True)),
                (
                    "version",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Se incrementa en cada modificación o cancelación.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "cancelled_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cancelled_reservations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "hall",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="hotels.hall",
                    ),
                ),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="hotels.hotel",
                    ),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        help_text="Reserva principal del paquete al que pertenece esta habitación.",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="children",
                        to="bookings.reservation",
                    ),
                ),
                (
                    "room",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="hotels.room",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reservations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Reserva",
                "verbose_name_plural": "Reservas",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["room", "check_in", "check_out"], name="reservation_room_dates_idx"),
                    models.Index(fields=["hall", "check_in", "check_out"], name="reservation_hall_dates_idx"),
                    models.Index(fields=["state"], name="reservation_state_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(check_out__gt=models.F("check_in")),
                        name="reservation_valid_dates",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(room__isnull=False, hall__isnull=True)
                            | models.Q(room__isnull=True, hall__isnull=False)
                        ),
                        name="reservation_single_resource",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DateChange",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("previous_check_in", models.DateField()),
                ("previous_check_out", models.DateField()),
                ("new_check_in", models.DateField()),
                ("new_check_out", models.DateField()),
                ("previous_total", models.DecimalField(decimal_places=2, max_digits=14)),
                ("new_total", models.DecimalField(decimal_places=2, max_digits=14)),
                ("changed_at", models.DateTimeField(auto_now_add=True)),
                (
                    "changed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "reservation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="date_changes",
                        to="bookings.reservation",
                    ),
                ),
            ],
            options={
                "verbose_name": "Cambio de fechas",
                "verbose_name_plural": "Cambios de fechas",
                "ordering": ["changed_at", "id"],
            },
        ),
    ]
