from decimal import Decimal

import django.core.serializers.json
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        ("hotels", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PackageBooking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("package_code", models.CharField(max_length=16, unique=True)),
                ("room_requests", models.JSONField(default=list, help_text="[{type, count}] solicitado.")),
                ("attendees", models.PositiveIntegerField(default=1)),
                ("responsible_name", models.CharField(max_length=150)),
                ("responsible_phone", models.CharField(blank=True, max_length=30)),
                ("catering_type", models.CharField(blank=True, max_length=50)),
                ("catering_guests", models.PositiveIntegerField(default=0)),
                (
                    "catering_price_per_person",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                ("hall_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("rooms_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("catering_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                (
                    "total_before_discount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                ("discount_percent", models.PositiveSmallIntegerField(default=10)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[("complete", "Completo"), ("partial", "Parcial")],
                        default="complete",
                        max_length=16,
                    ),
                ),
                ("failed_components", models.JSONField(blank=True, default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="packages",
                        to="hotels.hotel",
                    ),
                ),
                (
                    "parent",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="package",
                        to="bookings.reservation",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="packages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Paquete corporativo",
                "verbose_name_plural": "Paquetes corporativos",
                "ordering": ["-created_at"],
            },
        ),
    ]
