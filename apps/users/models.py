"""User domain models for HotelesCO.

La plataforma distingue cuatro roles: cliente, empresa (clientes
corporativos que reservan paquetes), administrador de hotel y
administrador central de la cadena. Los administradores de hotel están
vinculados al hotel que gestionan.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Formato de teléfono inválido. Use el formato internacional sin espacios."),
)


class CustomUserManager(BaseUserManager):
    """Gestor de usuarios que usa el email como login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("El email es obligatorio para crear un usuario.")
        email = self.normalize_email(email)

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = self.normalize_phone(phone)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.CLIENT)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.CENTRAL_ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("El superusuario debe tener is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("El superusuario debe tener is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Quita espacios y guiones para almacenar el teléfono de forma uniforme."""
        return phone.replace(" ", "").replace("-", "")


class CustomUser(AbstractUser):
    """Usuario de la plataforma con rol y hotel asignado."""

    class RoleChoices(models.TextChoices):
        CLIENT = "client", _("Cliente")
        COMPANY = "company", _("Empresa")
        HOTEL_ADMIN = "hotel_admin", _("Administrador de hotel")
        CENTRAL_ADMIN = "central_admin", _("Administrador central")

    username = models.CharField(
        _("Nombre visible"),
        max_length=150,
        blank=True,
    )
    email = models.EmailField(_("Email"), unique=True)
    phone = models.CharField(
        _("Teléfono"),
        max_length=20,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    role = models.CharField(
        _("Rol"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.CLIENT,
    )
    company_name = models.CharField(_("Empresa"), max_length=255, blank=True)
    hotel = models.ForeignKey(
        "hotels.Hotel",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="administrators",
        help_text=_("Hotel gestionado por un administrador de hotel."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        verbose_name = _("Usuario")
        verbose_name_plural = _("Usuarios")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    def is_hotel_admin(self) -> bool:
        return self.role == self.RoleChoices.HOTEL_ADMIN

    def is_central_admin(self) -> bool:
        return self.role == self.RoleChoices.CENTRAL_ADMIN or self.is_superuser

    def manages_hotel(self, hotel_id) -> bool:
        if self.is_central_admin():
            return True
        return self.is_hotel_admin() and self.hotel_id == hotel_id


User = CustomUser
