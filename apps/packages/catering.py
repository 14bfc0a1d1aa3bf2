"""Catering menu offered with corporate packages."""

from __future__ import annotations

from decimal import Decimal

CATERING_OPTIONS: dict[str, dict] = {
    "coffee_break": {
        "name": "Coffee Break",
        "description": "Café, té, jugos, pasabocas dulces y salados",
        "price_per_person": Decimal("15000"),
        "duration": "30 minutos",
    },
    "desayuno_ejecutivo": {
        "name": "Desayuno Ejecutivo",
        "description": "Desayuno completo buffet con frutas, jugos, café, pan, huevos",
        "price_per_person": Decimal("25000"),
        "duration": "1 hora",
    },
    "almuerzo_corporativo": {
        "name": "Almuerzo Corporativo",
        "description": "Menú de 3 tiempos: entrada, plato fuerte, postre y bebida",
        "price_per_person": Decimal("45000"),
        "duration": "1.5 horas",
    },
    "cena_gala": {
        "name": "Cena de Gala",
        "description": "Menú premium de 4 tiempos con vino",
        "price_per_person": Decimal("85000"),
        "duration": "2 horas",
    },
    "dia_completo": {
        "name": "Paquete Día Completo",
        "description": "Coffee Break AM + Almuerzo + Coffee Break PM",
        "price_per_person": Decimal("75000"),
        "duration": "Todo el día",
    },
}


def catering_menu() -> list[dict]:
    return [{"type": key, **option} for key, option in CATERING_OPTIONS.items()]


def price_per_person(catering_type: str) -> Decimal:
    return CATERING_OPTIONS[catering_type]["price_per_person"]
