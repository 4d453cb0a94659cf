"""Task categories, form mapping, and default priorities."""

from __future__ import annotations

from logicem.domain.lifecycle import TaskPriority

# Data-update form id -> task category.
FORM_CATEGORIES: dict[str, str] = {
    "vehicle-registration": "nuevo-vehiculo",
    "no-answer": "numeros-no-contestan",
    "no-logicem-interest": "no-interesado-logicem",
    "loading-restrictions": "restricciones-cargue",
    "referrals": "referidos",
}

CATEGORY_PRIORITIES: dict[str, TaskPriority] = {
    "nuevo-vehiculo": TaskPriority.BAJA,
    "numeros-no-contestan": TaskPriority.MEDIA,
    "no-interesado-logicem": TaskPriority.BAJA,
    "restricciones-cargue": TaskPriority.BAJA,
    "referidos": TaskPriority.MEDIA,
}

CATEGORY_LABELS: dict[str, str] = {
    "nuevo-vehiculo": "Nuevo Vehículo",
    "numeros-no-contestan": "Números que no Contestan",
    "no-interesado-logicem": "No Interesado Logicem",
    "restricciones-cargue": "Restricciones de Cargue",
    "referidos": "Referidos",
    "bloqueo-contacto": "Bloqueo de Contacto",
    "no-conductor": "No Conductor",
}


def category_for_form(form_id: str) -> str:
    """Resolve a form id to its task category (unmapped ids pass through)."""
    return FORM_CATEGORIES.get(form_id, form_id)


def priority_for_category(category: str) -> TaskPriority:
    """Default priority for a category; ``media`` when unmapped."""
    return CATEGORY_PRIORITIES.get(category, TaskPriority.MEDIA)
