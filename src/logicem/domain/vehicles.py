"""Campaign vehicle validation and bulk-paste parsing.

Plates follow the Colombian ``AAA123`` pattern; driver phones are ten
digits. Violations are collected per line rather than failing fast, so an
operator pasting a whole sheet sees every problem at once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

PLATE_PATTERN = re.compile(r"^[A-Z]{3}[0-9]{3}$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")


@dataclass(frozen=True)
class VehicleInput:
    """Plate, driver name, and phone as typed by the operator."""

    plate: str
    driver_name: str
    driver_phone: str


@dataclass(frozen=True)
class VehicleCheck:
    """Accepted vehicles plus any per-line errors."""

    vehicles: list[VehicleInput] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def check_vehicles(vehicles: list[VehicleInput]) -> VehicleCheck:
    """Validate format and uniqueness of every vehicle (1-based line numbers)."""
    accepted: list[VehicleInput] = []
    errors: list[str] = []
    seen: set[str] = set()
    for index, vehicle in enumerate(vehicles, start=1):
        if not vehicle.plate or not vehicle.driver_name or not vehicle.driver_phone:
            errors.append(f"Línea {index}: Faltan datos (necesita placa, nombre, celular)")
            continue
        if not PLATE_PATTERN.match(vehicle.plate):
            errors.append(f'Línea {index}: Placa "{vehicle.plate}" debe tener formato AAA123')
            continue
        if not PHONE_PATTERN.match(vehicle.driver_phone):
            errors.append(
                f'Línea {index}: Celular "{vehicle.driver_phone}" debe tener 10 dígitos'
            )
            continue
        if vehicle.plate in seen:
            errors.append(f'Línea {index}: Placa "{vehicle.plate}" está duplicada')
            continue
        seen.add(vehicle.plate)
        accepted.append(vehicle)
    return VehicleCheck(vehicles=accepted, errors=errors)


def parse_vehicle_lines(text: str) -> list[VehicleInput]:
    """Parse tab-separated ``plate<TAB>name<TAB>phone`` lines.

    Short lines become vehicles with empty fields so that
    :func:`check_vehicles` reports them with their line number.
    """
    vehicles: list[VehicleInput] = []
    for line in text.strip().splitlines():
        parts = [p.strip() for p in line.split("\t")]
        parts += [""] * (3 - len(parts))
        vehicles.append(VehicleInput(plate=parts[0], driver_name=parts[1], driver_phone=parts[2]))
    return vehicles
