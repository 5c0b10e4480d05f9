"""Per-segment carbon footprint calculation.

Factors are kg CO2e per kilometer. Road vehicles that carry a group
(car, van, bus) use per-vehicle factors and the result is shared among the
passengers; train and plane factors are already per passenger.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from travelprint.contracts.enums import FuelType, VehicleSize, VehicleType
from travelprint.contracts.segment import Segment

E = TypeVar("E", bound=Enum)

# Human-powered, always zero
ZERO_EMISSION = frozenset({VehicleType.WALKING, VehicleType.BICYCLE})

# Footprint is divided among passengers for these
SHARED_OCCUPANCY = frozenset({VehicleType.CAR, VehicleType.VAN, VehicleType.BUS})

# Road vehicles whose footprint scales with number_of_vehicles
MULTI_VEHICLE = frozenset(
    {VehicleType.MOTORCYCLE, VehicleType.CAR, VehicleType.VAN, VehicleType.BUS, VehicleType.TRUCK}
)

# Per passenger-km, fuel is irrelevant
FIXED_FACTORS: dict[VehicleType, float] = {
    VehicleType.TRAIN: 0.035,
    VehicleType.PLANE: 0.246,  # includes radiative forcing uplift
}

# Per vehicle-km, refined by fuel
FUEL_FACTORS: dict[VehicleType, dict[FuelType, float]] = {
    VehicleType.MOTORCYCLE: {
        FuelType.GASOLINE: 0.114,
        FuelType.HYBRID: 0.085,
        FuelType.ELECTRIC: 0.028,
    },
    VehicleType.CAR: {
        FuelType.GASOLINE: 0.170,
        FuelType.DIESEL: 0.171,
        FuelType.HYBRID: 0.120,
        FuelType.PLUGIN_HYBRID: 0.070,
        FuelType.ELECTRIC: 0.047,
    },
    VehicleType.BUS: {
        FuelType.DIESEL: 1.050,
        FuelType.GASOLINE: 1.100,
        FuelType.HYBRID: 0.800,
        FuelType.PLUGIN_HYBRID: 0.600,
        FuelType.ELECTRIC: 0.300,
    },
}

# Used when the fuel is missing, unknown, "other" or not in the table
AVERAGE_FUEL_FACTORS: dict[VehicleType, float] = {
    VehicleType.MOTORCYCLE: 0.114,
    VehicleType.CAR: 0.171,
    VehicleType.BUS: 1.050,
}

# Per vehicle-km for a diesel vehicle of each weight bracket
SIZE_FACTORS: dict[VehicleType, dict[VehicleSize, float]] = {
    VehicleType.VAN: {
        VehicleSize.UNDER_7_5T: 0.250,
        VehicleSize.FROM_7_5_TO_12T: 0.450,
    },
    VehicleType.TRUCK: {
        VehicleSize.UNDER_7_5T: 0.480,
        VehicleSize.FROM_7_5_TO_12T: 0.600,
        VehicleSize.FROM_20_TO_26T: 0.850,
        VehicleSize.FROM_34_TO_40T: 0.950,
        VehicleSize.FROM_50_TO_60T: 1.150,
    },
}

DEFAULT_SIZES: dict[VehicleType, VehicleSize] = {
    VehicleType.VAN: VehicleSize.UNDER_7_5T,
    VehicleType.TRUCK: VehicleSize.FROM_20_TO_26T,
}

# Applied on top of SIZE_FACTORS; anything missing counts as diesel
SIZE_FUEL_MULTIPLIERS: dict[FuelType, float] = {
    FuelType.GASOLINE: 1.05,
    FuelType.DIESEL: 1.00,
    FuelType.HYBRID: 0.75,
    FuelType.PLUGIN_HYBRID: 0.45,
    FuelType.ELECTRIC: 0.25,
}


def _coerce(enum_cls: type[E], value: object) -> E | None:
    """Map a raw stored value onto *enum_cls*, ``None`` when it doesn't fit."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def emission_factor(segment: Segment) -> float:
    """Return the kg CO2e/km factor for *segment*, 0 when it can't be resolved."""
    vehicle = _coerce(VehicleType, segment.vehicle_type)
    if vehicle is None or vehicle in ZERO_EMISSION:
        return 0.0

    if vehicle in FIXED_FACTORS:
        return FIXED_FACTORS[vehicle]

    fuel = _coerce(FuelType, segment.fuel_type)

    if vehicle in SIZE_FACTORS:
        size_value = segment.van_size if vehicle == VehicleType.VAN else segment.truck_size
        size = _coerce(VehicleSize, size_value)
        sizes = SIZE_FACTORS[vehicle]
        if size not in sizes:
            size = DEFAULT_SIZES[vehicle]
        return sizes[size] * SIZE_FUEL_MULTIPLIERS.get(fuel, 1.0)

    if vehicle in FUEL_FACTORS:
        return FUEL_FACTORS[vehicle].get(fuel, AVERAGE_FUEL_FACTORS[vehicle])

    # "other" has no factor
    return 0.0


def compute_footprint(segment: Segment) -> float:
    """Compute the kg CO2e attributed to one traveller for *segment*.

    1. factor x distance
    2. shared vehicles (car, van, bus): divided by ``max(passengers, 1)``
    3. road vehicles: multiplied by ``number_of_vehicles`` when > 1
    4. multiplied by ``frequency`` when > 1

    ``carbon_compensated`` is reported alongside, never subtracted. Missing
    distance or an unknown vehicle yields 0; this function never raises.
    """
    distance = segment.distance or 0.0
    if distance <= 0:
        return 0.0

    footprint = emission_factor(segment) * distance

    vehicle = _coerce(VehicleType, segment.vehicle_type)
    if vehicle in SHARED_OCCUPANCY:
        footprint /= max(segment.passengers or 1, 1)

    if vehicle in MULTI_VEHICLE and segment.number_of_vehicles and segment.number_of_vehicles > 1:
        footprint *= segment.number_of_vehicles

    if segment.frequency and segment.frequency > 1:
        footprint *= segment.frequency

    return round(max(footprint, 0.0), 4)
