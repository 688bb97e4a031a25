"""
Carbon footprint calculator.

Pure functions converting a logged quantity into kg CO2e using the fixed
factor tables in `ecosphere.categories`. None of these raise for domain
input: unknown types count as zero emissions and non-positive quantities
are plain arithmetic. Rejecting bad input is the logging flow's job.
"""
import math
from dataclasses import dataclass
from typing import Optional

from ecosphere.categories import (
    ActivityCategory,
    EnergyType,
    FoodType,
    TransportType,
    WasteType,
    DEFAULT_SUBTYPES,
    ENERGY_FACTORS,
    FOOD_FACTORS,
    OTHER_FACTOR,
    TRANSPORT_FACTORS,
    WASTE_FACTORS,
    parse_category,
    parse_subtype,
)

# Global average footprint is ~4 t CO2e per person per year
GLOBAL_AVERAGE_ANNUAL_KG = 4000.0
GLOBAL_AVERAGE_DAILY_KG = GLOBAL_AVERAGE_ANNUAL_KG / 365


@dataclass(frozen=True)
class GlobalComparison:
    """Result of comparing a daily footprint with the global average."""
    comparison_label: str
    percentage: int
    recommendation: str


def _round_half_up(x: float) -> int:
    if not math.isfinite(x):
        return x
    return math.floor(x + 0.5)


def _factor(table: dict, enum_cls, type_) -> float:
    try:
        return table.get(enum_cls(type_), 0.0)
    except ValueError:
        return 0.0


def emissions_for_transport(distance_km: float, type_: TransportType) -> float:
    """
    Calculate transport emissions.

    Args:
        distance_km: Distance travelled in kilometres
        type_: Vehicle type

    Returns:
        Emissions in kg CO2e
    """
    return distance_km * _factor(TRANSPORT_FACTORS, TransportType, type_)


def emissions_for_energy(consumption: float, type_: EnergyType) -> float:
    """Calculate energy emissions for a consumption in kWh, m3 or litres."""
    return consumption * _factor(ENERGY_FACTORS, EnergyType, type_)


def emissions_for_food(weight_kg: float, type_: FoodType) -> float:
    """Calculate food emissions for a weight in kilograms."""
    return weight_kg * _factor(FOOD_FACTORS, FoodType, type_)


def emissions_for_waste(weight_kg: float, type_: WasteType) -> float:
    """Calculate waste emissions for a weight in kilograms."""
    return weight_kg * _factor(WASTE_FACTORS, WasteType, type_)


_CATEGORY_FUNCTIONS = {
    ActivityCategory.TRANSPORT: emissions_for_transport,
    ActivityCategory.ENERGY: emissions_for_energy,
    ActivityCategory.FOOD: emissions_for_food,
    ActivityCategory.WASTE: emissions_for_waste,
}


def calculate_carbon_footprint(
    category: ActivityCategory,
    value: float,
    subtype: Optional[str] = None,
) -> float:
    """
    Calculate the footprint of an activity from its category and quantity.

    Args:
        category: Activity category (member or string value)
        value: Quantity in the category's unit
        subtype: Sub-type within the category; missing or unrecognised
            sub-types fall back to the category default

    Returns:
        Emissions in kg CO2e, or 0 for an unknown category
    """
    category = parse_category(category)
    if category is None:
        return 0.0
    if category is ActivityCategory.OTHER:
        return value * OTHER_FACTOR

    resolved = parse_subtype(category, subtype) or DEFAULT_SUBTYPES[category]
    return _CATEGORY_FUNCTIONS[category](value, resolved)


def describe_emissions(kg: float) -> str:
    """
    Format an emissions figure with a readable unit.

    Below 1 kg the value is shown in grams, below 1000 kg in kilograms,
    otherwise in tonnes.
    """
    if kg < 1:
        return f"{_round_half_up(kg * 1000)}g CO2e"
    elif kg < 1000:
        return f"{kg:.2f}kg CO2e"
    else:
        return f"{kg / 1000:.2f}t CO2e"


def compare_to_global_average(daily_kg: float) -> GlobalComparison:
    """
    Compare a daily footprint against the global daily average.

    Args:
        daily_kg: Daily footprint in kg CO2e

    Returns:
        GlobalComparison with the percentage of the global average rounded
        half up; the tier is chosen on the unrounded percentage
    """
    percentage = daily_kg * 365 * 100 / GLOBAL_AVERAGE_ANNUAL_KG

    if percentage < 50:
        label = "Much lower than the global average"
        recommendation = "You're doing great! Keep up this level."
    elif percentage < 100:
        label = "Lower than the global average"
        recommendation = "You're on the right track. Try to cut your emissions a little further."
    elif percentage < 150:
        label = "Near the global average"
        recommendation = "There is room to improve. Focus on reducing transport and energy use."
    else:
        label = "Above the global average"
        recommendation = "Take action now. Start by cutting energy consumption and car travel."

    return GlobalComparison(
        comparison_label=label,
        percentage=_round_half_up(percentage),
        recommendation=recommendation,
    )


def potential_savings(
    category: ActivityCategory,
    current_subtype: Optional[str],
    new_subtype: Optional[str],
    value: float,
) -> float:
    """
    Emissions saved by switching from one sub-type to another.

    Negative when the new option emits more than the current one.
    """
    current = calculate_carbon_footprint(category, value, current_subtype)
    new = calculate_carbon_footprint(category, value, new_subtype)
    return current - new
