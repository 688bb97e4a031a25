"""
Activity categories, sub-types and their emission factors.

Factors are kg CO2e per unit (km, kWh, m3, L or kg). Sources: EPA, IPCC,
Carbon Footprint Ltd averages. They are constants; stored activities keep
the footprint computed at logging time.
"""
from enum import Enum
from typing import Dict, Optional, Type


class ActivityCategory(str, Enum):
    """Category of a logged activity."""
    TRANSPORT = "transport"
    ENERGY = "energy"
    FOOD = "food"
    WASTE = "waste"
    OTHER = "other"


class TransportType(str, Enum):
    CAR = "car"
    BUS = "bus"
    TRAIN = "train"
    BIKE = "bike"
    WALK = "walk"
    FLIGHT = "flight"
    MOTORCYCLE = "motorcycle"


class EnergyType(str, Enum):
    ELECTRICITY = "electricity"
    NATURAL_GAS = "natural_gas"
    HEATING_OIL = "heating_oil"
    RENEWABLE = "renewable"


class FoodType(str, Enum):
    MEAT = "meat"
    DAIRY = "dairy"
    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    GRAINS = "grains"
    OTHER = "other"


class WasteType(str, Enum):
    PLASTIC = "plastic"
    PAPER = "paper"
    ORGANIC = "organic"
    METAL = "metal"
    GLASS = "glass"
    ELECTRONIC = "electronic"


# kg CO2e per km (per passenger for bus/train)
TRANSPORT_FACTORS: Dict[TransportType, float] = {
    TransportType.CAR: 0.192,
    TransportType.BUS: 0.089,
    TransportType.TRAIN: 0.041,
    TransportType.BIKE: 0.0,
    TransportType.WALK: 0.0,
    TransportType.FLIGHT: 0.255,
    TransportType.MOTORCYCLE: 0.092,
}

# kg CO2e per kWh, per m3 of gas, per litre of oil
ENERGY_FACTORS: Dict[EnergyType, float] = {
    EnergyType.ELECTRICITY: 0.5,
    EnergyType.NATURAL_GAS: 2.04,
    EnergyType.HEATING_OIL: 3.15,
    EnergyType.RENEWABLE: 0.0,
}

# kg CO2e per kg of food (meat is beef)
FOOD_FACTORS: Dict[FoodType, float] = {
    FoodType.MEAT: 27.0,
    FoodType.DAIRY: 1.23,
    FoodType.VEGETABLES: 0.2,
    FoodType.FRUITS: 0.48,
    FoodType.GRAINS: 0.8,
    FoodType.OTHER: 1.5,
}

# kg CO2e per kg of waste, production plus treatment
WASTE_FACTORS: Dict[WasteType, float] = {
    WasteType.PLASTIC: 6.0,
    WasteType.PAPER: 1.5,
    WasteType.ORGANIC: 0.5,
    WasteType.METAL: 8.0,
    WasteType.GLASS: 0.7,
    WasteType.ELECTRONIC: 15.0,
}

OTHER_FACTOR = 0.5

SUBTYPES: Dict[ActivityCategory, Type[Enum]] = {
    ActivityCategory.TRANSPORT: TransportType,
    ActivityCategory.ENERGY: EnergyType,
    ActivityCategory.FOOD: FoodType,
    ActivityCategory.WASTE: WasteType,
}

DEFAULT_SUBTYPES: Dict[ActivityCategory, Enum] = {
    ActivityCategory.TRANSPORT: TransportType.CAR,
    ActivityCategory.ENERGY: EnergyType.ELECTRICITY,
    ActivityCategory.FOOD: FoodType.OTHER,
    ActivityCategory.WASTE: WasteType.PLASTIC,
}

DEFAULT_UNITS: Dict[ActivityCategory, str] = {
    ActivityCategory.TRANSPORT: "km",
    ActivityCategory.ENERGY: "kWh",
    ActivityCategory.FOOD: "kg",
    ActivityCategory.WASTE: "kg",
    ActivityCategory.OTHER: "unit",
}


def parse_category(value) -> Optional[ActivityCategory]:
    """Return the ActivityCategory for a member or string value, or None."""
    if isinstance(value, ActivityCategory):
        return value
    try:
        return ActivityCategory(value)
    except ValueError:
        return None


def parse_subtype(category: ActivityCategory, value) -> Optional[Enum]:
    """
    Return the sub-type member of `category` matching `value`, or None.

    The `other` category has no sub-types, so this always returns None for it.
    """
    enum_cls = SUBTYPES.get(category)
    if enum_cls is None or value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None
