"""Shared enums for models and API."""

from enum import Enum


class WeightType(str, Enum):
    """How the logged weight of an exercise is measured."""

    TOTAL = "total"
    PER_SIDE = "/side"  # Dumbbells, one side of a machine
    PLUS_BAR = "+bar"  # Plates only, bar weight added
    BODYWEIGHT = "bodyweight"


class Unit(str, Enum):
    LBS = "lbs"
    KG = "kg"


class Category(str, Enum):
    """Granular exercise category."""

    CHEST = "Chest"
    SHOULDERS = "Shoulders"
    TRICEPS = "Triceps"
    BACK = "Back"
    BICEPS = "Biceps"
    LEGS = "Legs"
    CORE = "Core"
    CARDIO = "Cardio"
    OTHER = "Other"


class MuscleGroup(str, Enum):
    """Coarse muscle group used for workout targeting."""

    UPPER = "Upper"
    LOWER = "Lower"
    CORE = "Core"
    CARDIO = "Cardio"
    OTHER = "Other"


# Older clients stored granular categories as workout targets
CATEGORY_TO_MUSCLE_GROUP: dict[str, MuscleGroup] = {
    Category.CHEST.value: MuscleGroup.UPPER,
    Category.SHOULDERS.value: MuscleGroup.UPPER,
    Category.TRICEPS.value: MuscleGroup.UPPER,
    Category.BACK.value: MuscleGroup.UPPER,
    Category.BICEPS.value: MuscleGroup.UPPER,
    Category.LEGS.value: MuscleGroup.LOWER,
    Category.CORE.value: MuscleGroup.CORE,
    Category.CARDIO.value: MuscleGroup.CARDIO,
    Category.OTHER.value: MuscleGroup.OTHER,
}


def to_muscle_group(value: str) -> MuscleGroup:
    """Map a stored target (legacy category or muscle group) to a MuscleGroup."""
    try:
        return MuscleGroup(value)
    except ValueError:
        return CATEGORY_TO_MUSCLE_GROUP.get(value, MuscleGroup.OTHER)
