"""Food preference resolution for pairs and course-groups.

Meat never shares a table with a vegan or veggie. Within those rules the stricter
preference wins, and "none" adapts to whoever it is matched with.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from spinfood.models import FoodPreference


def resolve_pair_preference(first: FoodPreference, second: FoodPreference) -> FoodPreference | None:
    """Main food preference of two participants cooking together.

    Returns None when the two preferences cannot share a kitchen (meat with vegan/veggie).
    """
    if first == second:
        return first
    if first == FoodPreference.NONE:
        return second
    if second == FoodPreference.NONE:
        return first
    if first.is_plant_based and second.is_plant_based:
        return FoodPreference.VEGAN
    # Meat with veggie or vegan
    return None


def is_compatible(first: FoodPreference, second: FoodPreference) -> bool:
    return resolve_pair_preference(first, second) is not None


def resolve_group_preference(preferences: Iterable[FoodPreference]) -> FoodPreference | None:
    """Food preference of a course-group from its pairs' main preferences.

    None when a vegan/veggie pair is grouped with a meat pair.
    """
    counts = Counter(preferences)
    vegan = counts[FoodPreference.VEGAN]
    veggie = counts[FoodPreference.VEGGIE]

    if (vegan or veggie) and counts[FoodPreference.MEAT]:
        return None
    if vegan >= 2:
        return FoodPreference.VEGAN
    if veggie >= 2:
        return FoodPreference.VEGGIE
    if vegan and veggie:
        return FoodPreference.VEGAN
    return FoodPreference.MEAT
