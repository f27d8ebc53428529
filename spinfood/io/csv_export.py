"""Semicolon-delimited export of the final schedule, one row per participant per group."""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path

from spinfood.models import Course, FoodPreference, Group

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "course",
    "group_number",
    "group_preference",
    "pair_number",
    "participant_id",
    "participant_name",
    "partner_name",
    "joint_registration",
    "kitchen_longitude",
    "kitchen_latitude",
    "pair_preference",
    "appetizer_group",
    "main_group",
    "dessert_group",
    "kitchen_supplier",
    "cooking_course",
]

_PREFERENCE_ORDER = {preference: index for index, preference in enumerate(FoodPreference)}


def _preference_sort_key(group: Group) -> int:
    # Unresolved (meat mixed with vegan/veggie) groups go last
    if group.food_preference is None:
        return len(_PREFERENCE_ORDER)
    return _PREFERENCE_ORDER[group.food_preference]


def _bool(value: bool) -> str:
    return "true" if value else "false"


def group_rows(groups: Sequence[Group]) -> list[dict[str, str]]:
    """Flatten groups into export rows, groups ordered by food preference."""
    rows: list[dict[str, str]] = []
    for group in sorted(groups, key=_preference_sort_key):
        for pair in group.pairs:
            for participant, partner in (pair.participants, pair.participants[::-1]):
                rows.append(
                    {
                        "course": group.course.value,
                        "group_number": str(group.group_number),
                        "group_preference": group.food_preference.value if group.food_preference else "",
                        "pair_number": str(pair.pair_number),
                        "participant_id": participant.id,
                        "participant_name": participant.name,
                        "partner_name": partner.name,
                        "joint_registration": _bool(pair.joint_registration),
                        "kitchen_longitude": str(pair.kitchen.location.longitude),
                        "kitchen_latitude": str(pair.kitchen.location.latitude),
                        "pair_preference": pair.main_food_preference.value,
                        "appetizer_group": str(pair.group_numbers.get(Course.APPETIZER, "")),
                        "main_group": str(pair.group_numbers.get(Course.MAIN, "")),
                        "dessert_group": str(pair.group_numbers.get(Course.DESSERT, "")),
                        "kitchen_supplier": _bool(pair.kitchen_supplier),
                        "cooking_course": pair.cooking_course.value if pair.cooking_course else "",
                    }
                )
    return rows


def write_groups_csv(groups: Sequence[Group], path: str | Path) -> Path:
    """Write the schedule to ``path`` and return it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = group_rows(groups)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=EXPORT_COLUMNS, delimiter=";")
        writer.writeheader()
        writer.writerows(rows)

    logger.info(f"Wrote {len(rows)} rows for {len(groups)} groups to {path}")
    return path
