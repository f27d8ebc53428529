"""
CSV ingestion for the participant list and the party location.

Participant file columns:
    ,ID,Name,FoodPreference,Age,Sex,HasKitchen,Kitchen_Story,Kitchen_Longitude,Kitchen_Latitude,ID_2,Name_2,Age_2,Sex_2

A row with ``ID_2`` filled registers two people jointly. Both become participants that declare
each other as partner and share the row's food preference and kitchen.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from spinfood.errors import InputFormatError
from spinfood.models import (
    FoodPreference,
    Gender,
    Kitchen,
    KitchenAvailability,
    Location,
    Participant,
)

logger = logging.getLogger(__name__)

PARTICIPANT_COLUMNS = {
    "ID",
    "Name",
    "FoodPreference",
    "Age",
    "Sex",
    "HasKitchen",
    "Kitchen_Story",
    "Kitchen_Longitude",
    "Kitchen_Latitude",
    "ID_2",
    "Name_2",
    "Age_2",
    "Sex_2",
}
PARTY_COLUMNS = {"Longitude", "Latitude"}


def _blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _parse_age(value: str) -> int:
    # Exports write ages as "22.0"
    return int(float(value))


def _parse_float(value: str | None) -> float | None:
    return None if _blank(value) else float(value)  # type: ignore[arg-type]


def _parse_kitchen(row: dict[str, str], availability: KitchenAvailability) -> Kitchen | None:
    if availability == KitchenAvailability.NO:
        return None
    longitude = _parse_float(row.get("Kitchen_Longitude"))
    latitude = _parse_float(row.get("Kitchen_Latitude"))
    if longitude is None or latitude is None:
        raise ValueError(f"kitchen availability '{availability.value}' needs Kitchen_Longitude and Kitchen_Latitude")
    return Kitchen(
        location=Location(latitude=latitude, longitude=longitude),
        story=_parse_float(row.get("Kitchen_Story")),
    )


def _parse_row(row: dict[str, str]) -> list[Participant]:
    food_preference = FoodPreference(row["FoodPreference"].strip().lower())
    availability = KitchenAvailability(row["HasKitchen"].strip().lower())
    kitchen = _parse_kitchen(row, availability)
    partner_id = None if _blank(row.get("ID_2")) else row["ID_2"].strip()

    shared: dict[str, Any] = {
        "food_preference": food_preference,
        "kitchen_availability": availability,
        "kitchen": kitchen,
    }
    first = Participant(
        id=row["ID"].strip(),
        name=row["Name"].strip(),
        age=_parse_age(row["Age"]),
        gender=Gender(row["Sex"].strip().lower()),
        partner_id=partner_id,
        **shared,
    )
    if partner_id is None:
        return [first]

    second = Participant(
        id=partner_id,
        name=row["Name_2"].strip(),
        age=_parse_age(row["Age_2"]),
        gender=Gender(row["Sex_2"].strip().lower()),
        partner_id=first.id,
        **shared,
    )
    return [first, second]


def read_participants(path: str | Path) -> list[Participant]:
    """Read the participant list.

    Raises:
        InputFormatError: If the file is missing columns or a row cannot be parsed
    """
    path = Path(path)
    participants: list[Participant] = []

    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        missing = PARTICIPANT_COLUMNS - set(reader.fieldnames or [])
        if missing:
            raise InputFormatError(f"{path.name} missing columns: {sorted(missing)}", line_number=1)

        for line_number, row in enumerate(reader, start=2):
            try:
                participants.extend(_parse_row(row))
            except (ValueError, ValidationError, KeyError, AttributeError) as e:
                raise InputFormatError(f"{path.name}: {e}", line_number=line_number) from e

    seen: set[str] = set()
    for participant in participants:
        if participant.id in seen:
            raise InputFormatError(f"{path.name}: duplicate participant id {participant.id}")
        seen.add(participant.id)

    logger.info(f"Read {len(participants)} participants from {path}")
    return participants


def read_party_location(path: str | Path) -> Location:
    """Read the party location (first data row of a Longitude,Latitude file)."""
    path = Path(path)

    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        missing = PARTY_COLUMNS - set(reader.fieldnames or [])
        if missing:
            raise InputFormatError(f"{path.name} missing columns: {sorted(missing)}", line_number=1)

        row = next(reader, None)
        if row is None:
            raise InputFormatError(f"{path.name} has no party location row", line_number=2)
        try:
            location = Location(latitude=float(row["Latitude"]), longitude=float(row["Longitude"]))
        except (ValueError, ValidationError, TypeError) as e:
            raise InputFormatError(f"{path.name}: {e}", line_number=2) from e

    logger.debug(f"Party location: ({location.latitude}, {location.longitude})")
    return location
