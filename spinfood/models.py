"""
Domain models for the pairing and grouping engines.

Participants, kitchens and locations are immutable input. Pairs and groups are created by
the engines and carry the scheduling state the exporters and indicator calculators read.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from spinfood.constants import GROUP_SIZE


class FoodPreference(str, Enum):
    NONE = "none"
    MEAT = "meat"
    VEGGIE = "veggie"
    VEGAN = "vegan"

    @property
    def ordinal(self) -> int:
        """Distance scale used for preference deviation (none and meat share the bottom)."""
        if self is FoodPreference.VEGAN:
            return 2
        if self is FoodPreference.VEGGIE:
            return 1
        return 0

    @property
    def is_plant_based(self) -> bool:
        return self in (FoodPreference.VEGGIE, FoodPreference.VEGAN)


class KitchenAvailability(str, Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Course(str, Enum):
    APPETIZER = "appetizer"
    MAIN = "main"
    DESSERT = "dessert"


class Location(BaseModel):
    """A point on the map in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Kitchen(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: Location
    story: float | None = None  # Floor the kitchen is on, informational only


class Participant(BaseModel):
    """One registered person. Never mutated by the engines."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    age: int = Field(ge=0)
    gender: Gender
    food_preference: FoodPreference
    kitchen_availability: KitchenAvailability
    kitchen: Kitchen | None = None
    partner_id: str | None = None  # Joint registration

    @model_validator(mode="after")
    def validate_kitchen(self) -> Participant:
        if self.kitchen_availability != KitchenAvailability.NO and self.kitchen is None:
            raise ValueError(f"participant {self.id} offers a kitchen but has no kitchen location")
        if self.kitchen_availability == KitchenAvailability.NO and self.kitchen is not None:
            raise ValueError(f"participant {self.id} has no kitchen available but a kitchen location")
        if self.partner_id is not None and self.partner_id == self.id:
            raise ValueError(f"participant {self.id} cannot register jointly with themselves")
        return self

    @property
    def has_kitchen(self) -> bool:
        return self.kitchen is not None


class Pair(BaseModel):
    """Two participants cooking together.

    ``kitchen_supplier`` is True when participant2 supplies the kitchen and False when
    participant1 does. Dining history stores co-diners by pair number, never by reference.
    """

    participant1: Participant
    participant2: Participant
    main_food_preference: FoodPreference
    kitchen_supplier: bool = False
    kitchen: Kitchen
    pair_number: int = Field(ge=1)
    joint_registration: bool = False
    successor: bool = False

    dining_pairs: dict[Course, set[int]] = Field(default_factory=dict)
    group_numbers: dict[Course, int] = Field(default_factory=dict)
    cooking_course: Course | None = None
    path_length: float | None = None  # km from the first host kitchen to the party

    @model_validator(mode="after")
    def validate_members(self) -> Pair:
        if self.participant1.id == self.participant2.id:
            raise ValueError(f"pair {self.pair_number} needs two distinct participants")
        return self

    @property
    def participants(self) -> tuple[Participant, Participant]:
        return (self.participant1, self.participant2)

    @property
    def kitchen_participant(self) -> Participant:
        return self.participant2 if self.kitchen_supplier else self.participant1

    @property
    def age_difference(self) -> int:
        return abs(self.participant1.age - self.participant2.age)

    @property
    def average_age(self) -> float:
        return (self.participant1.age + self.participant2.age) / 2

    @property
    def preference_deviation(self) -> int:
        return abs(self.participant1.food_preference.ordinal - self.participant2.food_preference.ordinal)

    @property
    def number_of_women(self) -> int:
        return sum(1 for p in self.participants if p.gender == Gender.FEMALE)

    @property
    def number_of_others(self) -> int:
        return len(self.participants) - self.number_of_women

    def co_diners(self, course: Course) -> set[int]:
        """Pair numbers this pair shares a table with for the given course."""
        return self.dining_pairs.get(course, set())


class Group(BaseModel):
    """Three pairs dining together for one course at the host pair's kitchen."""

    pairs: list[Pair]
    course: Course
    group_number: int = Field(ge=1)
    food_preference: FoodPreference | None = None
    cohort_number: int | None = None
    host_pair_number: int | None = None
    kitchen: Kitchen | None = None

    @field_validator("pairs")
    @classmethod
    def validate_pairs(cls, v: list[Pair]) -> list[Pair]:
        if len(v) != GROUP_SIZE:
            raise ValueError(f"a group holds exactly {GROUP_SIZE} pairs, got {len(v)}")
        if len({p.pair_number for p in v}) != len(v):
            raise ValueError("pairs in a group must be distinct")
        return v

    @property
    def pair_numbers(self) -> list[int]:
        return [p.pair_number for p in self.pairs]

    @property
    def host_pair(self) -> Pair | None:
        for pair in self.pairs:
            if pair.pair_number == self.host_pair_number:
                return pair
        return None

    @property
    def number_of_women(self) -> int:
        return sum(p.number_of_women for p in self.pairs)

    @property
    def number_of_others(self) -> int:
        return sum(p.number_of_others for p in self.pairs)

    @property
    def age_difference(self) -> float:
        """Spread between the youngest and the oldest pair, by pair average age."""
        ages = [p.average_age for p in self.pairs]
        return max(ages) - min(ages)

    @property
    def preference_deviation(self) -> int:
        ordinals = [p.main_food_preference.ordinal for p in self.pairs]
        return max(ordinals) - min(ordinals)


class PairingResult(BaseModel):
    """Output of the pairing engine."""

    pairs: list[Pair]
    successor_participants: list[Participant] = Field(default_factory=list)
