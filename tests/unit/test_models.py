"""Tests for domain model validation and derived values."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from spinfood.models import (
    Course,
    FoodPreference,
    Gender,
    Group,
    Kitchen,
    KitchenAvailability,
    Location,
    Participant,
)

from tests.factories import create_pair, create_participant


class TestParticipant:
    def test_kitchen_owner_needs_location(self):
        with pytest.raises(ValidationError, match="no kitchen location"):
            Participant(
                id="a",
                name="A",
                age=20,
                gender=Gender.MALE,
                food_preference=FoodPreference.MEAT,
                kitchen_availability=KitchenAvailability.MAYBE,
            )

    def test_no_kitchen_means_no_location(self):
        with pytest.raises(ValidationError):
            Participant(
                id="a",
                name="A",
                age=20,
                gender=Gender.MALE,
                food_preference=FoodPreference.MEAT,
                kitchen_availability=KitchenAvailability.NO,
                kitchen=Kitchen(location=Location(latitude=50.0, longitude=8.0)),
            )

    def test_cannot_partner_with_self(self):
        with pytest.raises(ValidationError):
            create_participant("a", partner_id="a")

    def test_participants_are_frozen(self):
        participant = create_participant("a")
        with pytest.raises(ValidationError):
            participant.age = 30  # type: ignore[misc]


class TestPair:
    """Derived pair values used by the indicators."""

    def test_derived_values(self):
        pair = create_pair(1, ages=(20, 26), genders=(Gender.FEMALE, Gender.FEMALE))

        assert pair.age_difference == 6
        assert pair.average_age == 23
        assert pair.number_of_women == 2
        assert pair.number_of_others == 0
        assert pair.preference_deviation == 0

    def test_preference_deviation_uses_ordinals(self):
        pair = create_pair(1, food=FoodPreference.VEGAN)
        pair.participant2 = create_participant("x", food=FoodPreference.NONE)

        assert pair.preference_deviation == 2

    def test_kitchen_participant_follows_supplier_flag(self):
        pair = create_pair(1)
        assert pair.kitchen_participant is pair.participant1

        pair.kitchen_supplier = True
        assert pair.kitchen_participant is pair.participant2

    def test_co_diners_default_empty(self):
        assert create_pair(1).co_diners(Course.MAIN) == set()


class TestGroup:
    def test_requires_three_distinct_pairs(self):
        pair = create_pair(1)
        with pytest.raises(ValidationError):
            Group(pairs=[pair, pair, create_pair(2)], course=Course.MAIN, group_number=1)
        with pytest.raises(ValidationError):
            Group(pairs=[pair, create_pair(2)], course=Course.MAIN, group_number=1)

    def test_age_and_preference_spread(self):
        group = Group(
            pairs=[
                create_pair(1, ages=(20, 22), food=FoodPreference.VEGAN),
                create_pair(2, ages=(30, 30), food=FoodPreference.VEGGIE),
                create_pair(3, ages=(24, 26), food=FoodPreference.NONE),
            ],
            course=Course.APPETIZER,
            group_number=1,
        )

        assert group.age_difference == 9
        assert group.preference_deviation == 2
        assert group.pair_numbers == [1, 2, 3]
        assert group.host_pair is None
