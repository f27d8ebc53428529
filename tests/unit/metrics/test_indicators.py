"""Tests for the pair and group performance indicators."""

from __future__ import annotations

import math

import pytest

from spinfood.metrics import GroupIndicators, PairIndicators
from spinfood.models import Course, FoodPreference, Gender, Group

from tests.factories import create_pair, create_participant

F = Gender.FEMALE
M = Gender.MALE


class TestPairIndicators:
    def test_hand_computed_values(self):
        mixed = create_pair(1, ages=(20, 24), genders=(F, M))
        women = create_pair(2, ages=(30, 30), genders=(F, F))
        women.participant2 = create_participant("x", age=30, gender=F, food=FoodPreference.VEGAN)

        indicators = PairIndicators.compute([mixed, women], [create_participant("left")])

        assert indicators.number_of_pairs == 2
        assert indicators.number_of_successors == 1
        # |0.5 - 0.5| and |1.0 - 0.5|
        assert indicators.gender_deviation == pytest.approx(0.25)
        assert indicators.average_age_difference == pytest.approx(2.0)
        # meat 0 vs vegan 2
        assert indicators.average_preference_deviation == pytest.approx(1.0)

    def test_empty(self):
        indicators = PairIndicators.compute([], [])

        assert indicators.gender_deviation == 0.0
        assert indicators.average_age_difference == 0.0


class TestGroupIndicators:
    def test_hand_computed_values(self):
        pairs = [
            create_pair(1, ages=(20, 20), genders=(F, M)),
            create_pair(2, ages=(26, 26), genders=(F, F)),
            create_pair(3, ages=(23, 23), genders=(M, M)),
        ]
        for pair, length in zip(pairs, [2.0, 4.0, 6.0]):
            pair.path_length = length
        group = Group(pairs=pairs, course=Course.APPETIZER, group_number=1)

        indicators = GroupIndicators.compute([group], [create_pair(4)])

        assert indicators.number_of_groups == 1
        assert indicators.number_of_successors == 1
        assert indicators.gender_deviation == pytest.approx(0.0)
        assert indicators.average_age_difference == pytest.approx(6.0)
        assert indicators.total_path_length == pytest.approx(12.0)
        assert indicators.average_path_length == pytest.approx(4.0)
        assert indicators.path_length_std_dev == pytest.approx(math.sqrt(8 / 3))

    def test_pairs_in_several_groups_count_once(self):
        pairs = [create_pair(n) for n in range(1, 4)]
        for pair in pairs:
            pair.path_length = 3.0
        groups = [Group(pairs=pairs, course=course, group_number=1) for course in Course]

        indicators = GroupIndicators.compute(groups, [])

        assert indicators.total_path_length == pytest.approx(9.0)
        assert indicators.path_length_std_dev == pytest.approx(0.0)
