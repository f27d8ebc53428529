"""Tests for CP-SAT host assignment within one cohort."""

from __future__ import annotations

import pytest

from spinfood.config import ConfigLoader
from spinfood.errors import CourseAssignmentError
from spinfood.geo import haversine_km
from spinfood.grouping.arrangements import generate_arrangements
from spinfood.grouping.course_assignment import assign_courses
from spinfood.models import Course, Group, Location

from tests.factories import PARTY_LOCATION, create_pair, create_pairs


def build_course_groups(cohort):
    """Course-groups for one cohort plus the fourth arrangement, as the group generator builds them."""
    arrangements = generate_arrangements(cohort)
    groups = []
    for course, arrangement in zip(Course, arrangements):
        for number, members in enumerate(arrangement, start=1):
            groups.append(Group(pairs=members, course=course, group_number=number))
    return groups, arrangements[3]


class TestAssignCourses:
    """Every group gets one host and every pair cooks once."""

    def test_each_pair_hosts_exactly_one_course(self, config):
        cohort = create_pairs(9)
        groups, rota = build_course_groups(cohort)

        assign_courses(groups, PARTY_LOCATION, rota, config=config)

        hosts = [g.host_pair_number for g in groups]
        assert sorted(hosts) == list(range(1, 10))
        for group in groups:
            assert group.host_pair_number in group.pair_numbers
            assert group.kitchen == group.host_pair.kitchen
            assert group.host_pair.cooking_course == group.course

    def test_each_course_has_three_hosts(self, config):
        cohort = create_pairs(9)
        groups, rota = build_course_groups(cohort)

        assign_courses(groups, PARTY_LOCATION, rota, config=config)

        for course in Course:
            assert sum(1 for p in cohort if p.cooking_course == course) == 3

    def test_route_length_follows_the_hosts(self, config):
        cohort = create_pairs(9)
        groups, rota = build_course_groups(cohort)

        result = assign_courses(groups, PARTY_LOCATION, rota, config=config)

        pair = cohort[4]
        stops = [
            next(g for g in groups if g.course == course and 5 in g.pair_numbers).kitchen.location
            for course in Course
        ]
        expected = (
            haversine_km(stops[0], stops[1]) + haversine_km(stops[1], stops[2]) + haversine_km(stops[2], PARTY_LOCATION)
        )
        assert pair.path_length == pytest.approx(expected)
        assert result.route_km[5] == pytest.approx(expected)

    def test_zero_distances_give_zero_objective(self):
        """With every kitchen at the party and no rota penalty, any matching is optimal."""
        config = ConfigLoader(values={"course_assignment.rota_penalty": 0})
        cohort = [create_pair(n, location=PARTY_LOCATION) for n in range(1, 10)]
        groups, rota = build_course_groups(cohort)

        result = assign_courses(groups, PARTY_LOCATION, rota, config=config)

        assert result.objective_meters == 0
        assert result.status == "OPTIMAL"
        assert all(p.path_length == 0 for p in cohort)

    def test_prefers_kitchens_close_to_the_party_for_dessert(self, config):
        """The dessert leg ends at the party, so a far kitchen should not host dessert."""
        far = Location(latitude=PARTY_LOCATION.latitude + 0.5, longitude=PARTY_LOCATION.longitude)
        cohort = [create_pair(n, location=far if n == 9 else PARTY_LOCATION) for n in range(1, 10)]
        groups, rota = build_course_groups(cohort)

        assign_courses(groups, PARTY_LOCATION, rota, config=config)

        assert cohort[8].cooking_course == Course.APPETIZER

    def test_deterministic(self, config):
        first_groups, first_rota = build_course_groups(create_pairs(9))
        second_groups, second_rota = build_course_groups(create_pairs(9, start=1))
        # Same kitchens for both runs
        for a, b in zip(first_groups, second_groups):
            for pa, pb in zip(a.pairs, b.pairs):
                pb.kitchen = pa.kitchen

        first = assign_courses(first_groups, PARTY_LOCATION, first_rota, config=config)
        second = assign_courses(second_groups, PARTY_LOCATION, second_rota, config=config)

        assert first.hosts == second.hosts

    def test_missing_course_is_rejected(self, config):
        cohort = create_pairs(9)
        groups, rota = build_course_groups(cohort)
        without_dessert = [g for g in groups if g.course != Course.DESSERT]

        with pytest.raises(CourseAssignmentError, match="no group for dessert"):
            assign_courses(without_dessert, PARTY_LOCATION, rota, config=config)
