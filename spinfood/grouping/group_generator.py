"""
Group Generator - clusters pairs into cohorts of nine and schedules their courses.

Pairs are bucketed by main food preference, the buckets are balanced to multiples of the cohort
size with pairs from the "any" bucket, and every cohort is split into course-groups by the
arrangement generator. Course assignment then picks hosts for each cohort.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from spinfood.config import ConfigLoader
from spinfood.constants import CLUSTER_SIZE
from spinfood.decision_log import DecisionLogger
from spinfood.errors import CohortSizeError
from spinfood.geo import DistanceFunction, haversine_km
from spinfood.models import Course, FoodPreference, Group, Location, Pair
from spinfood.preferences import resolve_group_preference

from .arrangements import generate_arrangements
from .course_assignment import HostAssignment, assign_courses
from .dining_history import DiningHistory

logger = logging.getLogger(__name__)

COURSES = list(Course)


@dataclass
class GroupingResult:
    """Output of the group formation engine."""

    groups: list[Group]
    successor_pairs: list[Pair]
    history: DiningHistory
    host_assignments: list[HostAssignment] = field(default_factory=list)

    def groups_for(self, course: Course) -> list[Group]:
        return [g for g in self.groups if g.course == course]


class GroupGenerator:
    """Builds course-groups from pairs for a single run."""

    def __init__(
        self,
        pairs: Sequence[Pair],
        party_location: Location,
        rng: random.Random | None = None,
        config: ConfigLoader | None = None,
        distance: DistanceFunction = haversine_km,
        decision_logger: DecisionLogger | None = None,
    ):
        self.pairs = list(pairs)
        self.party_location = party_location
        self.config = config or ConfigLoader.get_instance()
        self.distance = distance
        self.decision_logger = decision_logger or DecisionLogger()
        self.arrangement_count = self.config.get_int("grouping.arrangement_count")

        if rng is None:
            seed = self.config.get_optional("grouping.random_seed")
            rng = random.Random(seed)
        self.rng = rng

    def _reset_pairs(self) -> None:
        for pair in self.pairs:
            pair.successor = False
            pair.dining_pairs = {}
            pair.group_numbers = {}
            pair.cooking_course = None
            pair.path_length = None

    def generate_groups(self) -> GroupingResult:
        """Balance, cluster and schedule the pairs.

        Raises:
            CohortSizeError: If a balanced bucket does not split into whole cohorts
            CourseAssignmentError: If a cohort's hosts cannot be assigned
        """
        self._reset_pairs()
        plant_based, meat, any_preference = self._bucket_pairs()
        successors: list[Pair] = []

        plant_based = self._pad_bucket(plant_based, any_preference, successors, "vegan/veggie")
        meat = self._pad_bucket(meat, any_preference, successors, "meat")
        any_preference = self._shrink_to_cohorts(any_preference, successors, "any")

        cohorts = self._split_into_cohorts(plant_based) + self._split_into_cohorts(meat)
        cohorts += self._split_into_cohorts(any_preference)

        history = DiningHistory()
        course_groups: dict[Course, list[Group]] = {course: [] for course in COURSES}
        host_assignments: list[HostAssignment] = []

        for cohort_number, cohort in enumerate(cohorts, start=1):
            arrangements = generate_arrangements(cohort, self.arrangement_count)
            cohort_groups: list[Group] = []

            for course, arrangement in zip(COURSES, arrangements):
                for members in arrangement:
                    group = Group(
                        pairs=members,
                        course=course,
                        group_number=len(course_groups[course]) + 1,
                        food_preference=resolve_group_preference(p.main_food_preference for p in members),
                        cohort_number=cohort_number,
                    )
                    for pair in members:
                        pair.group_numbers[course] = group.group_number
                    history.record_group(course, members)
                    course_groups[course].append(group)
                    cohort_groups.append(group)

            # Without a fourth arrangement there is no rota to spread hosts over
            final_partition = arrangements[3] if len(arrangements) > 3 else []
            host_assignments.append(
                assign_courses(
                    cohort_groups,
                    self.party_location,
                    final_partition,
                    config=self.config,
                    distance=self.distance,
                )
            )
            self.decision_logger.log_decision(
                "grouping.cohort",
                f"cohort {cohort_number}: pairs {[p.pair_number for p in cohort]}",
            )

        groups = [g for course in COURSES for g in course_groups[course]]
        self.decision_logger.log_progress(
            f"Grouping finished: {len(cohorts)} cohorts, {len(groups)} groups, {len(successors)} successor pairs"
        )
        return GroupingResult(
            groups=groups,
            successor_pairs=successors,
            history=history,
            host_assignments=host_assignments,
        )

    def _bucket_pairs(self) -> tuple[list[Pair], list[Pair], list[Pair]]:
        plant_based = [p for p in self.pairs if p.main_food_preference.is_plant_based]
        meat = [p for p in self.pairs if p.main_food_preference == FoodPreference.MEAT]
        any_preference = [p for p in self.pairs if p.main_food_preference == FoodPreference.NONE]

        def by_age_difference(bucket: list[Pair]) -> list[Pair]:
            return sorted(bucket, key=lambda p: p.age_difference)

        logger.debug(
            f"Buckets: {len(plant_based)} vegan/veggie, {len(meat)} meat, {len(any_preference)} any"
        )
        return by_age_difference(plant_based), by_age_difference(meat), by_age_difference(any_preference)

    def _pad_bucket(
        self,
        bucket: list[Pair],
        any_preference: list[Pair],
        successors: list[Pair],
        label: str,
    ) -> list[Pair]:
        """Fill a bucket up to a multiple of the cohort size from the "any" bucket.

        Takes random pairs out of ``any_preference`` in place. If it runs dry the bucket is
        shrunk instead.
        """
        missing = -len(bucket) % CLUSTER_SIZE
        if missing == 0:
            return bucket

        if missing > len(any_preference):
            self.decision_logger.log_warning(
                f"{label} bucket needs {missing} more pairs but only {len(any_preference)} "
                f"any-preference pairs are left; shrinking it instead"
            )
            return self._shrink_to_cohorts(bucket, successors, label)

        for _ in range(missing):
            moved = any_preference.pop(self.rng.randrange(len(any_preference)))
            bucket.append(moved)
            self.decision_logger.log_decision(
                "grouping.balance", f"pair {moved.pair_number} moved from any to {label}"
            )
        return bucket

    def _shrink_to_cohorts(self, bucket: list[Pair], successors: list[Pair], label: str) -> list[Pair]:
        """Remove random pairs until the bucket splits into whole cohorts; they become successors."""
        surplus = len(bucket) % CLUSTER_SIZE
        for _ in range(surplus):
            dropped = bucket.pop(self.rng.randrange(len(bucket)))
            dropped.successor = True
            successors.append(dropped)
            self.decision_logger.log_decision(
                "grouping.successor", f"pair {dropped.pair_number} removed from {label} bucket"
            )
        return bucket

    @staticmethod
    def _split_into_cohorts(bucket: list[Pair]) -> list[list[Pair]]:
        if len(bucket) % CLUSTER_SIZE:
            raise CohortSizeError(f"{len(bucket)} pairs do not split into cohorts of {CLUSTER_SIZE}")
        return [bucket[i : i + CLUSTER_SIZE] for i in range(0, len(bucket), CLUSTER_SIZE)]


def generate_groups(
    pairs: Sequence[Pair],
    party_location: Location,
    rng: random.Random | None = None,
    config: ConfigLoader | None = None,
    distance: DistanceFunction = haversine_km,
    decision_logger: DecisionLogger | None = None,
) -> GroupingResult:
    """Convenience wrapper around GroupGenerator for a single run."""
    generator = GroupGenerator(
        pairs,
        party_location,
        rng=rng,
        config=config,
        distance=distance,
        decision_logger=decision_logger,
    )
    return generator.generate_groups()
