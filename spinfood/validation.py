"""
Validation of generated pairs and groups.

The engines route problem cases instead of raising, so a run that finishes can still be checked
against the hard rules here. ``analyze()`` reports every issue; ``validate()`` raises on the first
error.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Sequence
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from spinfood.constants import GROUP_SIZE, MAX_PAIRS_PER_KITCHEN
from spinfood.errors import InvariantViolationError
from spinfood.grouping.dining_history import DiningHistory
from spinfood.models import Course, FoodPreference, Group, Pair
from spinfood.preferences import resolve_group_preference

logger = logging.getLogger(__name__)


class ValidationSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """Single validation issue found during analysis."""

    severity: ValidationSeverity
    type: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    affected_pairs: list[int] = Field(default_factory=list)


class ValidationStatistics(BaseModel):
    total_pairs: int = 0
    total_groups: int = 0
    errors: int = 0
    warnings: int = 0
    repeated_encounters: int = 0


class ValidationResult(BaseModel):
    """Complete validation result with statistics and issues."""

    statistics: ValidationStatistics
    issues: list[ValidationIssue]
    validated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_valid(self) -> bool:
        return not any(issue.severity == ValidationSeverity.ERROR for issue in self.issues)

    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == ValidationSeverity.ERROR]


def _finalize(issues: list[ValidationIssue], stats: ValidationStatistics) -> ValidationResult:
    stats.errors = sum(1 for i in issues if i.severity == ValidationSeverity.ERROR)
    stats.warnings = sum(1 for i in issues if i.severity == ValidationSeverity.WARNING)
    return ValidationResult(statistics=stats, issues=issues)


def _raise_first_error(result: ValidationResult) -> None:
    for issue in result.errors():
        pair_number = issue.affected_pairs[0] if issue.affected_pairs else 0
        logger.error(f"Validation failed: {issue.message}")
        raise InvariantViolationError(pair_number, issue.message)


class PairsValidator:
    """Checks the hard rules every generated pair must satisfy."""

    def __init__(self, pairs: Sequence[Pair], max_pairs_per_kitchen: int = MAX_PAIRS_PER_KITCHEN):
        self.pairs = list(pairs)
        self.max_pairs_per_kitchen = max_pairs_per_kitchen

    def validate(self) -> ValidationResult:
        """Raise InvariantViolationError naming the pair number of the first error found."""
        result = self.analyze()
        _raise_first_error(result)
        return result

    def analyze(self) -> ValidationResult:
        issues: list[ValidationIssue] = []
        stats = ValidationStatistics(total_pairs=len(self.pairs))

        for pair in self.pairs:
            issues.extend(self._check_preferences(pair))
            issues.extend(self._check_kitchen(pair))

        issues.extend(self._check_uniqueness())
        issues.extend(self._check_kitchen_occupation())
        return _finalize(issues, stats)

    @staticmethod
    def _check_preferences(pair: Pair) -> list[ValidationIssue]:
        preferences = {pair.participant1.food_preference, pair.participant2.food_preference, pair.main_food_preference}
        if FoodPreference.MEAT in preferences and any(p.is_plant_based for p in preferences):
            return [
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    type="incompatible_preferences",
                    message="Meat-eater paired with vegan or veggie",
                    details={"preferences": sorted(p.value for p in preferences)},
                    affected_pairs=[pair.pair_number],
                )
            ]
        return []

    @staticmethod
    def _check_kitchen(pair: Pair) -> list[ValidationIssue]:
        supplier = pair.kitchen_participant
        if supplier.kitchen is None:
            return [
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    type="missing_kitchen",
                    message=f"Kitchen supplier {supplier.id} has no kitchen",
                    affected_pairs=[pair.pair_number],
                )
            ]
        if supplier.kitchen != pair.kitchen:
            return [
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    type="kitchen_mismatch",
                    message=f"Kitchen does not belong to supplier {supplier.id}",
                    affected_pairs=[pair.pair_number],
                )
            ]
        return []

    def _check_uniqueness(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        number_counts = Counter(pair.pair_number for pair in self.pairs)
        for number, count in sorted(number_counts.items()):
            if count > 1:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        type="duplicate_pair_number",
                        message=f"Pair number used {count} times",
                        affected_pairs=[number],
                    )
                )

        pairs_of: dict[str, list[int]] = defaultdict(list)
        for pair in self.pairs:
            for participant in pair.participants:
                pairs_of[participant.id].append(pair.pair_number)
        for participant_id, numbers in pairs_of.items():
            if len(numbers) > 1:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        type="participant_in_multiple_pairs",
                        message=f"Participant {participant_id} is in {len(numbers)} pairs",
                        details={"participant_id": participant_id},
                        affected_pairs=numbers,
                    )
                )
        return issues

    def _check_kitchen_occupation(self) -> list[ValidationIssue]:
        by_location: dict[Any, list[int]] = defaultdict(list)
        for pair in self.pairs:
            by_location[pair.kitchen.location].append(pair.pair_number)

        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                type="kitchen_overbooked",
                message=f"Kitchen used by {len(numbers)} pairs (max {self.max_pairs_per_kitchen})",
                details={"latitude": location.latitude, "longitude": location.longitude},
                affected_pairs=numbers,
            )
            for location, numbers in by_location.items()
            if len(numbers) > self.max_pairs_per_kitchen
        ]


class GroupsValidator:
    """Checks group structure, per-course seating, hosting and the dining history."""

    def __init__(
        self,
        groups: Sequence[Group],
        pairs: Sequence[Pair] | None = None,
        history: DiningHistory | None = None,
    ):
        self.groups = list(groups)
        if pairs is None:
            seen: dict[int, Pair] = {}
            for group in self.groups:
                for pair in group.pairs:
                    seen.setdefault(pair.pair_number, pair)
            pairs = list(seen.values())
        self.pairs = list(pairs)
        self.history = history

    def validate(self) -> ValidationResult:
        """Raise InvariantViolationError naming a pair number of the first error found."""
        result = self.analyze()
        _raise_first_error(result)
        return result

    def analyze(self) -> ValidationResult:
        issues: list[ValidationIssue] = []
        stats = ValidationStatistics(total_pairs=len(self.pairs), total_groups=len(self.groups))

        for group in self.groups:
            issues.extend(self._check_group(group))

        issues.extend(self._check_seating())
        issues.extend(self._check_hosting())
        issues.extend(self._check_dining_history())

        if self.history is not None:
            repeated = self.history.repeated_encounters()
            stats.repeated_encounters = len(repeated)
            if repeated:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        type="repeated_encounter",
                        message=f"{len(repeated)} pairs of pairs meet at more than one course",
                        details={"encounters": repeated[:10]},
                        affected_pairs=sorted({n for edge in repeated for n in edge}),
                    )
                )

        return _finalize(issues, stats)

    @staticmethod
    def _check_group(group: Group) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        numbers = group.pair_numbers
        label = f"{group.course.value} group {group.group_number}"

        if len(numbers) != GROUP_SIZE or len(set(numbers)) != len(numbers):
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    type="group_size",
                    message=f"{label} needs {GROUP_SIZE} distinct pairs",
                    affected_pairs=numbers,
                )
            )

        expected = resolve_group_preference(p.main_food_preference for p in group.pairs)
        if group.food_preference != expected:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    type="group_preference",
                    message=(
                        f"{label} preference is {group.food_preference.value if group.food_preference else None}, "
                        f"expected {expected.value if expected else None}"
                    ),
                    affected_pairs=numbers,
                )
            )

        for pair in group.pairs:
            if pair.group_numbers.get(group.course) != group.group_number:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        type="group_number_mismatch",
                        message=f"Pair records group {pair.group_numbers.get(group.course)} for {label}",
                        affected_pairs=[pair.pair_number],
                    )
                )
        return issues

    def _check_seating(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        seats: Counter[tuple[int, Course]] = Counter()
        for group in self.groups:
            for number in group.pair_numbers:
                seats[(number, group.course)] += 1

        for pair in self.pairs:
            for course in Course:
                count = seats[(pair.pair_number, course)]
                if count != 1:
                    issues.append(
                        ValidationIssue(
                            severity=ValidationSeverity.ERROR,
                            type="course_seating",
                            message=f"Pair seated {count} times for {course.value}",
                            affected_pairs=[pair.pair_number],
                        )
                    )
        return issues

    def _check_hosting(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        hosted: Counter[int] = Counter()

        for group in self.groups:
            if group.host_pair_number is None:
                continue
            host = group.host_pair
            if host is None:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        type="host_not_in_group",
                        message=f"Host of {group.course.value} group {group.group_number} is not a member",
                        affected_pairs=[group.host_pair_number],
                    )
                )
                continue
            hosted[host.pair_number] += 1
            if host.cooking_course != group.course:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        type="cooking_course_mismatch",
                        message=f"Host cooks {host.cooking_course} but hosts {group.course.value}",
                        affected_pairs=[host.pair_number],
                    )
                )

        if hosted:
            for pair in self.pairs:
                if hosted[pair.pair_number] != 1:
                    issues.append(
                        ValidationIssue(
                            severity=ValidationSeverity.ERROR,
                            type="hosting_count",
                            message=f"Pair hosts {hosted[pair.pair_number]} courses",
                            affected_pairs=[pair.pair_number],
                        )
                    )
        return issues

    def _check_dining_history(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        by_number = {pair.pair_number: pair for pair in self.pairs}

        for group in self.groups:
            for pair in group.pairs:
                expected = set(group.pair_numbers) - {pair.pair_number}
                actual = pair.co_diners(group.course)
                if actual != expected or len(actual) != GROUP_SIZE - 1:
                    issues.append(
                        ValidationIssue(
                            severity=ValidationSeverity.ERROR,
                            type="dining_history",
                            message=(
                                f"Co-diners for {group.course.value} are {sorted(actual)}, "
                                f"expected {sorted(expected)}"
                            ),
                            affected_pairs=[pair.pair_number],
                        )
                    )
                for other in actual:
                    other_pair = by_number.get(other)
                    if other_pair is not None and pair.pair_number not in other_pair.co_diners(group.course):
                        issues.append(
                            ValidationIssue(
                                severity=ValidationSeverity.ERROR,
                                type="dining_history_asymmetric",
                                message=f"Pair {other} does not record the shared {group.course.value}",
                                affected_pairs=[pair.pair_number, other],
                            )
                        )

        if self.history is not None and not self.history.is_symmetric(self.pairs):
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    type="dining_history_graph",
                    message="Pair co-diners disagree with the dining history graph",
                    affected_pairs=sorted(by_number)[:1],
                )
            )
        return issues
