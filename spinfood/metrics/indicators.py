"""Performance indicators for a run's pairs and groups.

Both calculators only read engine output. Gender deviation is the mean distance of each unit's
share of women from one half; preference deviation uses the ordinal scale none/meat 0, veggie 1,
vegan 2.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from pydantic import BaseModel

from spinfood.models import Group, Pair, Participant

logger = logging.getLogger(__name__)


def _gender_deviation(units: Sequence[Pair] | Sequence[Group]) -> float:
    deviations = []
    for unit in units:
        total = unit.number_of_women + unit.number_of_others
        if total > 0:
            deviations.append(abs(unit.number_of_women / total - 0.5))
    return sum(deviations) / len(units) if units else 0.0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class PairIndicators(BaseModel):
    """Indicators over the generated pairs."""

    number_of_pairs: int
    number_of_successors: int
    gender_deviation: float
    average_age_difference: float
    average_preference_deviation: float

    @classmethod
    def compute(cls, pairs: Sequence[Pair], successors: Sequence[Participant]) -> PairIndicators:
        return cls(
            number_of_pairs=len(pairs),
            number_of_successors=len(successors),
            gender_deviation=_gender_deviation(pairs),
            average_age_difference=_mean([p.age_difference for p in pairs]),
            average_preference_deviation=_mean([p.preference_deviation for p in pairs]),
        )


class GroupIndicators(BaseModel):
    """Indicators over the course-groups, with route statistics over the grouped pairs."""

    number_of_groups: int
    number_of_successors: int
    gender_deviation: float
    average_age_difference: float
    average_preference_deviation: float
    total_path_length: float
    average_path_length: float
    path_length_std_dev: float

    @classmethod
    def compute(cls, groups: Sequence[Group], successors: Sequence[Pair]) -> GroupIndicators:
        grouped: dict[int, Pair] = {}
        for group in groups:
            for pair in group.pairs:
                grouped.setdefault(pair.pair_number, pair)

        lengths = [p.path_length for p in grouped.values() if p.path_length is not None]
        if len(lengths) < len(grouped):
            logger.warning(f"{len(grouped) - len(lengths)} grouped pairs have no route length")

        average = _mean(lengths)
        variance = _mean([(length - average) ** 2 for length in lengths])

        return cls(
            number_of_groups=len(groups),
            number_of_successors=len(successors),
            gender_deviation=_gender_deviation(groups),
            average_age_difference=_mean([g.age_difference for g in groups]),
            average_preference_deviation=_mean([g.preference_deviation for g in groups]),
            total_path_length=sum(lengths),
            average_path_length=average,
            path_length_std_dev=math.sqrt(variance),
        )
