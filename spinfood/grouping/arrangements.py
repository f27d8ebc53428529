"""
Arrangement Generator - partitions of one cohort into course-groups.

The nine pairs of a cohort are laid out on a 3x3 grid and each arrangement is one parallel class
of lines of the affine plane of order 3: rows, columns, diagonals and anti-diagonals. Two
points lie on exactly one common line, so two pairs share a group in exactly one of the four
arrangements. The first three therefore never repeat an encounter.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from spinfood.constants import ARRANGEMENT_COUNT, CLUSTER_SIZE, GROUP_SIZE
from spinfood.errors import CohortSizeError
from spinfood.models import Pair

logger = logging.getLogger(__name__)

Arrangement = list[list[Pair]]

# Line index of grid point (row, col) within each parallel class, in arrangement order
_PARALLEL_CLASSES: list[Callable[[int, int], int]] = [
    lambda row, col: row,
    lambda row, col: col,
    lambda row, col: (col - row) % GROUP_SIZE,
    lambda row, col: (col + row) % GROUP_SIZE,
]

MIN_ARRANGEMENT_COUNT = 3


def generate_arrangements(cohort: Sequence[Pair], arrangement_count: int = ARRANGEMENT_COUNT) -> list[Arrangement]:
    """Partition a cohort into ``arrangement_count`` sets of disjoint groups of three.

    Args:
        cohort: Exactly CLUSTER_SIZE pairs; position in the sequence fixes the grid point.
        arrangement_count: 3 (one per course) or 4 (plus the cooking rota).

    Returns:
        One list of GROUP_SIZE groups per arrangement, groups and members in grid order.

    Raises:
        CohortSizeError: If the cohort does not hold exactly CLUSTER_SIZE pairs
        ValueError: If arrangement_count is out of range
    """
    if len(cohort) != CLUSTER_SIZE:
        raise CohortSizeError(f"A cohort needs exactly {CLUSTER_SIZE} pairs, got {len(cohort)}")
    if not MIN_ARRANGEMENT_COUNT <= arrangement_count <= len(_PARALLEL_CLASSES):
        raise ValueError(
            f"arrangement_count must be between {MIN_ARRANGEMENT_COUNT} and {len(_PARALLEL_CLASSES)}, "
            f"got {arrangement_count}"
        )

    arrangements: list[Arrangement] = []
    for line_of in _PARALLEL_CLASSES[:arrangement_count]:
        groups: Arrangement = [[] for _ in range(GROUP_SIZE)]
        for position, pair in enumerate(cohort):
            row, col = divmod(position, GROUP_SIZE)
            groups[line_of(row, col)].append(pair)
        arrangements.append(groups)

    logger.debug(
        f"Generated {arrangement_count} arrangements for cohort "
        f"{[pair.pair_number for pair in cohort]}"
    )
    return arrangements
