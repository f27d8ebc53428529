"""Fixed conventions of the event format.

Three courses, three pairs per course-group, so a cohort that rotates through every course
without repeating a table holds 3 * 3 pairs.
"""

from __future__ import annotations

GROUP_SIZE = 3
CLUSTER_SIZE = GROUP_SIZE * GROUP_SIZE

# Three live courses plus the cooking rota consumed by course assignment
ARRANGEMENT_COUNT = 4

MAX_PAIRS_PER_KITCHEN = 3
