"""
Dining History - who shares a table with whom, per course.

Kept as a networkx MultiGraph over pair numbers with one edge per shared course, keyed by the
course. The graph is the record of truth; each pair's ``dining_pairs`` mirrors it so exporters
can read a pair without the graph.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from itertools import combinations

import networkx as nx

from spinfood.models import Course, Pair

logger = logging.getLogger(__name__)


class DiningHistory:
    """Symmetric co-diner relation between pairs."""

    def __init__(self) -> None:
        self.graph = nx.MultiGraph()

    def record_group(self, course: Course, pairs: Iterable[Pair]) -> None:
        """Record that the given pairs dine together for a course.

        Every pair gains every other member as a co-diner for that course, in both directions.
        """
        members = list(pairs)
        for pair in members:
            self.graph.add_node(pair.pair_number)
            pair.dining_pairs.setdefault(course, set())

        for a, b in combinations(members, 2):
            self.graph.add_edge(a.pair_number, b.pair_number, key=course)
            a.dining_pairs[course].add(b.pair_number)
            b.dining_pairs[course].add(a.pair_number)

    def co_diners(self, pair_number: int, course: Course | None = None) -> set[int]:
        """Pair numbers sharing a table with ``pair_number``, for one course or the whole evening."""
        if pair_number not in self.graph:
            return set()
        return {
            other
            for _, other, key in self.graph.edges(pair_number, keys=True)
            if course is None or key == course
        }

    def encounter_count(self, first: int, second: int) -> int:
        """How many courses two pairs share a table for."""
        return self.graph.number_of_edges(first, second)

    def repeated_encounters(self) -> list[tuple[int, int]]:
        """Pairs of pair numbers that meet at more than one course."""
        seen = {(min(u, v), max(u, v)) for u, v in self.graph.edges()}
        return sorted(edge for edge in seen if self.graph.number_of_edges(*edge) > 1)

    def is_symmetric(self, pairs: Iterable[Pair]) -> bool:
        """Check that each pair's ``dining_pairs`` matches the graph for every course."""
        for pair in pairs:
            for course in Course:
                if pair.co_diners(course) != self.co_diners(pair.pair_number, course):
                    logger.debug(f"Dining history of pair {pair.pair_number} out of sync for {course.value}")
                    return False
        return True

    @property
    def pair_numbers(self) -> set[int]:
        return set(self.graph.nodes)

    def __len__(self) -> int:
        return self.graph.number_of_nodes()
