"""
Course Assignment - picks the host pair of every course-group in one cohort.

Every pair cooks exactly one course and every group dines at exactly one member's kitchen.
Each pair sits in one group per course, so hosting is a perfect matching between pairs and
groups and one always exists. Among the matchings, CP-SAT minimizes in integer metres:

    sum over pairs of  d(appetizer host, main host) + d(main host, dessert host) + d(dessert host, party)
    + rota_penalty * (extra same-course hosts inside each group of the final arrangement)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ortools.sat.python import cp_model

from spinfood.config import ConfigLoader
from spinfood.errors import CourseAssignmentError
from spinfood.geo import DistanceFunction, haversine_km, to_meters
from spinfood.logging_config import TRACE
from spinfood.models import Course, Group, Location, Pair

logger = logging.getLogger(__name__)

COURSES = list(Course)


@dataclass
class HostAssignment:
    """Result of one cohort's course assignment."""

    hosts: dict[tuple[Course, int], int]  # (course, group_number) -> host pair number
    objective_meters: int
    rota_conflicts: int
    status: str
    route_km: dict[int, float] = field(default_factory=dict)  # pair number -> route length


def assign_courses(
    groups: Sequence[Group],
    party_location: Location,
    final_partition: Sequence[Sequence[Pair]],
    config: ConfigLoader | None = None,
    distance: DistanceFunction = haversine_km,
) -> HostAssignment:
    """Assign hosts for one cohort's course-groups and write the schedule onto groups and pairs.

    Sets ``host_pair_number`` and ``kitchen`` on every group, and ``cooking_course`` and
    ``path_length`` on every pair.

    Raises:
        CourseAssignmentError: If the groups do not seat every pair once per course, or the
            solver returns no solution
    """
    config = config or ConfigLoader.get_instance()
    rota_penalty = config.get_int("course_assignment.rota_penalty")

    pairs_by_number: dict[int, Pair] = {}
    group_of: dict[tuple[int, Course], int] = {}  # (pair number, course) -> group index
    for g_idx, group in enumerate(groups):
        for pair in group.pairs:
            if (pair.pair_number, group.course) in group_of:
                raise CourseAssignmentError(f"Pair {pair.pair_number} is seated twice for {group.course.value}")
            pairs_by_number[pair.pair_number] = pair
            group_of[(pair.pair_number, group.course)] = g_idx

    for pair_number in pairs_by_number:
        missing = [c.value for c in COURSES if (pair_number, c) not in group_of]
        if missing:
            raise CourseAssignmentError(f"Pair {pair_number} has no group for {', '.join(missing)}")

    model = cp_model.CpModel()

    # host[(g_idx, pair_number)] = 1 if the pair cooks for that group
    host: dict[tuple[int, int], cp_model.IntVar] = {}
    for g_idx, group in enumerate(groups):
        for pair in group.pairs:
            host[(g_idx, pair.pair_number)] = model.NewBoolVar(f"host_g{g_idx}_p{pair.pair_number}")
        model.AddExactlyOne([host[(g_idx, pair.pair_number)] for pair in group.pairs])

    for pair_number in pairs_by_number:
        model.AddExactlyOne([host[(group_of[(pair_number, course)], pair_number)] for course in COURSES])

    objective_terms: list[cp_model.LinearExprT] = []

    # Route legs between consecutive courses; each leg cost is the distance between the two chosen hosts
    for pair_number in pairs_by_number:
        for leg, (origin_course, target_course) in enumerate(zip(COURSES, COURSES[1:])):
            origin_idx = group_of[(pair_number, origin_course)]
            target_idx = group_of[(pair_number, target_course)]
            for origin_host in groups[origin_idx].pairs:
                for target_host in groups[target_idx].pairs:
                    meters = to_meters(distance(origin_host.kitchen.location, target_host.kitchen.location))
                    if meters == 0:
                        continue
                    both = model.NewBoolVar(
                        f"leg{leg}_p{pair_number}_{origin_host.pair_number}_{target_host.pair_number}"
                    )
                    model.Add(
                        both
                        >= host[(origin_idx, origin_host.pair_number)] + host[(target_idx, target_host.pair_number)] - 1
                    )
                    objective_terms.append(meters * both)

        # Last leg from the dessert host to the party
        dessert_idx = group_of[(pair_number, Course.DESSERT)]
        for dessert_host in groups[dessert_idx].pairs:
            meters = to_meters(distance(dessert_host.kitchen.location, party_location))
            objective_terms.append(meters * host[(dessert_idx, dessert_host.pair_number)])

    # Cooking rota: spread each course's hosts across the groups of the final arrangement
    excess_vars: list[cp_model.IntVar] = []
    for r_idx, rota_group in enumerate(final_partition):
        members = [p.pair_number for p in rota_group if p.pair_number in pairs_by_number]
        for course in COURSES:
            cooks = sum(host[(group_of[(n, course)], n)] for n in members)
            excess = model.NewIntVar(0, max(len(members) - 1, 0), f"rota_excess_r{r_idx}_{course.value}")
            model.Add(excess >= cooks - 1)
            excess_vars.append(excess)
            objective_terms.append(rota_penalty * excess)

    model.Minimize(sum(objective_terms))
    logger.log(
        TRACE,
        f"Course assignment model: {len(model.Proto().variables)} variables, "
        f"{len(model.Proto().constraints)} constraints",
    )

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = config.get_solver_param("time_limit", "seconds")
    solver.parameters.num_search_workers = config.get_solver_param("num_workers")
    solver.parameters.random_seed = config.get_solver_param("random_seed")

    status = solver.Solve(model)
    if status not in [cp_model.OPTIMAL, cp_model.FEASIBLE]:
        logger.error(f"Course assignment failed with status {solver.StatusName(status)}")
        raise CourseAssignmentError(
            f"No host assignment found for pairs {sorted(pairs_by_number)}: {solver.StatusName(status)}"
        )

    hosts: dict[tuple[Course, int], int] = {}
    for g_idx, group in enumerate(groups):
        host_pair = next(p for p in group.pairs if solver.Value(host[(g_idx, p.pair_number)]) == 1)
        group.host_pair_number = host_pair.pair_number
        group.kitchen = host_pair.kitchen
        host_pair.cooking_course = group.course
        hosts[(group.course, group.group_number)] = host_pair.pair_number

    route_km: dict[int, float] = {}
    for pair_number, pair in pairs_by_number.items():
        stops = [
            groups[group_of[(pair_number, course)]].kitchen.location  # type: ignore[union-attr]
            for course in COURSES
        ]
        stops.append(party_location)
        pair.path_length = sum(distance(a, b) for a, b in zip(stops, stops[1:]))
        route_km[pair_number] = pair.path_length

    rota_conflicts = sum(int(solver.Value(v)) for v in excess_vars)
    objective = int(solver.ObjectiveValue())
    logger.debug(
        f"Course assignment {solver.StatusName(status)} for pairs {sorted(pairs_by_number)}: "
        f"objective {objective} m, {rota_conflicts} rota conflicts"
    )

    return HostAssignment(
        hosts=hosts,
        objective_meters=objective,
        rota_conflicts=rota_conflicts,
        status=solver.StatusName(status),
        route_km=route_km,
    )
