"""Group formation engine: pairs to cohorts and course-groups."""

from .arrangements import generate_arrangements
from .course_assignment import HostAssignment, assign_courses
from .dining_history import DiningHistory
from .group_generator import GroupGenerator, GroupingResult, generate_groups

__all__ = [
    "DiningHistory",
    "GroupGenerator",
    "GroupingResult",
    "HostAssignment",
    "assign_courses",
    "generate_arrangements",
    "generate_groups",
]
