"""Configuration schema registry.

Defines all valid configuration keys with their types and validation rules.
This is the single source of truth for configuration structure.
"""

from __future__ import annotations

from typing import Any

from spinfood.constants import ARRANGEMENT_COUNT, GROUP_SIZE, MAX_PAIRS_PER_KITCHEN

from .types import ConfigKey, ConfigType

# =============================================================================
# CONFIGURATION SCHEMA REGISTRY
#
# All configuration keys must be defined here. Unknown keys will be rejected.
# =============================================================================

CONFIG_SCHEMA: dict[str, ConfigKey] = {
    # =========================================================================
    # PAIRING
    # =========================================================================
    "pairing.max_pairs_per_kitchen": ConfigKey(
        key="pairing.max_pairs_per_kitchen",
        config_type=ConfigType.INT,
        default=MAX_PAIRS_PER_KITCHEN,
        description="Pairs allowed to cook at one kitchen location before all of them are dropped",
        min_value=1,
        max_value=10,
    ),
    # =========================================================================
    # GROUPING
    # =========================================================================
    "grouping.arrangement_count": ConfigKey(
        key="grouping.arrangement_count",
        config_type=ConfigType.INT,
        default=ARRANGEMENT_COUNT,
        description="Partitions generated per cohort (three courses plus the cooking rota)",
        min_value=GROUP_SIZE,
        max_value=GROUP_SIZE + 1,
    ),
    "grouping.random_seed": ConfigKey(
        key="grouping.random_seed",
        config_type=ConfigType.INT,
        description="Seed for the balancing step; unset means a fresh random source per run",
        min_value=0,
    ),
    # =========================================================================
    # COURSE ASSIGNMENT
    # =========================================================================
    "course_assignment.rota_penalty": ConfigKey(
        key="course_assignment.rota_penalty",
        config_type=ConfigType.INT,
        default=500,
        description="Metres added per extra host of the same course within one cooking rota group",
        min_value=0,
    ),
    # =========================================================================
    # CP-SAT SOLVER
    # =========================================================================
    "solver.time_limit.seconds": ConfigKey(
        key="solver.time_limit.seconds",
        config_type=ConfigType.FLOAT,
        default=10.0,
        description="Time limit per cohort for the host assignment model",
        min_value=0.1,
        max_value=600,
    ),
    "solver.num_workers": ConfigKey(
        key="solver.num_workers",
        config_type=ConfigType.INT,
        default=1,
        description="CP-SAT search workers (1 keeps runs reproducible)",
        min_value=1,
        max_value=64,
    ),
    "solver.random_seed": ConfigKey(
        key="solver.random_seed",
        config_type=ConfigType.INT,
        default=0,
        description="CP-SAT random seed",
        min_value=0,
    ),
    # =========================================================================
    # RUN OUTPUT
    # =========================================================================
    "output.decision_log.enabled": ConfigKey(
        key="output.decision_log.enabled",
        config_type=ConfigType.BOOL,
        default=False,
        description="Write the routing decision log to a JSON file after each run",
    ),
    "output.decision_log.directory": ConfigKey(
        key="output.decision_log.directory",
        config_type=ConfigType.STRING,
        default="logs/spinfood",
        description="Directory for decision log files",
    ),
}


def get_all_required_keys() -> list[str]:
    """Get all keys that must be provided explicitly."""
    return [key for key, schema in CONFIG_SCHEMA.items() if schema.required]


def validate_key(key: str, value: Any) -> str | None:
    """
    Validate a value against its schema.

    Returns:
        None if valid, error message if invalid
    """
    schema = CONFIG_SCHEMA.get(key)
    if schema is None:
        return f"Unknown config key: {key}"
    return schema.validate(value)
