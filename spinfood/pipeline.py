"""
Pipeline - one run of the event planning from participants to the exported schedule.

    read -> pair -> validate pairs -> group -> validate groups -> indicators -> export

Engines run once over a static snapshot; nothing is persisted besides the optional export and
decision log.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from spinfood.config import ConfigLoader
from spinfood.decision_log import DecisionLogger
from spinfood.geo import DistanceFunction, haversine_km
from spinfood.grouping import GroupGenerator, GroupingResult
from spinfood.io import read_participants, read_party_location, write_groups_csv
from spinfood.metrics import GroupIndicators, PairIndicators
from spinfood.models import Location, PairingResult, Participant
from spinfood.pairing import PairGenerator
from spinfood.validation import GroupsValidator, PairsValidator, ValidationResult

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    pairing: PairingResult
    grouping: GroupingResult
    pair_indicators: PairIndicators
    group_indicators: GroupIndicators
    pair_validation: ValidationResult
    group_validation: ValidationResult
    decision_summary: dict[str, Any] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    output_path: Path | None = None
    decision_log_path: str | None = None

    def stats(self) -> dict[str, Any]:
        """Flat summary for the CLI's stats output."""
        return {
            "pairs": self.pair_indicators.model_dump(),
            "groups": self.group_indicators.model_dump(),
            "successor_participants": len(self.pairing.successor_participants),
            "successor_pairs": len(self.grouping.successor_pairs),
            "repeated_encounters": self.group_validation.statistics.repeated_encounters,
            "warnings": len(self.decision_summary.get("warnings", [])),
            "settings": self.settings,
        }


def run_pipeline(
    participants: Sequence[Participant],
    party_location: Location,
    config: ConfigLoader | None = None,
    rng: random.Random | None = None,
    distance: DistanceFunction = haversine_km,
    output_path: str | Path | None = None,
    decision_logger: DecisionLogger | None = None,
) -> PipelineResult:
    """Pair and group a participant snapshot.

    Raises:
        InvariantViolationError: If a generated pair or group breaks a hard rule
        CohortSizeError: If balancing leaves a partial cohort
        CourseAssignmentError: If hosts cannot be assigned for a cohort
    """
    config = config or ConfigLoader.get_instance()
    decision_logger = decision_logger or DecisionLogger()

    settings = config.as_dict()
    logger.debug(f"Effective settings: {settings}")
    decision_logger.log_progress(f"Starting run with {len(participants)} participants")

    pairing = PairGenerator(
        participants,
        party_location,
        config=config,
        distance=distance,
        decision_logger=decision_logger,
    ).generate_pairs()
    pair_validation = PairsValidator(
        pairing.pairs, max_pairs_per_kitchen=config.get_int("pairing.max_pairs_per_kitchen")
    ).validate()

    grouping = GroupGenerator(
        pairing.pairs,
        party_location,
        rng=rng,
        config=config,
        distance=distance,
        decision_logger=decision_logger,
    ).generate_groups()
    grouped_pairs = [p for p in pairing.pairs if not p.successor]
    group_validation = GroupsValidator(grouping.groups, pairs=grouped_pairs, history=grouping.history).validate()

    result = PipelineResult(
        pairing=pairing,
        grouping=grouping,
        pair_indicators=PairIndicators.compute(pairing.pairs, pairing.successor_participants),
        group_indicators=GroupIndicators.compute(grouping.groups, grouping.successor_pairs),
        pair_validation=pair_validation,
        group_validation=group_validation,
        settings=settings,
    )

    if output_path is not None:
        result.output_path = write_groups_csv(grouping.groups, output_path)

    if config.get_bool("output.decision_log.enabled"):
        result.decision_log_path = decision_logger.save_to_file(config.get_str("output.decision_log.directory"))

    result.decision_summary = decision_logger.get_summary()
    logger.info(
        f"Run complete: {len(pairing.pairs)} pairs, {len(grouping.groups)} groups, "
        f"{len(pairing.successor_participants)} successor participants, "
        f"{len(grouping.successor_pairs)} successor pairs"
    )
    return result


def run_from_files(
    participants_path: str | Path,
    party_path: str | Path,
    output_path: str | Path | None = None,
    config: ConfigLoader | None = None,
    rng: random.Random | None = None,
    decision_logger: DecisionLogger | None = None,
) -> PipelineResult:
    """Read both input files and run the pipeline."""
    participants = read_participants(participants_path)
    party_location = read_party_location(party_path)
    return run_pipeline(
        participants,
        party_location,
        config=config,
        rng=rng,
        output_path=output_path,
        decision_logger=decision_logger,
    )
