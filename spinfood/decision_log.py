"""
Decision Logger - records the routing decisions the engines make.

Pairing and grouping never raise for participants or pairs they cannot place; instead every
such decision is written here so a run can be audited afterwards.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class DecisionLogger:
    """Tracks routing decisions, warnings and stage progress during one run."""

    def __init__(self, debug_mode: bool = False) -> None:
        self.debug_mode = debug_mode
        self.decisions: dict[str, list[str]] = defaultdict(list)
        self.warnings: list[str] = []
        self.progress: list[str] = []

    def log_decision(self, stage: str, details: str) -> None:
        """Record a routing decision (a pair created, a participant left over, ...)."""
        self.decisions[stage].append(details)
        if self.debug_mode:
            logger.debug(f"[{stage.upper()}] {details}")

    def log_warning(self, warning: str) -> None:
        """Record a decision a planner should look at."""
        self.warnings.append(warning)
        logger.warning(f"[ROUTING] {warning}")

    def log_progress(self, message: str) -> None:
        self.progress.append(message)
        logger.info(message)

    def count(self, stage: str) -> int:
        return len(self.decisions.get(stage, []))

    def get_summary(self) -> dict[str, Any]:
        """Get summary of all logged information."""
        return {
            "decision_counts": {stage: len(entries) for stage, entries in self.decisions.items()},
            "warnings": list(self.warnings),
            "progress": list(self.progress),
        }

    def save_to_file(self, logs_dir: Path | str = "logs/spinfood", run_id: str | None = None) -> str:
        """Save the log to a JSON file and return its path."""
        logs_dir = Path(logs_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        run_id_suffix = f"_{run_id}" if run_id else ""
        filepath = logs_dir / f"decision_log_{timestamp}{run_id_suffix}.json"

        log_data = {
            "timestamp": datetime.now().isoformat(),
            "run_id": run_id,
            "debug_mode": self.debug_mode,
            "summary": self.get_summary(),
            "decisions": dict(self.decisions),
        }

        with open(filepath, "w") as f:
            json.dump(log_data, f, indent=2, default=str)

        logger.info(f"Decision log saved to {filepath}")
        return str(filepath)
