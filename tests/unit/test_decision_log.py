"""Tests for the routing decision log."""

from __future__ import annotations

import json
import logging

from spinfood.decision_log import DecisionLogger


class TestDecisionLogger:
    def test_summary_counts_decisions_per_stage(self):
        logger = DecisionLogger()
        logger.log_decision("pairing.joint", "pair 1: a + b")
        logger.log_decision("pairing.joint", "pair 2: c + d")
        logger.log_decision("grouping.successor", "pair 3 removed")

        summary = logger.get_summary()

        assert summary["decision_counts"] == {"pairing.joint": 2, "grouping.successor": 1}
        assert logger.count("pairing.joint") == 2
        assert logger.count("pairing.unmatched") == 0

    def test_warnings_are_logged(self, caplog):
        logger = DecisionLogger()

        with caplog.at_level(logging.WARNING):
            logger.log_warning("partner x of y is not available")

        assert "[ROUTING] partner x of y is not available" in caplog.text
        assert logger.get_summary()["warnings"] == ["partner x of y is not available"]

    def test_save_to_file(self, tmp_path):
        logger = DecisionLogger(debug_mode=True)
        logger.log_decision("pairing.preference", "pair 1: a + b (meat)")
        logger.log_progress("Pairing finished")

        path = logger.save_to_file(tmp_path / "logs", run_id="test")

        data = json.loads(open(path).read())
        assert data["run_id"] == "test"
        assert data["decisions"] == {"pairing.preference": ["pair 1: a + b (meat)"]}
        assert data["summary"]["progress"] == ["Pairing finished"]
