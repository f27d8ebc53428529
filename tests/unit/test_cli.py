"""Tests for the command-line entry point."""

from __future__ import annotations

import json

import pytest

from spinfood.cli import main, parse_args

HEADER = (
    ",ID,Name,FoodPreference,Age,Sex,HasKitchen,Kitchen_Story,"
    "Kitchen_Longitude,Kitchen_Latitude,ID_2,Name_2,Age_2,Sex_2\n"
)


@pytest.fixture
def event_files(tmp_path):
    """Nine joint registrations with their own kitchens: exactly one cohort."""
    rows = [
        f"{i},a{i},Person a{i},meat,{20 + i}.0,female,yes,0.0,{8.66 + i * 0.004:.4f},{50.57 + i * 0.003:.4f},"
        f"b{i},Person b{i},{21 + i}.0,male\n"
        for i in range(9)
    ]
    participants = tmp_path / "teilnehmerliste.csv"
    participants.write_text(HEADER + "".join(rows))

    party = tmp_path / "partylocation.csv"
    party.write_text("Longitude,Latitude\n8.6746166676233,50.5909317660173\n")

    config = tmp_path / "spinfood.json"
    config.write_text(json.dumps({"solver.time_limit.seconds": 5.0}))
    return participants, party, config


class TestParseArgs:
    def test_required_arguments(self):
        args = parse_args(["--participants", "p.csv", "--party", "l.csv", "--seed", "3"])

        assert args.participants == "p.csv"
        assert args.seed == 3
        assert args.output is None
        assert args.debug is False

    def test_missing_participants(self):
        with pytest.raises(SystemExit):
            parse_args(["--party", "l.csv"])


class TestMain:
    def test_full_run_writes_schedule_and_stats(self, event_files, tmp_path):
        participants, party, config = event_files
        output = tmp_path / "schedule.csv"
        stats = tmp_path / "stats.json"

        exit_code = main(
            [
                "--participants", str(participants),
                "--party", str(party),
                "--output", str(output),
                "--config", str(config),
                "--seed", "1",
                "--stats-output", str(stats),
            ]
        )  # fmt: skip

        assert exit_code == 0
        assert len(output.read_text().splitlines()) == 1 + 9 * 3 * 2
        data = json.loads(stats.read_text())
        assert data["success"] is True
        assert data["pairs"]["number_of_pairs"] == 9
        assert data["groups"]["number_of_groups"] == 9
        assert data["successor_pairs"] == 0

    def test_bad_input_returns_error(self, tmp_path):
        bad = tmp_path / "bad.csv"
        bad.write_text("nothing useful\n")
        stats = tmp_path / "stats.json"

        exit_code = main(["--participants", str(bad), "--party", str(bad), "--stats-output", str(stats)])

        assert exit_code == 1
        assert json.loads(stats.read_text())["success"] is False
