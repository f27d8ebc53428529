"""Tests for the schedule export."""

from __future__ import annotations

import csv

from spinfood.io import EXPORT_COLUMNS, write_groups_csv
from spinfood.io.csv_export import group_rows
from spinfood.models import Course, FoodPreference, Group

from tests.factories import create_pair


def make_group(number: int, preference: FoodPreference | None, first_pair: int) -> Group:
    pairs = [create_pair(n) for n in range(first_pair, first_pair + 3)]
    return Group(
        pairs=pairs,
        course=Course.MAIN,
        group_number=number,
        food_preference=preference,
        host_pair_number=first_pair,
    )


class TestGroupRows:
    def test_one_row_per_participant(self):
        group = make_group(1, FoodPreference.MEAT, 1)

        rows = group_rows([group])

        assert len(rows) == 6
        assert [r["participant_id"] for r in rows[:2]] == ["p1a", "p1b"]
        assert rows[0]["partner_name"] == "Person p1b"
        assert rows[1]["partner_name"] == "Person p1a"
        assert rows[0]["kitchen_supplier"] == "false"
        assert rows[0]["joint_registration"] == "false"

    def test_kitchen_supplier_is_a_flag(self):
        group = make_group(1, FoodPreference.MEAT, 1)
        group.pairs[0].kitchen_supplier = True

        rows = group_rows([group])

        assert [r["kitchen_supplier"] for r in rows[:4]] == ["true", "true", "false", "false"]

    def test_groups_sorted_by_preference_unresolved_last(self):
        groups = [
            make_group(1, None, 1),
            make_group(2, FoodPreference.VEGAN, 4),
            make_group(3, FoodPreference.MEAT, 7),
        ]

        rows = group_rows(groups)

        assert [rows[i]["group_number"] for i in (0, 6, 12)] == ["3", "2", "1"]
        assert rows[12]["group_preference"] == ""

    def test_course_group_numbers(self):
        group = make_group(1, FoodPreference.MEAT, 1)
        pair = group.pairs[0]
        pair.group_numbers = {Course.APPETIZER: 4, Course.MAIN: 1, Course.DESSERT: 9}
        pair.cooking_course = Course.MAIN

        row = group_rows([group])[0]

        assert (row["appetizer_group"], row["main_group"], row["dessert_group"]) == ("4", "1", "9")
        assert row["cooking_course"] == "main"
        assert row["course"] == "main"


class TestWriteGroupsCsv:
    def test_semicolon_delimited_with_header(self, tmp_path):
        path = write_groups_csv([make_group(1, FoodPreference.MEAT, 1)], tmp_path / "out" / "schedule.csv")

        with open(path, newline="") as f:
            reader = csv.DictReader(f, delimiter=";")
            rows = list(reader)

        assert reader.fieldnames == EXPORT_COLUMNS
        assert len(rows) == 6
        assert rows[0]["pair_preference"] == "meat"
