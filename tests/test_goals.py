# tests/test_goals.py
# Search, status filter and sorting on the goals page.

import pytest

from finance.goals import filter_goals, sort_goals
from finance.models import Goal


@pytest.fixture
def goals():
    return Goal.parse_list([
        {"_id": "1", "name": "Emergency fund", "targetAmount": 5000, "savedAmount": 5000,
         "targetDate": "2025-12-31", "description": "Six months of rent"},
        {"_id": "2", "name": "new laptop", "targetAmount": 1500, "savedAmount": 300,
         "targetDate": "2025-06-30"},
        {"_id": "3", "name": "Holiday", "targetAmount": 2000, "savedAmount": 1500,
         "targetDate": "2026-03-01", "description": "Lisbon trip"},
    ])


def _ids(goals):
    return [goal.id for goal in goals]


def test_search_matches_name_or_description_case_insensitively(goals):
    assert _ids(filter_goals(goals, "LAPTOP")) == ["2"]
    assert _ids(filter_goals(goals, "lisbon")) == ["3"]
    assert _ids(filter_goals(goals, "  ")) == ["1", "2", "3"]


@pytest.mark.parametrize("status, expected", [
    ("all", ["1", "2", "3"]),
    ("active", ["2", "3"]),
    ("completed", ["1"]),
])
def test_status_filter(goals, status, expected):
    assert _ids(filter_goals(goals, status=status)) == expected


def test_search_and_status_combine(goals):
    assert _ids(filter_goals(goals, "fund", "active")) == []


@pytest.mark.parametrize("key, direction, expected", [
    ("targetDate", "asc", ["2", "1", "3"]),
    ("targetDate", "desc", ["3", "1", "2"]),
    ("name", "asc", ["1", "3", "2"]),
    ("targetAmount", "desc", ["1", "3", "2"]),
    ("savedAmount", "asc", ["2", "3", "1"]),
    ("progress", "desc", ["1", "3", "2"]),
])
def test_sort(goals, key, direction, expected):
    assert _ids(sort_goals(goals, key, direction)) == expected


def test_unknown_sort_key_falls_back_to_target_date(goals):
    assert _ids(sort_goals(goals, "colour")) == ["2", "1", "3"]
