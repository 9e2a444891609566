"""
Unit tests for the static activity catalog.
"""

import json

import pytest

from nudge.core.exceptions import ValidationError
from nudge.infrastructure.local.activity_catalog import DEFAULT_ACTIVITIES, StaticActivityCatalog


def test_defaults():
    names = StaticActivityCatalog().get_name_map()
    assert names == DEFAULT_ACTIVITIES


def test_extra_file_extends_and_overrides(tmp_path):
    path = tmp_path / "activities.json"
    path.write_text(json.dumps({"run": "Morning Run", "sauna": "Sauna"}), encoding="utf-8")

    names = StaticActivityCatalog(extra_path=str(path)).get_name_map()

    assert names["run"] == "Morning Run"
    assert names["sauna"] == "Sauna"
    assert names["green_lake_walk"] == "Walk around Green Lake"


def test_returned_map_is_a_copy():
    catalog = StaticActivityCatalog(base={"a": "A"})
    catalog.get_name_map()["a"] = "changed"
    assert catalog.get_name_map() == {"a": "A"}


@pytest.mark.parametrize("content", ["not json", "[1, 2]"])
def test_bad_file_raises(tmp_path, content):
    path = tmp_path / "activities.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValidationError):
        StaticActivityCatalog(extra_path=str(path))


def test_missing_file_raises(tmp_path):
    with pytest.raises(ValidationError):
        StaticActivityCatalog(extra_path=str(tmp_path / "nope.json"))


def test_builtin_names():
    names = StaticActivityCatalog().get_name_map()

    assert names["expressive_writing"] == "Expressive Writing"
    assert names["dumbbell_presses"] == "Dumbbell Presses"
    assert names["job_search"] == "Job Search / New Application"
    assert len(names) == 16
