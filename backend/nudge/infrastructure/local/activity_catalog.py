"""
Static activity catalog.

Built-in activity definitions, optionally extended from a JSON file of
``{"activity_id": "Display name"}`` pairs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from nudge.core.exceptions import ValidationError
from nudge.interfaces.activity_catalog import IActivityCatalog

DEFAULT_ACTIVITIES: dict[str, str] = {
    # Mind-body
    "lin_health_education": "Lin Health Education",
    "breathing": "Breathing Exercises",
    "external_orienting": "External Orienting",
    "internal_orienting": "Internal Orienting",
    "visualize_movement": "Visualize Graded Movement",
    "movement_coach": "Movement Coach Exercise",
    "expressive_writing": "Expressive Writing",
    # Physical
    "biking": "Stationary Biking",
    "dumbbell_presses": "Dumbbell Presses",
    "run": "Run",
    "green_lake_walk": "Walk around Green Lake",
    "neighborhood_walk": "Neighborhood Walk",
    "lin_health_activity": "Lin Health Activity",
    # Professional
    "coursera_module": "Coursera Modules",
    "job_followup": "Job Application Follow-up",
    "job_search": "Job Search / New Application",
}


class StaticActivityCatalog(IActivityCatalog):
    """In-process catalog; loaded once and never mutated."""

    def __init__(self, extra_path: Optional[str] = None, base: Optional[dict[str, str]] = None):
        names = dict(DEFAULT_ACTIVITIES if base is None else base)
        if extra_path:
            names.update(self._load(Path(extra_path)))
        self._names = names

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ValidationError(f"Cannot read activity catalog {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValidationError(f"Activity catalog {path} must be a JSON object")
        return {str(key): str(value) for key, value in raw.items()}

    def get_name_map(self) -> dict[str, str]:
        return dict(self._names)
