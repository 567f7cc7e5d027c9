from __future__ import annotations

import json
import logging
from pathlib import Path

from growcycle.models import PlannerPreferences

logger = logging.getLogger(__name__)


class PreferencesStore:
    def __init__(self, path: str = "data/preferences.json"):
        self.path = Path(path)

    def load(self) -> PlannerPreferences:
        """
        Load operator preferences from disk. Returns defaults if the file is missing or invalid.
        """
        try:
            if not self.path.exists():
                return PlannerPreferences()

            data = json.loads(self.path.read_text(encoding="utf-8"))
            return PlannerPreferences(**data)
        except Exception as e:
            logger.warning(f"Could not read preferences from {self.path}: {e}")
            return PlannerPreferences()

    def save(self, prefs: PlannerPreferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(prefs.model_dump(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
