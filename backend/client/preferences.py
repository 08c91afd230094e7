import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import settings

logger = logging.getLogger("matchup.client.preferences")


def _escape_part(part: Any) -> str:
    """Escape a value to a filesystem-safe path segment."""
    s = re.sub(r"[^A-Za-z0-9._\-=]", "_", str(part))
    return s[:128] or "_"


def _read_json(path: Path):
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except ValueError as e:
        logger.warning(f"Ignoring unreadable preferences file {path}: {e}")
        return None


def _write_json(path: Path, data: Any):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
    os.replace(tmp, path)


class PreferenceStore:
    """Per-user UI flags that survive restarts.

    Each account gets its own file, nothing leaks between users on a shared
    device.
    """

    defaults = {
        "selected_sport": "football",
        "questionnaire_completed": False,
    }

    def __init__(self, user_id: str, directory: Path | None = None):
        self.user_id = user_id
        self.path = Path(directory or settings.PREFERENCES_DIR) / (
            f"user_{_escape_part(user_id)}.json"
        )
        self.values = {**self.defaults, **(_read_json(self.path) or {})}

    def get(self, key: str, default=None):
        return self.values.get(key, default)

    def set(self, key: str, value):
        self.values[key] = value
        _write_json(self.path, self.values)

    @property
    def selected_sport(self) -> str:
        return self.values["selected_sport"]

    @property
    def questionnaire_completed(self) -> bool:
        return bool(self.values["questionnaire_completed"])
