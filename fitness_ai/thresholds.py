"""Per-exercise form threshold table.

Wire format (JSON)::

    {"squat": {"medium": [{"knee_angle_min": 50, "knee_angle_max": 175}]}}

Keys ending in ``_min`` are lower bounds and keys ending in ``_max`` are
upper bounds on the metric named by the rest of the key. Only the first
entry of each list is ever consulted. Malformed pieces are logged and
dropped; loading never fails as a whole.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

logger = logging.getLogger("ThresholdTable")

Bounds = Dict[str, float]


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class ThresholdTable:
    """Exercise x difficulty lookup of form bounds.

    Attributes:
        table: Parsed mapping of exercise -> difficulty -> list of bounds
    """

    def __init__(self, table: Optional[Mapping[str, Any]] = None) -> None:
        self.table: Dict[str, Dict[str, List[Bounds]]] = self._parse(table or {})
        self._reported_missing: Set[Tuple[str, str]] = set()

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> 'ThresholdTable':
        """Build a table from a JSON document; unparsable input yields an empty table."""
        try:
            raw = json.loads(text)
        except (TypeError, ValueError) as e:
            logger.error(f"Error parsing thresholds: {e}")
            return cls()
        return cls(raw)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ThresholdTable':
        """Build a table from a JSON file; an unreadable file yields an empty table."""
        try:
            text = Path(path).read_text(encoding='utf-8')
        except OSError as e:
            logger.error(f"Error reading thresholds from {path}: {e}")
            return cls()
        return cls.from_json(text)

    def _parse(self, raw: Any) -> Dict[str, Dict[str, List[Bounds]]]:
        if not isinstance(raw, Mapping):
            logger.warning("Threshold table must be an object keyed by exercise; ignoring it")
            return {}

        parsed: Dict[str, Dict[str, List[Bounds]]] = {}
        for exercise, difficulties in raw.items():
            if not isinstance(difficulties, Mapping):
                logger.warning(f"Skipping thresholds for {exercise}: expected an object of difficulties")
                continue
            levels: Dict[str, List[Bounds]] = {}
            for difficulty, entries in difficulties.items():
                if not isinstance(entries, list):
                    logger.warning(f"Skipping thresholds for {exercise} ({difficulty}): expected a list")
                    continue
                bounds_list = [
                    bounds for bounds in (self._parse_entry(exercise, difficulty, entry) for entry in entries)
                    if bounds is not None
                ]
                if bounds_list:
                    levels[str(difficulty)] = bounds_list
            if levels:
                parsed[str(exercise)] = levels

        logger.info(f"Thresholds loaded successfully for {len(parsed)} exercises")
        return parsed

    @staticmethod
    def _parse_entry(exercise: str, difficulty: str, entry: Any) -> Optional[Bounds]:
        if not isinstance(entry, Mapping):
            logger.warning(f"Skipping non-object threshold entry for {exercise} ({difficulty})")
            return None
        bounds: Bounds = {}
        for key, value in entry.items():
            number = _as_number(value)
            if number is None:
                logger.warning(f"Skipping non-numeric bound {key}={value!r} for {exercise} ({difficulty})")
                continue
            bounds[str(key)] = number
        return bounds

    def lookup(self, exercise: str, difficulty: str) -> Bounds:
        """Return the first bound set for an exercise/difficulty, or an empty dict."""
        entries = self.table.get(exercise, {}).get(difficulty)
        if not entries:
            if (exercise, difficulty) not in self._reported_missing:
                self._reported_missing.add((exercise, difficulty))
                logger.warning(f"No thresholds found for {exercise} ({difficulty})")
            return {}
        return dict(entries[0])

    def exercises(self) -> List[str]:
        return list(self.table)

    def __len__(self) -> int:
        return len(self.table)
