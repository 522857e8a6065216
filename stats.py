from __future__ import annotations

from dataclasses import dataclass, asdict, field
import json
import logging
from pathlib import Path
from typing import Any

import config


log = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    id: str
    created_at: str
    duration: int
    source: str
    wpm: float
    raw_wpm: float
    accuracy: int
    active_seconds: float
    source_meta: dict = field(default_factory=dict)


class StatsStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or config.STATS_FILE

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"sessions": []}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as exc:
            log.warning("Could not read %s, starting empty: %s", self.path, exc)
            return {"sessions": []}
        if not isinstance(data, dict):
            return {"sessions": []}
        if not isinstance(data.get("sessions"), list):
            data["sessions"] = []
        return data

    def sessions(self) -> list[dict[str, Any]]:
        return self.load()["sessions"]

    def append_session(self, record: SessionRecord) -> None:
        data = self.load()
        data["sessions"].append(asdict(record))
        self._save(data)
        log.info("Saved result %s: %.2f wpm over %ds", record.id, record.wpm, record.duration)

    def best_scores(self) -> dict[int, float]:
        best: dict[int, float] = {}
        for session in self.sessions():
            duration = session.get("duration")
            wpm = session.get("wpm", 0.0)
            if duration is None:
                continue
            if wpm > best.get(duration, float("-inf")):
                best[duration] = wpm
        return best

    def summary(self) -> dict[str, float]:
        sessions = self.sessions()
        total = len(sessions)
        if not total:
            return {"total": 0, "avg_wpm": 0.0, "avg_raw_wpm": 0.0, "avg_accuracy": 0.0}
        return {
            "total": total,
            "avg_wpm": sum(s.get("wpm", 0.0) for s in sessions) / total,
            "avg_raw_wpm": sum(s.get("raw_wpm", 0.0) for s in sessions) / total,
            "avg_accuracy": sum(s.get("accuracy", 0) for s in sessions) / total,
        }

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
