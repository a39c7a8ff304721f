# slopedash/game/highscores.py
from __future__ import annotations
import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union
from .config import HIGHSCORES_KEY, HIGHSCORES_CAP, NAME_MAX_LEN, DEFAULT_NAME


@dataclass
class HighScoreEntry:
    name: str
    score: int
    date: str       # ISO-8601


def clean_name(raw: Optional[str]) -> str:
    name = (raw or "").strip()[:NAME_MAX_LEN].strip()
    return name or DEFAULT_NAME


class HighScoreStore:
    """
    Leaderboard kept in a JSON key-value file. The list lives under
    HIGHSCORES_KEY, sorted by score (desc) and capped at HIGHSCORES_CAP.
    Other keys in the file are left untouched.
    """
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_blob(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            blob = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return blob if isinstance(blob, dict) else {}

    def _write_blob(self, blob: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(blob, indent=2), encoding="utf-8")

    def load(self) -> List[HighScoreEntry]:
        raw = self._read_blob().get(HIGHSCORES_KEY, [])
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                entries.append(HighScoreEntry(
                    name=item.get("name") or DEFAULT_NAME,
                    score=int(item.get("score", 0)),
                    date=str(item.get("date", "")),
                ))
            except (TypeError, ValueError):
                continue
        entries.sort(key=lambda e: e.score, reverse=True)
        return entries[:HIGHSCORES_CAP]

    def add(self, name: Optional[str], score: int, when: Optional[datetime] = None) -> HighScoreEntry:
        when = when or datetime.now(timezone.utc)
        entry = HighScoreEntry(name=clean_name(name), score=int(score), date=when.isoformat())
        entries = self.load()
        entries.append(entry)
        entries.sort(key=lambda e: e.score, reverse=True)

        blob = self._read_blob()
        blob[HIGHSCORES_KEY] = [asdict(e) for e in entries[:HIGHSCORES_CAP]]
        self._write_blob(blob)
        return entry

    def qualifies(self, score: int) -> bool:
        entries = self.load()
        return len(entries) < HIGHSCORES_CAP or score > entries[-1].score

    def clear(self):
        blob = self._read_blob()
        if HIGHSCORES_KEY in blob:
            del blob[HIGHSCORES_KEY]
            self._write_blob(blob)
