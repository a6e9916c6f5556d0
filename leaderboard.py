# leaderboard.py
"""Leaderboard persistence (one JSON array, rewritten on every save)."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, Field, ValidationError

import config

log = config.get_logger()


class ScoreRecord(BaseModel):
    username: str = Field(min_length=1)
    wpm: int = Field(ge=0)
    date: str
    won: bool


# ============================================================
#  Pure list helpers
# ============================================================


def _key(username: str) -> str:
    return username.strip().lower()


def sort_scores(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Highest WPM first; ties keep their order."""
    return sorted(entries, key=lambda e: e["wpm"], reverse=True)


def normalize(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort, then keep the best entry per username (case-insensitive)."""
    seen = set()
    table: List[Dict[str, Any]] = []
    for e in sort_scores(entries):
        k = _key(e["username"])
        if k in seen:
            continue
        seen.add(k)
        table.append(e)
    return table


def merge_score(entries: List[Dict[str, Any]], score: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Replace the user's previous entry with `score` and re-sort."""
    k = _key(score["username"])
    rows = [e for e in entries if _key(e["username"]) != k]
    rows.append(score)
    return sort_scores(rows)


# ============================================================
#  File store
# ============================================================


class LeaderboardStore:
    """File-based leaderboard. No locking: the last writer wins."""

    def __init__(self, path: Path = config.LEADERBOARD_FILE) -> None:
        self.path = Path(path)

    def _write(self, entries: List[Dict[str, Any]]) -> None:
        os.makedirs(self.path.parent, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2, ensure_ascii=False)

    def _valid_entries(self, data: List[Any]) -> List[Dict[str, Any]]:
        """Drop (and log) records that do not validate; keep the rest."""
        entries: List[Dict[str, Any]] = []
        for i, e in enumerate(data):
            try:
                entries.append(ScoreRecord.model_validate(e).model_dump())
            except ValidationError as err:
                log.warning("[leaderboard] Skipping invalid entry #%d in %s: %s", i, self.path, err)
        return entries

    def load(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("leaderboard file is not a JSON array")
        except (OSError, ValueError) as e:
            log.warning("[leaderboard] Could not read %s, returning empty array: %s", self.path, e)
        else:
            return self._valid_entries(data)

        try:
            self._write([])
        except OSError as e:
            log.warning("[leaderboard] Could not create empty leaderboard file: %s", e)
        return []

    def save(self, entries: List[Dict[str, Any]]) -> bool:
        """Overwrite the file; False when the environment refuses the write."""
        try:
            self._write(normalize(entries))
            return True
        except OSError as e:
            log.error("[leaderboard] Error writing leaderboard file: %s", e)
            return False

    def reset(self) -> bool:
        return self.save([])

    def username_exists(self, username: str) -> bool:
        k = _key(username)
        return any(_key(e["username"]) == k for e in self.load())

    def submit(self, score: Dict[str, Any]) -> List[Dict[str, Any]]:
        table = merge_score(self.load(), score)
        self.save(table)
        return table
