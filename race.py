# race.py
from __future__ import annotations

import json
import math
import random
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import config

log = config.get_logger()

# ============================================================
#  AI pace per difficulty (percent of the track per tick)
# ============================================================

AI_SPEEDS: Dict[str, Dict[str, Tuple[float, float]]] = {
    "easy": {
        "ai1": (0.3, 0.6),
        "ai2": (0.2, 0.5),
    },
    "medium": {
        "ai1": (0.5, 0.8),
        "ai2": (0.4, 0.7),
    },
    "hard": {
        "ai1": (0.7, 1.1),
        "ai2": (0.6, 1.0),
    },
}

DIFFICULTIES = list(AI_SPEEDS)

SENTENCES: List[str] = [
    "La inteligencia artificial no es un sustituto de la inteligencia humana, sino una extensión de ella.",
]

# (id, display name, color tag)
AI_RACERS: List[Tuple[str, str, str]] = [
    ("ai1", "AI 1", "red"),
    ("ai2", "AI 2", "blue"),
]
PLAYER_ID = "player"
PLAYER_COLOR = "teal"


# ============================================================
#  Scoring helpers
# ============================================================


def typing_progress(typed: str, target: str) -> float:
    """Percent of the target matched position by position, capped at 100."""
    if not target:
        return 0.0
    correct = sum(1 for a, b in zip(typed, target) if a == b)
    return min(correct / len(target) * 100.0, 100.0)


def is_complete(typed: str, target: str) -> bool:
    return typed == target


def word_count(sentence: str) -> int:
    return len(sentence.split(" "))


def words_per_minute(sentence: str, elapsed_seconds: float) -> int:
    """Whole words per minute for typing `sentence` in `elapsed_seconds`."""
    if elapsed_seconds <= 0:
        return 0
    minutes = elapsed_seconds / 60.0
    # half-up, not banker's rounding
    return int(math.floor(word_count(sentence) / minutes + 0.5))


def wpm_to_beat(sentence: str, seconds: float) -> int:
    """Smallest whole WPM that finishes `sentence` within `seconds`."""
    if seconds <= 0:
        return 0
    return int(math.ceil(word_count(sentence) / (seconds / 60.0)))


def ai_step(
    position: float,
    speed_range: Tuple[float, float],
    rng: random.Random,
) -> float:
    lo, hi = speed_range
    return min(position + rng.uniform(lo, hi), 100.0)


# ============================================================
#  Pace estimate / calibration
# ============================================================


def estimate_ai_finish_seconds(
    difficulty: str,
    tick_seconds: float = config.TICK_SECONDS,
) -> float:
    """Expected finish time of the faster AI, from mean step size."""
    speeds = AI_SPEEDS[difficulty]
    ticks = min(math.ceil(100.0 / ((lo + hi) / 2.0)) for lo, hi in speeds.values())
    return ticks * tick_seconds


def load_ai_calibration(path: Path = config.CALIBRATION_FILE) -> Optional[Dict[str, Any]]:
    """Load calibrate_ai.py output from disk if available."""
    if not Path(path).exists():
        log.info("[BOOT] AI calibration not found; using pace estimate.")
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
        if not isinstance(obj, dict) or not isinstance(obj.get("difficulties"), dict):
            raise ValueError("missing 'difficulties' table")
    except (OSError, ValueError) as e:
        log.warning("[BOOT] Failed to load AI calibration: %s", e)
        return None

    rows = {}
    for difficulty, row in obj["difficulties"].items():
        try:
            seconds = float(row["first_finish_p50"])
        except (KeyError, TypeError, ValueError):
            log.warning("[BOOT] Skipping calibration row %r: no usable first_finish_p50", difficulty)
            continue
        if seconds <= 0 or math.isnan(seconds):
            log.warning("[BOOT] Skipping calibration row %r: first_finish_p50=%s", difficulty, seconds)
            continue
        rows[difficulty] = row

    obj["difficulties"] = rows
    log.info("[BOOT] AI calibration loaded from %s (%d difficulties)", path, len(rows))
    return obj


def pace_info(
    difficulty: str,
    sentence: str,
    calibration: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """How fast the player has to type to beat the AI; calibration first."""
    row = None
    if calibration is not None:
        row = calibration.get("difficulties", {}).get(difficulty)

    if row is not None:
        seconds = float(row["first_finish_p50"])
        source = "Calibration"
    else:
        seconds = estimate_ai_finish_seconds(difficulty)
        source = "Estimate"

    return {
        "difficulty": difficulty,
        "ai_finish_seconds": round(seconds, 2),
        "wpm_to_win": wpm_to_beat(sentence, seconds),
        "source": source,
    }


# ============================================================
#  Participants
# ============================================================


class Participant:
    def __init__(self, pid: str, name: str, color: str) -> None:
        self.id = pid
        self.name = name
        self.color = color
        self.position = 0.0
        self.finished = False
        self.finished_at: Optional[float] = None

    def move_to(self, position: float, at: float) -> None:
        self.position = max(0.0, min(float(position), 100.0))
        finished = self.position >= 100.0
        if finished and not self.finished:
            self.finished_at = at
        elif not finished:
            self.finished_at = None
        self.finished = finished

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "position": round(self.position, 2),
            "finished": self.finished,
        }


# ============================================================
#  Race
# ============================================================


class Race:
    """
    One attempt: a human typing `sentence` against two AI cars.

    Nothing runs in the background. AI cars move in whole ticks counted from
    the first keystroke, applied whenever `advance` or `type` is called with
    the current clock value.
    """

    def __init__(
        self,
        player_name: str,
        sentence: Optional[str] = None,
        difficulty: str = config.AI_DIFFICULTY,
        seed: Optional[int] = None,
        tick_seconds: float = config.TICK_SECONDS,
        grace_seconds: float = config.FINISH_GRACE_SECONDS,
    ) -> None:
        if difficulty not in AI_SPEEDS:
            raise ValueError(f"Unknown difficulty: {difficulty}")

        self.rng = random.Random(seed)
        self.sentence = sentence if sentence is not None else self.rng.choice(SENTENCES)
        self.difficulty = difficulty
        self.tick_seconds = tick_seconds
        self.grace_seconds = max(0.0, grace_seconds)

        self.player = Participant(PLAYER_ID, player_name, PLAYER_COLOR)
        self.ais = [Participant(pid, name, color) for pid, name, color in AI_RACERS]

        self.typed = ""
        self.started_at: Optional[float] = None
        self.completed_at: Optional[float] = None
        self.ticks = 0
        self.wpm = 0
        self.over = False
        self.won = False
        # advance/type run from concurrent request threads
        self.lock = threading.RLock()

    @property
    def participants(self) -> List[Participant]:
        return [self.player] + self.ais

    @property
    def status(self) -> str:
        if self.over:
            return "finished"
        if self.started_at is None:
            return "ready"
        return "running"

    def _first_finish(self) -> Optional[float]:
        times = [p.finished_at for p in self.participants if p.finished_at is not None]
        return min(times) if times else None

    def _close(self) -> None:
        self.over = True
        ai_times = [a.finished_at for a in self.ais if a.finished_at is not None]
        self.won = self.player.finished and (
            not ai_times or self.player.finished_at <= min(ai_times)
        )

    def _close_if_due(self, now: float) -> None:
        first = self._first_finish()
        if first is None or now < first + self.grace_seconds:
            return
        self._close()

    def advance(self, now: float) -> None:
        """Apply every AI tick due by `now`."""
        with self.lock:
            if self.started_at is None or self.over:
                return

            due = int((now - self.started_at) / self.tick_seconds)
            while self.ticks < due and not self.over:
                self.ticks += 1
                tick_at = self.started_at + self.ticks * self.tick_seconds
                for ai in self.ais:
                    if ai.finished:
                        continue
                    ai.move_to(ai_step(ai.position, AI_SPEEDS[self.difficulty][ai.id], self.rng), tick_at)
                self._close_if_due(tick_at)

            self._close_if_due(now)

    def settle(self, now: float) -> None:
        """Close a race the player already completed without waiting out the grace window."""
        with self.lock:
            self.advance(now)
            if not self.over and self.completed_at is not None:
                self._close()

    def type(self, text: str, now: float) -> None:
        """Handle the player's current input box contents."""
        with self.lock:
            if self.over or self.completed_at is not None:
                return
            if self.started_at is None:
                # the first keystroke starts the clock
                self.started_at = now

            self.advance(now)
            if self.over:
                return

            self.typed = text
            self.player.move_to(typing_progress(text, self.sentence), now)

            if is_complete(text, self.sentence):
                self.completed_at = now
                self.player.move_to(100.0, now)
                self.wpm = words_per_minute(self.sentence, now - self.started_at)

            self._close_if_due(now)

    def elapsed(self, now: float) -> float:
        if self.started_at is None:
            return 0.0
        end = self.completed_at if self.completed_at is not None else now
        return max(0.0, end - self.started_at)

    def to_dict(self, now: float) -> Dict[str, Any]:
        with self.lock:
            return {
                "sentence": self.sentence,
                "typed": self.typed,
                "status": self.status,
                "participants": [p.to_dict() for p in self.participants],
                "wpm": self.wpm,
                "won": self.won if self.over else None,
                "elapsed": round(self.elapsed(now), 2),
            }
