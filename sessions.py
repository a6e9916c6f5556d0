# sessions.py
from __future__ import annotations

import threading
import time
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import config
from leaderboard import LeaderboardStore
from race import Race

log = config.get_logger()


class InvalidUsername(ValueError):
    pass


class UsernameTaken(ValueError):
    pass


class PlayerSession:
    """
    One player's run of up to MAX_ATTEMPTS races.

    Tracks:
      - attempts used (1..MAX_ATTEMPTS)
      - best WPM and the score record that goes to the leaderboard
      - whether the leaderboard is currently being shown
    """

    def __init__(
        self,
        username: str,
        store: LeaderboardStore,
        difficulty: str = config.AI_DIFFICULTY,
        seed: Optional[int] = None,
        now: Optional[float] = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.username = username
        self.store = store
        self.difficulty = difficulty
        self.seed = seed
        self.last_seen = time.monotonic() if now is None else now

        self.attempts = 1
        self.best_wpm = 0
        self.best_score: Optional[Dict[str, Any]] = None
        self.race: Optional[Race] = None
        self.race_recorded = False
        self.showing_leaderboard = False
        # held by the request handlers around every read/update
        self.lock = threading.RLock()

    def _new_race(self) -> Race:
        seed = None if self.seed is None else self.seed + self.attempts
        return Race(self.username, difficulty=self.difficulty, seed=seed)

    def sync(self, now: float) -> None:
        """Advance the current race and pick up its result once it is over."""
        with self.lock:
            race = self.race
            if race is None:
                return
            race.advance(now)
            self._record(race)

    def _settle(self, now: float) -> None:
        # a completed race in its grace window is closed now so its WPM counts
        if self.race is not None:
            self.race.settle(now)
            self._record(self.race)

    def _record(self, race: Race) -> None:
        if not race.over or self.race_recorded:
            return

        self.race_recorded = True
        if race.wpm > 0 and race.wpm > self.best_wpm:
            self.best_wpm = race.wpm
            self.best_score = {
                "username": self.username,
                "wpm": race.wpm,
                "date": datetime.now().strftime(config.DATE_FORMAT),
                "won": race.won,
            }

    def prepare_race(self, now: float) -> None:
        """Set up the next attempt, or close out the session after the last one."""
        with self.lock:
            self._settle(now)
            if self.race is not None and self.race.over:
                if self.attempts + 1 > config.MAX_ATTEMPTS:
                    self.finalize()
                    return
                self.attempts += 1

            self.race = self._new_race()
            self.race_recorded = False
            self.showing_leaderboard = False

    def finalize(self) -> List[Dict[str, Any]]:
        """Push the session's best score (if any) and show the leaderboard."""
        with self.lock:
            if self.best_score is not None:
                table = self.store.submit(dict(self.best_score))
                log.info("[session] %s finalized with %d wpm", self.username, self.best_wpm)
            else:
                table = self.store.load()
            self.showing_leaderboard = True
            return table

    def finish_early(self, now: float) -> List[Dict[str, Any]]:
        with self.lock:
            self._settle(now)
            return self.finalize()

    def close(self, now: float) -> None:
        """New-user action: make sure an unsaved best score is not lost."""
        with self.lock:
            self._settle(now)
            if self.best_score is not None and not self.showing_leaderboard:
                self.finalize()

    def to_dict(self, now: float) -> Dict[str, Any]:
        with self.lock:
            return {
                "id": self.id,
                "username": self.username,
                "attempts": self.attempts,
                "max_attempts": config.MAX_ATTEMPTS,
                "best_wpm": self.best_wpm,
                "showing_leaderboard": self.showing_leaderboard,
                "race": self.race.to_dict(now) if self.race is not None else None,
            }


class SessionRegistry:
    """In-process sessions keyed by id; idle ones expire after `ttl_seconds`."""

    def __init__(
        self,
        store: LeaderboardStore,
        difficulty: str = config.AI_DIFFICULTY,
        ttl_seconds: float = config.SESSION_TTL_SECONDS,
    ) -> None:
        self.store = store
        self.difficulty = difficulty
        self.ttl_seconds = ttl_seconds
        self.sessions: Dict[str, PlayerSession] = {}
        self.lock = threading.Lock()

    def prune(self, now: float) -> int:
        """Drop sessions idle longer than the TTL; returns how many went."""
        with self.lock:
            stale = [sid for sid, s in self.sessions.items() if now - s.last_seen > self.ttl_seconds]
            for sid in stale:
                del self.sessions[sid]
        if stale:
            log.info("[session] Expired %d idle session(s)", len(stale))
        return len(stale)

    def create(
        self,
        username: str,
        seed: Optional[int] = None,
        now: Optional[float] = None,
    ) -> PlayerSession:
        now = time.monotonic() if now is None else now
        self.prune(now)

        name = (username or "").strip()
        if not name:
            raise InvalidUsername("Please enter a username.")
        if self.store.username_exists(name):
            raise UsernameTaken("This name already exists. Please choose another one.")

        session = PlayerSession(name, self.store, difficulty=self.difficulty, seed=seed, now=now)
        with self.lock:
            self.sessions[session.id] = session
        return session

    def get(self, session_id: str, now: Optional[float] = None) -> PlayerSession:
        with self.lock:
            session = self.sessions[session_id]
        session.last_seen = time.monotonic() if now is None else now
        return session

    def drop(self, session_id: str) -> None:
        with self.lock:
            self.sessions.pop(session_id, None)
