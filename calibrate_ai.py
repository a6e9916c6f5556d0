"""
AI pace calibration for TypeRace.
Monte-Carlo simulates the AI cars for every difficulty and stores how long
the first AI takes to finish, so the game can tell players what WPM beats it.
Saves to data/ai_calibration.json
"""

import json
import math
import os

import numpy as np

import config
from race import AI_SPEEDS, SENTENCES, wpm_to_beat

RACES = 20000
SEED = 2025


def finish_ticks(speed_range, races, rng):
    """Ticks each simulated AI car needs to reach 100."""
    lo, hi = speed_range
    max_ticks = int(math.ceil(100.0 / lo)) + 1
    steps = rng.uniform(lo, hi, size=(races, max_ticks))
    positions = np.cumsum(steps, axis=1)
    return np.argmax(positions >= 100.0, axis=1) + 1


def calibrate_difficulty(difficulty, races=RACES, rng=None, tick_seconds=config.TICK_SECONDS):
    """Finish-time stats (seconds) of the first AI across `races` simulated races."""
    if rng is None:
        rng = np.random.default_rng(SEED)

    speeds = AI_SPEEDS[difficulty]
    ticks = {pid: finish_ticks(speed_range, races, rng) for pid, speed_range in speeds.items()}
    first = np.minimum.reduce(list(ticks.values())) * tick_seconds

    row = {
        "races": int(races),
        "first_finish_mean": float(first.mean()),
        "first_finish_p10": float(np.percentile(first, 10)),
        "first_finish_p50": float(np.percentile(first, 50)),
        "first_finish_p90": float(np.percentile(first, 90)),
    }
    for pid, t in ticks.items():
        row[f"{pid}_finish_mean"] = float(t.mean() * tick_seconds)
    return row


def calibrate(races=RACES, seed=SEED):
    rng = np.random.default_rng(seed)
    table = {}
    for difficulty in AI_SPEEDS:
        table[difficulty] = calibrate_difficulty(difficulty, races=races, rng=rng)
    return {"tick_seconds": config.TICK_SECONDS, "seed": seed, "difficulties": table}


def save_calibration(data, path=config.CALIBRATION_FILE):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


if __name__ == "__main__":
    print("=" * 60)
    print("TYPERACE AI PACE CALIBRATION")
    print("=" * 60)
    print(f"\nSimulating {RACES} races per difficulty (seed={SEED})...")

    data = calibrate()
    sentence = SENTENCES[0]
    for difficulty, row in data["difficulties"].items():
        print(
            f"  {difficulty:<7} first AI finish: median {row['first_finish_p50']:.1f}s "
            f"(p10 {row['first_finish_p10']:.1f}s, p90 {row['first_finish_p90']:.1f}s) "
            f"→ {wpm_to_beat(sentence, row['first_finish_p50'])} WPM to win"
        )

    save_calibration(data)
    print(f"\n✓ SAVED TO: {config.CALIBRATION_FILE}")
    print("Restart your server to use the new calibration.")
    print("=" * 60)
