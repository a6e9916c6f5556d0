import json

import numpy as np

from calibrate_ai import calibrate, calibrate_difficulty, finish_ticks, save_calibration
from race import AI_SPEEDS, estimate_ai_finish_seconds, load_ai_calibration


def test_finish_ticks_bounds():
    ticks = finish_ticks((0.3, 0.6), 500, np.random.default_rng(1))
    # 100 / 0.6 and 100 / 0.3
    assert ticks.min() >= 167
    assert ticks.max() <= 334


def test_calibration_is_close_to_estimate():
    row = calibrate_difficulty("easy", races=2000, rng=np.random.default_rng(3))
    assert row["first_finish_p10"] <= row["first_finish_p50"] <= row["first_finish_p90"]
    # the faster of two cars finishes a little ahead of the mean-step estimate
    assert abs(row["first_finish_p50"] - estimate_ai_finish_seconds("easy")) < 2.0


def test_calibrate_covers_every_difficulty(tmp_path):
    data = calibrate(races=200, seed=7)
    assert set(data["difficulties"]) == set(AI_SPEEDS)

    path = tmp_path / "data" / "ai_calibration.json"
    save_calibration(data, path)
    assert json.loads(path.read_text())["seed"] == 7
    assert load_ai_calibration(path)["difficulties"]["hard"]["races"] == 200
