"""Tests for the open-hand / fist classifier."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))

from conftest import make_frame, set_hand, standing_landmarks
from nordicgait.hands import HandState, classify_hand, hand_ratio


def _hand_frame(ratio, side="left"):
    return make_frame(set_hand(standing_landmarks(), side, ratio))


def test_ratio_exactly_at_threshold_is_fist():
    frame = _hand_frame(0.25)
    assert hand_ratio(frame, "left") == 0.25
    assert classify_hand(frame, "left") == HandState.FIST


def test_ratio_above_threshold_is_open():
    assert classify_hand(_hand_frame(0.26), "left") == HandState.OPEN


def test_right_side_uses_right_landmarks():
    lm = set_hand(standing_landmarks(), "right", 0.6)
    set_hand(lm, "left", 0.1)
    frame = make_frame(lm)
    assert classify_hand(frame, "right") == HandState.OPEN
    assert classify_hand(frame, "left") == HandState.FIST


@pytest.mark.parametrize("name", ["WRIST", "ELBOW", "PINKY", "INDEX", "THUMB"])
def test_low_visibility_is_unknown(name):
    lm = set_hand(standing_landmarks(), "left", 0.6)
    lm[f"LEFT_{name}"]["visibility"] = 0.49
    frame = make_frame(lm)
    assert hand_ratio(frame, "left") is None
    assert classify_hand(frame, "left") == HandState.UNKNOWN


def test_open_ratio_is_tunable():
    frame = _hand_frame(0.3)
    assert classify_hand(frame, "left") == HandState.OPEN
    assert classify_hand(frame, "left", open_ratio=0.32) == HandState.FIST


def test_zero_forearm_is_unknown():
    lm = set_hand(standing_landmarks(), "left", 0.3)
    lm["LEFT_ELBOW"] = dict(lm["LEFT_WRIST"])
    assert classify_hand(make_frame(lm), "left") == HandState.UNKNOWN
