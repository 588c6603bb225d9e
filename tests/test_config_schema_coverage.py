"""Coverage-focused tests for config/schema I/O and settings validation."""

import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))

from conftest import make_frame, standing_landmarks


def test_load_config_yaml_roundtrip(tmp_path):
    from nordicgait.config import save_config, load_config

    cfg = {
        "analysis": {"view_mode": "side_right", "user_height_cm": 182.0},
    }
    path = tmp_path / "cfg.yaml"
    save_config(cfg, path)
    loaded = load_config(path)
    assert loaded["analysis"]["view_mode"] == "side_right"
    assert loaded["analysis"]["user_height_cm"] == 182.0
    # merged defaults present
    assert loaded["analysis"]["hand_open_ratio"] == 0.25
    assert "calibration" in loaded


def test_load_config_yaml_non_dict_raises(tmp_path):
    from nordicgait.config import load_config

    path = tmp_path / "bad.yaml"
    path.write_text("- item1\n- item2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Config must be a dict"):
        load_config(path)


def test_load_config_missing_file_raises(tmp_path):
    from nordicgait.config import load_config

    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.json")


def test_load_config_does_not_mutate_defaults(tmp_path):
    from nordicgait.config import DEFAULT_CONFIG, load_config

    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"analysis": {"user_height_cm": 150.0}}), encoding="utf-8")
    load_config(path)
    assert DEFAULT_CONFIG["analysis"]["user_height_cm"] == 170.0


class TestAnalysisSettings:

    @pytest.mark.parametrize("height", [0, -170.0])
    def test_non_positive_height_rejected(self, height):
        from nordicgait.config import AnalysisSettings

        with pytest.raises(ValueError, match="user_height_cm"):
            AnalysisSettings(user_height_cm=height)

    def test_unknown_view_mode_rejected(self):
        from nordicgait.config import AnalysisSettings

        with pytest.raises(ValueError, match="view_mode"):
            AnalysisSettings(view_mode="overhead")

    def test_bad_cadence_rejected(self):
        from nordicgait.config import AnalysisSettings

        with pytest.raises(ValueError, match="summary_every"):
            AnalysisSettings(summary_every=0)

    @pytest.mark.parametrize("ratio", [-0.1, 1.5])
    def test_com_ratio_out_of_range_rejected(self, ratio):
        from nordicgait.config import AnalysisSettings

        with pytest.raises(ValueError, match="com_ratio"):
            AnalysisSettings(com_ratio=ratio)

    def test_bad_smoothing_rejected(self):
        from nordicgait.config import AnalysisSettings

        with pytest.raises(ValueError, match="smoothing_alpha"):
            AnalysisSettings(smoothing_alpha=1.5)

    def test_from_config_overrides_skip_none(self):
        from nordicgait.config import AnalysisSettings

        s = AnalysisSettings.from_config(
            {"analysis": {"user_height_cm": 160.0}, "video": {"width": 640}},
            view_mode="back",
            user_height_cm=None,
        )
        assert s.user_height_cm == 160.0
        assert s.view_mode == "back"
        assert s.frame_width == 640
        assert s.frame_height == 1080


def test_schema_load_json_root_non_dict_raises(tmp_path):
    from nordicgait.schema import load_json

    path = tmp_path / "list.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    with pytest.raises(ValueError, match="JSON root must be a dict"):
        load_json(path)


def test_schema_load_json_missing_frames_raises(tmp_path):
    from nordicgait.schema import load_json

    path = tmp_path / "noframes.json"
    path.write_text(json.dumps({"meta": {}}), encoding="utf-8")
    with pytest.raises(ValueError, match="frames"):
        load_json(path)


def test_schema_save_load_roundtrip_frames(tmp_path):
    from nordicgait.schema import create_empty, frames_from_pivot, load_json, save_json

    frame = make_frame()
    data = create_empty("walk.mp4", width=1000, height=1000, n_frames=1)
    data["frames"] = [{"frame_idx": 0, "landmarks": frame.to_dict()}]
    path = tmp_path / "walk.json"
    save_json(data, path)
    loaded = frames_from_pivot(load_json(path))
    assert loaded == [(0, frame)]


def test_schema_create_empty_meta():
    from nordicgait.schema import create_empty

    meta = create_empty("walk.mp4", fps=25.0, width=640, height=480, n_frames=50)["meta"]
    assert meta == {"video_path": "walk.mp4", "fps": 25.0, "width": 640,
                    "height": 480, "n_frames": 50}


class TestLandmarkFrame:

    def test_wrong_count_raises(self):
        from nordicgait.schema import Landmark, LandmarkFrame

        with pytest.raises(ValueError, match="33"):
            LandmarkFrame([Landmark(0.0, 0.0)] * 17)

    def test_immutable(self):
        frame = make_frame()
        with pytest.raises(AttributeError):
            frame.extra = 1

    def test_lookup_by_joint(self):
        from nordicgait.constants import Joint

        frame = make_frame()
        assert frame[Joint.LEFT_SHOULDER].x == pytest.approx(0.48)
        assert frame[Joint.RIGHT_HEEL].y == pytest.approx(0.95)

    def test_missing_and_nan_names_are_invisible(self):
        from nordicgait.constants import Joint
        from nordicgait.schema import LandmarkFrame

        lm = standing_landmarks()
        del lm["LEFT_WRIST"]
        lm["RIGHT_WRIST"] = {"x": float("nan"), "y": float("nan"), "visibility": 0.9}
        frame = LandmarkFrame.from_dict(lm)
        assert not frame[Joint.LEFT_WRIST].is_visible()
        assert not frame[Joint.RIGHT_WRIST].is_visible()
        assert frame.visible(Joint.LEFT_HIP, Joint.RIGHT_HIP)

    def test_from_sequence_accepts_attribute_objects(self):
        from nordicgait.constants import Joint
        from nordicgait.schema import LandmarkFrame

        points = [SimpleNamespace(x=i / 100, y=0.5, z=0.0, visibility=0.8) for i in range(33)]
        frame = LandmarkFrame.from_sequence(points)
        assert frame[Joint.LEFT_ANKLE].x == pytest.approx(0.27)
        assert frame[Joint.LEFT_ANKLE].visibility == pytest.approx(0.8)

    def test_frames_from_pivot_sorts_by_index(self):
        from nordicgait.schema import frames_from_pivot

        lm = standing_landmarks()
        data = {"meta": {}, "frames": [
            {"frame_idx": 2, "landmarks": lm},
            {"frame_idx": 0, "landmarks": lm},
            {"frame_idx": 1, "landmarks": lm},
        ]}
        assert [idx for idx, _ in frames_from_pivot(data)] == [0, 1, 2]


def test_joint_for_resolves_pairs():
    from nordicgait.constants import Joint, Side, joint_for

    assert joint_for(Side.LEFT, "wrist") is Joint.LEFT_WRIST
    assert joint_for("right", "thumb") is Joint.RIGHT_THUMB
    with pytest.raises(KeyError):
        joint_for("left", "nose")
