"""Tests for the OpenCV renderer."""

from unittest.mock import patch

import numpy as np

from app.config import AppConfig
from app.ui import OpenCVUI
from domain.enums import Command
from domain.models import Keypoint

SKELETON = [
    Keypoint("left_shoulder", 50.0, 50.0, 0.9),
    Keypoint("left_elbow", 150.0, 150.0, 0.9),
    Keypoint("left_wrist", 250.0, 50.0, 0.2),
]


def _frame():
    return np.zeros((300, 300, 3), dtype=np.uint8)


class TestDrawLive:
    def test_explosion_fills_red_circles(self):
        ui = OpenCVUI(AppConfig())
        out = ui.draw_live(_frame(), SKELETON, explode=True, lines=[], playback_time=0.0)

        # 25 px from the keypoint lies inside the radius-30 circle
        assert tuple(out[50, 75]) == (0, 0, 255)
        # low-confidence keypoint gets nothing
        assert tuple(out[50, 250]) == (0, 0, 0)

    def test_normal_view_draws_skeleton_not_explosion(self):
        ui = OpenCVUI(AppConfig())
        out = ui.draw_live(_frame(), SKELETON, explode=False, lines=[], playback_time=0.0)

        assert tuple(out[50, 75]) != (0, 0, 255)
        assert out[100, 100].any()          # on the shoulder→elbow segment

    def test_does_not_mutate_input(self):
        frame = _frame()
        OpenCVUI(AppConfig()).draw_live(frame, SKELETON, True, ["Pose1: 0.99"], 3.0)
        assert not frame.any()

    def test_without_skeleton(self):
        out = OpenCVUI(AppConfig()).draw_live(_frame(), None, True, ["idle: 1.00"], 0.0)
        assert out.shape == (300, 300, 3)


class TestDrawVideo:
    def test_uses_higher_threshold(self):
        ui = OpenCVUI(AppConfig())
        skeleton = [
            Keypoint("left_hip", 100.0, 200.0, 0.55),
            Keypoint("left_knee", 200.0, 200.0, 0.65),
        ]
        live = ui.draw_live(_frame(), skeleton, False, [], 0.0)
        video = ui.draw_video(_frame(), skeleton, 0.0)

        assert live[200, 100].any()
        assert not video[200, 100].any()
        assert video[200, 200].any()


class TestShowing:
    def test_missing_frame_is_ignored(self):
        ui = OpenCVUI(AppConfig())
        with patch("cv2.imshow") as imshow:
            ui.render_live(None)
            ui.render_video(None)
        imshow.assert_not_called()

    def test_render_shows_window(self):
        ui = OpenCVUI(AppConfig())
        with patch("cv2.imshow") as imshow:
            ui.render_live(_frame(), SKELETON, False, ["Pose1: 0.10"], 1.0)
        assert imshow.call_args[0][0] == "Pose Blast"

    def test_poll_key(self):
        ui = OpenCVUI(AppConfig())
        with patch("cv2.waitKey", return_value=ord("v")):
            assert ui.poll_key() is Command.PLAY_VIDEO
        with patch("cv2.waitKey", return_value=27):
            assert ui.poll_key() is Command.QUIT
        with patch("cv2.waitKey", return_value=-1):
            assert ui.poll_key() is None
