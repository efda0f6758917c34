from dataclasses import replace

import numpy as np
import pytest

from face_attendance.config import Config
from face_attendance.registry import PersonRegistry
from face_attendance.face_store import FaceStore
from face_attendance.matcher import FaceMatcher
from face_attendance.ledger import AttendanceLedger
from face_attendance.capture import AttendanceSystem


class FakeDetector:
    """Returns the same rectangles for every frame."""

    def __init__(self, faces=None):
        self.faces = list(faces or [])
        self.calls = 0

    def detect_faces(self, gray):
        self.calls += 1
        return list(self.faces)


class FakeCamera:
    """Stands in for cv2.VideoCapture, replaying a fixed list of frames."""

    def __init__(self, frames, opened=True):
        self.frames = list(frames)
        self.opened = opened
        self.released = False

    def isOpened(self):
        return self.opened

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True


class ScriptedInput:
    """Feeds canned answers to prompts and records what was asked."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt=''):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


FACE_RECT = (20, 20, 40, 40)


def make_frame(value=120, size=(100, 100)):
    """BGR frame with a brighter square where FACE_RECT sits."""
    frame = np.full(size + (3,), 30, dtype=np.uint8)
    x, y, w, h = FACE_RECT
    frame[y:y+h, x:x+w] = value
    # Some texture so face regions are not flat
    frame[y+5:y+10, x+5:x+30] = 200
    return frame


@pytest.fixture
def config(tmp_path):
    return Config(data_dir=str(tmp_path / 'data'), show_window=False, log_dir=str(tmp_path / 'logs'))


@pytest.fixture
def detector():
    return FakeDetector([FACE_RECT])


@pytest.fixture
def registry(config):
    return PersonRegistry(config.details_path)


@pytest.fixture
def face_store(config):
    return FaceStore(config.faces_path, prefix=config.face_prefix, ext='.png')


@pytest.fixture
def ledger(config):
    return AttendanceLedger(config.attendance_path)


@pytest.fixture
def make_system(config, detector, registry, face_store, ledger):
    def _make(answers=(), frames=None, opened=True, **overrides):
        cfg = config
        if overrides:
            cfg = replace(config, **overrides)
        scripted = ScriptedInput(answers)
        camera = FakeCamera(frames or [], opened=opened)
        matcher = FaceMatcher(detector, face_store, threshold=cfg.match_threshold)
        system = AttendanceSystem(cfg, registry, face_store, matcher, ledger,
                                  input_fn=scripted, capture_factory=lambda camera_id: camera)
        system.scripted_input = scripted
        system.camera = camera
        return system
    return _make
