"""
Configuration module for the attendance tool.

Settings are resolved once at process start from environment variables and
command-line overrides, then passed explicitly to every component.
"""

import os
from dataclasses import dataclass, replace
from typing import Tuple

import cv2


def default_cascade_path() -> str:
    """Path of the frontal face cascade bundled with OpenCV."""
    return os.path.join(cv2.data.haarcascades, 'haarcascade_frontalface_default.xml')


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration for the attendance tool.

    Storage:
        data_dir: Root directory for every persisted file
        details_file: Append-only log of registered persons
        attendance_file: Append-only attendance ledger
        faces_dir: Directory holding one reference image per person ID
        face_prefix: File name prefix of reference images
        image_ext: File extension (and encoding) of reference images

    Detection:
        cascade_path: Haar cascade XML file
        scale_factor: Cascade scale step between detection passes
        min_neighbors: Neighbouring detections required to keep a region
        min_face_size: Smallest face region considered, (width, height)

    Matching:
        match_threshold: A reference matches when the L2 pixel norm is below this

    Capture:
        camera_id: Camera device index
        cancel_key: Key code that ends the capture loop (27 = ESC)
        wait_ms: Milliseconds to wait for a key press per frame
        show_window: Display annotated frames while capturing
        register_unknown: Prompt for registration when a face is not recognised

    System:
        restore: Rebuild registry and face store from disk at startup
        log_dir: Directory for application log files
        debug: Enable debug logging
    """

    # Storage
    data_dir: str = 'data'
    details_file: str = 'person_details.txt'
    attendance_file: str = 'attendance.txt'
    faces_dir: str = 'faces'
    face_prefix: str = 'face_'
    image_ext: str = '.png'

    # Detection
    cascade_path: str = ''
    scale_factor: float = 1.1
    min_neighbors: int = 3
    min_face_size: Tuple[int, int] = (30, 30)

    # Matching
    match_threshold: float = 1000.0

    # Capture
    camera_id: int = 0
    cancel_key: int = 27
    wait_ms: int = 10
    show_window: bool = True
    register_unknown: bool = True

    # System
    restore: bool = False
    log_dir: str = 'logs'
    debug: bool = False

    def resolve(self, path: str) -> str:
        """Resolve a configured path relative to data_dir."""
        if os.path.isabs(path):
            return path
        return os.path.join(self.data_dir, path)

    @property
    def details_path(self) -> str:
        return self.resolve(self.details_file)

    @property
    def attendance_path(self) -> str:
        return self.resolve(self.attendance_file)

    @property
    def faces_path(self) -> str:
        return self.resolve(self.faces_dir)


def load_config(**overrides) -> Config:
    """
    Load configuration from environment variables and explicit overrides.

    Overrides whose value is None are ignored, so argparse namespaces can be
    passed straight through.

    Returns:
        Config: Immutable configuration object
    """
    config = Config(
        data_dir=os.getenv('ATTENDANCE_DATA_DIR', 'data'),
        camera_id=int(os.getenv('ATTENDANCE_CAMERA', '0')),
        cascade_path=os.getenv('ATTENDANCE_CASCADE', ''),
        match_threshold=float(os.getenv('ATTENDANCE_THRESHOLD', '1000')),
        debug=os.getenv('ATTENDANCE_DEBUG', 'false').lower() == 'true',
    )

    changes = {key: value for key, value in overrides.items() if value is not None}
    config = replace(config, **changes)

    if not config.cascade_path:
        config = replace(config, cascade_path=default_cascade_path())

    return config
