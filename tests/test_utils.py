import logging

import numpy as np

from face_attendance.utils import setup_logger, to_grayscale


def test_setup_logger_closes_previous_handlers(tmp_path):
    logger = setup_logger(str(tmp_path / 'first'))
    old_file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]

    logger = setup_logger(str(tmp_path / 'second'))

    assert len(logger.handlers) == 2
    for handler in old_file_handlers:
        assert handler not in logger.handlers
        assert handler.stream is None


def test_to_grayscale():
    color = np.full((10, 12, 3), 50, dtype=np.uint8)
    gray = np.zeros((10, 12), dtype=np.uint8)

    assert to_grayscale(color).shape == (10, 12)
    assert to_grayscale(gray) is gray
    assert to_grayscale(None) is None
