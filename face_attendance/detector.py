import os
import logging
import cv2

logger = logging.getLogger(__name__)


class DetectorLoadError(RuntimeError):
    """Raised when the cascade classifier model cannot be loaded."""


class FaceDetector:
    """
    Haar cascade face detector.
    """

    def __init__(self, cascade_path, scale_factor=1.1, min_neighbors=3, min_face_size=(30, 30)):
        """
        Initialize the face detector.

        Args:
            cascade_path (str): Path to the cascade XML model
            scale_factor (float): Image scale step between detection passes
            min_neighbors (int): Neighbouring detections required to keep a region
            min_face_size (tuple): Minimum face size to detect

        Raises:
            DetectorLoadError: If the model file is missing or unreadable
        """
        self.cascade_path = cascade_path
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_face_size = tuple(min_face_size)

        if not os.path.isfile(cascade_path):
            error_msg = f"Failed to load face cascade model from path: {cascade_path}"
            logger.error(error_msg)
            raise DetectorLoadError(error_msg)

        # Load face detection cascade
        try:
            self.face_cascade = cv2.CascadeClassifier()
            self.face_cascade.load(cascade_path)
        except cv2.error as e:
            error_msg = f"Failed to load face cascade model from path: {cascade_path}"
            logger.error(f"{error_msg}: {e}")
            raise DetectorLoadError(error_msg) from e

        if self.face_cascade.empty():
            error_msg = f"Failed to load face cascade model from path: {cascade_path}"
            logger.error(error_msg)
            raise DetectorLoadError(error_msg)

    def detect_faces(self, gray):
        """
        Detect faces in a grayscale frame.

        Args:
            gray: Single-channel frame

        Returns:
            List of (x, y, w, h) tuples for detected faces
        """
        try:
            faces = self.face_cascade.detectMultiScale(
                gray,
                scaleFactor=self.scale_factor,
                minNeighbors=self.min_neighbors,
                minSize=self.min_face_size
            )
        except cv2.error as e:
            logger.error(f"Error detecting faces: {e}")
            return []

        return [tuple(int(v) for v in face) for face in faces]
