import logging
import cv2

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 1000.0


def crop_face(frame, face):
    """Return the (x, y, w, h) region of a frame."""
    x, y, w, h = face
    return frame[y:y+h, x:x+w]


def compare_faces(reference, candidate, threshold=MATCH_THRESHOLD):
    """
    Compare two face images by their L2 pixel norm.

    Images whose shapes differ never match, whatever their content.

    Args:
        reference: Stored reference image
        candidate: Face region taken from the current frame
        threshold (float): Norm below which the images match

    Returns:
        bool: True if the images match
    """
    if reference.shape != candidate.shape or reference.dtype != candidate.dtype:
        return False

    diff = cv2.norm(reference, candidate, cv2.NORM_L2)
    return diff < threshold


class FaceMatcher:
    """
    Decides which registered person, if any, a detected face belongs to.

    This is a raw pixel comparison, not biometric recognition: a face only
    matches a reference of exactly the same size and near-identical pixels.
    """

    def __init__(self, detector, face_store, threshold=MATCH_THRESHOLD):
        """
        Initialize the face matcher.

        Args:
            detector: Object with a detect_faces(gray) method
            face_store: FaceStore holding the reference images
            threshold (float): Norm below which a reference matches
        """
        self.detector = detector
        self.face_store = face_store
        self.threshold = threshold

    def detect(self, gray):
        """Detected face rectangles, in detector order."""
        return list(self.detector.detect_faces(gray))

    def match_region(self, face_img):
        """
        Find the first stored reference matching a face region.

        Args:
            face_img: Grayscale face region

        Returns:
            The matching person ID, or None
        """
        for person_id, reference in self.face_store.items():
            if compare_faces(reference, face_img, self.threshold):
                logger.debug(f"Face matched reference for ID {person_id}")
                return person_id
        return None

    def match(self, gray):
        """
        Detect faces in a grayscale frame and match the first one.

        Args:
            gray: Single-channel frame

        Returns:
            The matching person ID, or None when no face is detected or no
            reference matches
        """
        faces = self.detect(gray)
        if not faces:
            return None

        return self.match_region(crop_face(gray, faces[0]))
