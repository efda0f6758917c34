import os
import logging
import cv2

from face_attendance.utils import ensure_directory

logger = logging.getLogger(__name__)


class FaceStore:
    """
    Reference face images keyed by person ID.

    Images are compared in insertion order and each one is also written to
    its own file, ``<faces_dir>/<prefix><id><ext>``.
    """

    def __init__(self, faces_dir, prefix='face_', ext='.jpg'):
        """
        Initialize the face store.

        Args:
            faces_dir (str): Directory to save reference images
            prefix (str): File name prefix
            ext (str): File extension, which also selects the image encoding
        """
        self.faces_dir = faces_dir
        self.prefix = prefix
        self.ext = ext
        self._faces = {}

    def __len__(self):
        return len(self._faces)

    def __contains__(self, person_id):
        return person_id in self._faces

    def items(self):
        """(ID, image) pairs in insertion order."""
        return list(self._faces.items())

    def get(self, person_id):
        return self._faces.get(person_id)

    def path_for(self, person_id):
        return os.path.join(self.faces_dir, f"{self.prefix}{person_id}{self.ext}")

    def save(self, person_id, face):
        """
        Store a copy of the face and write it to its image file.

        A previous reference for the same ID is replaced, in memory and on disk.

        Args:
            person_id (int): Owning person ID
            face: Image array

        Returns:
            bool: True if the image file was written, False otherwise
        """
        self._faces[person_id] = face.copy()

        img_path = self.path_for(person_id)
        try:
            ensure_directory(self.faces_dir)
            written = cv2.imwrite(img_path, face)
        except (OSError, cv2.error) as e:
            logger.warning(f"Failed to write face image {img_path}: {e}")
            return False

        if not written:
            logger.warning(f"Failed to write face image {img_path}")
            return False

        logger.info(f"Saved face image for ID {person_id} to {img_path}")
        return True

    def load(self, person_ids):
        """
        Read reference images from disk for the given IDs.

        Args:
            person_ids: IDs to load, in the order they should be compared

        Returns:
            list: IDs whose image file could not be read
        """
        missing = []
        for person_id in person_ids:
            img_path = self.path_for(person_id)
            face = cv2.imread(img_path, cv2.IMREAD_GRAYSCALE)
            if face is None:
                missing.append(person_id)
                continue
            self._faces[person_id] = face

        logger.info(f"Loaded {len(self._faces)} face images from {self.faces_dir}")
        return missing
