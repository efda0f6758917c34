import logging
import cv2

from face_attendance.person import create_person
from face_attendance.matcher import crop_face
from face_attendance.utils import current_timestamp, to_grayscale

logger = logging.getLogger(__name__)

# Outcomes of processing a single frame
NO_FACE = 'no_face'
RECORDED = 'recorded'
REGISTERED = 'registered'
UNKNOWN = 'unknown'


class CameraError(RuntimeError):
    """Raised when the camera device cannot be opened."""


class RegistrationError(ValueError):
    """Raised when the registration form receives invalid input."""


def open_camera(camera_id, capture_factory=cv2.VideoCapture):
    """
    Open a camera device.

    Raises:
        CameraError: If the device cannot be opened
    """
    cap = capture_factory(camera_id)
    if not cap.isOpened():
        cap.release()
        raise CameraError(f"Could not open camera {camera_id}")
    return cap


def print_timestamp(timestamp):
    print("--------------------------")
    print(f"Timestamp: {timestamp}")
    print("--------------------------")


class AttendanceSystem:
    """
    Drives the camera, the matcher and the two registration stores.
    """

    def __init__(self, config, registry, face_store, matcher, ledger,
                 input_fn=input, capture_factory=cv2.VideoCapture):
        """
        Initialize the attendance system.

        Args:
            config: Config with camera and display settings
            registry: PersonRegistry of known persons
            face_store: FaceStore of reference images
            matcher: FaceMatcher used on every frame
            ledger: AttendanceLedger receiving matched events
            input_fn: Callable used to read console input
            capture_factory: Callable returning a cv2.VideoCapture-like object
        """
        self.config = config
        self.registry = registry
        self.face_store = face_store
        self.matcher = matcher
        self.ledger = ledger
        self.input_fn = input_fn
        self.capture_factory = capture_factory

        # Last captured frame, kept for the registration path
        self.current_frame = None

    def register(self, person, face):
        """
        Add a person to the registry and bind their reference face.

        Args:
            person: Student or Teacher
            face: Grayscale reference image

        Returns:
            bool: True if both the details line and the image file were written
        """
        details_saved = self.registry.add(person)
        face_saved = self.face_store.save(person.id, face)
        return details_saved and face_saved

    def lookup(self, person_id):
        return self.registry.lookup(person_id)

    def read_registration_form(self):
        """
        Prompt for a new person's details.

        Returns:
            Student or Teacher built from the answers

        Raises:
            RegistrationError: If the ID is not numeric or the role is not S or T
        """
        raw_id = self.input_fn("Enter ID: ").strip()
        try:
            person_id = int(raw_id)
        except ValueError:
            raise RegistrationError(f"Invalid ID '{raw_id}'. Please enter a number.")

        name = self.input_fn("Enter Name: ")
        department = self.input_fn("Enter Department: ")
        subject = self.input_fn("Enter Subject: ")
        role = self.input_fn("Is the person a Student (S) or Teacher (T)? ")

        person = create_person(role, person_id, name, department, subject)
        if person is None:
            raise RegistrationError("Invalid role. Please enter 'S' for Student or 'T' for Teacher.")
        return person

    def register_new_person(self, frame, face=None):
        """
        Run the registration form and bind the answers to a face.

        Args:
            frame: Captured frame, color or grayscale
            face: Face region already cut from the frame, if known

        Returns:
            The registered person, or None if registration was aborted
        """
        if face is None:
            face = self.extract_face(frame)

        try:
            person = self.read_registration_form()
        except RegistrationError as e:
            logger.error(str(e))
            return None

        self.register(person, face)
        logger.info(f"New person registered: {person.name} (ID: {person.id})")
        return person

    def extract_face(self, frame):
        """First detected face of a frame, or the whole grayscale frame if none is found."""
        gray = to_grayscale(frame)
        faces = self.matcher.detect(gray)
        if not faces:
            logger.warning("No face detected in registration frame, storing the whole frame")
            return gray
        return crop_face(gray, faces[0]).copy()

    def process_frame(self, frame):
        """
        Detect, match and dispatch a single frame.

        Detected faces are outlined in green on the frame passed in.

        Args:
            frame: BGR frame from the camera

        Returns:
            str: One of NO_FACE, RECORDED, REGISTERED or UNKNOWN
        """
        self.current_frame = frame.copy()
        gray = to_grayscale(frame)
        if gray is frame:
            # Keep annotation out of the matched pixels
            gray = frame.copy()

        faces = self.matcher.detect(gray)

        # Draw green rectangles around detected faces
        for (x, y, w, h) in faces:
            cv2.rectangle(frame, (x, y), (x+w, y+h), (0, 255, 0), 2)

        if not faces:
            return NO_FACE

        face_img = crop_face(gray, faces[0])
        person_id = self.matcher.match_region(face_img)
        person = self.lookup(person_id) if person_id is not None else None

        if person is not None:
            print("Marking attendance for:")
            for line in person.describe():
                print(line)
            self.ledger.record(person)
            return RECORDED

        if not self.config.register_unknown:
            return UNKNOWN

        print("Unknown person detected. Registering new person...")
        if self.register_new_person(self.current_frame, face=face_img.copy()) is None:
            return UNKNOWN
        return REGISTERED

    def mark_attendance(self):
        """
        Run the capture loop until the cancel key is pressed or the camera
        stops delivering frames.

        Raises:
            CameraError: If the camera cannot be opened
        """
        cap = open_camera(self.config.camera_id, self.capture_factory)
        logger.info("Starting attendance capture. Press ESC to stop.")

        try:
            while True:
                ret, frame = cap.read()

                if not ret or frame is None or frame.size == 0:
                    logger.error("Captured empty frame!")
                    break

                self.process_frame(frame)

                if self.config.show_window:
                    cv2.imshow('Mark Attendance', frame)
                    key = cv2.waitKey(self.config.wait_ms) & 0xFF
                    if key == self.config.cancel_key:
                        break
        except KeyboardInterrupt:
            logger.info("Attendance capture interrupted")
        finally:
            # Release resources
            cap.release()
            if self.config.show_window:
                cv2.destroyAllWindows()

    def capture_registration_frame(self):
        """
        Grab a single frame for registration.

        Returns:
            The captured frame, or None if the camera returned nothing

        Raises:
            CameraError: If the camera cannot be opened
        """
        cap = open_camera(self.config.camera_id, self.capture_factory)
        try:
            ret, frame = cap.read()
        finally:
            cap.release()

        if not ret or frame is None or frame.size == 0:
            logger.error("No frame captured to register new person.")
            return None

        self.current_frame = frame.copy()
        return frame

    def register_from_camera(self):
        """Capture one frame and register the person in front of the camera."""
        print("Registering new person...")
        frame = self.capture_registration_frame()
        if frame is None:
            return None

        print_timestamp(current_timestamp())
        return self.register_new_person(frame)
