import sys
import argparse
import logging

from face_attendance.config import load_config
from face_attendance.utils import setup_logger
from face_attendance.registry import PersonRegistry
from face_attendance.face_store import FaceStore
from face_attendance.detector import FaceDetector, DetectorLoadError
from face_attendance.matcher import FaceMatcher
from face_attendance.ledger import AttendanceLedger
from face_attendance.capture import AttendanceSystem, CameraError

logger = logging.getLogger(__name__)

MENU = "1. Mark Attendance\n2. Register New Person\n3. Exit"


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='Face Attendance System')

    # Storage arguments
    parser.add_argument('--data-dir', type=str,
                        help='Directory for person details, attendance log and face images (default: data)')
    parser.add_argument('--restore', action='store_true', default=None,
                        help='Reload registered persons and face images from the data directory')

    # Detection arguments
    parser.add_argument('--camera', type=int, dest='camera_id',
                        help='Camera device ID (default: 0)')
    parser.add_argument('--cascade', type=str, dest='cascade_path',
                        help="Path to the face cascade XML (default: OpenCV's frontal face model)")
    parser.add_argument('--threshold', type=float, dest='match_threshold',
                        help='Pixel norm below which a face matches a reference (default: 1000)')

    # Capture arguments
    parser.add_argument('--no-display', action='store_false', dest='show_window', default=None,
                        help='Do not open a preview window while capturing')
    parser.add_argument('--no-register-unknown', action='store_false', dest='register_unknown',
                        default=None, help='Do not prompt for registration when a face is not recognised')

    # Logging arguments
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files (default: logs)')
    parser.add_argument('--debug', action='store_true', default=None,
                        help='Enable debug logging')

    return parser.parse_args(argv)


def build_system(config, input_fn=input, **kwargs):
    """
    Wire every component from a configuration.

    Raises:
        DetectorLoadError: If the cascade model cannot be loaded
    """
    detector = FaceDetector(
        config.cascade_path,
        scale_factor=config.scale_factor,
        min_neighbors=config.min_neighbors,
        min_face_size=config.min_face_size
    )

    registry = PersonRegistry(config.details_path)
    face_store = FaceStore(config.faces_path, prefix=config.face_prefix, ext=config.image_ext)

    if config.restore:
        restore_state(registry, face_store)

    matcher = FaceMatcher(detector, face_store, threshold=config.match_threshold)
    ledger = AttendanceLedger(config.attendance_path)

    return AttendanceSystem(config, registry, face_store, matcher, ledger,
                            input_fn=input_fn, **kwargs)


def restore_state(registry, face_store):
    """Reload persisted persons, keeping only IDs that have both details and a face image."""
    registry.load()
    missing = face_store.load([person.id for person in registry])
    for person_id in missing:
        logger.warning(f"No face image for ID {person_id}, dropping it from the registry")
        registry.discard(person_id)


def run_menu(system, input_fn=input):
    """
    Console menu loop.

    Returns:
        int: Process exit status
    """
    while True:
        print(MENU)
        try:
            choice = input_fn("Choose an option: ").strip()
        except EOFError:
            return 0

        try:
            if choice == '1':
                system.mark_attendance()
            elif choice == '2':
                system.register_from_camera()
            elif choice == '3':
                return 0
            else:
                print("Invalid option. Try again.")
        except CameraError as e:
            logger.error(f"Error: {e}")
        except EOFError:
            return 0


def main(argv=None):
    """
    Main entry point for the attendance system.
    """
    args = parse_args(argv)
    config = load_config(**vars(args))

    # Setup logger
    setup_logger(config.log_dir, config.debug)

    try:
        system = build_system(config)
    except DetectorLoadError as e:
        logger.error(f"Exception caught: {e}")
        sys.exit(1)

    logger.info("Attendance system initialized.")
    sys.exit(run_menu(system))


if __name__ == '__main__':
    main()
