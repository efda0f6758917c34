import os
import logging

from face_attendance.utils import ensure_directory, current_timestamp

logger = logging.getLogger(__name__)


def format_record(person, timestamp):
    """Ledger line for one attendance event."""
    return (f"Time: {timestamp}, ID: {person.id}, Name: {person.name}, "
            f"{person.attribute_label}: {person.attribute}")


class AttendanceLedger:
    """
    Append-only attendance log. Nothing in the application reads it back.
    """

    def __init__(self, attendance_path):
        self.attendance_path = attendance_path

    def record(self, person, timestamp=None):
        """
        Append one attendance line for a matched person.

        Args:
            person: Student or Teacher that was recognised
            timestamp (str): Preformatted time, defaults to the current local time

        Returns:
            bool: True if the line was written, False if the ledger could not
            be opened (the event is still announced on the console)
        """
        if timestamp is None:
            timestamp = current_timestamp()

        try:
            ensure_directory(os.path.dirname(self.attendance_path))
            with open(self.attendance_path, 'a', encoding='utf-8') as f:
                f.write(format_record(person, timestamp) + '\n')
        except OSError as e:
            logger.error(f"Failed to open attendance log file {self.attendance_path}: {e}")
            return False

        logger.info(f"Attendance logged for: {person.name}")
        return True
