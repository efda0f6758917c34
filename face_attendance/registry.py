import os
import logging

from face_attendance.person import parse_details_line
from face_attendance.utils import ensure_directory

logger = logging.getLogger(__name__)


class PersonRegistry:
    """
    In-memory table of registered persons keyed by ID, persisted as an
    append-only details log.
    """

    def __init__(self, details_path):
        """
        Initialize the registry.

        Args:
            details_path (str): Text file receiving one line per registration
        """
        self.details_path = details_path
        self._people = {}

    def __len__(self):
        return len(self._people)

    def __contains__(self, person_id):
        return person_id in self._people

    def __iter__(self):
        # Registration order
        return iter(list(self._people.values()))

    def add(self, person):
        """
        Add a person and append their details line.

        An existing entry with the same ID is replaced and a second details
        line is written; earlier lines are never rewritten.

        Args:
            person: Student or Teacher to register

        Returns:
            bool: True if the details line was persisted, False otherwise
        """
        if person.id in self._people:
            logger.warning(f"ID {person.id} is already registered, overwriting entry")
        self._people[person.id] = person

        return self._append_details(person)

    def lookup(self, person_id):
        """Return the person registered under an ID, or None."""
        return self._people.get(person_id)

    def _append_details(self, person):
        try:
            ensure_directory(os.path.dirname(self.details_path))
            with open(self.details_path, 'a', encoding='utf-8') as f:
                f.write(person.details_line() + '\n')
        except OSError as e:
            logger.warning(f"Failed to write person details file {self.details_path}: {e}")
            return False

        logger.info(f"Person details saved for: {person.name}")
        return True

    def load(self):
        """
        Rebuild the table from the details log without writing to it.

        Later lines for the same ID replace earlier ones.

        Returns:
            int: Number of persons in the registry after loading
        """
        if not os.path.exists(self.details_path):
            return len(self._people)

        with open(self.details_path, 'r', encoding='utf-8') as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                person = parse_details_line(line)
                if person is None:
                    logger.warning(f"Skipping malformed details line {line_no}: {line.strip()}")
                    continue
                self._people[person.id] = person

        logger.info(f"Loaded {len(self._people)} persons from {self.details_path}")
        return len(self._people)

    def discard(self, person_id):
        """Drop an in-memory entry; the details log is left untouched."""
        self._people.pop(person_id, None)
