import re
from dataclasses import dataclass

STUDENT = 'S'
TEACHER = 'T'

# Field label written for each role
ROLE_FIELDS = {
    STUDENT: 'Department',
    TEACHER: 'Subject',
}

DETAILS_PATTERN = re.compile(
    r'^ID: (?P<id>-?\d+), Name: (?P<name>.*), (?P<field>Department|Subject): (?P<value>.*)$'
)


@dataclass(frozen=True)
class Person:
    """
    Identity record shared by every role.

    Subclasses set ``role`` to one of STUDENT or TEACHER and carry the
    role-specific attribute; the role never changes after creation.
    """
    id: int
    name: str

    role = None

    @property
    def attribute(self):
        """Value of the role-specific field."""
        raise NotImplementedError

    @property
    def attribute_label(self):
        return ROLE_FIELDS[self.role]

    def describe(self):
        """Human-readable lines describing this person."""
        return [
            f"Name: {self.name}, ID: {self.id}",
            f"{self.attribute_label}: {self.attribute}",
        ]

    def details_line(self):
        """Line appended to the person details log."""
        return f"ID: {self.id}, Name: {self.name}, {self.attribute_label}: {self.attribute}"


@dataclass(frozen=True)
class Student(Person):
    department: str = ''

    role = STUDENT

    @property
    def attribute(self):
        return self.department


@dataclass(frozen=True)
class Teacher(Person):
    subject: str = ''

    role = TEACHER

    @property
    def attribute(self):
        return self.subject


def create_person(role, person_id, name, department='', subject=''):
    """
    Build a person for a role selector letter.

    Args:
        role (str): 'S' for Student or 'T' for Teacher, case-insensitive
        person_id (int): Unique numeric ID
        name (str): Display name
        department (str): Used when the role is Student
        subject (str): Used when the role is Teacher

    Returns:
        Student or Teacher, or None if the role letter is not recognised
    """
    role = role.strip().upper()
    if role == STUDENT:
        return Student(person_id, name, department)
    if role == TEACHER:
        return Teacher(person_id, name, subject)
    return None


def parse_details_line(line):
    """Parse one details log line back into a person, or None if malformed."""
    match = DETAILS_PATTERN.match(line.rstrip('\r\n'))
    if match is None:
        return None

    person_id = int(match.group('id'))
    if match.group('field') == 'Department':
        return Student(person_id, match.group('name'), match.group('value'))
    return Teacher(person_id, match.group('name'), match.group('value'))
