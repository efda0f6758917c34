import logging
import os

import cv2
import numpy as np

from face_attendance.person import Student, Teacher, create_person, parse_details_line
from face_attendance.registry import PersonRegistry
from face_attendance.face_store import FaceStore


def read_lines(path):
    with open(path, encoding='utf-8') as f:
        return f.read().splitlines()


def test_create_person_by_role_letter():
    student = create_person('s', 1, 'Ann', 'Physics', 'Algebra')
    teacher = create_person(' T ', 2, 'Bob', 'Physics', 'Algebra')

    assert student == Student(1, 'Ann', 'Physics')
    assert teacher == Teacher(2, 'Bob', 'Algebra')
    assert create_person('x', 3, 'Cy') is None
    assert create_person('', 3, 'Cy') is None
    assert create_person('st', 3, 'Cy') is None


def test_student_details_line_has_department_only(registry):
    registry.add(Student(1, 'Ann Lee', 'Physics'))

    lines = read_lines(registry.details_path)
    assert lines == ['ID: 1, Name: Ann Lee, Department: Physics']
    assert 'Subject' not in lines[0]


def test_teacher_details_line_has_subject_only(registry):
    registry.add(Teacher(9, 'Bob', 'Algebra'))

    lines = read_lines(registry.details_path)
    assert lines == ['ID: 9, Name: Bob, Subject: Algebra']
    assert 'Department' not in lines[0]


def test_lookup(registry):
    ann = Student(1, 'Ann', 'Physics')
    registry.add(ann)

    assert registry.lookup(1) is ann
    assert registry.lookup(2) is None
    assert 1 in registry


def test_n_registrations(registry, face_store):
    for person_id in range(5):
        registry.add(Student(person_id, f'P{person_id}', 'CS'))
        face_store.save(person_id, np.full((30, 30), person_id, dtype=np.uint8))

    assert len(registry) == 5
    assert len(face_store) == 5
    assert [p.id for p in registry] == [0, 1, 2, 3, 4]
    assert sorted(os.listdir(face_store.faces_dir)) == [f'face_{i}.png' for i in range(5)]


def test_reregistration_overwrites_and_appends(registry, face_store):
    registry.add(Student(3, 'Ann', 'Physics'))
    face_store.save(3, np.zeros((30, 30), dtype=np.uint8))
    registry.add(Teacher(3, 'Ann', 'Chemistry'))
    face_store.save(3, np.full((30, 30), 255, dtype=np.uint8))

    assert len(registry) == 1
    assert isinstance(registry.lookup(3), Teacher)
    assert read_lines(registry.details_path) == [
        'ID: 3, Name: Ann, Department: Physics',
        'ID: 3, Name: Ann, Subject: Chemistry',
    ]

    assert len(face_store) == 1
    assert face_store.get(3).max() == 255
    on_disk = cv2.imread(face_store.path_for(3), cv2.IMREAD_GRAYSCALE)
    assert on_disk.min() == 255


def test_details_write_failure_keeps_person_in_memory(tmp_path, caplog):
    blocked = tmp_path / 'details'
    blocked.mkdir()
    registry = PersonRegistry(str(blocked))

    with caplog.at_level(logging.WARNING):
        assert registry.add(Student(1, 'Ann', 'Physics')) is False

    assert registry.lookup(1) is not None
    assert 'Failed to write person details file' in caplog.text


def test_face_store_keeps_a_copy(face_store):
    image = np.zeros((30, 30), dtype=np.uint8)
    face_store.save(1, image)
    image[:] = 99

    assert face_store.get(1).max() == 0


def test_parse_details_line():
    assert parse_details_line('ID: 4, Name: Ann, Department: CS\n') == Student(4, 'Ann', 'CS')
    assert parse_details_line('ID: 5, Name: Bob, Subject: Art') == Teacher(5, 'Bob', 'Art')
    assert parse_details_line('garbage') is None


def test_load_rebuilds_registry(tmp_path):
    details = tmp_path / 'person_details.txt'
    details.write_text(
        'ID: 1, Name: Ann, Department: CS\n'
        'not a record\n'
        '\n'
        'ID: 2, Name: Bob, Subject: Art\n'
        'ID: 1, Name: Ann, Subject: Math\n',
        encoding='utf-8'
    )

    registry = PersonRegistry(str(details))
    assert registry.load() == 2
    assert registry.lookup(1) == Teacher(1, 'Ann', 'Math')
    assert registry.lookup(2) == Teacher(2, 'Bob', 'Art')


def test_load_without_file(tmp_path):
    registry = PersonRegistry(str(tmp_path / 'missing.txt'))
    assert registry.load() == 0


def test_face_store_load(tmp_path):
    store = FaceStore(str(tmp_path), ext='.png')
    cv2.imwrite(store.path_for(1), np.full((30, 30), 42, dtype=np.uint8))

    assert store.load([1, 2]) == [2]
    assert [person_id for person_id, _ in store.items()] == [1]
    assert store.get(1).shape == (30, 30)
