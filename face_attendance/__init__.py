"""
Face Attendance System

A small desktop attendance tool that detects faces in webcam frames with a
Haar cascade classifier, matches them against registered reference images
and appends timestamped records to a text ledger.

This package contains modules for person registration, face storage,
face matching, attendance logging and the interactive capture loop.
"""

__version__ = '1.0.0'
