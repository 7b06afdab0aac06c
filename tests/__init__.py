"""
Test suite for chrono-ranges

Contains:
- tests/unit/          : Unit tests for individual modules
"""
