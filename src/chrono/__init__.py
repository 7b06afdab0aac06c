"""
Calendar/time arithmetic primitives.

Lazy, splittable temporal ranges and the wall-clock time-of-day value type.
Independent of external systems (no timezone database, no I/O).
"""
