# src/workcal/dayset/__init__.py
"""
workcal.dayset
~~~~~~~~~~~~~~

Sparse ordered sets of integer day indices.  A DaySet stores its members as
runs of consecutive days, so a five-year block of weekends costs a few hundred
runs and range cardinality is a pair of binary searches.

Basic usage::

    from workcal.dayset import DaySet

    days = DaySet([3, 4, 10])
    days.add_range(20, 30)                 # 20..29
    days.cardinality(0, 25)                # → 8
    days.next_member(4)                    # → 10

Public API
----------
DaySet       The set type.
DaySetError  Raised for non-integral or out-of-bounds indices.
MIN_INDEX    Smallest accepted day index (signed 32-bit).
MAX_INDEX    Largest accepted day index (signed 32-bit).
"""

from __future__ import annotations

from workcal.dayset.dayset import MAX_INDEX, MIN_INDEX, DaySet, DaySetError

__all__ = [
    "DaySet",
    "DaySetError",
    "MIN_INDEX",
    "MAX_INDEX",
]
