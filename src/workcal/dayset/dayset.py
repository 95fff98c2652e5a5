from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional, Union

import numpy as np

MIN_INDEX: int = -(2 ** 31)
MAX_INDEX: int = 2 ** 31 - 1

IndexLike = Union[int, np.integer]

_EMPTY = np.empty(0, dtype=np.int64)


class DaySetError(ValueError):
    """Raised for non-integral or out-of-bounds day indices."""


def _check_index(value: IndexLike, upper: int = MAX_INDEX) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise DaySetError(f"Day index must be an integer; got {value!r}.")
    index = int(value)
    if index < MIN_INDEX or index > upper:
        raise DaySetError(
            f"Day index {index} is outside [{MIN_INDEX}, {upper}]."
        )
    return index


def _check_array(values: Iterable[IndexLike] | np.ndarray) -> np.ndarray:
    if not isinstance(values, np.ndarray):
        values = list(values)
        if not values:
            return _EMPTY
        for v in values:
            if isinstance(v, (bool, np.bool_)) or not isinstance(v, (int, np.integer)):
                raise DaySetError(f"Day index must be an integer; got {v!r}.")
    arr = np.asarray(values).ravel()
    if arr.size == 0:
        return _EMPTY
    if not np.issubdtype(arr.dtype, np.integer):
        raise DaySetError(f"Day indices must be integers; got dtype {arr.dtype}.")
    arr = arr.astype(np.int64, copy=False)
    if arr.min() < MIN_INDEX or arr.max() > MAX_INDEX:
        raise DaySetError(
            f"Day indices must lie in [{MIN_INDEX}, {MAX_INDEX}]; "
            f"got [{arr.min()}, {arr.max()}]."
        )
    return arr


# ── run arithmetic ───────────────────────────────────────────────────────────
#
# A run set is a pair of int64 arrays (starts, ends) describing sorted,
# disjoint, non-adjacent half-open intervals [start, end).

def _runs_of(sorted_unique: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    if sorted_unique.size == 0:
        return _EMPTY, _EMPTY
    breaks = np.flatnonzero(np.diff(sorted_unique) != 1) + 1
    first = np.concatenate(([0], breaks))
    last = np.concatenate((breaks - 1, [sorted_unique.size - 1]))
    return sorted_unique[first], sorted_unique[last] + 1


def _union_runs(
    s1: np.ndarray, e1: np.ndarray, s2: np.ndarray, e2: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    starts = np.concatenate((s1, s2))
    ends = np.concatenate((e1, e2))
    if starts.size == 0:
        return _EMPTY, _EMPTY
    order = np.argsort(starts, kind="stable")
    starts, ends = starts[order], ends[order]
    reach = np.maximum.accumulate(ends)
    # A run opens wherever it starts strictly past everything seen so far;
    # touching runs (start == reach) are merged.
    opens = np.empty(starts.size, dtype=bool)
    opens[0] = True
    opens[1:] = starts[1:] > reach[:-1]
    idx = np.flatnonzero(opens)
    closes = np.concatenate((idx[1:] - 1, [starts.size - 1]))
    return starts[idx], reach[closes]


def _covers(starts: np.ndarray, ends: np.ndarray, points: np.ndarray) -> np.ndarray:
    k = np.searchsorted(starts, points, side="right") - 1
    inside = np.zeros(points.shape, dtype=bool)
    valid = k >= 0
    inside[valid] = points[valid] < ends[k[valid]]
    return inside


def _difference_runs(
    s1: np.ndarray, e1: np.ndarray, s2: np.ndarray, e2: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    if s1.size == 0 or s2.size == 0:
        return s1.copy(), e1.copy()
    # Every boundary of either operand; membership is constant on each
    # elementary interval [points[k], points[k + 1]).
    points = np.unique(np.concatenate((s1, e1, s2, e2)))
    lo, hi = points[:-1], points[1:]
    keep = _covers(s1, e1, lo) & ~_covers(s2, e2, lo)
    lo, hi = lo[keep], hi[keep]
    if lo.size == 0:
        return _EMPTY, _EMPTY
    opens = np.empty(lo.size, dtype=bool)
    opens[0] = True
    opens[1:] = lo[1:] != hi[:-1]
    idx = np.flatnonzero(opens)
    closes = np.concatenate((idx[1:] - 1, [lo.size - 1]))
    return lo[idx], hi[closes]


class DaySet:
    """
    Sparse ordered set of integer day indices.

    Members are stored as sorted, disjoint, non-adjacent half-open runs
    ``[start, end)`` together with a prefix sum of run lengths, so memory
    scales with the number of runs and ``cardinality()`` over any range is
    two binary searches regardless of how many days the range spans.
    """

    __slots__ = ("_starts", "_ends", "_prefix")

    def __init__(self, indices: Optional[Iterable[IndexLike] | np.ndarray] = None) -> None:
        self._set_runs(_EMPTY, _EMPTY)
        if indices is not None:
            self.add_many(indices)

    @classmethod
    def from_range(cls, lo: IndexLike, hi: IndexLike) -> "DaySet":
        out = cls()
        out.add_range(lo, hi)
        return out

    # ── run management ───────────────────────────────────────────────────

    def _set_runs(self, starts: np.ndarray, ends: np.ndarray) -> None:
        self._starts: np.ndarray = np.asarray(starts, dtype=np.int64)
        self._ends: np.ndarray = np.asarray(ends, dtype=np.int64)
        self._prefix = np.empty(self._starts.size + 1, dtype=np.int64)
        self._prefix[0] = 0
        np.cumsum(self._ends - self._starts, out=self._prefix[1:])

    def _merge(self, starts: np.ndarray, ends: np.ndarray) -> None:
        if starts.size:
            self._set_runs(*_union_runs(self._starts, self._ends, starts, ends))

    def _subtract(self, starts: np.ndarray, ends: np.ndarray) -> None:
        if starts.size and self._starts.size:
            self._set_runs(*_difference_runs(self._starts, self._ends, starts, ends))

    # Single-index splices: one searchsorted, at most one insert or delete,
    # no re-sort.  Arrays are replaced, never written in place, since runs
    # may be shared with _EMPTY.

    def _splice_in(self, i: int) -> None:
        starts, ends = self._starts, self._ends
        k = int(np.searchsorted(starts, i, side="right")) - 1
        joins_left = k >= 0 and int(ends[k]) == i
        joins_right = k + 1 < starts.size and int(starts[k + 1]) == i + 1
        if joins_left and joins_right:
            starts, ends = np.delete(starts, k + 1), np.delete(ends, k)
        elif joins_left:
            ends = ends.copy()
            ends[k] = i + 1
        elif joins_right:
            starts = starts.copy()
            starts[k + 1] = i
        else:
            starts, ends = np.insert(starts, k + 1, i), np.insert(ends, k + 1, i + 1)
        self._set_runs(starts, ends)

    def _splice_out(self, i: int) -> None:
        starts, ends = self._starts, self._ends
        k = int(np.searchsorted(starts, i, side="right")) - 1
        s, e = int(starts[k]), int(ends[k])
        if e - s == 1:
            starts, ends = np.delete(starts, k), np.delete(ends, k)
        elif i == s:
            starts = starts.copy()
            starts[k] = i + 1
        elif i == e - 1:
            ends = ends.copy()
            ends[k] = i
        else:
            starts, ends = np.insert(starts, k + 1, i + 1), np.insert(ends, k, i)
        self._set_runs(starts, ends)

    # ── mutation ─────────────────────────────────────────────────────────

    def add(self, index: IndexLike) -> None:
        i = _check_index(index)
        if not self._contains(i):
            self._splice_in(i)

    def add_range(self, lo: IndexLike, hi: IndexLike) -> None:
        lo, hi = _check_index(lo), _check_index(hi, MAX_INDEX + 1)
        if hi > lo:
            self._merge(np.array([lo], dtype=np.int64), np.array([hi], dtype=np.int64))

    def add_many(self, indices: Iterable[IndexLike] | np.ndarray) -> None:
        self._merge(*_runs_of(np.unique(_check_array(indices))))

    def remove(self, index: IndexLike) -> None:
        i = _check_index(index)
        if self._contains(i):
            self._splice_out(i)

    def remove_range(self, lo: IndexLike, hi: IndexLike) -> None:
        lo, hi = _check_index(lo), _check_index(hi, MAX_INDEX + 1)
        if hi > lo:
            self._subtract(np.array([lo], dtype=np.int64), np.array([hi], dtype=np.int64))

    def remove_many(self, indices: Iterable[IndexLike] | np.ndarray) -> None:
        self._subtract(*_runs_of(np.unique(_check_array(indices))))

    def update(self, other: "DaySet") -> None:
        """In-place union."""
        self._merge(other._starts, other._ends)

    def and_not(self, other: "DaySet") -> None:
        """In-place difference: drop every member of *other*."""
        self._subtract(other._starts, other._ends)

    def clear(self) -> None:
        self._set_runs(_EMPTY, _EMPTY)

    # ── queries ──────────────────────────────────────────────────────────

    def _contains(self, index: int) -> bool:
        k = int(np.searchsorted(self._starts, index, side="right")) - 1
        return k >= 0 and index < int(self._ends[k])

    def contains(self, index: IndexLike) -> bool:
        return self._contains(_check_index(index))

    def contains_many(self, indices: Iterable[IndexLike] | np.ndarray) -> np.ndarray:
        return _covers(self._starts, self._ends, _check_array(indices))

    def rank(self, index: IndexLike) -> int:
        """Number of members strictly below *index*."""
        x = _check_index(index, MAX_INDEX + 1)
        k = int(np.searchsorted(self._starts, x, side="right"))
        if k == 0:
            return 0
        return int(self._prefix[k - 1]) + min(x, int(self._ends[k - 1])) - int(self._starts[k - 1])

    def cardinality(self, lo: IndexLike, hi: IndexLike) -> int:
        """Number of members in ``[lo, hi)``."""
        lo, hi = _check_index(lo, MAX_INDEX + 1), _check_index(hi, MAX_INDEX + 1)
        if hi <= lo:
            return 0
        return self.rank(hi) - self.rank(lo)

    def next_member(self, after: IndexLike) -> Optional[int]:
        """Smallest member strictly greater than *after*, or None."""
        x = _check_index(after, MAX_INDEX + 1) + 1
        k = int(np.searchsorted(self._starts, x, side="right")) - 1
        if k >= 0 and x < int(self._ends[k]):
            return x
        if k + 1 < self._starts.size:
            return int(self._starts[k + 1])
        return None

    def previous_member(self, before: IndexLike) -> Optional[int]:
        """Largest member strictly less than *before*, or None."""
        x = _check_index(before, MAX_INDEX + 1) - 1
        k = int(np.searchsorted(self._starts, x, side="right")) - 1
        if k < 0:
            return None
        return min(x, int(self._ends[k]) - 1)

    def next_absent(self, after: IndexLike) -> Optional[int]:
        x = _check_index(after, MAX_INDEX + 1) + 1
        k = int(np.searchsorted(self._starts, x, side="right")) - 1
        if k >= 0 and x < int(self._ends[k]):
            x = int(self._ends[k])
        return x if x <= MAX_INDEX else None

    def previous_absent(self, before: IndexLike) -> Optional[int]:
        """Largest non-member strictly less than *before*, or None."""
        x = _check_index(before, MAX_INDEX + 1) - 1
        k = int(np.searchsorted(self._starts, x, side="right")) - 1
        if k >= 0 and x < int(self._ends[k]):
            x = int(self._starts[k]) - 1
        return x if x >= MIN_INDEX else None

    def members(self, lo: IndexLike, hi: IndexLike) -> np.ndarray:
        """Ascending array of the members in ``[lo, hi)``."""
        lo, hi = _check_index(lo, MAX_INDEX + 1), _check_index(hi, MAX_INDEX + 1)
        if hi <= lo:
            return _EMPTY.copy()
        i = int(np.searchsorted(self._ends, lo, side="right"))
        j = int(np.searchsorted(self._starts, hi, side="left"))
        if i >= j:
            return _EMPTY.copy()
        s = np.maximum(self._starts[i:j], lo)
        e = np.minimum(self._ends[i:j], hi)
        lengths = e - s
        offsets = np.concatenate(([0], np.cumsum(lengths)[:-1]))
        return np.arange(int(lengths.sum()), dtype=np.int64) + np.repeat(s - offsets, lengths)

    def for_each_in_range(self, lo: IndexLike, hi: IndexLike, visitor: Callable[[int], None]) -> None:
        for index in self.members(lo, hi):
            visitor(int(index))

    # ── set algebra ──────────────────────────────────────────────────────

    def clone(self) -> "DaySet":
        out = DaySet()
        out._set_runs(self._starts.copy(), self._ends.copy())
        return out

    copy = clone

    def union(self, other: "DaySet") -> "DaySet":
        out = self.clone()
        out.update(other)
        return out

    def difference(self, other: "DaySet") -> "DaySet":
        out = self.clone()
        out.and_not(other)
        return out

    def __or__(self, other: "DaySet") -> "DaySet":
        if not isinstance(other, DaySet):
            return NotImplemented
        return self.union(other)

    def __sub__(self, other: "DaySet") -> "DaySet":
        if not isinstance(other, DaySet):
            return NotImplemented
        return self.difference(other)

    def __ior__(self, other: "DaySet") -> "DaySet":
        if not isinstance(other, DaySet):
            return NotImplemented
        self.update(other)
        return self

    def __isub__(self, other: "DaySet") -> "DaySet":
        if not isinstance(other, DaySet):
            return NotImplemented
        self.and_not(other)
        return self

    # ── properties / dunder ──────────────────────────────────────────────

    @property
    def runs(self) -> list[tuple[int, int]]:
        return [(int(s), int(e)) for s, e in zip(self._starts, self._ends)]

    @property
    def first(self) -> Optional[int]:
        return int(self._starts[0]) if self._starts.size else None

    @property
    def last(self) -> Optional[int]:
        return int(self._ends[-1]) - 1 if self._ends.size else None

    def __contains__(self, index: object) -> bool:
        if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
            return False
        return self._contains(int(index))

    def __len__(self) -> int:
        return int(self._prefix[-1])

    def __bool__(self) -> bool:
        return self._starts.size > 0

    def __iter__(self) -> Iterator[int]:
        for s, e in zip(self._starts, self._ends):
            yield from range(int(s), int(e))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DaySet):
            return NotImplemented
        return bool(
            np.array_equal(self._starts, other._starts)
            and np.array_equal(self._ends, other._ends)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"DaySet(members={len(self)}, "
            f"runs={self._starts.size}, "
            f"first={self.first}, "
            f"last={self.last})"
        )
