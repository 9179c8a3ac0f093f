"""
Time intervals over discrete POSIX time (milliseconds).

A transaction never exposes "now"; it only declares the range of times in
which it may execute. Bounds are extended (either end may be infinite) and
carry an inclusive/exclusive flag. Because time is discrete, an exclusive
finite bound `(a` behaves exactly like `[a+1`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

BoundKind = Literal["neg_inf", "finite", "pos_inf"]


@dataclass(frozen=True)
class Bound:
    kind: BoundKind
    time: int | None = None
    closed: bool = True

    def __post_init__(self) -> None:
        if self.kind == "finite" and self.time is None:
            raise ValueError("finite bound requires a time")
        if self.kind != "finite" and self.time is not None:
            raise ValueError(f"{self.kind} bound must not carry a time")


NEG_INF = Bound("neg_inf")
POS_INF = Bound("pos_inf")


def finite(t: int, closed: bool = True) -> Bound:
    return Bound("finite", t, closed)


@dataclass(frozen=True)
class Interval:
    lower: Bound
    upper: Bound

    def first(self) -> float:
        """Earliest time admitted by the lower bound."""
        b = self.lower
        if b.kind == "neg_inf":
            return -math.inf
        if b.kind == "pos_inf":
            return math.inf
        assert b.time is not None
        return b.time if b.closed else b.time + 1

    def last(self) -> float:
        """Latest time admitted by the upper bound."""
        b = self.upper
        if b.kind == "pos_inf":
            return math.inf
        if b.kind == "neg_inf":
            return -math.inf
        assert b.time is not None
        return b.time if b.closed else b.time - 1


def interval(a: int, b: int) -> Interval:
    """Closed interval [a, b]."""
    return Interval(finite(a), finite(b))


def from_(a: int) -> Interval:
    """Every time at or after a."""
    return Interval(finite(a), POS_INF)


def to(b: int) -> Interval:
    """Every time up to and including b."""
    return Interval(NEG_INF, finite(b))


def always() -> Interval:
    return Interval(NEG_INF, POS_INF)


def never() -> Interval:
    return Interval(POS_INF, NEG_INF)


def is_empty(i: Interval) -> bool:
    lo, hi = i.first(), i.last()
    # No finite time lies beyond either infinity.
    return lo > hi or lo == math.inf or hi == -math.inf


def member(t: int, i: Interval) -> bool:
    return i.first() <= t <= i.last()


def contains(outer: Interval, inner: Interval) -> bool:
    """True if every time in `inner` is also in `outer`."""
    if is_empty(inner):
        return True
    return outer.first() <= inner.first() and inner.last() <= outer.last()


def reaches(i: Interval, t: int) -> bool:
    """True if `i` admits at least one time >= t."""
    return not is_empty(i) and i.last() >= t
