"""Histogram bucket definitions and helpers for deriving bucket bounds.

Durations are expressed as integer nanoseconds throughout.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

NANOS_PER_MICROSECOND = 1_000
NANOS_PER_MILLISECOND = 1_000_000
NANOS_PER_SECOND = 1_000_000_000

MAX_FLOAT64 = sys.float_info.max
MIN_INT64 = -(1 << 63)
MAX_INT64 = (1 << 63) - 1

_ERR_COUNT = "n needs to be > 0"
_ERR_START = "start needs to be > 0"
_ERR_FACTOR = "factor needs to be > 1"


def _fraction(value: int, digits: int) -> str:
    whole, frac = divmod(value, 10**digits)
    if not frac:
        return str(whole)
    return f"{whole}." + f"{frac:0{digits}d}".rstrip("0")


def format_duration(nanos: int) -> str:
    """Format a nanosecond duration the way durations are conventionally
    rendered in metric tags, e.g. ``"25ms"``, ``"1.5µs"`` or ``"1h2m3.5s"``."""
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    u = abs(nanos)

    if u < NANOS_PER_SECOND:
        if u < NANOS_PER_MICROSECOND:
            text = f"{u}ns"
        elif u < NANOS_PER_MILLISECOND:
            text = _fraction(u, 3) + "µs"
        else:
            text = _fraction(u, 6) + "ms"
        return sign + text

    total_seconds, frac = divmod(u, NANOS_PER_SECOND)
    text = str(total_seconds % 60)
    if frac:
        text += "." + f"{frac:09d}".rstrip("0")
    text += "s"
    minutes = total_seconds // 60
    if minutes:
        text = f"{minutes % 60}m" + text
        hours = minutes // 60
        if hours:
            text = f"{hours}h" + text
    return sign + text


class ValueBuckets(list):
    """A list of float bucket boundaries."""

    def __str__(self) -> str:
        return "[" + " ".join(f"{v:f}" for v in self) + "]"

    def __repr__(self) -> str:
        return f"ValueBuckets({list.__repr__(self)})"

    def as_values(self) -> list[float]:
        """Return the boundaries as floats."""
        return list(self)

    def as_durations(self) -> list[int]:
        """Return the boundaries, read as seconds, as nanosecond durations."""
        return [int(v * NANOS_PER_SECOND) for v in self]


class DurationBuckets(list):
    """A list of duration bucket boundaries in nanoseconds."""

    def __str__(self) -> str:
        return "[" + " ".join(format_duration(d) for d in self) + "]"

    def __repr__(self) -> str:
        return f"DurationBuckets({list.__repr__(self)})"

    def as_values(self) -> list[float]:
        """Return the boundaries as float seconds."""
        return [d / NANOS_PER_SECOND for d in self]

    def as_durations(self) -> list[int]:
        """Return the boundaries as nanosecond durations."""
        return list(self)


Buckets = Union[ValueBuckets, DurationBuckets]


@dataclass(frozen=True)
class BucketPair:
    """Lower and upper bounds of a single derived bucket."""

    lower_bound_value: float = 0.0
    upper_bound_value: float = 0.0
    lower_bound_duration: int = 0
    upper_bound_duration: int = 0


SINGLE_BUCKET = BucketPair(
    lower_bound_value=-MAX_FLOAT64,
    upper_bound_value=MAX_FLOAT64,
    lower_bound_duration=MIN_INT64,
    upper_bound_duration=MAX_INT64,
)


def _same_items(a: Sequence, b: Sequence) -> bool:
    return len(a) == len(b) and all(x == y for x, y in zip(a, b))


def buckets_equal(x: object, y: object) -> bool:
    """Report whether two bucket sets are of the same kind and hold equal bounds."""
    if isinstance(x, DurationBuckets):
        return isinstance(y, DurationBuckets) and _same_items(x, y)
    if isinstance(x, ValueBuckets):
        return isinstance(y, ValueBuckets) and _same_items(x, y)
    return True


def _values_of(buckets: Iterable) -> list[float]:
    as_values = getattr(buckets, "as_values", None)
    return list(as_values()) if as_values is not None else [float(v) for v in buckets]


def bucket_pairs(buckets: Buckets | Sequence[float] | None) -> list[BucketPair]:
    """Derive the sorted lower/upper bound pairs described by ``buckets``.

    With no buckets a single pair spanning the whole range is returned.
    """
    if buckets is None or len(buckets) < 1:
        return [SINGLE_BUCKET]

    if isinstance(buckets, DurationBuckets):
        bounds = sorted(buckets.as_durations())
        lows = [SINGLE_BUCKET.lower_bound_duration, *bounds]
        highs = [*bounds, SINGLE_BUCKET.upper_bound_duration]
        return [
            BucketPair(lower_bound_duration=lo, upper_bound_duration=hi)
            for lo, hi in zip(lows, highs)
        ]

    values = sorted(_values_of(buckets))
    lows = [SINGLE_BUCKET.lower_bound_value, *values]
    highs = [*values, SINGLE_BUCKET.upper_bound_value]
    return [
        BucketPair(lower_bound_value=lo, upper_bound_value=hi)
        for lo, hi in zip(lows, highs)
    ]


def linear_value_buckets(start: float, width: float, n: int) -> ValueBuckets:
    """Create ``n`` value buckets starting at ``start``, ``width`` apart."""
    if n <= 0:
        raise ValueError(_ERR_COUNT)
    return ValueBuckets(start + float(i) * width for i in range(n))


def linear_duration_buckets(start: int, width: int, n: int) -> DurationBuckets:
    """Create ``n`` duration buckets starting at ``start``, ``width`` apart."""
    if n <= 0:
        raise ValueError(_ERR_COUNT)
    return DurationBuckets(start + i * width for i in range(n))


def exponential_value_buckets(start: float, factor: float, n: int) -> ValueBuckets:
    """Create ``n`` value buckets, each ``factor`` times the previous one."""
    if n <= 0:
        raise ValueError(_ERR_COUNT)
    if start <= 0:
        raise ValueError(_ERR_START)
    if factor <= 1:
        raise ValueError(_ERR_FACTOR)
    result = ValueBuckets()
    current = start
    for _ in range(n):
        result.append(current)
        current *= factor
    return result


def exponential_duration_buckets(start: int, factor: float, n: int) -> DurationBuckets:
    """Create ``n`` duration buckets, each ``factor`` times the previous one."""
    if n <= 0:
        raise ValueError(_ERR_COUNT)
    if start <= 0:
        raise ValueError(_ERR_START)
    if factor <= 1:
        raise ValueError(_ERR_FACTOR)
    result = DurationBuckets()
    current = start
    for _ in range(n):
        result.append(current)
        current = int(float(current) * factor)
    return result