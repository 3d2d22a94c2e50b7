import sys
from concurrent.futures import ThreadPoolExecutor

import pytest

from tally.histogram import (
    MAX_INT64,
    MIN_INT64,
    BucketPair,
    DurationBuckets,
    ValueBuckets,
    bucket_pairs,
    buckets_equal,
    exponential_duration_buckets,
    exponential_value_buckets,
    format_duration,
    linear_duration_buckets,
    linear_value_buckets,
)

SECOND = 1_000_000_000
MILLISECOND = 1_000_000
MAX_FLOAT = sys.float_info.max


def test_value_buckets_string():
    assert str(linear_value_buckets(1, 1, 3)) == "[1.000000 2.000000 3.000000]"


def test_duration_buckets_string():
    assert str(linear_duration_buckets(SECOND, SECOND, 3)) == "[1s 2s 3s]"


def test_bucket_pairs_defaults_to_neg_infinity_to_infinity():
    pairs = bucket_pairs(None)
    assert len(pairs) == 1
    assert pairs[0].lower_bound_value == -MAX_FLOAT
    assert pairs[0].upper_bound_value == MAX_FLOAT
    assert pairs[0].lower_bound_duration == MIN_INT64
    assert pairs[0].upper_bound_duration == MAX_INT64


def test_bucket_pairs_empty_duration_buckets_gives_single_bucket():
    pairs = bucket_pairs(DurationBuckets())
    assert len(pairs) == 1
    assert pairs[0].upper_bound_duration == MAX_INT64


def test_bucket_pairs_sorts_value_buckets():
    pairs = bucket_pairs(ValueBuckets([1.0, 3.0, 2.0]))
    assert len(pairs) == 4
    assert pairs[0].lower_bound_value == -MAX_FLOAT
    assert pairs[0].upper_bound_value == 1.0
    assert pairs[1].lower_bound_value == 1.0
    assert pairs[1].upper_bound_value == 2.0
    assert pairs[2].lower_bound_value == 2.0
    assert pairs[2].upper_bound_value == 3.0
    assert pairs[3].lower_bound_value == 3.0
    assert pairs[3].upper_bound_value == MAX_FLOAT


def test_bucket_pairs_sorts_duration_buckets():
    pairs = bucket_pairs(DurationBuckets([0, 2 * SECOND, 1 * SECOND]))
    assert len(pairs) == 4
    assert pairs[0].lower_bound_duration == MIN_INT64
    assert pairs[0].upper_bound_duration == 0
    assert pairs[1].lower_bound_duration == 0
    assert pairs[1].upper_bound_duration == SECOND
    assert pairs[2].lower_bound_duration == SECOND
    assert pairs[2].upper_bound_duration == 2 * SECOND
    assert pairs[3].lower_bound_duration == 2 * SECOND
    assert pairs[3].upper_bound_duration == MAX_INT64


def test_bucket_pairs_does_not_mutate_input():
    buckets = ValueBuckets([3.0, 1.0, 2.0])
    bucket_pairs(buckets)
    assert buckets == [3.0, 1.0, 2.0]


def test_linear_value_buckets():
    assert linear_value_buckets(0, 1, 3) == ValueBuckets([0.0, 1.0, 2.0])


def test_linear_value_buckets_bad_count():
    with pytest.raises(ValueError, match="n needs to be > 0"):
        linear_value_buckets(0, 1, 0)


def test_linear_duration_buckets():
    assert linear_duration_buckets(0, SECOND, 3) == DurationBuckets([0, SECOND, 2 * SECOND])


def test_linear_duration_buckets_bad_count():
    with pytest.raises(ValueError):
        linear_duration_buckets(0, SECOND, 0)


def test_exponential_value_buckets():
    assert exponential_value_buckets(2, 2, 3) == ValueBuckets([2, 4, 8])


@pytest.mark.parametrize(
    "start,factor,n,message",
    [
        (2, 2, 0, "n needs to be > 0"),
        (0, 2, 2, "start needs to be > 0"),
        (2, 1, 2, "factor needs to be > 1"),
    ],
)
def test_exponential_value_buckets_errors(start, factor, n, message):
    with pytest.raises(ValueError, match=message):
        exponential_value_buckets(start, factor, n)


def test_exponential_duration_buckets():
    assert exponential_duration_buckets(2 * SECOND, 2, 3) == DurationBuckets(
        [2 * SECOND, 4 * SECOND, 8 * SECOND]
    )


@pytest.mark.parametrize(
    "start,factor,n,message",
    [
        (2 * SECOND, 2, 0, "n needs to be > 0"),
        (0, 2, 2, "start needs to be > 0"),
        (2 * SECOND, 1, 2, "factor needs to be > 1"),
    ],
)
def test_exponential_duration_buckets_errors(start, factor, n, message):
    with pytest.raises(ValueError, match=message):
        exponential_duration_buckets(start, factor, n)


def test_bucket_pairs_concurrent_sorted():
    buckets = DurationBuckets(i * SECOND for i in range(99))
    with ThreadPoolExecutor(max_workers=10) as pool:
        results = list(pool.map(lambda _: len(bucket_pairs(buckets)), range(10)))
    assert results == [100] * 10


def test_bucket_pairs_concurrent_unsorted():
    buckets = DurationBuckets(i * SECOND for i in range(100, 1, -1))
    with ThreadPoolExecutor(max_workers=10) as pool:
        results = list(pool.map(lambda _: len(bucket_pairs(buckets)), range(10)))
    assert results == [100] * 10


def test_buckets_equal():
    values = linear_value_buckets(1.0, 1.0, 20)
    durations = linear_duration_buckets(SECOND, SECOND, 20)
    assert buckets_equal(values, linear_value_buckets(1.0, 1.0, 20))
    assert buckets_equal(durations, linear_duration_buckets(SECOND, SECOND, 20))
    assert not buckets_equal(values, durations)
    assert not buckets_equal(values, linear_value_buckets(1.0, 1.0, 19))
    assert not buckets_equal(durations, linear_duration_buckets(SECOND, SECOND * 2, 20))


def test_value_duration_conversion_round_trip():
    durations = DurationBuckets([SECOND, 2 * SECOND, 3 * SECOND])
    assert durations.as_values() == [1.0, 2.0, 3.0]
    assert ValueBuckets(durations.as_values()).as_durations() == list(durations)


@pytest.mark.parametrize(
    "nanos,expected",
    [
        (0, "0s"),
        (SECOND, "1s"),
        (25 * MILLISECOND, "25ms"),
        (75 * MILLISECOND, "75ms"),
        (3200 * MILLISECOND, "3.2s"),
    ],
)
def test_format_duration(nanos, expected):
    assert format_duration(nanos) == expected


def test_format_duration_negative_is_prefixed():
    assert format_duration(-25 * MILLISECOND) == "-" + format_duration(25 * MILLISECOND)


def test_bucket_pair_defaults():
    pair = BucketPair(lower_bound_value=1.0, upper_bound_value=2.0)
    assert (pair.lower_bound_duration, pair.upper_bound_duration) == (0, 0)