# tally

Building blocks for metrics reporting. It has no third-party dependencies.

- `tally.histogram`: histogram bucket sets and their bounds.
- `tally.identity`: order-independent identity hashing based on 64-bit MurmurHash3.
- `tally.cache`: a thread-safe string interner and a cache of tag lists.
- `tally.transports`: a byte-counting transport and a buffer-backed read transport.
- `tally.instrument`: counts the successes and errors of a function call and times it.

## Installation

```
pip install .
```

## Histogram buckets

Durations are integer nanoseconds throughout.

- `ValueBuckets` holds float boundaries. `DurationBuckets` holds nanosecond boundaries. Both are `list` subclasses.
- Each has `as_values()`, which gives floats (durations become seconds), and `as_durations()`, which gives nanoseconds (values are read as seconds).
- `str()` of a `ValueBuckets` gives `[1.000000 2.000000]`. `str()` of a `DurationBuckets` gives `[1s 2s]`.
- `format_duration(nanos)` renders a duration in the style `"25ms"`, `"1.5µs"` or `"1h2m3.5s"`. Zero renders as `"0s"`.
- `linear_value_buckets(start, width, n)` and `linear_duration_buckets(start, width, n)` build `n` boundaries spaced `width` apart.
- `exponential_value_buckets(start, factor, n)` and `exponential_duration_buckets(start, factor, n)` build `n` boundaries, each `factor` times the previous one.
- These builders raise `ValueError` in three cases: when `n <= 0`, and for the exponential builders also when `start <= 0` or `factor <= 1`.
- `bucket_pairs(buckets)` sorts the boundaries and returns one `BucketPair` per bucket. The first bucket runs from minus the largest float (or the smallest int64 for durations). The last runs to the largest float (or the largest int64). If `buckets` is `None` or empty, a single pair covers the whole range.
- `buckets_equal(x, y)` is true when `x` and `y` are the same kind of bucket set with equal boundaries.

```python
from tally.histogram import bucket_pairs, exponential_value_buckets, linear_duration_buckets

buckets = exponential_value_buckets(2.0, 2.0, 3)   # [2.0, 4.0, 8.0]
for pair in bucket_pairs(buckets):
    print(pair.lower_bound_value, pair.upper_bound_value)

second = 1_000_000_000
print(str(linear_duration_buckets(second, second, 3)))  # [1s 2s 3s]
```

## Identity hashing

- `murmur3_sum64(data)` returns the first 64 bits of the x64 128-bit MurmurHash3 of a `bytes` or `str` value, with seed 0.
- `Accumulator` folds values into a sum starting from seed 23. Each value is multiplied by 31, and everything wraps at 64 bits.
- Its methods `add_string(s)` and `add_uint64(value)` return a new accumulator. The result is in `.value`.
- `durations`, `int64s`, `float64s` and `string_string_map` each give the identity of a collection. An empty collection gives 0.

Because the fold is commutative, the order of the keys does not change the result:

```python
from tally.identity import string_string_map

assert string_string_map({"a": "1", "b": "2"}) == string_string_map({"b": "2", "a": "1"})
```

## Caches

- `StringInterner.intern(s)` returns the one shared instance for each equal string.
- `TagCache` maps an integer key to a list of `MetricTag(name, value)`.
  - `get(key)` returns the list, or `None` if there is none.
  - `set(key, tags)` stores the list only if the key is absent, and returns whichever list ends up cached.
- `tag_map_key(tags)` derives such a key from a tag mapping.

## Transports

- `CalcTransport` counts bytes without storing them.
  - `write`, `write_byte` and `write_string` add to `count`. `write_string` counts UTF-8 bytes.
  - `reset_count()` sets `count` to zero.
  - `read` returns no bytes and `read_byte` returns 0.
  - `remaining_bytes()` reports 2**64 - 1.
  - `flush()` returns the current count.
- `BufferedReadTransport(buffer)` reads from an in-memory buffer.
  - `read(size)` returns up to `size` bytes. It raises `EOFError` when bytes are requested and none are left.
  - `remaining_bytes()` gives the number of unread bytes.
  - `write(data)` replaces the buffer.
  - `flush()` discards the bytes already read.
- Both transports can be used as context managers. `is_open()` is always true.

## Call instrumentation

`new_call(scope, name)` takes any scope object with `tagged(tags)`, `sub_scope(name)`, `counter(name)` and `timer(name)`. Counters need `inc(n)`, and timers need `start()`, which returns an object with `stop()`.

```python
from tally.instrument import new_call

call = new_call(scope, "fetch")
result = call.exec(lambda: do_work())
```

`Call.exec(fn)` runs `fn` and stops the timer. The timer is named `latency` and lives in the `fetch` sub-scope. Then:

- If `fn` returns normally, the `fetch` counter tagged `result_type=success` is incremented and the return value is passed back.
- If `fn` raises, the counter tagged `result_type=error` is incremented and the same exception is raised again.

## What this package does not do

This package has no scope implementation, no reporter and no network client:

- Nothing here aggregates metrics over time.
- Nothing serialises metrics or sends them to a collector.
- Nothing ships a command-line program.

To use `tally.instrument`, you supply the scope, counter and timer objects yourself.

## Running the tests

```
pip install .[test]
pytest
```