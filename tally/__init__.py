"""Histogram buckets, identity hashing, caches, in-memory transports and call instrumentation."""

__version__ = "0.1.0"