"""Functional core - pure business logic with no I/O."""

from .entries import (
    Entry,
    compute_hash,
    decode_keywords,
    encode_keywords,
    filter_visible,
    normalize_keywords,
    parse_keywords,
    parse_timestamp,
    search_entries,
)

__all__ = [
    "Entry",
    "compute_hash",
    "decode_keywords",
    "encode_keywords",
    "filter_visible",
    "normalize_keywords",
    "parse_keywords",
    "parse_timestamp",
    "search_entries",
]
