"""Pure diary entry logic - no I/O dependencies."""

import hashlib
import re
from dataclasses import dataclass
from datetime import datetime

KEYWORD_SEPARATOR = ";"

_fraction_re = re.compile(r"\.(\d+)")


@dataclass
class Entry:
    """A single diary entry."""

    id: int
    hash: bytes
    date: datetime
    keywords: list[str]
    title: str
    content: str
    hidden: bool = False

    @property
    def hash_hex(self) -> str:
        return self.hash.hex()

    def matches(self, term: str) -> bool:
        """Title contains the term, or the term is one of the keywords."""
        return term in self.title.lower() or term in self.keywords

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "hash": self.hash_hex,
            "date": self.date.isoformat(),
            "keywords": self.keywords,
            "title": self.title,
            "content": self.content,
            "hidden": self.hidden,
        }


def parse_keywords(raw: str) -> list[str]:
    """Split whitespace-separated user input into lowercase keywords."""
    return [k.lower() for k in raw.split()]


def normalize_keywords(keywords: list[str]) -> list[str]:
    """Sort and deduplicate keywords. Pure function - no I/O."""
    return sorted(set(keywords))


def encode_keywords(keywords: list[str]) -> str:
    return KEYWORD_SEPARATOR.join(keywords)


def decode_keywords(value: str) -> list[str]:
    if not value:
        return []
    return value.split(KEYWORD_SEPARATOR)


def compute_hash(keywords: list[str], title: str, content: str, timestamp: str) -> bytes:
    """
    SHA-256 fingerprint of an entry.

    Digest of the joined keywords, title, content and creation timestamp,
    fed in that order.
    """
    hasher = hashlib.sha256()
    hasher.update(encode_keywords(keywords).encode("utf-8"))
    hasher.update(title.encode("utf-8"))
    hasher.update(content.encode("utf-8"))
    hasher.update(timestamp.encode("utf-8"))
    return hasher.digest()


def search_entries(entries: list[Entry], terms: list[str]) -> list[Entry]:
    """
    Entries matching any of the search terms, in their original order.

    Terms are expected lowercase. Each entry is included at most once.
    Pure function - no I/O.
    """
    found = []
    for entry in entries:
        for term in terms:
            if entry.matches(term):
                found.append(entry)
                break
    return found


def filter_visible(entries: list[Entry], show_hidden: bool = False) -> list[Entry]:
    """Drop hidden entries unless show_hidden is set."""
    return [e for e in entries if not e.hidden or show_hidden]


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored RFC 3339 timestamp.

    Fractional seconds are padded or truncated to microseconds (nanosecond
    timestamps lose their last digits), and a trailing "Z" is read as UTC.
    Raises ValueError if the value is not a timestamp.
    """
    value = _fraction_re.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
