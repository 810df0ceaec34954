"""Console formatting for diary entries."""

import json
from dataclasses import dataclass
from email.utils import format_datetime

import click

from .core.entries import Entry, filter_visible

ACCENT = "cyan"
TITLE_WIDTH = 40
ID_WIDTH = 20
HASH_WIDTH = 30


@dataclass
class DisplayOptions:
    """Which parts of an entry get printed, and whether hidden ones do."""

    show_date: bool = True
    show_id: bool = False
    show_hash: bool = False
    show_keywords: bool = False
    show_content: bool = True
    show_hidden: bool = False


def accent(text: str, color: bool = True, **styles) -> str:
    if not color:
        return text
    return click.style(text, fg=ACCENT, **styles)


def count_phrase(count: int, color: bool = True) -> str:
    """'1 entry' / '3 entries', with the number highlighted."""
    noun = "entry" if count == 1 else "entries"
    return f"{accent(str(count), color)} {noun}"


def _padded(text: str, width: int, color: bool, **styles) -> str:
    # Pad the plain text so escape codes don't count towards the column width
    return accent(text, color, **styles) + " " * max(0, width - len(text))


def format_header(entry: Entry, options: DisplayOptions, color: bool = True) -> str:
    """Title line: title, then date, id and hash as requested."""
    header = _padded(entry.title, TITLE_WIDTH, color, underline=True)
    if options.show_date:
        header += accent(format_datetime(entry.date), color) + " "
    if options.show_id:
        header += _padded(f"[{entry.id}]", ID_WIDTH, color)
    if options.show_hash:
        header += _padded(f"[{entry.hash_hex}]", HASH_WIDTH, color)
    return header.rstrip()


def format_entries(
    entries: list[Entry],
    options: DisplayOptions,
    width: int = 80,
    color: bool = True,
) -> str:
    """
    Render the visible entries followed by a count of how many were shown.

    Hidden entries are skipped unless options.show_hidden is set.
    """
    visible = filter_visible(entries, options.show_hidden)
    rule = "-" * width
    lines = []

    for entry in visible:
        lines.append(rule)
        lines.append("")
        lines.append(format_header(entry, options, color))

        if options.show_keywords:
            keywords = ", ".join(accent(k, color) for k in entry.keywords)
            lines.append(f"Keywords: {keywords}")

        if options.show_content:
            lines.append(entry.content)

        lines.append("")

    if visible:
        lines.append(rule)

    lines.append(f"Found {count_phrase(len(visible), color)}.")
    return "\n".join(lines)


def format_entries_json(entries: list[Entry], options: DisplayOptions) -> str:
    """Visible entries as a JSON array."""
    visible = filter_visible(entries, options.show_hidden)
    return json.dumps([e.to_dict() for e in visible], indent=2)
