"""Stats and operator-facing messages for a redaction run."""

from __future__ import annotations
from typing import Iterable

from .types import KINDS, Match, Stats

# Noun shown for each kind in the summary
_NOUNS = {"email": "email", "phone": "phone", "ssn": "SSN"}


def aggregate(matches: Iterable[Match]) -> Stats:
    """Count matches per kind.  Every kind is present, zero or not."""
    counts = {kind: 0 for kind in KINDS}
    total = 0
    for m in matches:
        counts[m.kind] += 1
        total += 1
    return Stats(total=total, by_kind=counts)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def compose_message(stats: Stats, note: str = "") -> str:
    """Build the final status line, e.g.

        Redaction complete. Replaced 3 items (1 email, 1 phone, 1 SSN).

    A non-empty note is appended as its own sentence.
    """
    parts = [
        _plural(stats.by_kind.get(kind, 0), _NOUNS[kind])
        for kind in KINDS
        if stats.by_kind.get(kind, 0) > 0
    ]
    msg = f"Redaction complete. Replaced {_plural(stats.total, 'item')}"
    if parts:
        msg += f" ({', '.join(parts)})"
    msg += "."
    if note:
        msg += f" {note}"
    return msg


def progress_message(stats: Stats) -> str:
    return f"Found {_plural(stats.total, 'item')} to redact. Processing..."
