"""Pattern detector: regexes for the three kinds of sensitive text.

The captured literal is what later gets searched for and replaced in
the document, so values are returned exactly as they appear.
"""

from __future__ import annotations
import re
from .types import Kind, Match

# Phone separator: dot, hyphen, ASCII whitespace or a Unicode space (NBSP, U+2000..U+200A, ...)
_SEP = r"[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff.-]"

# Each pattern: (kind, compiled_regex).  Order matters: when the same
# literal satisfies two families, the earlier one claims it.
# re.ASCII keeps \d and \b to their ASCII meaning.
_PATTERNS: list[tuple[Kind, re.Pattern]] = [
    # Email
    ("email", re.compile(
        r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"
    , re.ASCII)),

    # Phone: 555-123-4567, 555.123.4567, (555) 123-4567, +1 555 123 4567
    ("phone", re.compile(
        r"\b(?:\+?\d{1,2}" + _SEP + r"?)?"
        r"(?:\(?\d{3}\)?" + _SEP + r"?)"
        r"\d{3}" + _SEP + r"?\d{4}\b"
    , re.ASCII)),

    # SSN (US)
    ("ssn", re.compile(
        r"\b\d{3}-\d{2}-\d{4}\b"
    , re.ASCII)),
]


def detect(text: str) -> list[Match]:
    """Find sensitive values in text.

    Families run in order (email, phone, ssn), each left to right.
    A literal value is reported once even if it occurs many times or
    fits more than one family.
    """
    if not isinstance(text, str) or not text:
        return []
    matches: list[Match] = []
    seen: set[str] = set()
    for kind, pattern in _PATTERNS:
        for m in pattern.finditer(text):
            value = m.group()
            if value in seen:
                continue
            seen.add(value)
            matches.append(Match(value=value, kind=kind))
    return matches
