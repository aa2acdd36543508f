"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal, Mapping

if TYPE_CHECKING:
    from .host import HostError

Kind = Literal["email", "phone", "ssn"]

# Fixed order used by the detector and the summary message
KINDS: tuple[Kind, ...] = ("email", "phone", "ssn")

REDACTION_LABELS: Mapping[str, str] = {
    "email": "[REDACTED EMAIL]",
    "phone": "[REDACTED PHONE]",
    "ssn": "[REDACTED SSN]",
}

HEADER_TEXT = "CONFIDENTIAL DOCUMENT"


@dataclass(frozen=True, slots=True)
class Match:
    """A single detected sensitive value."""
    value: str             # exact substring as found, never normalized
    kind: Kind

    @property
    def label(self) -> str:
        return REDACTION_LABELS[self.kind]


@dataclass(frozen=True, slots=True)
class Stats:
    """Counts over one run's matches."""
    total: int
    by_kind: Mapping[str, int]


class Phase(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    TRACKING_SETUP = "tracking_setup"
    HEADER_INSERT = "header_insert"
    SCANNING = "scanning"
    NO_MATCHES = "no_matches"
    REDACTING = "redacting"
    REPORTING = "reporting"
    DONE = "done"
    ERROR = "error"


@dataclass(slots=True)
class RunState:
    """Transient state of the run in flight."""
    phase: Phase = Phase.IDLE
    tracking_note: str = ""
    redacted: int = 0          # matches whose ranges were replaced
    header_ok: bool = False    # header step completed without error


@dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of one best-effort step."""
    ok: bool
    note: str = ""
    error: HostError | None = None


@dataclass(frozen=True, slots=True)
class RunReport:
    """Result of one redaction run."""
    phase: Phase
    message: str
    matches: list[Match] = field(default_factory=list)
    stats: Stats | None = None
    redacted: int = 0
    tracking_note: str = ""
    header_ok: bool = False
    error: HostError | None = None

    @property
    def ok(self) -> bool:
        return self.phase is not Phase.ERROR
