"""In-memory document host.

Mirrors the request/sync discipline of a real host: reads resolve and
writes land only when the session syncs.  Useful for tests and for
running the redactor over plain text offline.
"""

from __future__ import annotations
import asyncio
import re
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar, Union

from .host import DocumentSession, ErrorKind, HostError, Pending

T = TypeVar("T")


def _version(v: str) -> tuple[int, ...]:
    return tuple(int(p) for p in v.split(".") if p.isdigit())


@dataclass
class InMemoryDocument:
    """Plain-text document with one primary header per section."""
    body: str = ""
    headers: list[list[str]] = field(default_factory=lambda: [[]])
    track_revisions: bool = False
    # Requirement sets the host claims to support, name → version
    api_versions: dict[str, str] = field(default_factory=lambda: {"WordApi": "1.5"})
    revision: int = 0      # bumped on every body edit

    def header(self, section: int = 0) -> str:
        return "\n".join(self.headers[section])

    def supports(self, feature: str, min_version: str) -> bool:
        have = self.api_versions.get(feature)
        return have is not None and _version(have) >= _version(min_version)


class InMemoryRange:
    """A span of the body as it was when the search resolved."""

    __slots__ = ("_session", "start", "end", "revision")

    def __init__(self, session: InMemorySession, start: int, end: int, revision: int) -> None:
        self._session = session
        self.start = start
        self.end = end
        self.revision = revision

    @property
    def text(self) -> str:
        return self._session.document.body[self.start:self.end]

    def replace(self, text: str) -> None:
        self._session._queue.append(_Edit(self, text))


@dataclass(frozen=True, slots=True)
class _Edit:
    range: InMemoryRange
    text: str


_Op = Union[Callable[[], None], _Edit]


class InMemorySession:
    """Batched session over an InMemoryDocument."""

    def __init__(self, document: InMemoryDocument, *, reject: HostError | None = None) -> None:
        self.document = document
        self._reject = reject
        self._queue: list[_Op] = []
        self.sync_count = 0

    def supports(self, feature: str, min_version: str) -> bool:
        return self.document.supports(feature, min_version)

    def set_track_revisions(self, enabled: bool) -> None:
        def op() -> None:
            if not self.document.supports("WordApi", "1.5"):
                raise HostError(ErrorKind.UNSUPPORTED, "ApiNotFound: trackRevisions is not supported")
            self.document.track_revisions = enabled
        self._queue.append(op)

    def section_count(self) -> Pending[int]:
        pending: Pending[int] = Pending("sections")
        self._queue.append(lambda: pending.resolve(len(self.document.headers)))
        return pending

    def header_text(self, section: int = 0) -> Pending[str]:
        pending: Pending[str] = Pending("header text")

        def op() -> None:
            self._check_section(section)
            pending.resolve(self.document.header(section))
        self._queue.append(op)
        return pending

    def insert_header_paragraph(self, text: str, section: int = 0) -> None:
        def op() -> None:
            self._check_section(section)
            self.document.headers[section].insert(0, text)
        self._queue.append(op)

    def body_text(self) -> Pending[str]:
        pending: Pending[str] = Pending("body text")
        self._queue.append(lambda: pending.resolve(self.document.body))
        return pending

    def search(
        self,
        literal: str,
        *,
        match_case: bool = False,
        match_whole_word: bool = False,
    ) -> Pending[list[InMemoryRange]]:
        pending: Pending[list[InMemoryRange]] = Pending("search results")

        def op() -> None:
            if not literal:
                raise HostError(ErrorKind.INVALID_REQUEST, "search text is empty")
            pattern = re.escape(literal)
            if match_whole_word:
                pattern = rf"\b{pattern}\b"
            flags = 0 if match_case else re.IGNORECASE
            rev = self.document.revision
            pending.resolve([
                InMemoryRange(self, m.start(), m.end(), rev)
                for m in re.finditer(pattern, self.document.body, flags)
            ])
        self._queue.append(op)
        return pending

    async def sync(self) -> None:
        await asyncio.sleep(0)
        self.sync_count += 1
        if self._reject is not None:
            self._queue.clear()
            raise self._reject
        queue, self._queue = self._queue, []
        edits: list[_Edit] = []
        try:
            for op in queue:
                if isinstance(op, _Edit):
                    edits.append(op)
                    continue
                self._apply_edits(edits)
                edits = []
                op()
            self._apply_edits(edits)
        except HostError:
            raise
        except Exception as e:
            raise HostError(ErrorKind.GENERAL, str(e)) from e

    # ------------------------------------------------------------------

    def _check_section(self, section: int) -> None:
        if not 0 <= section < len(self.document.headers):
            raise HostError(ErrorKind.INVALID_REQUEST, f"no section {section}")

    def _apply_edits(self, edits: list[_Edit]) -> None:
        """Apply queued replacements right-to-left so offsets stay valid."""
        if not edits:
            return
        doc = self.document
        for edit in edits:
            if edit.range.revision != doc.revision:
                raise HostError(ErrorKind.INVALID_REQUEST, "range is no longer valid")
        body = doc.body
        for edit in sorted(edits, key=lambda e: e.range.start, reverse=True):
            body = body[:edit.range.start] + edit.text + body[edit.range.end:]
        doc.body = body
        doc.revision += 1


class InMemoryHost:
    """DocumentHost over an InMemoryDocument.

    ``reject`` makes every sync fail with that error, the way a host
    rejects a whole batch.
    """

    session_class: type[InMemorySession] = InMemorySession

    def __init__(self, document: InMemoryDocument, *, reject: HostError | None = None) -> None:
        self.document = document
        self.reject = reject
        self.sessions: list[InMemorySession] = []

    async def run(self, batch: Callable[[DocumentSession], Awaitable[T]]) -> T:
        session = self.open_session()
        result = await batch(session)
        await session.sync()
        return result

    def open_session(self) -> InMemorySession:
        session = self.session_class(self.document, reject=self.reject)
        self.sessions.append(session)
        return session


class StatusLog:
    """Status sink that records every message."""

    __slots__ = ("messages",)

    def __init__(self) -> None:
        self.messages: list[str] = []

    def publish(self, text: str) -> None:
        self.messages.append(text)

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None


class ToggleControl:
    """Trigger control that records enable/disable calls."""

    __slots__ = ("enabled", "history")

    def __init__(self) -> None:
        self.enabled = True
        self.history: list[bool] = []

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        self.history.append(enabled)
