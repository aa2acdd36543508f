"""Interfaces to the host document platform.

The redactor never touches the document directly.  Every read is a
request whose result is only valid after the next ``sync()``; every
write is queued and only committed by a ``sync()``.

    async def batch(session):
        body = session.body_text()     # Pending[str]
        await session.sync()
        return body.value              # safe now

    text = await host.run(batch)
"""

from __future__ import annotations
import json
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar

T = TypeVar("T")

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class ErrorKind(str, Enum):
    UNSUPPORTED = "unsupported"          # host lacks the feature
    ALREADY_ENABLED = "already_enabled"  # setting is already on
    NOT_SYNCED = "not_synced"            # value read before its sync
    INVALID_REQUEST = "invalid_request"  # host rejected a single request
    SESSION = "session"                  # the whole batch was rejected
    GENERAL = "general"


class HostError(Exception):
    """Failure reported by the document host."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        debug_info: dict[str, Any] | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.debug_info = debug_info
        self.code = code

    @property
    def is_fatal(self) -> bool:
        return self.kind is ErrorKind.SESSION

    @classmethod
    def wrap(cls, exc: BaseException) -> "HostError":
        """Tag an arbitrary exception that escaped a batch as session-fatal."""
        if isinstance(exc, HostError):
            return exc
        return cls(ErrorKind.SESSION, str(exc))

    def __repr__(self) -> str:
        return f"HostError({self.kind.value!r}, {self.message!r}, code={self.code!r})"


def describe_error(error: HostError) -> str:
    """Turn a host error into the text shown to the operator."""
    message = error.message
    if error.debug_info:
        msg = f"Error: {message or 'Unknown'}. Debug: {json.dumps(error.debug_info)}"
        if error.code:
            msg += f" [Code: {error.code}]"
        return msg
    if error.code:
        return f"{message or 'Unknown'} [Code: {error.code}]"
    if message:
        return message
    return GENERIC_ERROR_MESSAGE


class Pending(Generic[T]):
    """A loaded value that becomes readable after the session syncs."""

    __slots__ = ("_value", "_loaded", "_what")

    def __init__(self, what: str = "value") -> None:
        self._what = what
        self._loaded = False
        self._value: T | None = None

    def resolve(self, value: T) -> None:
        self._value = value
        self._loaded = True

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def value(self) -> T:
        if not self._loaded:
            raise HostError(
                ErrorKind.NOT_SYNCED,
                f"{self._what} is not available until the session is synced",
            )
        return self._value  # type: ignore[return-value]


# ----------------------------------------------------------------------
# Collaborator protocols
# ----------------------------------------------------------------------

class TextRange(Protocol):
    def replace(self, text: str) -> None:
        """Queue replacing this range's text."""
        ...


class DocumentSession(Protocol):
    def supports(self, feature: str, min_version: str) -> bool: ...

    def set_track_revisions(self, enabled: bool) -> None: ...

    def section_count(self) -> Pending[int]: ...

    def header_text(self, section: int = 0) -> Pending[str]: ...

    def insert_header_paragraph(self, text: str, section: int = 0) -> None: ...

    def body_text(self) -> Pending[str]: ...

    def search(
        self,
        literal: str,
        *,
        match_case: bool = False,
        match_whole_word: bool = False,
    ) -> Pending[list[TextRange]]: ...

    async def sync(self) -> None: ...


class DocumentHost(Protocol):
    def run(self, batch: Callable[[DocumentSession], Awaitable[T]]) -> Awaitable[T]:
        """Open a session, run the batch, commit.  Raises HostError(SESSION)."""
        ...


class StatusSink(Protocol):
    def publish(self, text: str) -> None: ...


class TriggerControl(Protocol):
    def set_enabled(self, enabled: bool) -> None: ...
