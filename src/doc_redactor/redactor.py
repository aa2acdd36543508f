"""Redactor: drives one redaction run against a live document.

Usage:
    from doc_redactor import Redactor
    from doc_redactor.memory import InMemoryDocument, InMemoryHost, StatusLog

    doc = InMemoryDocument("Mail a@b.com or call 555-123-4567.")
    status = StatusLog()
    report = await Redactor().run(InMemoryHost(doc), status)
    print(status.last)     # "Redaction complete. Replaced 2 items (1 email, 1 phone)."
    print(doc.body)        # "Mail [REDACTED EMAIL] or call [REDACTED PHONE]."

Steps after scanning are best-effort: tracking, header and per-match
failures are logged and skipped.  Only a failure of the session itself
ends the run in the error phase.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from .host import (
    DocumentHost,
    DocumentSession,
    ErrorKind,
    HostError,
    StatusSink,
    TriggerControl,
    describe_error,
)
from .patterns import detect
from .summary import aggregate, compose_message, progress_message
from .types import HEADER_TEXT, Match, Phase, RunReport, RunState, StepResult

logger = logging.getLogger(__name__)

TRACKING_UNAVAILABLE = "Track Changes not available in this host (skipping tracking)."
NO_MATCHES_MESSAGE = "No sensitive patterns found."

_PHASE_MESSAGES = {
    Phase.ANALYZING: "Analyzing document...",
    Phase.TRACKING_SETUP: "Enabling track changes...",
    Phase.HEADER_INSERT: "Adding confidentiality header...",
    Phase.SCANNING: "Scanning for sensitive information...",
    Phase.NO_MATCHES: NO_MATCHES_MESSAGE,
}


class RedactionInProgressError(RuntimeError):
    """Raised when a run is started while another is in flight."""


@dataclass(frozen=True)
class RedactorConfig:
    """Configuration for the Redactor."""
    header_text: str = HEADER_TEXT
    insert_header: bool = True
    track_changes: bool = True
    # Host requirement set that provides revision tracking
    tracking_feature: str = "WordApi"
    tracking_min_version: str = "1.5"


class Redactor:
    """Runs the analyze → track → header → scan → redact → report sequence."""

    def __init__(self, config: RedactorConfig | None = None) -> None:
        self.config = config or RedactorConfig()
        self._active: RunState | None = None

    @property
    def busy(self) -> bool:
        return self._active is not None

    @property
    def state(self) -> RunState | None:
        """State of the run in flight, if any."""
        return self._active

    async def run(
        self,
        host: DocumentHost,
        status: StatusSink,
        control: TriggerControl | None = None,
    ) -> RunReport:
        """Redact the host's document, publishing progress to status.

        Never raises for host failures: a rejected session yields a
        report in the ERROR phase.  The control is re-enabled on every
        exit path.
        """
        if self._active is not None:
            raise RedactionInProgressError("a redaction run is already in progress")

        state = RunState()
        self._active = state
        if control is not None:
            control.set_enabled(False)
        try:
            self._enter(state, Phase.ANALYZING, status)

            async def batch(session: DocumentSession) -> RunReport:
                return await self._run_session(session, state, status)

            return await host.run(batch)
        except Exception as exc:
            error = HostError.wrap(exc)
            logger.error("Redaction run failed: %r", error, exc_info=exc)
            state.phase = Phase.ERROR
            message = describe_error(error)
            status.publish(message)
            return RunReport(
                phase=Phase.ERROR,
                message=message,
                redacted=state.redacted,
                tracking_note=state.tracking_note,
                header_ok=state.header_ok,
                error=error,
            )
        finally:
            self._active = None
            if control is not None:
                control.set_enabled(True)

    # ------------------------------------------------------------------
    # Session body
    # ------------------------------------------------------------------

    async def _run_session(
        self,
        session: DocumentSession,
        state: RunState,
        status: StatusSink,
    ) -> RunReport:
        if self.config.track_changes:
            self._enter(state, Phase.TRACKING_SETUP, status)
            result = await self.setup_tracking(session)
            state.tracking_note = result.note

        if self.config.insert_header:
            self._enter(state, Phase.HEADER_INSERT, status)
            result = await self.insert_header(session)
            state.header_ok = result.ok

        self._enter(state, Phase.SCANNING, status)
        body = session.body_text()
        await session.sync()
        matches = detect(body.value)
        stats = aggregate(matches)

        if not matches:
            self._enter(state, Phase.NO_MATCHES, status)
            return RunReport(
                phase=Phase.NO_MATCHES,
                message=NO_MATCHES_MESSAGE,
                stats=stats,
                tracking_note=state.tracking_note,
                header_ok=state.header_ok,
            )

        state.phase = Phase.REDACTING
        status.publish(progress_message(stats))
        for match in matches:
            result = await self.redact_match(session, match)
            if result.ok:
                state.redacted += 1

        state.phase = Phase.REPORTING
        await session.sync()
        message = compose_message(stats, state.tracking_note)
        logger.info(
            "Redacted %d of %d matches", state.redacted, stats.total,
        )
        state.phase = Phase.DONE
        status.publish(message)
        return RunReport(
            phase=Phase.DONE,
            message=message,
            matches=matches,
            stats=stats,
            redacted=state.redacted,
            tracking_note=state.tracking_note,
            header_ok=state.header_ok,
        )

    # ------------------------------------------------------------------
    # Best-effort steps
    # ------------------------------------------------------------------

    async def setup_tracking(self, session: DocumentSession) -> StepResult:
        """Turn on revision tracking if the host supports it.

        An unsupported host yields an advisory note; a failed enable is
        ignored, since tracking that is already on is what we want.
        """
        cfg = self.config
        if not session.supports(cfg.tracking_feature, cfg.tracking_min_version):
            logger.debug(
                "%s %s not supported, skipping tracking",
                cfg.tracking_feature, cfg.tracking_min_version,
            )
            return StepResult(ok=False, note=TRACKING_UNAVAILABLE)
        try:
            session.set_track_revisions(True)
            await session.sync()
        except HostError as e:
            if e.is_fatal:
                raise
            if e.kind in (ErrorKind.UNSUPPORTED, ErrorKind.ALREADY_ENABLED):
                logger.debug("Track changes not enabled (%s)", e.kind.value)
            else:
                logger.warning("Enabling track changes failed: %r", e)
            return StepResult(ok=False, error=e)
        except Exception as e:
            logger.warning("Enabling track changes failed: %r", e)
            return StepResult(ok=False, error=HostError(ErrorKind.GENERAL, str(e)))
        return StepResult(ok=True)

    async def insert_header(self, session: DocumentSession) -> StepResult:
        """Put the banner at the top of the first section's header, once."""
        text = self.config.header_text
        try:
            sections = session.section_count()
            await session.sync()
            if sections.value == 0:
                return StepResult(ok=True)

            existing = session.header_text(0)
            await session.sync()
            if text in existing.value:
                return StepResult(ok=True)

            session.insert_header_paragraph(text, 0)
            await session.sync()
        except HostError as e:
            if e.is_fatal:
                raise
            logger.warning("Header insert failed: %r", e)
            return StepResult(ok=False, error=e)
        except Exception as e:
            logger.warning("Header insert failed: %r", e)
            return StepResult(ok=False, error=HostError(ErrorKind.GENERAL, str(e)))
        return StepResult(ok=True)

    async def redact_match(self, session: DocumentSession, match: Match) -> StepResult:
        """Replace every occurrence of one match with its label.

        Not finding the value is a skip, not an error.
        """
        try:
            found = session.search(match.value, match_case=False, match_whole_word=False)
            await session.sync()
            ranges = found.value
            if not ranges:
                logger.debug("No ranges found for %s match, skipping", match.kind)
                return StepResult(ok=False)

            for rng in ranges:
                rng.replace(match.label)
            await session.sync()
        except HostError as e:
            if e.is_fatal:
                raise
            logger.warning("Couldn't redact %r: %r", match.value, e)
            return StepResult(ok=False, error=e)
        except Exception as e:
            logger.warning("Couldn't redact %r: %r", match.value, e)
            return StepResult(ok=False, error=HostError(ErrorKind.GENERAL, str(e)))
        return StepResult(ok=True)

    # ------------------------------------------------------------------

    @staticmethod
    def _enter(state: RunState, phase: Phase, status: StatusSink) -> None:
        state.phase = phase
        logger.debug("Entering phase %s", phase.value)
        status.publish(_PHASE_MESSAGES[phase])
