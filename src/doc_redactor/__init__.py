"""Doc Redactor: find and redact emails, phones and SSNs in a live document."""

from .redactor import Redactor, RedactorConfig, RedactionInProgressError
from .patterns import detect
from .summary import aggregate, compose_message, progress_message
from .host import ErrorKind, HostError, Pending, describe_error
from .config import create_redactor, load_config, load_from_yaml
from .types import Match, Phase, RunReport, Stats, REDACTION_LABELS, HEADER_TEXT

__all__ = [
    "Redactor", "RedactorConfig", "RedactionInProgressError",
    "detect", "aggregate", "compose_message", "progress_message",
    "ErrorKind", "HostError", "Pending", "describe_error",
    "create_redactor", "load_config", "load_from_yaml",
    "Match", "Phase", "RunReport", "Stats", "REDACTION_LABELS", "HEADER_TEXT",
]
__version__ = "0.1.0"
