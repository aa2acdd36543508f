"""Tests for the detector, stats, messages, errors and config."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from doc_redactor import Match, Stats, aggregate, compose_message, detect, progress_message
from doc_redactor.config import create_redactor, load_config, load_from_yaml
from doc_redactor.host import GENERIC_ERROR_MESSAGE, ErrorKind, HostError, Pending, describe_error
from doc_redactor.redactor import RedactorConfig, TRACKING_UNAVAILABLE


# ── Detector ─────────────────────────────────────────────────────────

def test_detect_example_document():
    matches = detect("Contact a@b.com or 555-123-4567, SSN 123-45-6789.")
    assert matches == [
        Match("a@b.com", "email"),
        Match("555-123-4567", "phone"),
        Match("123-45-6789", "ssn"),
    ]


def test_email_detection():
    matches = detect("Write to jane.doe+news@mail.example.co.uk today")
    assert matches == [Match("jane.doe+news@mail.example.co.uk", "email")]


def test_phone_separators():
    matches = detect("Call 555.123.4567 or 555 987 6543")
    assert [m.value for m in matches] == ["555.123.4567", "555 987 6543"]
    assert all(m.kind == "phone" for m in matches)


def test_phone_with_country_code():
    # \b cannot sit before "+", so the capture starts at the first digit
    assert detect("Office: +44-555-123-4567") == [Match("44-555-123-4567", "phone")]
    assert detect("Dial +1 555 123 4567 today") == [Match("1 555 123 4567", "phone")]


def test_phone_parenthesized_area_code():
    # likewise \b cannot sit before "(", so the capture starts inside it
    assert detect("Call (555) 123-4567 now") == [Match("555) 123-4567", "phone")]


def test_phone_unicode_space_separators():
    nbsp = "555\u00a0123\u00a04567"
    assert detect(f"Call {nbsp} now") == [Match(nbsp, "phone")]
    ideographic = "555\u3000123\u30004567"
    assert detect(ideographic) == [Match(ideographic, "phone")]


def test_ssn_requires_hyphens():
    assert detect("SSN 123 45 6789") == []
    assert detect("SSN 123-45-6789") == [Match("123-45-6789", "ssn")]


def test_families_in_fixed_order():
    # SSN and phone appear before the email in the text
    matches = detect("123-45-6789 then 555-123-4567 then z@z.io")
    assert [m.kind for m in matches] == ["email", "phone", "ssn"]


def test_duplicate_literal_reported_once():
    text = "a@b.com, a@b.com and again a@b.com; 123-45-6789 / 123-45-6789"
    matches = detect(text)
    assert matches == [Match("a@b.com", "email"), Match("123-45-6789", "ssn")]


def test_case_variants_are_distinct_literals():
    matches = detect("a@b.com and A@B.COM")
    assert [m.value for m in matches] == ["a@b.com", "A@B.COM"]


def test_no_matches_on_clean_text():
    assert detect("Hello world.") == []
    assert detect("") == []


def test_non_ascii_digits_ignored():
    assert detect("５５５-１２３-４５６７") == []


def test_match_label():
    assert Match("a@b.com", "email").label == "[REDACTED EMAIL]"
    assert Match("555-123-4567", "phone").label == "[REDACTED PHONE]"
    assert Match("123-45-6789", "ssn").label == "[REDACTED SSN]"


# ── Stats ────────────────────────────────────────────────────────────

def test_aggregate_counts():
    stats = aggregate(detect("Contact a@b.com or 555-123-4567, SSN 123-45-6789."))
    assert stats == Stats(total=3, by_kind={"email": 1, "phone": 1, "ssn": 1})


def test_aggregate_empty_has_all_kinds():
    stats = aggregate([])
    assert stats.total == 0
    assert stats.by_kind == {"email": 0, "phone": 0, "ssn": 0}


def test_aggregate_totals_agree():
    matches = [Match("a@b.com", "email"), Match("c@d.com", "email"), Match("123-45-6789", "ssn")]
    stats = aggregate(matches)
    assert stats.total == len(matches)
    assert sum(stats.by_kind.values()) == stats.total


# ── Messages ─────────────────────────────────────────────────────────

def test_compose_example_message():
    stats = Stats(total=3, by_kind={"email": 1, "phone": 1, "ssn": 1})
    assert compose_message(stats) == "Redaction complete. Replaced 3 items (1 email, 1 phone, 1 SSN)."


def test_compose_pluralization_and_omission():
    stats = Stats(total=3, by_kind={"email": 2, "phone": 0, "ssn": 1})
    assert compose_message(stats) == "Redaction complete. Replaced 3 items (2 emails, 1 SSN)."


def test_compose_single_item():
    stats = Stats(total=1, by_kind={"email": 0, "phone": 1, "ssn": 0})
    assert compose_message(stats) == "Redaction complete. Replaced 1 item (1 phone)."


def test_compose_zero_items():
    assert compose_message(aggregate([])) == "Redaction complete. Replaced 0 items."


def test_compose_with_note():
    stats = Stats(total=2, by_kind={"email": 0, "phone": 0, "ssn": 2})
    assert compose_message(stats, TRACKING_UNAVAILABLE) == (
        "Redaction complete. Replaced 2 items (2 SSNs). "
        "Track Changes not available in this host (skipping tracking)."
    )


def test_progress_message():
    assert progress_message(Stats(1, {"email": 1, "phone": 0, "ssn": 0})) == (
        "Found 1 item to redact. Processing..."
    )
    assert progress_message(Stats(4, {"email": 4, "phone": 0, "ssn": 0})) == (
        "Found 4 items to redact. Processing..."
    )


# ── Errors ───────────────────────────────────────────────────────────

def test_describe_error_with_debug_info():
    err = HostError(
        ErrorKind.SESSION, "Batch rejected",
        debug_info={"errorLocation": "Body.search"}, code="GeneralException",
    )
    assert describe_error(err) == (
        'Error: Batch rejected. Debug: {"errorLocation": "Body.search"} [Code: GeneralException]'
    )


def test_describe_error_with_code():
    err = HostError(ErrorKind.SESSION, "Access denied", code="AccessDenied")
    assert describe_error(err) == "Access denied [Code: AccessDenied]"


def test_describe_error_message_only():
    assert describe_error(HostError(ErrorKind.SESSION, "Document is read-only")) == "Document is read-only"


def test_describe_error_fallback():
    assert describe_error(HostError(ErrorKind.SESSION)) == GENERIC_ERROR_MESSAGE
    assert describe_error(HostError(ErrorKind.SESSION, debug_info={"a": 1})) == 'Error: Unknown. Debug: {"a": 1}'


def test_wrap_tags_foreign_exceptions_as_fatal():
    err = HostError.wrap(RuntimeError("boom"))
    assert err.kind is ErrorKind.SESSION
    assert err.is_fatal
    assert describe_error(err) == "boom"
    original = HostError(ErrorKind.UNSUPPORTED, "nope")
    assert HostError.wrap(original) is original
    assert not original.is_fatal


def test_pending_value_requires_sync():
    pending: Pending[str] = Pending("body text")
    with pytest.raises(HostError) as info:
        pending.value
    assert info.value.kind is ErrorKind.NOT_SYNCED
    pending.resolve("hello")
    assert pending.loaded
    assert pending.value == "hello"


# ── Config ───────────────────────────────────────────────────────────

def test_load_config_defaults():
    assert load_config({}) == RedactorConfig()
    assert load_config(None).header_text == "CONFIDENTIAL DOCUMENT"


def test_load_config_nested():
    cfg = load_config({
        "doc_redactor": {
            "header_text": "INTERNAL",
            "track_changes": False,
            "tracking": {"feature": "WordApi", "min_version": 1.6},
        }
    })
    assert cfg.header_text == "INTERNAL"
    assert cfg.track_changes is False
    assert cfg.insert_header is True
    assert cfg.tracking_min_version == "1.6"


def test_load_config_rejects_blank_header():
    with pytest.raises(ValueError):
        load_config({"header_text": "  "})


def test_load_from_yaml(tmp_path):
    path = tmp_path / "redactor.yaml"
    path.write_text(
        "doc_redactor:\n"
        "  header_text: PRIVILEGED\n"
        "  insert_header: false\n"
    )
    cfg = load_from_yaml(path)
    assert cfg.header_text == "PRIVILEGED"
    assert cfg.insert_header is False
    assert cfg.track_changes is True


def test_create_redactor():
    assert create_redactor().config == RedactorConfig()
    cfg = RedactorConfig(insert_header=False)
    assert create_redactor(cfg).config is cfg
    assert create_redactor({"track_changes": False}).config.track_changes is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
