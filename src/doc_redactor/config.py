"""YAML/dict config loader for doc-redactor.

Supports loading from a YAML file or a plain dict (for embedding in a
larger add-in config).  Loaded once at startup; the resulting
RedactorConfig is immutable.

Example YAML:

    doc_redactor:
      header_text: CONFIDENTIAL DOCUMENT
      insert_header: true
      track_changes: true
      tracking:
        feature: WordApi
        min_version: "1.5"
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

from .redactor import Redactor, RedactorConfig
from .types import HEADER_TEXT


def load_config(data: dict[str, Any] | None) -> RedactorConfig:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "doc_redactor" key or flat
    if "doc_redactor" in data:
        data = data["doc_redactor"] or {}

    tracking = data.get("tracking") or {}
    header_text = data.get("header_text", HEADER_TEXT)
    if not isinstance(header_text, str) or not header_text.strip():
        raise ValueError("header_text must be a non-empty string")

    return RedactorConfig(
        header_text=header_text,
        insert_header=bool(data.get("insert_header", True)),
        track_changes=bool(data.get("track_changes", True)),
        tracking_feature=str(tracking.get("feature", "WordApi")),
        tracking_min_version=str(tracking.get("min_version", "1.5")),
    )


def load_from_yaml(path: str | Path) -> RedactorConfig:
    """Load config from a YAML file."""
    import yaml
    with open(path) as f:
        return load_config(yaml.safe_load(f))


def create_redactor(config: dict[str, Any] | RedactorConfig | None = None) -> Redactor:
    """Create a Redactor from a config dict or a ready RedactorConfig."""
    if not isinstance(config, RedactorConfig):
        config = load_config(config)
    return Redactor(config)
