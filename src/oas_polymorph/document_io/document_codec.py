"""Document loading and serialization service."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import yaml

STDIO_MARKER = "-"


class DocumentError(Exception):
    """Raised when an API description cannot be read, parsed or written."""


def load_document(source: Path | str | None = None) -> Any:
    """Parse a YAML or JSON API description; `None` or `-` reads stdin."""
    if source is None or str(source) == STDIO_MARKER:
        text = sys.stdin.read()
        label = "<stdin>"
    else:
        path = Path(source)
        if not path.exists():
            raise DocumentError(f"Input document not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentError(f"Failed to read input document {path}: {exc}") from exc
        label = str(path)
    return parse_document(text, label=label)


def parse_document(text: str, *, label: str = "<string>") -> Any:
    """Parse document text; JSON is read through the YAML parser."""
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentError(f"Failed to parse {label}: {exc}") from exc
    return {} if parsed is None else parsed


def render_document(document: Any, *, as_json: bool = False) -> str:
    """Serialize a document, keeping key insertion order."""
    if as_json:
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(
        document,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def dump_document(document: Any, target: Path | str | None = None) -> str:
    """Write a document to `target` (JSON for `.json`, YAML otherwise).

    With no target (or `-`) the rendered text is written to stdout. The
    rendered text is returned either way.
    """
    if target is None or str(target) == STDIO_MARKER:
        text = render_document(document)
        sys.stdout.write(text)
        return text

    destination = Path(target)
    text = render_document(document, as_json=destination.suffix.lower() == ".json")
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Failed to write output document {destination}: {exc}") from exc
    return text
