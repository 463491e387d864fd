"""Document I/O exports."""

from .document_codec import (
    STDIO_MARKER,
    DocumentError,
    dump_document,
    load_document,
    parse_document,
    render_document,
)

__all__ = [
    "STDIO_MARKER",
    "DocumentError",
    "dump_document",
    "load_document",
    "parse_document",
    "render_document",
]
