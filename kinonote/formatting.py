"""
Field formatting helpers for template-ready movie records.

Every multi-valued attribute of a normalized record is stored as a list of
already-encoded strings. This module owns those encodings:
- plain short values (genres, actors, identifiers)
- quoted long text (descriptions, slogans, facts)
- raw URLs
- quoted wiki links ("[[Name]]")

It also holds the small text utilities shared by the normalizer and the
file namer: date formatting, HTML stripping, image reference construction
and illegal file-name character removal.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

MAX_ARRAY_ITEMS = 15
MAX_FACTS_COUNT = 5

MIN_DATE_YEAR = 1800
MAX_DATE_YEAR = 2100

# Entities decoded in facts; anything else matching ENTITY_PATTERN is dropped
HTML_ENTITIES = {
    "&laquo;": "«",
    "&raquo;": "»",
    "&ldquo;": '"',
    "&rdquo;": '"',
    "&lsquo;": "'",
    "&rsquo;": "'",
    "&quot;": '"',
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&nbsp;": " ",
    "&ndash;": "–",
    "&mdash;": "—",
    "&hellip;": "…",
}

HTML_TAG_PATTERN = re.compile(r"<[^>]*>")
ENTITY_PATTERN = re.compile(r"&#?\w+;")
WHITESPACE_PATTERN = re.compile(r"\s+")
ILLEGAL_FILE_NAME_PATTERN = re.compile(r'[\\/:*?"<>|]')

# Characters that break the structured header block
METADATA_BREAKING_CHARS = ":"

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d.%m.%Y")


class FormatMode(str, Enum):
    """Presentation encodings for record fields."""

    PLAIN = "plain"  # short values without quotes
    QUOTED_TEXT = "quoted-text"  # long text wrapped in quotes
    URL = "url"  # untouched apart from trimming
    LINK = "link"  # quoted wiki link


def clean_text_for_metadata(text: Optional[str]) -> str:
    """Remove characters that would break a metadata block and trim."""
    if not text:
        return ""
    for char in METADATA_BREAKING_CHARS:
        text = text.replace(char, "")
    return text.strip()


def _collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text.replace("\n", " ")).strip()


def _encode(item: str, mode: FormatMode) -> str:
    if mode == FormatMode.PLAIN:
        return clean_text_for_metadata(item)
    if mode == FormatMode.QUOTED_TEXT:
        return f'"{_collapse_whitespace(item)}"'
    if mode == FormatMode.URL:
        return item.strip()
    if mode == FormatMode.LINK:
        return f'"[[{clean_text_for_metadata(item)}]]"'
    return item


def format_values(
    values: Any,
    mode: FormatMode,
    max_items: int = MAX_ARRAY_ITEMS,
) -> List[str]:
    """
    Encode a sequence of raw values for a normalized record.

    Empty and whitespace-only entries are dropped first, then the sequence is
    truncated to ``max_items`` and every surviving entry is encoded according
    to ``mode``. Never raises; anything unusable formats to an empty list.

    Args:
        values: Raw values: a list or tuple of strings (``None`` entries are
            allowed) or a single string
        mode: Target encoding
        max_items: Maximum number of entries kept

    Returns:
        List of encoded strings, one per surviving input value
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, (list, tuple)):
        return []

    filtered = [item for item in values if isinstance(item, str) and item.strip()]
    return [_encode(item, mode) for item in filtered[: max(max_items, 0)]]


def capitalize_first_letter(text: Optional[str]) -> str:
    """Upper-case the first character only, leaving the rest untouched."""
    if not text:
        return ""
    return text[0].upper() + text[1:]


def replace_illegal_file_name_characters(text: Optional[str]) -> str:
    """Strip characters that are not allowed in note file names."""
    if not text:
        return ""
    return ILLEGAL_FILE_NAME_PATTERN.sub("", text)


def _parse_date(value: str) -> Optional[datetime]:
    candidate = value.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass

    for date_format in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate, date_format)
        except ValueError:
            continue
    return None


def format_date(value: Optional[str]) -> str:
    """
    Format a catalog date as ``YYYY-MM-DD``.

    Timezone-aware values are converted to UTC first. Unparseable values and
    years outside 1800..2100 format to an empty string.
    """
    if not value or not isinstance(value, str):
        return ""

    parsed = _parse_date(value)
    if parsed is None:
        return ""

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc)
        except (OverflowError, ValueError):
            return ""

    if parsed.year < MIN_DATE_YEAR or parsed.year > MAX_DATE_YEAR:
        return ""

    return parsed.date().isoformat()


def strip_html_tags(text: Optional[str]) -> str:
    """Remove markup tags and decode the known entity set (best effort)."""
    if not text:
        return ""

    clean_text = HTML_TAG_PATTERN.sub("", text)
    for entity, char in HTML_ENTITIES.items():
        clean_text = clean_text.replace(entity, char)

    return ENTITY_PATTERN.sub("", clean_text).strip()


def is_remote_reference(path: str) -> bool:
    """True for web references; anything else is treated as a local path."""
    return path.startswith("http")


def create_image_link(image_path: Optional[str]) -> List[str]:
    """
    Build an embeddable image reference.

    Remote URLs become ``![](url)``; local paths become ``![[file-name]]``
    with the directory part dropped.
    """
    if not image_path or not image_path.strip():
        return []

    if not is_remote_reference(image_path):
        file_name = image_path.split("/")[-1] or image_path
        return [f"![[{file_name}]]"]

    return [f"![]({image_path})"]
