"""
Data normalization utilities for scrapers.

These functions standardize scraped text and structured fields into
consistent formats before they are stored.
"""

import re
import json
from typing import Any, Optional


def extract_text(text: Optional[str]) -> Optional[str]:
    """
    Collapse every whitespace run (newlines included) to a single space.

    Used for inline fields such as titles and list items.

    Examples:
        "  Work\\n   Permit  " -> "Work Permit"
        "   " -> None
    """
    if not text:
        return None
    collapsed = re.sub(r'\s+', ' ', text).strip()
    return collapsed or None


def clean_text(text: Optional[str]) -> Optional[str]:
    """
    Clean a longer description while keeping its line structure.

    Runs of spaces and tabs become one space, consecutive newlines
    become a single newline.

    Examples:
        "First   line\\n\\n\\nSecond" -> "First line\\nSecond"
    """
    if not text:
        return None
    cleaned = re.sub(r'[ \t\r\f\v]+', ' ', text)
    cleaned = re.sub(r' *\n *', '\n', cleaned)
    cleaned = re.sub(r'\n+', '\n', cleaned)
    return cleaned.strip() or None


def normalize_country_code(country_code: str) -> str:
    """
    Normalize an ISO country code.

    Examples:
        fr -> FR
        " gb " -> GB
    """
    return (country_code or '').strip().upper()


def serialize_field(value: Any) -> Optional[str]:
    """
    Serialize a multi-valued field to JSON text.

    Empty lists and dicts serialize to None, never to "[]" or "{}".
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple, dict)) and not value:
        return None
    return json.dumps(list(value) if isinstance(value, tuple) else value)


def deserialize_field(value: Optional[str]) -> Any:
    """Decode a JSON text column back to its list/dict. None stays None."""
    if not value:
        return None
    return json.loads(value)
