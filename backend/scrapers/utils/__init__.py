"""Shared utilities for scrapers."""

from .normalizers import (
    extract_text,
    clean_text,
    normalize_country_code,
    serialize_field,
    deserialize_field,
)
from .document import PageDocument
from .extractors import (
    first_match,
    contains_any,
    extract_keywords,
    infer_label,
    filter_links,
)

__all__ = [
    'extract_text',
    'clean_text',
    'normalize_country_code',
    'serialize_field',
    'deserialize_field',
    'PageDocument',
    'first_match',
    'contains_any',
    'extract_keywords',
    'infer_label',
    'filter_links',
]
