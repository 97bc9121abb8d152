"""
Data extraction utilities for scrapers.

These functions pull structured facts out of section text using regex
patterns and keyword vocabularies. The patterns mirror how source sites
phrase things and are kept literal on purpose: first matching pattern
wins and the whole match is returned as written on the page.
"""

import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple


# ============================================================
# GENERIC HELPERS
# ============================================================

def first_match(patterns: Sequence[str], text: Optional[str], flags: int = 0) -> Optional[str]:
    """
    Return the full text of the first pattern that matches.

    Args:
        patterns: Regex patterns, tried in order
        text: Text to search
        flags: Extra re flags applied to every pattern

    Returns:
        Matched text or None
    """
    if not text:
        return None
    for pattern in patterns:
        match = re.search(pattern, text, flags)
        if match:
            return match.group(0)
    return None


def contains_any(text: Optional[str], keywords: Sequence[str]) -> bool:
    """Case-insensitive substring test against a keyword list."""
    if not text:
        return False
    text_lower = text.lower()
    return any(keyword in text_lower for keyword in keywords)


def extract_keywords(text: Optional[str], keywords: Sequence[str], case_sensitive: bool = False) -> List[str]:
    """
    Extract keywords present in text.

    Order of the result follows the keyword list, not the text.

    Args:
        text: Text to search
        keywords: Vocabulary to look for
        case_sensitive: Match exact case (used for proper names like banks)

    Returns:
        List of found keywords
    """
    if not text:
        return []
    haystack = text if case_sensitive else text.lower()
    return [keyword for keyword in keywords if keyword in haystack]


def infer_label(text: Optional[str], rules: Sequence[Tuple[Sequence[str], str]], default: str = 'general') -> str:
    """
    Classify text with ordered keyword rules.

    Examples:
        rules = [(('permit', 'authorization'), 'work_permit'), (('salary',), 'salary')]
        "Work Permit Requirements" -> work_permit
        "Living costs" -> general
    """
    if not text:
        return default
    text_lower = text.lower()
    for keywords, label in rules:
        if any(keyword in text_lower for keyword in keywords):
            return label
    return default


def filter_links(links: List[Dict[str, Optional[str]]], predicate: Callable[[Dict[str, Optional[str]]], bool]) -> List[Dict[str, Optional[str]]]:
    """Keep the ``{"name", "url"}`` links accepted by predicate."""
    return [link for link in links if link.get('url') and predicate(link)]


# ============================================================
# VISA
# ============================================================

def extract_processing_time(text: Optional[str]) -> Optional[str]:
    """
    Extract processing time.

    Handles:
        5-10 business days
        3 to 4 weeks
        15 days
    """
    if not text:
        return None
    patterns = [
        r'(\d+)\s*(?:to|-)\s*(\d+)\s*(?:business\s+)?days?',
        r'(\d+)\s*(?:business\s+)?days?',
        r'(\d+)\s*(?:to|-)\s*(\d+)\s*weeks?',
        r'(\d+)\s*weeks?',
    ]
    return first_match(patterns, text.lower(), re.IGNORECASE)


def extract_cost(text: Optional[str]) -> Optional[str]:
    """
    Extract a fee/cost amount.

    Handles:
        €80
        99.00 EUR
        Fee: 60
    """
    patterns = [
        r'[€$£]\s*\d+(?:[.,]\d{2})?',
        r'(?i)\d+(?:[.,]\d{2})?\s*(?:EUR|USD|GBP)',
        r'(?i)(?:fee|cost|price)(?:\s*:)?\s*[€$£]?\s*\d+',
    ]
    return first_match(patterns, text)


def extract_validity(text: Optional[str]) -> Optional[str]:
    """
    Extract validity period.

    Handles:
        valid 90 days
        validity: 12 months
        up to 5 years
    """
    if not text:
        return None
    patterns = [
        r'valid(?:ity)?(?:\s*:)?\s*(\d+)\s*(?:months?|years?|days?)',
        r'(\d+)\s*(?:months?|years?)\s*validity',
        r'up\s*to\s*(\d+)\s*(?:months?|years?|days?)',
    ]
    return first_match(patterns, text.lower(), re.IGNORECASE)


# ============================================================
# JOB
# ============================================================

def check_work_permit_required(text: Optional[str]) -> Optional[bool]:
    """
    Tri-state work permit flag.

    Returns:
        True if the text says a permit is required, False if it says
        none is needed, None when it says neither
    """
    if not text:
        return None
    text_lower = text.lower()
    # "no work permit required" contains the positive phrase too
    if 'no work permit' in text_lower or 'without permit' in text_lower:
        return False
    if 'work permit required' in text_lower or 'need a work permit' in text_lower:
        return True
    return None


def extract_salary(text: Optional[str]) -> Optional[str]:
    """
    Extract a salary figure.

    Handles:
        Average salary: €3,200
        Minimum wage: 1,766
        £2,500 per month
    """
    patterns = [
        r'average\s+salary[:\s]+[€$£]?\s*[\d,]+',
        r'minimum\s+wage[:\s]+[€$£]?\s*[\d,]+',
        r'[€$£]\s*[\d,]+\s*(?:per\s+)?(?:month|year|hour)',
    ]
    return first_match(patterns, text, re.IGNORECASE)


# ============================================================
# HOUSING
# ============================================================

def extract_city(text: Optional[str], cities: Sequence[str]) -> Optional[str]:
    """First city of the list (in list order) named in the text, case-sensitive."""
    if not text:
        return None
    for city in cities:
        if city in text:
            return city
    return None


def extract_rent(text: Optional[str]) -> Optional[str]:
    """
    Extract a rent amount.

    Handles:
        Average rent: €1,200
        €900 per month
        Rent: €800 - €1,500
    """
    patterns = [
        r'average\s+rent[:\s]+[€$£]?\s*[\d,]+',
        r'[€$£]\s*[\d,]+\s*(?:per\s+)?(?:month|week)',
        r'rent[:\s]+[€$£]?\s*[\d,]+\s*[-–]\s*[€$£]?\s*[\d,]+',
    ]
    return first_match(patterns, text, re.IGNORECASE)


# ============================================================
# HEALTHCARE
# ============================================================

def extract_public_system_info(text: Optional[str]) -> Optional[str]:
    """
    Extract the sentence describing the public health system.

    Handles:
        The public health insurance covers 70% of costs.
        National health service is free at the point of use.
        Universal healthcare is available to residents.
    """
    patterns = [
        r'public\s+health\s+(?:system|care|insurance)[^.]+\.',
        r'national\s+health[^.]+\.',
        r'universal\s+(?:health)?care[^.]+\.',
    ]
    return first_match(patterns, text, re.IGNORECASE)


def extract_emergency_numbers(text: Optional[str]) -> List[str]:
    """
    Extract emergency number mentions.

    One snippet per pattern that matches, in pattern order.

    Handles:
        Emergency: 112
        Ambulance: 15
        999 emergency
    """
    if not text:
        return []
    patterns = [
        r'emergency[:\s]+(\d{2,3})',
        r'ambulance[:\s]+(\d{2,3})',
        r'(\d{3})\s*(?:emergency|ambulance)',
    ]
    numbers = []
    for pattern in patterns:
        match = re.search(pattern, text, re.IGNORECASE)
        if match:
            numbers.append(match.group(0))
    return numbers
