"""
Healthcare system information.

Unlike the other categories, the fallback record is never left without
emergency numbers for a country in DEFAULT_EMERGENCY_NUMBERS.
"""

from ..base import BlockContext, Category, CategoryConfig
from ..utils.extractors import (
    contains_any,
    extract_emergency_numbers,
    extract_keywords,
    extract_public_system_info,
    filter_links,
)


RELEVANCE_KEYWORDS = [
    'health', 'medical', 'insurance', 'hospital', 'doctor',
    'care', 'emergency', 'medicine', 'patient',
]

CATEGORY_RULES = [
    (('insurance',), 'insurance'),
    (('emergency',), 'emergency'),
    (('hospital',), 'hospitals'),
    (('doctor', 'gp'), 'doctors'),
    (('pharmacy', 'medicine'), 'pharmacy'),
    (('dental',), 'dental'),
]

INSURANCE_KEYWORDS = [
    'insurance required', 'mandatory insurance', 'health coverage', 'ehic', 'social security',
]

DEFAULT_EMERGENCY_NUMBERS = {
    'FR': {'emergency': '112', 'samu': '15', 'police': '17', 'fire': '18'},
    'DE': {'emergency': '112', 'police': '110'},
    'ES': {'emergency': '112'},
    'IT': {'emergency': '112', 'carabinieri': '112'},
    'GB': {'emergency': '999', 'nhs': '111'},
    'US': {'emergency': '911'},
    'CA': {'emergency': '911'},
    'AU': {'emergency': '000'},
}


def get_default_emergency_numbers(country_code: str):
    """Static emergency numbers for a country, or None when unknown."""
    numbers = DEFAULT_EMERGENCY_NUMBERS.get(country_code.upper())
    return dict(numbers) if numbers else None


def _is_health_link(link) -> bool:
    return contains_any(link.get('name') or link['url'], RELEVANCE_KEYWORDS)


def public_system_info(ctx: BlockContext):
    return extract_public_system_info(ctx.text)


def insurance_requirements(ctx: BlockContext):
    return extract_keywords(ctx.text, INSURANCE_KEYWORDS)


def emergency_numbers(ctx: BlockContext):
    return extract_emergency_numbers(ctx.text)


def useful_links(ctx: BlockContext):
    return filter_links(ctx.links, _is_health_link)


def fallback_fields(country_code: str):
    return {'emergency_numbers': get_default_emergency_numbers(country_code)}


HEALTHCARE_CONFIG = CategoryConfig(
    category=Category.HEALTHCARE,
    label='Healthcare',
    relevance_keywords=RELEVANCE_KEYWORDS,
    category_rules=CATEGORY_RULES,
    field_extractors={
        'public_system_info': public_system_info,
        'insurance_requirements': insurance_requirements,
        'emergency_numbers': emergency_numbers,
        'useful_links': useful_links,
    },
    fallback_fields=fallback_fields,
)
