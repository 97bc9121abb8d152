"""Housing and rental information for foreigners."""

from ..base import BlockContext, Category, CategoryConfig
from ..utils.extractors import contains_any, extract_city, extract_keywords, extract_rent, filter_links


RELEVANCE_KEYWORDS = [
    'housing', 'rent', 'apartment', 'flat', 'accommodation', 'lease',
    'tenant', 'landlord', 'property', 'home', 'living',
]

CATEGORY_RULES = [
    (('rent',), 'rental'),
    (('buy', 'purchase'), 'buying'),
    (('student',), 'student'),
    (('temporary', 'short'), 'temporary'),
    (('social',), 'social_housing'),
    (('right', 'law'), 'rights'),
]

# Checked in this order, first hit wins
MAJOR_CITIES = [
    'Paris', 'Lyon', 'Marseille', 'Berlin', 'Munich', 'Frankfurt', 'Hamburg',
    'Madrid', 'Barcelona', 'Amsterdam', 'Rotterdam', 'London', 'Manchester',
    'Toronto', 'Vancouver', 'Montreal', 'Sydney', 'Melbourne', 'New York',
    'Los Angeles', 'Tokyo', 'Singapore', 'Dubai',
]

DOCUMENT_KEYWORDS = [
    'passport', 'id', 'proof of income', 'bank statement', 'employment contract',
    'references', 'deposit', 'guarantor', 'visa',
]


def _is_rental_platform(link) -> bool:
    return contains_any(link.get('name') or link['url'], RELEVANCE_KEYWORDS)


def city(ctx: BlockContext):
    return extract_city(ctx.text, MAJOR_CITIES)


def average_rent(ctx: BlockContext):
    return extract_rent(ctx.text)


def required_documents(ctx: BlockContext):
    return extract_keywords(ctx.text, DOCUMENT_KEYWORDS)


def tips(ctx: BlockContext):
    return ctx.list_items


def rental_platforms(ctx: BlockContext):
    return filter_links(ctx.links, _is_rental_platform)


HOUSING_CONFIG = CategoryConfig(
    category=Category.HOUSING,
    label='Housing',
    relevance_keywords=RELEVANCE_KEYWORDS,
    category_rules=CATEGORY_RULES,
    field_extractors={
        'city': city,
        'average_rent': average_rent,
        'required_documents': required_documents,
        'tips': tips,
        'rental_platforms': rental_platforms,
    },
)
