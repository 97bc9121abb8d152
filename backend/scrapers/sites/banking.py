"""Banking and financial services for expats."""

from ..base import BlockContext, Category, CategoryConfig
from ..utils.extractors import extract_keywords


RELEVANCE_KEYWORDS = [
    'bank', 'account', 'finance', 'money', 'transfer',
    'payment', 'credit', 'debit', 'savings',
]

CATEGORY_RULES = [
    (('account',), 'accounts'),
    (('transfer',), 'transfers'),
    (('credit',), 'credit'),
    (('savings',), 'savings'),
    (('tax',), 'taxes'),
    (('investment',), 'investment'),
]

REQUIREMENT_KEYWORDS = [
    'passport', 'id', 'proof of address', 'proof of income',
    'residence permit', 'tax number', 'social security',
]

# Common banks by region, matched case-sensitively
KNOWN_BANKS = [
    'BNP Paribas', 'Societe Generale', 'Credit Agricole', 'HSBC',
    'Deutsche Bank', 'Commerzbank', 'ING', 'Santander', 'BBVA',
    'Barclays', 'Lloyds', 'NatWest', 'TD Bank', 'RBC', 'Scotiabank',
    'Commonwealth Bank', 'Westpac', 'ANZ', 'NAB', 'N26', 'Revolut',
]


def account_requirements(ctx: BlockContext):
    return extract_keywords(ctx.text, REQUIREMENT_KEYWORDS)


def recommended_banks(ctx: BlockContext):
    return extract_keywords(ctx.text, KNOWN_BANKS, case_sensitive=True)


def tips(ctx: BlockContext):
    return ctx.list_items


BANKING_CONFIG = CategoryConfig(
    category=Category.BANKING,
    label='Banking',
    relevance_keywords=RELEVANCE_KEYWORDS,
    category_rules=CATEGORY_RULES,
    field_extractors={
        'account_requirements': account_requirements,
        'recommended_banks': recommended_banks,
        'tips': tips,
    },
)
