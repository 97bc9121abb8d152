"""
Visa information.

Visa pages are assumed to be topically pure, so every block with a
heading is accepted (no relevance keywords). Blocks are also looked up
with a visa-specific selector and plain h1-h3 headings.
"""

from ..base import BlockContext, Category, CategoryConfig
from ..utils.extractors import extract_cost, extract_processing_time, extract_validity


CATEGORY_RULES = [
    (('tourist', 'visitor'), 'tourist'),
    (('work', 'employment'), 'work'),
    (('student', 'study'), 'student'),
    (('business',), 'business'),
    (('transit',), 'transit'),
    (('family', 'spouse'), 'family'),
    (('permanent', 'residence'), 'residence'),
]


def requirements(ctx: BlockContext):
    return ctx.list_items


def processing_time(ctx: BlockContext):
    return extract_processing_time(ctx.text)


def cost(ctx: BlockContext):
    return extract_cost(ctx.text)


def validity(ctx: BlockContext):
    return extract_validity(ctx.text)


VISA_CONFIG = CategoryConfig(
    category=Category.VISA,
    label='Visa',
    relevance_keywords=None,
    category_rules=CATEGORY_RULES,
    block_selector='article, .content-section, .visa-info, section',
    heading_selector='h1, h2, h3',
    field_extractors={
        'requirements': requirements,
        'processing_time': processing_time,
        'cost': cost,
        'validity': validity,
    },
)
