"""Job market information for foreigners."""

from ..base import BlockContext, Category, CategoryConfig
from ..utils.extractors import check_work_permit_required, extract_keywords, extract_salary, filter_links


RELEVANCE_KEYWORDS = [
    'job', 'work', 'employment', 'career', 'salary',
    'hiring', 'recruit', 'labour', 'labor', 'profession',
]

CATEGORY_RULES = [
    (('permit', 'authorization'), 'work_permit'),
    (('salary', 'wage'), 'salary'),
    (('search', 'find'), 'job_search'),
    (('sector', 'industry'), 'sectors'),
    (('right', 'law'), 'rights'),
    (('contract',), 'contracts'),
]

SECTOR_KEYWORDS = [
    'technology', 'healthcare', 'finance', 'engineering', 'tourism',
    'education', 'manufacturing', 'agriculture', 'retail', 'construction',
]


def _is_job_portal(link) -> bool:
    # href match is case-sensitive, link text is not
    name = link.get('name') or ''
    return 'job' in name.lower() or 'job' in link['url']


def work_permit_required(ctx: BlockContext):
    return check_work_permit_required(ctx.text)


def average_salary(ctx: BlockContext):
    return extract_salary(ctx.text)


def job_search_tips(ctx: BlockContext):
    return ctx.list_items


def popular_sectors(ctx: BlockContext):
    return extract_keywords(ctx.text, SECTOR_KEYWORDS)


def job_portals(ctx: BlockContext):
    return filter_links(ctx.links, _is_job_portal)


JOB_CONFIG = CategoryConfig(
    category=Category.JOB,
    label='Job Market',
    relevance_keywords=RELEVANCE_KEYWORDS,
    category_rules=CATEGORY_RULES,
    field_extractors={
        'work_permit_required': work_permit_required,
        'average_salary': average_salary,
        'job_search_tips': job_search_tips,
        'popular_sectors': popular_sectors,
        'job_portals': job_portals,
    },
)
