"""Per-category scraping configurations."""

from ..base import Category
from .visa import VISA_CONFIG
from .job import JOB_CONFIG
from .housing import HOUSING_CONFIG
from .healthcare import HEALTHCARE_CONFIG, get_default_emergency_numbers
from .banking import BANKING_CONFIG

CATEGORY_CONFIGS = {
    Category.VISA: VISA_CONFIG,
    Category.JOB: JOB_CONFIG,
    Category.HOUSING: HOUSING_CONFIG,
    Category.HEALTHCARE: HEALTHCARE_CONFIG,
    Category.BANKING: BANKING_CONFIG,
}

__all__ = [
    'CATEGORY_CONFIGS',
    'VISA_CONFIG',
    'JOB_CONFIG',
    'HOUSING_CONFIG',
    'HEALTHCARE_CONFIG',
    'BANKING_CONFIG',
    'get_default_emergency_numbers',
]
