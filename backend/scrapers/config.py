"""
Source configurations for all five information categories.

SOURCES maps a category to a country code to an ordered list of pages
believed to hold information for that country. Countries without an
entry simply have no sources and scrape to nothing.
"""

from typing import Dict, List

from .base import Category, CategoryConfig, Source
from .sites import CATEGORY_CONFIGS


def _sources(*entries) -> List[Source]:
    return [Source(name=name, url=url, type=kind) for name, url, kind in entries]


# ============================================================
# VISA
# ============================================================

VISA_SOURCES = {
    'FR': _sources(
        ('France-Visas', 'https://france-visas.gouv.fr/en/web/france-visas/visa-wizard', 'official'),
        ('VisaHQ France', 'https://www.visahq.com/france/', 'aggregator'),
    ),
    'DE': _sources(
        ('Federal Foreign Office', 'https://www.auswaertiges-amt.de/en/visa-service', 'official'),
        ('VisaHQ Germany', 'https://www.visahq.com/germany/', 'aggregator'),
    ),
    'ES': _sources(
        ('VisaHQ Spain', 'https://www.visahq.com/spain/', 'aggregator'),
    ),
    'GB': _sources(
        ('GOV.UK Visas', 'https://www.gov.uk/browse/visas-immigration', 'official'),
    ),
    'CA': _sources(
        ('IRCC', 'https://www.canada.ca/en/immigration-refugees-citizenship/services/visit-canada.html', 'official'),
    ),
    'US': _sources(
        ('Travel.State.Gov', 'https://travel.state.gov/content/travel/en/us-visas.html', 'official'),
    ),
}


# ============================================================
# JOB
# ============================================================

JOB_SOURCES = {
    'FR': _sources(
        ('EURES France', 'https://eures.europa.eu/living-and-working/living-and-working-conditions/france_en', 'official'),
        ('Expatica Jobs France', 'https://www.expatica.com/fr/employment/', 'guide'),
    ),
    'DE': _sources(
        ('EURES Germany', 'https://eures.europa.eu/living-and-working/living-and-working-conditions/germany_en', 'official'),
        ('Make it in Germany', 'https://www.make-it-in-germany.com/en/working-in-germany', 'official'),
    ),
    'ES': _sources(
        ('EURES Spain', 'https://eures.europa.eu/living-and-working/living-and-working-conditions/spain_en', 'official'),
    ),
    'NL': _sources(
        ('Expatica Jobs Netherlands', 'https://www.expatica.com/nl/employment/', 'guide'),
    ),
    'GB': _sources(
        ('GOV.UK Working', 'https://www.gov.uk/browse/working', 'official'),
    ),
}


# ============================================================
# HOUSING
# ============================================================

HOUSING_SOURCES = {
    'FR': _sources(
        ('Expatica Housing France', 'https://www.expatica.com/fr/housing/', 'guide'),
        ('Service-Public Logement', 'https://www.service-public.fr/particuliers/vosdroits/N19808', 'official'),
    ),
    'DE': _sources(
        ('Expatica Housing Germany', 'https://www.expatica.com/de/housing/', 'guide'),
    ),
    'ES': _sources(
        ('Expatica Housing Spain', 'https://www.expatica.com/es/housing/', 'guide'),
    ),
    'NL': _sources(
        ('Expatica Housing Netherlands', 'https://www.expatica.com/nl/housing/', 'guide'),
    ),
    'GB': _sources(
        ('GOV.UK Renting', 'https://www.gov.uk/private-renting', 'official'),
    ),
}


# ============================================================
# HEALTHCARE
# ============================================================

HEALTHCARE_SOURCES = {
    'FR': _sources(
        ('Ameli', 'https://www.ameli.fr/assure/droits-demarches/europe-international', 'official'),
        ('Expatica Healthcare France', 'https://www.expatica.com/fr/healthcare/', 'guide'),
    ),
    'DE': _sources(
        ('Expatica Healthcare Germany', 'https://www.expatica.com/de/healthcare/', 'guide'),
    ),
    'ES': _sources(
        ('Expatica Healthcare Spain', 'https://www.expatica.com/es/healthcare/', 'guide'),
    ),
    'GB': _sources(
        ('NHS Visiting England', 'https://www.nhs.uk/nhs-services/visiting-or-moving-to-england/', 'official'),
    ),
    'AU': _sources(
        ('Services Australia Medicare', 'https://www.servicesaustralia.gov.au/medicare', 'official'),
    ),
}


# ============================================================
# BANKING
# ============================================================

BANKING_SOURCES = {
    'FR': _sources(
        ('Expatica Banking France', 'https://www.expatica.com/fr/finance/banking/', 'guide'),
    ),
    'DE': _sources(
        ('Expatica Banking Germany', 'https://www.expatica.com/de/finance/banking/', 'guide'),
    ),
    'ES': _sources(
        ('Expatica Banking Spain', 'https://www.expatica.com/es/finance/banking/', 'guide'),
    ),
    'NL': _sources(
        ('Expatica Banking Netherlands', 'https://www.expatica.com/nl/finance/banking/', 'guide'),
    ),
    'GB': _sources(
        ('Expatica Banking UK', 'https://www.expatica.com/uk/finance/banking/', 'guide'),
    ),
}


SOURCES: Dict[Category, Dict[str, List[Source]]] = {
    Category.VISA: VISA_SOURCES,
    Category.JOB: JOB_SOURCES,
    Category.HOUSING: HOUSING_SOURCES,
    Category.HEALTHCARE: HEALTHCARE_SOURCES,
    Category.BANKING: BANKING_SOURCES,
}


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_category(category) -> Category:
    """
    Resolve a category name.

    Args:
        category: Category or its value (e.g., 'visa', 'job')

    Returns:
        Category

    Raises:
        ValueError: If the category is not known
    """
    try:
        return Category(category)
    except ValueError:
        valid_keys = ', '.join(c.value for c in Category)
        raise ValueError(f"Unknown category: '{category}'. Valid categories: {valid_keys}") from None


def get_category_config(category) -> CategoryConfig:
    """Get the scraping configuration for a category."""
    return CATEGORY_CONFIGS[get_category(category)]


def get_sources(category, country_code: str) -> List[Source]:
    """Configured sources for one country, in order. Empty when none."""
    sources = SOURCES[get_category(category)]
    return list(sources.get(country_code.strip().upper(), []))


def list_categories() -> list:
    """List all category keys."""
    return [c.value for c in Category]


def get_source_summary() -> list:
    """Get a summary of all configured sources for display."""
    summary = []
    for category, by_country in SOURCES.items():
        for country_code, sources in by_country.items():
            for source in sources:
                summary.append({
                    'category': category.value,
                    'country': country_code,
                    'name': source.name,
                    'type': source.type,
                    'url': source.url,
                })
    return summary
