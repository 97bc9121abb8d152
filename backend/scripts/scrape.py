#!/usr/bin/env python3
"""
Command-line scraping.

Usage:
    cd backend
    python -m scripts.scrape <category> [country_code]

Examples:
    python -m scripts.scrape job FR      # Scrape job info for France
    python -m scripts.scrape housing     # Scrape housing info for every country
    python -m scripts.scrape --all       # Scrape every category for every country
    python -m scripts.scrape --list      # List configured sources
"""

import asyncio
import argparse
import logging

from api.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format=settings.log_format,
)

from api.database import SessionLocal, init_db
from scrapers.base import Colors
from scrapers.config import get_source_summary, list_categories
from scrapers.gateway import SQLAlchemyGateway
from scrapers.manager import ScraperManager


def list_sources():
    """List all configured sources."""
    print(f"\n{'='*60}")
    print("Configured Sources")
    print(f"{'='*60}\n")

    for source in get_source_summary():
        print(f"[{source['category']:10}] {source['country']}  {source['name']}")
        print(f"              {source['url']}")


def print_summaries(results):
    print(f"\n{'='*60}")
    print("Summary")
    print(f"{'='*60}")
    grand_total = 0
    for category, summaries in results.items():
        total = sum(s.count for s in summaries)
        grand_total += total
        scraped = ', '.join(f"{s.country}={s.count}" for s in summaries if s.count)
        print(f"{Colors.bold(category):20} {total:5} item(s)  {Colors.gray(scraped)}")
    print(f"\nTotal: {grand_total} item(s)")


async def run(args):
    init_db()
    db = SessionLocal()
    try:
        gateway = SQLAlchemyGateway(db, upsert=args.upsert or settings.scraper_upsert_records)
        async with ScraperManager(gateway) as manager:
            if args.all:
                print_summaries(await manager.scrape_everything())
            elif args.country_code:
                records = await manager.scrape_country(args.category, args.country_code)
                print(f"\n{Colors.green('✓')} {len(records)} {args.category} item(s) for {args.country_code.upper()}")
                for record in records:
                    print(f"  [{record.category}] {record.title}")
            else:
                print_summaries({args.category: await manager.scrape_all(args.category)})
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description='Scrape relocation information')
    parser.add_argument('category', nargs='?', choices=list_categories(), help='Category to scrape')
    parser.add_argument('country_code', nargs='?', help='ISO country code (default: every known country)')
    parser.add_argument('--all', action='store_true', help='Scrape every category for every country')
    parser.add_argument('--list', action='store_true', help='List configured sources')
    parser.add_argument('--upsert', action='store_true', help='Update matching rows instead of appending')

    args = parser.parse_args()

    if args.list:
        list_sources()
        return

    if not args.all and not args.category:
        parser.print_help()
        print("\nExample: python -m scripts.scrape job FR")
        return

    asyncio.run(run(args))


if __name__ == '__main__':
    main()
