"""Main entry point for naukri-scout.

This module provides the command-line interface: scraping keywords from the
config file or the command line, and inspecting the job store.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from naukri_scout import __version__
from naukri_scout.config import ScrapeConfig, Settings, get_settings, load_scrape_config
from naukri_scout.db.store import JobStore, SaveResult
from naukri_scout.errors import NaukriScoutError
from naukri_scout.runner import run_scrape

RULE = "━" * 40


def show_banner() -> None:
    print("\n╔════════════════════════════════════════╗")
    print("║       🔍 Naukri Job Scraper            ║")
    print("╚════════════════════════════════════════╝\n")


def print_keyword_header(index: int, total: int, keyword: str) -> None:
    print(f"\n{RULE}")
    print(f"📌 Keyword {index}/{total}: \"{keyword}\"")
    print(RULE)


def print_results(results: SaveResult, config: ScrapeConfig, prefix: str = "") -> None:
    print(RULE)
    print(f"📊 {prefix}Jobs Found: {results.found}")
    print(f"💾 {prefix}New Jobs Saved: {results.saved}")
    print(f"🔄 {prefix}Duplicates Updated: {results.duplicates}")
    if config.skills:
        print(f"🎯 {prefix}Jobs Matched by Skills: {results.matched}")
    print(f"{RULE}\n")


def run_from_config(settings: Settings, store: JobStore) -> int:
    """Scrape every keyword in the config file, logging in first."""
    config = load_scrape_config(settings.config_path)
    keywords = config.keywords
    if not keywords:
        print(f"\n⚠️  No keywords found in {settings.config_path}")
        print("Please add keywords to the config file:")
        print('  {\n    "keywords": ["nodejs developer", "react developer"]\n  }')
        return 0

    scraping = config.scraping
    print(f"\n📋 Found {len(keywords)} keywords in {settings.config_path}")
    print(f"   Keywords: {', '.join(keywords)}")
    print(f"   Pages per keyword: {scraping.pages_per_keyword}")
    if config.skills:
        print(f"   🔧 Skills to match: {', '.join(config.skills)}")
    if config.experience:
        print(f"   📋 Experience filter: {config.experience.label()}")
    if scraping.scrape_job_details:
        print("   📝 Detail scraping: enabled (will visit each job page)")

    totals, failed = asyncio.run(
        run_scrape(
            settings,
            store,
            keywords,
            config,
            credentials=settings.credentials(),
            on_keyword=print_keyword_header,
        )
    )

    print("\n\n╔════════════════════════════════════════╗")
    print("║        🎉 ALL SCRAPING COMPLETE!       ║")
    print("╚════════════════════════════════════════╝")
    print(f"🔑 Keywords Processed: {len(keywords)}")
    if failed:
        print(f"❌ Keywords Failed: {', '.join(failed)}")
    print_results(totals, config, prefix="Total ")
    return 0


def run_single_scrape(settings: Settings, store: JobStore, keyword: str, pages: int, login: bool) -> int:
    """Scrape a single keyword."""
    config = load_scrape_config(settings.config_path)
    credentials = settings.credentials() if login else None

    results, failed = asyncio.run(
        run_scrape(settings, store, [keyword], config, pages=pages, credentials=credentials)
    )
    if failed:
        print(f"\n❌ Failed to scrape jobs for \"{keyword}\"")
        return 1
    if results.found == 0:
        print("\n⚠️  No jobs found for the given keyword.")
        return 0

    print("\n✅ Scraping Complete!")
    print_results(results, config)
    return 0


def list_jobs(store: JobStore, keyword: Optional[str], limit: int) -> int:
    jobs = store.list_jobs(keyword, limit)
    if not jobs:
        print("\n⚠️  No jobs found in the database.")
        return 0

    print(f"\n📋 Found {len(jobs)} jobs:\n")
    print("━" * 78)
    for index, job in enumerate(jobs, 1):
        print(f"\n{index}. {job['title']}")
        print(f"   🏢 Company: {job['company']}")
        print(f"   📍 Location: {job['location']}")
        print(f"   💼 Experience: {job['experienceRange']}")
        salary = job["salaryOffered"]
        if salary == "Not disclosed":
            salary = job["salaryDisclosed"]
        print(f"   💰 Salary: {salary}")
        if job["keySkills"]:
            print(f"   🔧 Key Skills: {', '.join(job['keySkills'][:8])}")
        elif job["skills"]:
            print(f"   🔧 Skills: {', '.join(job['skills'][:5])}")
        if job["matchedSkills"]:
            print(f"   🎯 Matched Skills: {', '.join(job['matchedSkills'])}")
        if job["industryTypes"]:
            print(f"   🏭 Industry: {', '.join(job['industryTypes'])}")
        if job["totalVacancy"] != "Not specified":
            print(f"   👥 Vacancies: {job['totalVacancy']}")
        posted = job["jobPostedAt"]
        if posted == "Not specified":
            posted = job["postedDate"]
        print(f"   🔗 {job['jobUrl']}")
        print(f"   📅 Posted: {posted} | Scraped: {(job['scrapedAt'] or '')[:10]}")
    print("\n" + "━" * 78 + "\n")
    return 0


def show_stats(store: JobStore) -> int:
    stats = store.stats()
    print("\n📈 Database Statistics:\n")
    print(RULE)
    print(f"📊 Total Jobs: {stats.total_jobs}")
    print(f"🏢 Unique Companies: {stats.unique_companies}")
    print(f"🔑 Keywords Searched: {', '.join(stats.keywords_searched) or 'None'}")
    print(f"🎯 Jobs with Matched Skills: {stats.jobs_with_matched_skills}")
    print(f"{RULE}\n")
    return 0


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="naukri-scout",
        description="Scrape job listings from Naukri.com and store them locally",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("run", help="Scrape every keyword in the config file (with Naukri login)")

    scrape_parser = subparsers.add_parser("scrape", help="Scrape jobs for a specific keyword")
    scrape_parser.add_argument(
        "-k", "--keyword", required=True, help='Job keyword to search for (e.g., "nodejs developer")'
    )
    scrape_parser.add_argument("-p", "--pages", type=positive_int, default=3, help="Number of pages to scrape")
    scrape_parser.add_argument("-l", "--login", action="store_true", help="Login to Naukri before scraping")

    list_parser = subparsers.add_parser("list", help="List stored jobs")
    list_parser.add_argument("-k", "--keyword", help="Filter jobs by keyword")
    list_parser.add_argument("-l", "--limit", type=positive_int, default=20, help="Maximum number of jobs to display")

    subparsers.add_parser("stats", help="Show statistics about stored jobs")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    show_banner()
    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = get_settings()
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        store = JobStore.connect(settings.require_database_url())
    except NaukriScoutError as e:
        print(f"\n❌ Error: {e}")
        return 1

    try:
        if args.command == "run":
            return run_from_config(settings, store)
        if args.command == "scrape":
            return run_single_scrape(settings, store, args.keyword, args.pages, args.login)
        if args.command == "list":
            return list_jobs(store, args.keyword, args.limit)
        return show_stats(store)
    except NaukriScoutError as e:
        print(f"\n❌ Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n⏹️  Interrupted")
        return 130
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
