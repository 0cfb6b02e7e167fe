#!/usr/bin/env python3

"""
Job Bank Scraper - Main Entry Point
Scrapes LMIA job postings and delivers them to the ingestion API
"""

import argparse
import logging
import sys
from typing import Optional
from config_loader import load_config
from api_client import SessionClient
from collector import JobCollector
from extractor import extract_jobs
from models import RunSummary
from navigator import PacingPolicy, PageNavigator
from normalizer import normalize_records
from output_writer import OutputWriter

logger = logging.getLogger(__name__)


def setup_logging(config) -> None:
    """Configure logging for the application"""
    log_file = config.get_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    log_level = getattr(logging, config.get_log_level(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    logger.info(f"Logging initialized: {log_file}")


def display_config(config, number_of_pages: int, save_to_api: bool, save_to_json: bool) -> None:
    """Display loaded configuration"""
    print("\n" + "="*60)
    print("🇨🇦🍁 JOB BANK SCRAPER")
    print("="*60)

    pages_label = "all available" if number_of_pages <= 0 else str(number_of_pages)
    print(f"\n📄 Pages to load: {pages_label}")
    print(f"🌐 Listings: {config.get_listings_url()}")
    if config.get_job_title() or config.get_province():
        print(f"🔍 Job title: {config.get_job_title() or 'any'}")
        print(f"📍 Province: {config.get_province() or 'any'}")

    print(f"\n⚙️  BROWSER SETTINGS:")
    print(f"  Headless mode: {config.is_headless()}")
    print(f"  Delay range: {config.get_min_delay()}s - {config.get_max_delay()}s")
    print(f"  Page timeout: {config.get_page_timeout()/1000}s")

    print(f"\n💾 OUTPUT:")
    print(f"  API: {config.get_api_base_url() if save_to_api else 'disabled'}")
    print(f"  JSON: {config.get_output_dir() if save_to_json else 'disabled'}")

    print("\n" + "="*60 + "\n")


def run_pipeline(
    config,
    *,
    number_of_pages: int,
    save_to_api: bool,
    save_to_json: bool,
    client: Optional[SessionClient] = None,
    collector=None,
    navigator: Optional[PageNavigator] = None,
    writer: Optional[OutputWriter] = None,
) -> RunSummary:
    """
    Run one scrape end to end.

    Stages run strictly in order: pagination, extraction, normalization,
    submission, export. A failure while submitting or completing the session
    is logged and recorded on the summary; the JSON export still happens.
    """
    summary = RunSummary(requested_pages=number_of_pages)

    if save_to_api:
        client = client or SessionClient.from_config(config)
        if not client.test_connection():
            logger.warning("⚠️  API connection failed, continuing with JSON-only save")
            save_to_api = False
    summary.api_mode = save_to_api

    collector = collector or JobCollector(config)
    navigator = navigator or PageNavigator(PacingPolicy.from_config(config))
    writer = writer or OutputWriter(config)

    try:
        collector.start_browser()
        page = collector.open_listings()

        total_results = page.results_count()
        print(f"\n📊 Total LMIA jobs to scrape: {total_results}")

        if save_to_api:
            summary.session_id = client.start_scraping_session()

        summary.pages_loaded = navigator.load_pages(page, number_of_pages)

        jobs = extract_jobs(page, config.get_base_url())
        jobs = normalize_records(jobs)
        summary.jobs = jobs
        summary.jobs_scraped = len(jobs)

        writer.print_jobs(jobs)

        if save_to_api:
            total_pages = number_of_pages if number_of_pages > 0 else summary.pages_loaded
            try:
                summary.jobs_submitted = client.submit_jobs(jobs)
                client.complete_scraping_session(total_pages, len(jobs), len(jobs))
                summary.session_completed = True
            except Exception as e:
                logger.error(f"❌ Failed to save to API: {e}")
                summary.errors.append(str(e))

        if save_to_json:
            summary.export_path = str(writer.write_json(jobs))
    finally:
        collector.stop_browser()

    logger.info(f"Run complete: {summary}")
    return summary


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Job Bank LMIA scraper")
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to config YAML",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=None,
        help="Number of result pages to load (-1 loads all)",
    )
    parser.add_argument("--job-title", default=None, help="Filter by job title")
    parser.add_argument("--province", default=None, help="Filter by province")
    parser.add_argument(
        "--save-json",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write the normalized jobs to a timestamped JSON file",
    )
    parser.add_argument(
        "--no-api",
        action="store_true",
        help="Skip delivery to the ingestion API",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main execution function"""
    print("\n🚀 Job Bank Scraper - Starting...")
    args = parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"❌ Error: {e}")
        print("Make sure config/settings.yaml exists!")
        return 1
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        return 1

    if args.job_title is not None:
        config.set('scraper.job_title', args.job_title)
    if args.province is not None:
        config.set('scraper.province', args.province)

    number_of_pages = args.pages if args.pages is not None else config.get_number_of_pages()
    save_to_json = args.save_json if args.save_json is not None else config.is_json_export_enabled()
    save_to_api = config.is_api_enabled() and not args.no_api

    setup_logging(config)
    display_config(config, number_of_pages, save_to_api, save_to_json)

    summary = run_pipeline(
        config,
        number_of_pages=number_of_pages,
        save_to_api=save_to_api,
        save_to_json=save_to_json,
    )

    writer = OutputWriter(config)
    writer.print_summary(summary)

    # Partial API failures are reported above but do not change the exit code
    return 0


if __name__ == "__main__":
    sys.exit(main())
