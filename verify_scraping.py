import argparse
import asyncio
import sys

from f95metadata import Scraper, ScraperError, cookies_from_env, create_cookie_jar, id_from_link, verify_cookies
from f95metadata.config import filter_whitelisted, parse_cookie_string
from f95metadata.logging_config import logger, setup_logging


def build_parser():
    parser = argparse.ArgumentParser(description="Scrape F95Zone threads and search results")
    parser.add_argument("threads", nargs="*", help="Thread ids or thread URLs")
    parser.add_argument("--search", action="append", default=[], help="Search term (repeatable)")
    parser.add_argument("--cookies", help="Cookie string 'name=value; name2=value2' (defaults to F95_COOKIES)")
    return parser


def _print_page(result):
    logger.info(f"  -> Name: {result.name}")
    logger.info(f"  -> Version: {result.version}")
    logger.info(f"  -> Developer: {result.developer}")
    logger.info(f"  -> Labels: {result.labels}")
    logger.info(f"  -> Found {len(result.tags or [])} tags, {len(result.images or [])} images, {len(result.links)} links.")
    logger.info(f"  -> Rating: {result.rating if result.has_rating else 'unknown'}")
    for link in result.links:
        logger.info(f"      - {link.name} -> {link.url}")


async def run(args, scraper):
    failures = 0
    for thread in args.threads:
        thread_id = id_from_link(thread) or thread
        logger.info(f"Scraping thread {thread_id}")
        try:
            _print_page(await scraper.fetch_page(thread_id))
        except ScraperError as e:
            logger.error(f"  [!] FAILED: {e}")
            failures += 1

    for term in args.search:
        logger.info(f"Searching for '{term}'")
        results = await scraper.search(term)
        if not results:
            logger.warning("  [!] Search returned nothing, make sure you are logged in!")
        for result in results:
            logger.info(f"  - {result.name} -> {result.link}")

    return failures


def main(argv=None, scraper=None):
    args = build_parser().parse_args(argv)
    setup_logging()

    if scraper is None:
        if args.cookies:
            cookies = create_cookie_jar(filter_whitelisted(parse_cookie_string(args.cookies)))
        else:
            cookies = cookies_from_env()
        for problem in verify_cookies(cookies):
            logger.warning(f"COOKIES: {problem}")
        scraper = Scraper(cookies=cookies)

    failures = asyncio.run(run(args, scraper))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
