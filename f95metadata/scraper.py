import time
from urllib.parse import quote_plus

import requests

from f95metadata.config import F95_BASE_URL, SEARCH_URL, THREADS_URL
from f95metadata.errors import Cancelled, ScraperError
from f95metadata.fetcher import DocumentFetcher
from f95metadata.guard import AntiBotGuard
from f95metadata.logging_config import logger
from f95metadata.notifications import LoggingNotifier, new_notification_key
from f95metadata.page_extractor import PageExtractor
from f95metadata.renderer import PlaywrightRenderer
from f95metadata.search_extractor import SearchExtractor

SEARCH_QUERY_TEMPLATE = "{search_url}/{timestamp}/?q={term}&t=post&c[child_nodes]=1&c[nodes][0]=2&o=relevance&g=1"


class Scraper:
    """
    Public entry point: fetch a thread page by id, or search the site.
    cookies: cookie jar sent with every request and copied into the bypass browser.
    notifier: sink receiving user-facing error messages.
    renderer_factory: callable returning a fresh Renderer for DDoS-Guard bypasses.
    """

    def __init__(self, cookies=None, notifier=None, renderer_factory=PlaywrightRenderer,
                 renderer_settings=None, session_factory=requests.Session, base_url=THREADS_URL,
                 search_url=SEARCH_URL, site_url=F95_BASE_URL, clock=time.time):
        self.base_url = base_url
        self.search_url = search_url.rstrip('/')
        self.clock = clock
        self.notifier = notifier if notifier is not None else LoggingNotifier()

        self.fetcher = DocumentFetcher(cookies=cookies, session_factory=session_factory)
        self.guard = AntiBotGuard(
            cookies=self.fetcher.cookies,
            renderer_factory=renderer_factory,
            renderer_settings=renderer_settings,
        )
        self.page_extractor = PageExtractor()
        self.search_extractor = SearchExtractor(site_url=site_url)

    def page_url(self, page_id):
        return self.base_url + page_id

    def search_page_url(self, term):
        return SEARCH_QUERY_TEMPLATE.format(
            search_url=self.search_url,
            timestamp=int(self.clock()),
            term=quote_plus(term),
        )

    def _report(self, error):
        logger.error(f"SCRAPER: {error}")
        self.notifier.notify(new_notification_key(), error.user_message(), error.title)

    async def fetch_page(self, page_id, cancel_event=None):
        """
        Scrapes the thread `page_id` and returns a PageResult.
        Raises FetchFailed, AuthenticationFailed, GuardPersists, HostileRedirect or Cancelled.
        """
        url = self.page_url(page_id)
        logger.info(f"SCRAPER: Scraping page {url} with {len(self.fetcher.cookies)} cookie(s).")
        try:
            document = await self.fetcher.fetch(url, cancel_event)
            document = await self.guard.resolve(url, document, cancel_event)
        except Cancelled:
            logger.info(f"SCRAPER: Scrape of {url} cancelled.")
            raise
        except ScraperError as e:
            self._report(e)
            raise

        return self.page_extractor.extract(document, page_id, page_url=url)

    async def search(self, term, cancel_event=None):
        """Searches the site for `term`. Failures are reported and yield an empty list."""
        url = self.search_page_url(term)
        logger.info(f"SCRAPER: Searching for '{term}'.")
        try:
            document = await self.fetcher.fetch(url, cancel_event)
            document = await self.guard.resolve(url, document, cancel_event)
        except Cancelled:
            logger.info(f"SCRAPER: Search for '{term}' cancelled.")
            raise
        except ScraperError as e:
            logger.error(f"SCRAPER: Search for '{term}' failed, returning no results.")
            self._report(e)
            return []

        return self.search_extractor.extract(document)
