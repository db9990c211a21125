import asyncio
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup
from requests.cookies import RequestsCookieJar

from f95metadata.cancellation import raise_if_cancelled, run_cancellable
from f95metadata.config import REQUEST_TIMEOUT, USER_AGENT
from f95metadata.errors import FetchFailed
from f95metadata.logging_config import logger


def parse_document(html_content):
    """Parses raw HTML into a queryable document."""
    return BeautifulSoup(html_content or "", 'html.parser')


class DocumentFetcher:
    """
    Performs cookie-bearing GET requests and returns parsed documents.
    cookies: cookie jar attached to every request; it is only read, never updated.
    session_factory: callable returning a requests.Session; one session per fetch.
    """

    def __init__(self, cookies=None, session_factory=requests.Session, timeout=REQUEST_TIMEOUT):
        self.cookies = cookies if cookies is not None else RequestsCookieJar()
        self.session_factory = session_factory
        self.timeout = timeout

    def _get(self, url):
        """Blocking GET that follows at most one redirect."""
        session = self.session_factory()
        session.headers.update({'User-Agent': USER_AGENT})
        try:
            response = session.get(url, cookies=self.cookies, timeout=self.timeout, allow_redirects=False)
            if response.is_redirect and response.headers.get('Location'):
                location = urljoin(url, response.headers['Location'])
                logger.info(f"FETCH: {url} redirected to {location}")
                response = session.get(location, cookies=self.cookies, timeout=self.timeout, allow_redirects=False)
        except requests.RequestException as e:
            raise FetchFailed(url, None, f"{type(e).__name__} - {e}") from e
        finally:
            # Cookies set by responses die with the session
            session.close()

        if not 200 <= response.status_code < 300:
            raise FetchFailed(url, response.status_code, response.reason)
        return response

    async def fetch(self, url, cancel_event=None):
        """
        Fetches `url` and returns it parsed with BeautifulSoup.
        Raises FetchFailed on a non-success status or transport error and
        Cancelled when `cancel_event` is set before the response arrives.
        """
        raise_if_cancelled(cancel_event)
        logger.debug(f"FETCH: GET {url} with {len(self.cookies)} cookie(s).")

        response = await run_cancellable(asyncio.to_thread(self._get, url), cancel_event)
        logger.debug(f"FETCH: {url} -> {response.status_code} ({len(response.content)} bytes)")
        return parse_document(response.text)
