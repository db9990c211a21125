# f95metadata/__init__.py

from f95metadata.config import cookies_from_env, create_cookie_jar, verify_cookies
from f95metadata.errors import (
    AuthenticationFailed,
    Cancelled,
    FetchFailed,
    GuardPersists,
    HostileRedirect,
    ScraperError,
)
from f95metadata.models import Link, PageResult, SearchResult
from f95metadata.parsing import breakdown_title, extract_search_result_name, id_from_link, parse_leading_rating
from f95metadata.scraper import Scraper

__all__ = [
    "AuthenticationFailed",
    "Cancelled",
    "FetchFailed",
    "GuardPersists",
    "HostileRedirect",
    "Link",
    "PageResult",
    "Scraper",
    "ScraperError",
    "SearchResult",
    "breakdown_title",
    "cookies_from_env",
    "create_cookie_jar",
    "extract_search_result_name",
    "id_from_link",
    "parse_leading_rating",
    "verify_cookies",
]
