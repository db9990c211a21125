import os
import time

from requests.cookies import RequestsCookieJar, create_cookie

# --- Site Constants ---
F95_BASE_URL = os.getenv("F95_BASE_URL", "https://f95zone.to").rstrip("/")
F95_DOMAIN = "f95zone.to"
THREADS_URL = f"{F95_BASE_URL}/threads/"
SEARCH_URL = f"{F95_BASE_URL}/search"
LOGIN_URL = f"{F95_BASE_URL}/login"

COVER_LINK_PREFIX = "https://f95zone.to/data/covers"
IMAGE_LINK_PREFIX = "https://attachments.f95zone.to/"

# Sent by both the HTTP client and the bypass browser so DDoS-Guard cookies stay valid
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'

# --- Runtime Settings ---
REQUEST_TIMEOUT = float(os.getenv("F95_REQUEST_TIMEOUT", "20"))
RENDER_TIMEOUT = float(os.getenv("F95_RENDER_TIMEOUT", "45"))
BYPASS_HEADLESS = os.getenv("F95_BYPASS_HEADLESS", "true").lower() in ("1", "true", "yes", "on")

COOKIE_LIFETIME_SECONDS = 7 * 24 * 60 * 60

# --- Cookies ---
WHITELISTED_COOKIES = [
    "xf_user",
    "xf_csrf",
    "xf_session",
    "__ddg1_",
    "__ddg2_",
    "__ddg3_",
    "__ddg4_",
    "__ddg5_",
    "__ddg6_",
    "__ddg7_",
    "__ddg8_",
    "__ddg9_",
    "__ddg10_",
    "__ddgid_",
    "__ddgmark_",
    "ddg_last_challenge",
]
REQUIRED_COOKIES = ["xf_user", "xf_csrf"]


def parse_cookie_string(raw):
    """Parses 'name=value; name2=value2' into an ordered list of (name, value) pairs."""
    pairs = []
    if not raw:
        return pairs
    for chunk in raw.split(';'):
        name, sep, value = chunk.partition('=')
        name = name.strip()
        if not sep or not name:
            continue
        pairs.append((name, value.strip()))
    return pairs


def filter_whitelisted(pairs):
    """Keeps only the login and DDoS-Guard cookies the site actually needs."""
    return [(name, value) for name, value in pairs if name in WHITELISTED_COOKIES]


def create_cookie_jar(pairs, domain=F95_DOMAIN):
    """
    Builds the cookie jar attached to every outbound request.
    Each cookie is scoped to the site's domain with path '/' and a 7 day lifetime.
    """
    if isinstance(pairs, dict):
        pairs = list(pairs.items())

    jar = RequestsCookieJar()
    expires = int(time.time()) + COOKIE_LIFETIME_SECONDS
    for name, value in pairs:
        if name is None or value is None:
            continue
        jar.set_cookie(create_cookie(
            name,
            value,
            domain=domain,
            path="/",
            secure=True,
            expires=expires,
            rest={"HttpOnly": None},
        ))
    return jar


def cookies_from_env():
    """Reads F95_COOKIES from the environment and returns a ready cookie jar."""
    return create_cookie_jar(filter_whitelisted(parse_cookie_string(os.getenv("F95_COOKIES", ""))))


def verify_cookies(jar):
    """Returns a list of human readable problems with the cookie set (empty if usable)."""
    names = {cookie.name for cookie in jar}
    return [f"The {name} cookie has to be set!" for name in REQUIRED_COOKIES if name not in names]
