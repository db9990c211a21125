"""Terminal failures of the scraping pipeline.

Field-level extraction problems are never raised; the page extractor logs
them and leaves the field absent.
"""


class ScraperError(Exception):
    """Base class for errors that abort a scrape."""

    title = "Scraping Error"
    remedy = "Please try again later."

    def user_message(self):
        return f"{self} {self.remedy}".strip()


class FetchFailed(ScraperError):
    title = "Scraping Error"

    def __init__(self, url, status=None, reason=None):
        self.url = url
        self.status = status
        self.reason = reason
        if status is None:
            message = f"Failed to fetch page '{url}': {reason}"
        else:
            message = f"Failed to fetch page '{url}'. Code: {status} {reason or ''}".rstrip()
        super().__init__(message)


class Cancelled(ScraperError):
    title = "Scraping Cancelled"
    remedy = ""

    def __init__(self, message="Operation cancelled."):
        super().__init__(message)


class AuthenticationFailed(ScraperError):
    title = "Login Failed"
    remedy = "Please re-authenticate and update your cookies."

    def __init__(self, message="Login cookies invalid, scraping aborted."):
        super().__init__(message)


class GuardPersists(ScraperError):
    title = "DDOS-Guard Detected"
    remedy = "Try again later or use a VPN."

    def __init__(self, message="DDOS-Guard still active after bypass."):
        super().__init__(message)


class HostileRedirect(ScraperError):
    title = "AdGlare Detected"
    remedy = "Please try again later."

    def __init__(self, message="AdGlare detected, scraping aborted."):
        super().__init__(message)
