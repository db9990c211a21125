from f95metadata.cancellation import raise_if_cancelled
from f95metadata.errors import AuthenticationFailed, Cancelled, GuardPersists, HostileRedirect
from f95metadata.fetcher import parse_document
from f95metadata.logging_config import logger
from f95metadata.renderer import PlaywrightRenderer, RendererSettings, render_page

# --- Signatures ---
CAPTCHA_CLASS = "ddg-captcha"
CHALLENGE_PHRASES = [
    "Checking your browser before accessing",
    "looks too much like a bot request",
]
GUARD_TITLE = "ddos-guard"
LOGIN_REQUIRED_PHRASE = "Sorry, you have to be"
ADWARE_SIGNATURE = "AdGlareDisplayAd"


def _contains_ci(haystack, needle):
    return needle.lower() in (haystack or "").lower()


def is_login_failure(document):
    return _contains_ci(document.get_text(), LOGIN_REQUIRED_PHRASE)


def is_challenge(document):
    """True when the document is a DDoS-Guard captcha or challenge page."""
    if document.find(class_=CAPTCHA_CLASS) is not None:
        return True

    text = document.get_text()
    if any(_contains_ci(text, phrase) for phrase in CHALLENGE_PHRASES):
        return True

    title = document.title.get_text().strip() if document.title else ""
    return title.lower() == GUARD_TITLE


def is_blocked(document):
    return is_challenge(document) or is_login_failure(document)


class AntiBotGuard:
    """
    Clears fetched documents of bot-protection pages.
    A blocked document gets exactly one bypass attempt through a browser
    renderer; anything still blocked afterwards is a terminal failure.
    """

    def __init__(self, cookies=None, renderer_factory=PlaywrightRenderer, renderer_settings=None):
        self.cookies = cookies
        self.renderer_factory = renderer_factory
        self.renderer_settings = renderer_settings or RendererSettings()

    async def resolve(self, url, document, cancel_event=None):
        """Returns a clear document for `url` or raises the terminal guard error."""
        if is_login_failure(document):
            logger.error(f"GUARD: Login required for {url}, cookies are stale or invalid.")
            raise AuthenticationFailed()

        if not is_challenge(document):
            return document

        logger.warning(f"GUARD: DDoS-Guard detected on {url}. Attempting browser bypass.")
        page_source = await self._bypass(url, cancel_event)

        if _contains_ci(page_source, ADWARE_SIGNATURE):
            logger.error(f"GUARD: AdGlare page returned for {url}.")
            raise HostileRedirect()

        document = parse_document(page_source)
        if is_login_failure(document):
            logger.error(f"GUARD: Bypass for {url} landed on the login wall.")
            raise AuthenticationFailed()
        if is_challenge(document):
            logger.error(f"GUARD: DDoS-Guard still active on {url} after bypass.")
            raise GuardPersists()

        logger.info(f"GUARD: Bypass succeeded for {url}.")
        return document

    async def _bypass(self, url, cancel_event):
        raise_if_cancelled(cancel_event)
        try:
            return await render_page(
                self.renderer_factory,
                self.renderer_settings,
                url,
                cookies=self.cookies,
                cancel_event=cancel_event,
            )
        except Cancelled:
            raise
        except Exception as e:
            logger.error(f"GUARD: Error while trying to bypass DDoS-Guard: {e}", exc_info=True)
            raise GuardPersists("An error occurred while trying to bypass DDOS-Guard.") from e
