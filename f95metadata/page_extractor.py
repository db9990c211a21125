import math
import re
from urllib.parse import urljoin, urlparse

from f95metadata.config import COVER_LINK_PREFIX, IMAGE_LINK_PREFIX
from f95metadata.dom import attr, first_typed, narrow, parent_tag, select_typed, text_of
from f95metadata.logging_config import logger
from f95metadata.models import NO_DESCRIPTION, Link, PageResult
from f95metadata.parsing import breakdown_title, parse_float, parse_leading_rating, title_case

# --- Selectors ---
SEL_DESCRIPTION = ".bbWrapper > div:nth-child(1)"
SEL_TITLE = ".p-title-value"
SEL_LABELS = ".labelLink"
SEL_TAGS = "a.tagItem"
SEL_RATING_SELECT = 'select[name="rating"]'
SEL_RATING_BADGE = ".bratr-rating"
SEL_MESSAGE_BODY = ".message-body"
SEL_POST_LINKS = ".message-threadStarterPost div.bbWrapper > a"

DESCRIPTION_MARKERS = ["Overview:", "Spoiler:"]
PLACEHOLDER_LINK_NAMES = ["here", "link", "this"]
MIN_RATING = 0.0
MAX_RATING = 5.0

_MARKUP_RE = re.compile(r"<.*?>")


def _starts_with_ci(value, prefix):
    return value is not None and value.lower().startswith(prefix.lower())


class PageExtractor:
    """
    Turns a cleared thread document into a PageResult.
    Every rule is independent: a missing element only leaves its own field
    empty and logs a warning.
    """

    def __init__(self, cover_prefix=COVER_LINK_PREFIX, image_prefix=IMAGE_LINK_PREFIX):
        self.cover_prefix = cover_prefix
        self.image_prefix = image_prefix

    def extract(self, document, page_id, page_url=None):
        result = PageResult(id=page_id)
        missing = []

        result.description = self._description(document)
        if result.description == NO_DESCRIPTION:
            missing.append("description")

        self._title(document, result)
        if result.name is None:
            missing.append("title")

        result.tags = self._tags(document)
        if result.tags is None:
            missing.append("tags")

        result.rating = self._rating(document)
        if math.isnan(result.rating):
            missing.append("rating")

        result.images = self._images(document)
        if result.images is None:
            missing.append("images")

        result.links = self._links(document, page_url)

        if missing:
            logger.warning(f"EXTRACT: Extraction incomplete for '{page_id}', missing: {', '.join(missing)}")
        else:
            logger.info(f"EXTRACT: Extracted all fields for '{page_id}'.")
        return result

    # --- Description ---
    def _description(self, document):
        element = document.select_one(SEL_DESCRIPTION)
        description = text_of(element) if element is not None else ""
        for marker in DESCRIPTION_MARKERS:
            description = description.replace(marker, "")
        description = description.strip()

        if not description:
            logger.warning("EXTRACT: Unable to find description element, using fallback")
            return NO_DESCRIPTION
        return description

    # --- Title & Labels ---
    def _title(self, document, result):
        title_element = document.select_one(SEL_TITLE)
        if title_element is None:
            logger.warning(f"EXTRACT: Unable to find element with class \"{SEL_TITLE[1:]}\"")
            return

        labels = [text_of(elem).strip() for elem in title_element.select(SEL_LABELS)]
        labels = [label for label in labels if label]

        title = text_of(title_element).strip()
        if labels:
            label_match = re.search(re.escape(labels[-1]), title, re.IGNORECASE)
            if label_match is not None:
                title = title[label_match.end():].strip()

        parts = breakdown_title(title)
        result.name = parts.name
        result.version = parts.version
        result.developer = parts.developer
        result.labels = labels or None

    # --- Tags ---
    def _tags(self, document):
        tag_elements = select_typed(document, SEL_TAGS, "a")
        if not tag_elements:
            logger.warning("EXTRACT: Unable to find elements with class \"tagItem\"")
            return None

        tags = []
        for element in tag_elements:
            tag = _MARKUP_RE.sub("", text_of(element)).strip()
            if tag:
                tags.append(title_case(tag))
        return tags or None

    # --- Rating ---
    def _rating(self, document):
        rating = self._rating_from_select(document)
        if math.isnan(rating):
            rating = self._rating_from_badge(document)

        if not math.isnan(rating) and not MIN_RATING <= rating <= MAX_RATING:
            logger.warning(f"EXTRACT: Rating {rating} outside of [{MIN_RATING}, {MAX_RATING}], ignoring it")
            return math.nan
        return rating

    def _rating_from_select(self, document):
        select_element = first_typed(document, SEL_RATING_SELECT, "select")
        if select_element is None:
            logger.warning("EXTRACT: Unable to find element with name \"rating\" using fallback, make sure you are logged in.")
            return math.nan

        raw_rating = attr(select_element, "data-initial-rating")
        if raw_rating is None:
            logger.warning("EXTRACT: Element with name \"rating\" does not have a data value with the name \"initial-rating\"")
            return math.nan

        rating, ok = parse_float(raw_rating)
        if not ok:
            logger.warning(f"EXTRACT: Unable to parse \"{raw_rating}\" as float")
        return rating

    def _rating_from_badge(self, document):
        badge = document.select_one(SEL_RATING_BADGE)
        if badge is None:
            logger.warning("EXTRACT: Unable to find element with class \"bratr-rating\".")
            return math.nan

        title_attribute = attr(badge, "title")
        if title_attribute is None:
            logger.warning("EXTRACT: Rating element does not have a \"title\" attribute!")
            return math.nan

        rating, ok = parse_leading_rating(title_attribute)
        if not ok:
            logger.warning(f"EXTRACT: Unable to convert \"{title_attribute}\" to a rating")
        return rating

    # --- Images ---
    def _images(self, document):
        images = []
        main_message = document.select_one(SEL_MESSAGE_BODY)
        if main_message is not None:
            for element in main_message.find_all("img"):
                image = narrow(element, "img")
                source = attr(image, "src")
                if not _starts_with_ci(source, self.image_prefix):
                    continue

                anchor = self._enclosing_anchor(image)
                href = attr(anchor, "href") if anchor is not None else None
                images.append(href if _starts_with_ci(href, self.image_prefix) else source)
        else:
            logger.warning(f"EXTRACT: Unable to find elements with class \"{SEL_MESSAGE_BODY[1:]}\".")

        cover = self._cover_image(document)
        if cover is not None:
            images.insert(0, cover)

        return images or None

    @staticmethod
    def _enclosing_anchor(image):
        """The <a> wrapping an image, directly or through a <noscript> wrapper."""
        noscript = parent_tag(image, "noscript")
        if noscript is not None:
            return parent_tag(noscript, "a")
        return parent_tag(image, "a")

    def _cover_image(self, document):
        head = document.head
        if head is None:
            return None

        og_image = head.find("meta", attrs={"property": "og:image"})
        if og_image is None:
            return None

        content = (attr(og_image, "content") or "").strip()
        if content and _starts_with_ci(content, self.cover_prefix):
            return content
        return None

    # --- Links ---
    def _links(self, document, page_url):
        links = []
        seen_urls = set()
        for anchor in select_typed(document, SEL_POST_LINKS, "a"):
            name = text_of(anchor).strip()
            href = (attr(anchor, "href") or "").strip()
            if not name or not href:
                continue

            # Anchors whose text is the bare href are named after its host
            if name.lower() == href.lower():
                name = self._name_from_host(href) or name

            url = urljoin(page_url, href) if page_url else href
            key = url.lower()
            if key in seen_urls:
                continue
            seen_urls.add(key)
            links.append(Link(name=name, url=url))

        related_count = 0
        for link in links:
            if link.name.lower() == "website":
                link.name = "Official Website"

            if link.name.lower() in PLACEHOLDER_LINK_NAMES:
                related_count += 1
                link.name = f"Related Info #{related_count}"

            if link.name[0].islower():
                link.name = title_case(link.name)

        return links

    @staticmethod
    def _name_from_host(href):
        # Scheme-less hrefs like "www.example.com/page" still carry a host
        host = urlparse(href if "//" in href else "//" + href).hostname
        if not host:
            return None
        labels = host.split('.')
        if len(labels) >= 2:
            return title_case(labels[-2])
        return title_case(host)
