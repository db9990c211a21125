from urllib.parse import urljoin

from f95metadata.config import F95_BASE_URL
from f95metadata.dom import attr, is_tag, select_typed, text_of
from f95metadata.logging_config import logger
from f95metadata.models import SearchResult
from f95metadata.parsing import extract_search_result_name

SEL_RESULT_ROWS = "li.block-row[data-author]"
SEL_ROW_TITLE = ".contentRow-title"


class SearchExtractor:
    """Reads (name, link) candidates out of a search results page."""

    def __init__(self, site_url=F95_BASE_URL):
        self.site_url = site_url.rstrip('/') + '/'

    def extract(self, document):
        results = []
        rows = select_typed(document, SEL_RESULT_ROWS, "li")
        for row in rows:
            header = row.select_one(SEL_ROW_TITLE)
            if header is None:
                continue

            anchor = next((child for child in header.children if is_tag(child, "a")), None)
            href = (attr(anchor, "href") or "").strip() if anchor is not None else ""
            if not href:
                continue

            results.append(SearchResult(
                link=urljoin(self.site_url, href),
                name=extract_search_result_name(text_of(anchor).strip()),
            ))

        logger.info(f"SEARCH: {len(results)} result(s) out of {len(rows)} row(s).")
        return results
