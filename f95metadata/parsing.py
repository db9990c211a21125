import math
import re
from typing import NamedTuple, Optional
from urllib.parse import urlparse

from f95metadata.config import THREADS_URL

# Invariant decimal: '.' is the only separator, no digit grouping, no nan/inf
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


class TitleParts(NamedTuple):
    name: Optional[str]
    version: Optional[str]
    developer: Optional[str]


def _find_bracket_group(text, start=0):
    """Returns (open_index, close_index) of the first [...] group at or after start, or None."""
    open_index = text.find('[', start)
    if open_index == -1:
        return None
    close_index = text.find(']', open_index + 1)
    if close_index == -1:
        return None
    return open_index, close_index


def _blank_to_none(value):
    value = value.strip()
    return value if value else None


def breakdown_title(title):
    """
    Splits a thread title of the form "Name [Version] [Developer]".
    e.g. "Corrupted Kingdoms [v0.12.8] [ArcGames]" -> ("Corrupted Kingdoms", "v0.12.8", "ArcGames")
    Missing parts come back as None.
    """
    if not title or not title.strip():
        return TitleParts(None, None, None)

    text = title.strip()
    first = _find_bracket_group(text)
    if first is None:
        return TitleParts(text, None, None)

    open_index, close_index = first
    # The character right before '[' is dropped along with the group
    name = _blank_to_none(text[:open_index - 1]) if open_index > 0 else None
    version = _blank_to_none(text[open_index + 1:close_index])

    second = _find_bracket_group(text, close_index + 1)
    if second is None:
        return TitleParts(name, version, None)

    open_index, close_index = second
    developer = _blank_to_none(text[open_index + 1:close_index])
    return TitleParts(name, version, developer)


def extract_search_result_name(title):
    """
    Strips every bracket group from a search result title.
    "[Flash] [Completed] Corruption of Champions [Fenoxo]" -> "Corruption of Champions"
    """
    text = title.strip()
    group = _find_bracket_group(text)
    if group is None:
        return title

    while group is not None:
        open_index, close_index = group
        if open_index == 0:
            text = text[close_index + 1:].strip()
        else:
            before = text[:open_index].rstrip()
            after = text[close_index + 1:].lstrip()
            text = f"{before} {after}".strip() if after else before
        group = _find_bracket_group(text)

    return text.strip()


def title_case(text):
    """Capitalizes each word, lower-casing the rest; all-caps words are kept as acronyms."""
    def _word(match):
        word = match.group(0)
        if word.isupper():
            return word
        return word[0].upper() + word[1:].lower()

    return re.sub(r"\S+", _word, text)


def parse_float(text):
    """Culture-invariant float parsing. Returns (value, ok); value is NaN when not ok."""
    if text is None:
        return math.nan, False
    candidate = text.strip()
    if not _DECIMAL_RE.match(candidate):
        return math.nan, False
    return float(candidate), True


def parse_leading_rating(text):
    """
    Parses the number in front of the first space, e.g. "4.50 star(s)" -> (4.5, True).
    Returns (nan, False) when there is no space or the prefix is not a number.
    """
    if not text:
        return math.nan, False
    space_index = text.find(' ')
    if space_index == -1:
        return math.nan, False
    return parse_float(text[:space_index])


def id_from_link(link, base_url=THREADS_URL):
    """
    Extracts the thread id from a thread link.
    "https://f95zone.to/threads/some-game.12345/" -> "12345"
    Returns None when the link does not point at a thread.
    """
    if not link or not link.lower().startswith(base_url.lower()):
        return None

    thread_id = link[len(base_url):]
    # Drop query strings, fragments and post anchors
    thread_id = urlparse(thread_id).path.split('/')[0]
    if not thread_id:
        return None

    dot_index = thread_id.rfind('.')
    thread_id = thread_id if dot_index == -1 else thread_id[dot_index + 1:]
    return thread_id or None
