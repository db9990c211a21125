"""Typed element queries on top of BeautifulSoup.

BeautifulSoup hands back generic Tags; these helpers narrow a query to the
element kind the caller expects (an <img>, an <a>, a <select>...) and fail
explicitly when something else turns up.
"""
from bs4 import Tag


class ElementTypeError(TypeError):
    def __init__(self, element, expected):
        self.element = element
        self.expected = expected
        actual = element.name if isinstance(element, Tag) else type(element).__name__
        super().__init__(f"Expected <{expected}> element, got <{actual}>")


def is_tag(element, tag_name):
    return isinstance(element, Tag) and element.name is not None and element.name.lower() == tag_name


def narrow(element, tag_name):
    """Returns `element` if it is a <tag_name> element, otherwise raises ElementTypeError."""
    if not is_tag(element, tag_name):
        raise ElementTypeError(element, tag_name)
    return element


def select_typed(root, selector, tag_name):
    """All matches of `selector` that are <tag_name> elements, in document order."""
    return [element for element in root.select(selector) if is_tag(element, tag_name)]


def first_typed(root, selector, tag_name):
    matches = select_typed(root, selector, tag_name)
    return matches[0] if matches else None


def attr(element, name):
    """String value of an attribute, or None. Multi-valued attributes (class, rel) are joined."""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def text_of(element):
    """Full text content, like DOM textContent."""
    return element.get_text()


def parent_tag(element, tag_name):
    """The parent element if it is a <tag_name>, otherwise None."""
    parent = element.parent
    return parent if is_tag(parent, tag_name) else None
