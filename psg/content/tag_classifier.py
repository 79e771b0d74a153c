"""
Content Tag Classifier.

Finds the dominant structural element of a page or linked document and maps
it to a learning style. Only start tags are counted; no DOM is built.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from html.parser import HTMLParser
from types import MappingProxyType

from loguru import logger

from psg.core.style_vector import StyleVector


class TagCategory(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    LIST = "list"
    TABLE = "table"
    EMAIL = "email"
    AUDIO = "audio"
    UNKNOWN = "unknown"


# Element name -> category. ``email`` is not an HTML element, so that
# category only fills for documents using a literal <email> tag.
TAG_CATEGORIES: MappingProxyType[str, TagCategory] = MappingProxyType(
    {
        "img": TagCategory.IMAGE,
        "video": TagCategory.VIDEO,
        "ul": TagCategory.LIST,
        "ol": TagCategory.LIST,
        "table": TagCategory.TABLE,
        "email": TagCategory.EMAIL,
        "audio": TagCategory.AUDIO,
    }
)

# Tie-break order: the first category reaching the maximum count wins.
CATEGORY_ORDER: tuple[TagCategory, ...] = (
    TagCategory.VIDEO,
    TagCategory.TABLE,
    TagCategory.EMAIL,
    TagCategory.AUDIO,
    TagCategory.IMAGE,
    TagCategory.LIST,
)

TAG_STYLES: MappingProxyType[TagCategory, StyleVector] = MappingProxyType(
    {
        TagCategory.IMAGE: StyleVector(
            active=0.05, reflective=0.05, sensing=0.18, intuitive=0.13,
            visual=0.44, verbal=0.05, sequential=0.03, global_=0.08,
        ),
        TagCategory.VIDEO: StyleVector(
            active=0.11, reflective=0.11, sensing=0.14, intuitive=0.09,
            visual=0.34, verbal=0.09, sequential=0.06, global_=0.06,
        ),
        TagCategory.LIST: StyleVector(
            active=0.0, reflective=0.31, sensing=0.0, intuitive=0.15,
            visual=0.15, verbal=0.08, sequential=0.0, global_=0.23,
        ),
        TagCategory.TABLE: StyleVector(
            active=0.08, reflective=0.32, sensing=0.2, intuitive=0.0,
            visual=0.16, verbal=0.16, sequential=0.0, global_=0.08,
        ),
        TagCategory.EMAIL: StyleVector(
            active=0.22, reflective=0.0, sensing=0.11, intuitive=0.11,
            visual=0.11, verbal=0.33, sequential=0.0, global_=0.11,
        ),
        TagCategory.AUDIO: StyleVector(sensing=0.2, verbal=0.8),
    }
)


class _TagCounter(HTMLParser):
    """Counts start tags of the tracked elements."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.counts: Counter[TagCategory] = Counter()

    def handle_starttag(self, tag: str, attrs) -> None:
        category = TAG_CATEGORIES.get(tag)
        if category is not None:
            self.counts[category] += 1

    def handle_startendtag(self, tag: str, attrs) -> None:
        self.handle_starttag(tag, attrs)


def count_tags(html: str) -> Counter[TagCategory]:
    """
    Count tracked elements per category in an HTML string.

    Markup the parser rejects ends the scan; tags counted before it are kept.
    """
    parser = _TagCounter()
    try:
        parser.feed(html)
        parser.close()
    except (AssertionError, ValueError) as e:
        logger.debug("Stopped parsing malformed HTML: {}", e)
    return parser.counts


def classify(html: str | None) -> TagCategory:
    """
    Return the dominant tag category of an HTML document.

    The category with the strictly highest count wins; ties go to whichever
    comes first in CATEGORY_ORDER. No tracked elements gives UNKNOWN.
    """
    if not html:
        return TagCategory.UNKNOWN

    counts = count_tags(html)
    dominant = TagCategory.UNKNOWN
    best = 0
    for category in CATEGORY_ORDER:
        if counts[category] > best:
            dominant = category
            best = counts[category]

    logger.debug("Dominant tag {} from counts {}", dominant.value, dict(counts))
    return dominant


def tag_style(category: TagCategory) -> StyleVector:
    """Learning style for a tag category; UNKNOWN maps to the zero vector."""
    return TAG_STYLES.get(category, StyleVector.zero())
