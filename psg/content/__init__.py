"""Content inspection: dominant tag classification and link fetching."""

from psg.content.fetcher import ContentFetcher
from psg.content.tag_classifier import (
    CATEGORY_ORDER,
    TAG_STYLES,
    TagCategory,
    classify,
    tag_style,
)

__all__ = [
    "CATEGORY_ORDER",
    "ContentFetcher",
    "TAG_STYLES",
    "TagCategory",
    "classify",
    "tag_style",
]
