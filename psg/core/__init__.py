"""
Core Module - Learning style data types and static tables.

Components:
- style_vector: StyleVector and AxisPair
- activity_styles: Fixed style weights per activity type
"""

from psg.core.activity_styles import ACTIVITY_STYLES, is_content_type, lookup
from psg.core.style_vector import STYLE_KEYS, AxisPair, StyleVector

__all__ = [
    "ACTIVITY_STYLES",
    "STYLE_KEYS",
    "AxisPair",
    "StyleVector",
    "is_content_type",
    "lookup",
]
