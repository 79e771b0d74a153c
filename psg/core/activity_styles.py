"""
Activity Style Table.

Fixed learning style weights per Moodle activity type, taken from the
learning-object-to-style mapping used by the Personalised Study Guide.
Content-bearing types (page, url) are classified from their HTML instead,
and package types (scorm, imscp) carry no defined style.
"""

from __future__ import annotations

from types import MappingProxyType

from psg.core.style_vector import StyleVector

# Activity types whose style is inferred from content rather than the table
CONTENT_TYPES: frozenset[str] = frozenset({"page", "url"})

ACTIVITY_STYLES: MappingProxyType[str, StyleVector] = MappingProxyType(
    {
        # Assessments (exams, tests)
        "assign": StyleVector(
            active=0.35, reflective=0.15, sensing=0.10, intuitive=0.05,
            visual=0.05, verbal=0.08, sequential=0.10, global_=0.05,
        ),
        # Self assessment exercises
        "quiz": StyleVector(
            active=0.25, reflective=0.11, sensing=0.07, intuitive=0.11,
            visual=0.11, verbal=0.16, sequential=0.09, global_=0.09,
        ),
        # Group discussion
        "forum": StyleVector(
            active=0.21, reflective=0.00, sensing=0.14, intuitive=0.14,
            visual=0.07, verbal=0.29, sequential=0.00, global_=0.14,
        ),
        # Educational software
        "lti": StyleVector(
            active=0.00, reflective=0.17, sensing=0.17, intuitive=0.17,
            visual=0.17, verbal=0.00, sequential=0.17, global_=0.17,
        ),
        # Narrative texts
        "book": StyleVector(
            active=0.02, reflective=0.33, sensing=0.11, intuitive=0.12,
            visual=0.02, verbal=0.30, sequential=0.09, global_=0.02,
        ),
        "lesson": StyleVector(
            active=0.00, reflective=0.40, sensing=0.00, intuitive=0.20,
            visual=0.00, verbal=0.20, sequential=0.00, global_=0.20,
        ),
        # Tables
        "data": StyleVector(
            active=0.08, reflective=0.32, sensing=0.20, intuitive=0.00,
            visual=0.16, verbal=0.16, sequential=0.00, global_=0.08,
        ),
        "chat": StyleVector(
            active=0.22, reflective=0.11, sensing=0.22, intuitive=0.22,
            visual=0.11, verbal=0.11, sequential=0.00, global_=0.00,
        ),
        # Multiple choice exercises
        "choice": StyleVector(active=1.00),
        # E-mail / expressions
        "feedback": StyleVector(
            active=0.22, reflective=0.00, sensing=0.11, intuitive=0.11,
            visual=0.11, verbal=0.33, sequential=0.00, global_=0.11,
        ),
        # Definitions
        "glossary": StyleVector(
            active=0.00, reflective=0.20, sensing=0.00, intuitive=0.27,
            visual=0.00, verbal=0.20, sequential=0.13, global_=0.20,
        ),
        # Questionnaires
        "survey": StyleVector(
            active=0.25, reflective=0.13, sensing=0.18, intuitive=0.14,
            visual=0.00, verbal=0.25, sequential=0.13, global_=0.00,
        ),
        # Web pages
        "wiki": StyleVector(
            active=0.10, reflective=0.20, sensing=0.10, intuitive=0.00,
            visual=0.10, verbal=0.20, sequential=0.15, global_=0.15,
        ),
        # Brainstorming / case study
        "workshop": StyleVector(
            active=0.25, reflective=0.00, sensing=0.00, intuitive=0.00,
            visual=0.25, verbal=0.25, sequential=0.00, global_=0.25,
        ),
        # Real life application
        "folder": StyleVector(global_=1.00),
    }
)


def lookup(activity_type: str) -> StyleVector:
    """Return the fixed style for an activity type, zero when undefined."""
    return ACTIVITY_STYLES.get(activity_type, StyleVector.zero())


def is_content_type(activity_type: str) -> bool:
    """True for activity types classified from their HTML content."""
    return activity_type in CONTENT_TYPES
