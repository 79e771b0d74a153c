"""
Module Style Resolver.

Computes the learning style of a course module:

1. Fixed-weight activity types come straight from the activity table.
2. Pages are classified by the dominant tag of their HTML content.
3. URL activities are classified by the dominant tag of the linked
   document; an unreachable link counts as an unknown tag.
4. Package types (scorm, imscp) and unknown types get the zero vector.

Module styles are computed once. A module that already has a stored style
keeps it on every later refresh; only new modules are resolved and only
vanished modules are removed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from psg.adaptive.collaborators import ModuleContentSource
from psg.adaptive.models import CourseModule
from psg.content.fetcher import ContentFetcher
from psg.content.tag_classifier import TagCategory, classify, tag_style
from psg.core import activity_styles
from psg.core.style_vector import StyleVector

if TYPE_CHECKING:
    from psg.db.store import RecordStore


@dataclass
class ModuleRefreshResult:
    """Outcome of refreshing one course's module styles."""

    styles: dict[int, StyleVector] = field(default_factory=dict)
    inserted: list[int] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    reused: int = 0


class ModuleStyleResolver:
    """Resolves, caches and reconciles module learning styles."""

    def __init__(
        self,
        store: RecordStore,
        content_source: ModuleContentSource | None = None,
        fetcher: ContentFetcher | None = None,
        dry_run: bool = False,
    ) -> None:
        self._store = store
        self._content = content_source
        self._fetcher = fetcher
        self._dry_run = dry_run

    def _get_fetcher(self) -> ContentFetcher:
        if self._fetcher is None:
            self._fetcher = ContentFetcher()
        return self._fetcher

    # =========================================================================
    # SINGLE MODULE
    # =========================================================================

    def resolve(self, module: CourseModule) -> StyleVector:
        """Compute the learning style of one module."""
        if activity_styles.is_content_type(module.activity_type):
            return tag_style(self.dominant_tag(module))
        return activity_styles.lookup(module.activity_type)

    def dominant_tag(self, module: CourseModule) -> TagCategory:
        """Classify the content behind a page or url module."""
        if self._content is None:
            logger.debug("No content source; module {} treated as unknown", module.id)
            return TagCategory.UNKNOWN

        if module.activity_type == "page":
            return classify(self._content.page_html(module))

        if module.activity_type == "url":
            html = self._get_fetcher().fetch(self._content.link_url(module))
            if html is None:
                return TagCategory.UNKNOWN
            return classify(html)

        return TagCategory.UNKNOWN

    def module_style(self, course_id: int, module_id: int) -> StyleVector:
        """Stored style of a module; zero when it has not been computed yet."""
        style = self._store.get_module_style(course_id, module_id)
        return style if style is not None else StyleVector.zero()

    # =========================================================================
    # COURSE REFRESH
    # =========================================================================

    def refresh_course_modules(
        self,
        course_id: int,
        current_modules: Iterable[CourseModule],
    ) -> ModuleRefreshResult:
        """
        Reconcile stored module styles with the modules currently in a course.

        Stored styles are reused verbatim. Modules without a stored style are
        resolved and inserted; stored styles of modules no longer present are
        deleted. Inserts are applied before deletes.

        Args:
            course_id: Course being refreshed
            current_modules: Clickable, visible modules of the course

        Returns:
            ModuleRefreshResult whose ``styles`` covers exactly the current modules
        """
        stored = self._store.load_module_styles(course_id)
        result = ModuleRefreshResult()
        to_insert: dict[int, StyleVector] = {}

        for module in current_modules:
            if module.id in result.styles:
                continue
            if module.id in stored:
                result.styles[module.id] = stored.pop(module.id)
                result.reused += 1
                continue

            style = self.resolve(module)
            result.styles[module.id] = style
            to_insert[module.id] = style

        result.inserted = list(to_insert)
        result.deleted = list(stored)

        if self._dry_run:
            logger.info(
                "[dry-run] Course {}: would insert {} and delete {} module styles",
                course_id, len(result.inserted), len(result.deleted),
            )
            return result

        if to_insert:
            self._store.insert_module_styles(course_id, to_insert)
        if result.deleted:
            self._store.delete_module_styles(course_id, result.deleted)

        logger.info(
            "Course {}: {} module styles reused, {} inserted, {} deleted",
            course_id, result.reused, len(result.inserted), len(result.deleted),
        )
        return result
