"""
Refresh Job - Recomputes module styles and learner scores.

Core responsibilities:
- Reconcile stored module styles with each course's current modules
- Estimate every learner's style from the ILS survey and the common links graph
- Rebuild the course's learner/module relevance scores in one transaction
- Support dry-run mode and per-course runs

Courses are processed one after the other. Within a course the module
refresh completes before any learner is scored.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from loguru import logger

from config import Settings, get_settings
from psg.adaptive import alignment
from psg.adaptive.collaborators import AnalyticsSource, CourseCatalog, ModuleContentSource, SurveySource
from psg.adaptive.graph_estimator import GraphStyleEstimator
from psg.adaptive.models import LearnerModuleScore, ScoreSource
from psg.adaptive.module_styles import ModuleStyleResolver
from psg.adaptive.survey_estimator import SurveyStyleEstimator
from psg.content.fetcher import ContentFetcher
from psg.core.style_vector import StyleVector

if TYPE_CHECKING:
    from psg.db.store import RecordStore


class RefreshStats:
    """Statistics for a refresh run."""

    def __init__(self) -> None:
        self.courses = 0
        self.modules_inserted = 0
        self.modules_deleted = 0
        self.learners = 0
        self.survey_profiles = 0
        self.graph_profiles = 0
        self.scores = 0
        self.start_time = datetime.now()
        self.end_time: datetime | None = None

    def finish(self) -> None:
        self.end_time = datetime.now()

    def duration_seconds(self) -> float:
        end = self.end_time or datetime.now()
        return (end - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/CLI output."""
        return {
            "courses": self.courses,
            "modules_inserted": self.modules_inserted,
            "modules_deleted": self.modules_deleted,
            "learners": self.learners,
            "survey_profiles": self.survey_profiles,
            "graph_profiles": self.graph_profiles,
            "scores": self.scores,
            "duration_seconds": round(self.duration_seconds(), 2),
        }


class RefreshJob:
    """
    Periodic recomputation of module styles and learner scores.

    Usage:
        job = RefreshJob(store, catalog, content, analytics, analytics)
        stats = job.run()
    """

    def __init__(
        self,
        store: RecordStore,
        catalog: CourseCatalog,
        content_source: ModuleContentSource,
        survey_source: SurveySource,
        analytics_source: AnalyticsSource,
        fetcher: ContentFetcher | None = None,
        settings: Settings | None = None,
        dry_run: bool | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._dry_run = self._settings.dry_run if dry_run is None else dry_run
        self._store = store
        self._catalog = catalog
        self._resolver = ModuleStyleResolver(store, content_source, fetcher, dry_run=self._dry_run)
        self._survey = SurveyStyleEstimator(survey_source, self._settings.survey_max_items)
        self._graph = GraphStyleEstimator(analytics_source)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def run(self, course_ids: list[int] | None = None) -> RefreshStats:
        """
        Refresh every personalised course, or only ``course_ids``.

        Returns:
            RefreshStats for the whole run
        """
        stats = RefreshStats()
        courses = course_ids if course_ids is not None else self._catalog.course_ids()
        logger.info("Refreshing learning styles for {} course(s)", len(courses))

        for course_id in courses:
            self.refresh_course(course_id, stats)

        stats.finish()
        logger.info("Refresh complete: {}", stats.to_dict())
        return stats

    def refresh_course(self, course_id: int, stats: RefreshStats | None = None) -> RefreshStats:
        stats = stats or RefreshStats()
        stats.courses += 1

        modules = self._catalog.course_modules(course_id)
        result = self._resolver.refresh_course_modules(course_id, modules)
        stats.modules_inserted += len(result.inserted)
        stats.modules_deleted += len(result.deleted)

        scores = self.score_learners(course_id, result.styles, stats)
        stats.scores += len(scores)

        if self._dry_run:
            logger.info("[dry-run] Course {}: would store {} learner scores", course_id, len(scores))
        else:
            self._store.replace_learner_scores(course_id, scores)
        return stats

    def score_learners(
        self,
        course_id: int,
        module_styles: Mapping[int, StyleVector],
        stats: RefreshStats | None = None,
    ) -> list[LearnerModuleScore]:
        """Score every module for every learner with each available learner style."""
        scores: list[LearnerModuleScore] = []
        learners = self._catalog.learner_ids(course_id)
        if stats is not None:
            stats.learners += len(learners)

        for user_id in learners:
            survey_style = self._survey.estimate_for_learner(course_id, user_id)
            if survey_style is not None:
                scores.extend(self._score_modules(course_id, user_id, survey_style, module_styles, ScoreSource.SURVEY))
                if stats is not None:
                    stats.survey_profiles += 1

            graph_style = self._graph.estimate_for_learner(course_id, user_id, module_styles).style
            if graph_style is not None:
                scores.extend(self._score_modules(course_id, user_id, graph_style, module_styles, ScoreSource.GRAPH))
                if stats is not None:
                    stats.graph_profiles += 1

        logger.debug("Course {}: {} scores for {} learners", course_id, len(scores), len(learners))
        return scores

    @staticmethod
    def _score_modules(
        course_id: int,
        user_id: int,
        learner_style: StyleVector,
        module_styles: Mapping[int, StyleVector],
        source: ScoreSource,
    ) -> list[LearnerModuleScore]:
        return [
            LearnerModuleScore(
                course_id=course_id,
                module_id=module_id,
                user_id=user_id,
                score=alignment.score(learner_style, module_style),
                source=source,
            )
            for module_id, module_style in module_styles.items()
        ]
