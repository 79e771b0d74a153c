"""
Collaborator interfaces.

The engine never talks to the LMS directly. Course enumeration, content,
survey responses and behaviour analytics arrive through these protocols;
psg.db.moodle_source provides the SQL-backed implementations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from psg.adaptive.models import (
    ClusterAssignment,
    CourseModule,
    CourseSection,
    PredictionSelection,
    WeightedEdge,
)


class CourseCatalog(Protocol):
    def course_ids(self) -> list[int]:
        """Courses using the personalised format."""
        ...

    def course_modules(self, course_id: int) -> list[CourseModule]:
        """Clickable, visible modules in display order."""
        ...

    def course_sections(self, course_id: int) -> list[CourseSection]:
        ...

    def learner_ids(self, course_id: int) -> list[int]:
        """Students of the course plus users with imported analytics data."""
        ...


class ModuleContentSource(Protocol):
    def page_html(self, module: CourseModule) -> str | None:
        ...

    def link_url(self, module: CourseModule) -> str | None:
        ...


class SurveySource(Protocol):
    def analytics_enabled(self, course_id: int) -> bool:
        ...

    def survey_responses(self, course_id: int, user_id: int) -> Sequence[int]:
        """ILS responses, latest attempt first, in question order."""
        ...


class AnalyticsSource(Protocol):
    def analytics_enabled(self, course_id: int) -> bool:
        ...

    def prediction_selection(self, course_id: int) -> PredictionSelection | None:
        ...

    def cluster_assignment(
        self, course_id: int, user_id: int, selection: PredictionSelection
    ) -> ClusterAssignment | None:
        """Manual membership with the lowest iteration, else automatic."""
        ...

    def common_links(
        self, course_id: int, selection: PredictionSelection, cluster: ClusterAssignment
    ) -> list[WeightedEdge]:
        ...

    def personalisation_enabled(self, course_id: int, user_id: int) -> bool:
        """Latest on/off toggle of the learner; on when never toggled."""
        ...
