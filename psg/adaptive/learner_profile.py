"""
Learner Profile Service.

Picks the learner style used when a course page is displayed and orders the
page with it:

- A learner who switched personalisation off gets no style.
- With ``use_ils`` on, the style comes from the ILS survey.
- Otherwise it is predicted from the learner's cluster common links. A
  learner who is simply not clustered is shown the plain course; a course
  with no clustering selected at all shows course editors a notice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from config import Settings, get_settings
from psg.adaptive import alignment
from psg.adaptive.collaborators import AnalyticsSource, CourseCatalog, SurveySource
from psg.adaptive.graph_estimator import GraphStyleEstimator
from psg.adaptive.models import RankedSection, ScoreSource
from psg.adaptive.survey_estimator import SurveyStyleEstimator
from psg.core.style_vector import StyleVector

if TYPE_CHECKING:
    from psg.db.store import RecordStore


@dataclass(frozen=True)
class LearnerProfile:
    """The style a course page is personalised with."""

    style: StyleVector | None
    source: ScoreSource | None = None
    personalised: bool = True
    needs_prediction_notice: bool = False


@dataclass
class CoursePage:
    profile: LearnerProfile
    sections: list[RankedSection] = field(default_factory=list)

    @property
    def module_order(self) -> list[int]:
        return [m.module_id for section in self.sections for m in section.modules]


class LearnerProfileService:
    """Builds learner profiles and personalised course page orderings."""

    def __init__(
        self,
        store: RecordStore,
        catalog: CourseCatalog,
        survey_source: SurveySource,
        analytics_source: AnalyticsSource,
        settings: Settings | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._analytics = analytics_source
        self._settings = settings or get_settings()
        self._survey = SurveyStyleEstimator(survey_source, self._settings.survey_max_items)
        self._graph = GraphStyleEstimator(analytics_source)

    def profile(self, course_id: int, user_id: int) -> LearnerProfile:
        """Resolve the learner style for one course page view."""
        if not self._analytics.personalisation_enabled(course_id, user_id):
            logger.debug("User {} turned personalisation off in course {}", user_id, course_id)
            return LearnerProfile(style=None, personalised=False)

        if self._settings.use_ils:
            style = self._survey.estimate_for_learner(course_id, user_id)
            return LearnerProfile(style=style, source=ScoreSource.SURVEY if style is not None else None)

        current = {module.id for module in self._catalog.course_modules(course_id)}
        module_styles = {
            module_id: style
            for module_id, style in self._store.load_module_styles(course_id).items()
            if module_id in current
        }
        estimate = self._graph.estimate_for_learner(course_id, user_id, module_styles)
        if estimate.style is not None:
            return LearnerProfile(style=estimate.style, source=ScoreSource.GRAPH)

        if estimate.prediction is not None:
            # Clustering exists, this learner is just not in it
            return LearnerProfile(style=None, personalised=False)
        return LearnerProfile(style=None, needs_prediction_notice=True)

    def course_page(self, course_id: int, user_id: int) -> CoursePage:
        """Order a course's sections and modules for one learner."""
        profile = self.profile(course_id, user_id)
        sections = self._catalog.course_sections(course_id)
        module_styles = self._store.load_module_styles(course_id) if profile.style is not None else {}

        ranked = alignment.rank_sections(
            profile.style,
            sections,
            module_styles,
            sort_sections=self._settings.by_section,
            sort_modules=self._settings.within_section,
        )
        return CoursePage(profile=profile, sections=ranked)
