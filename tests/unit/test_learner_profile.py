"""
Unit tests for render-time learner style selection and page ordering.
"""

import pytest

from psg.adaptive.learner_profile import LearnerProfileService
from psg.adaptive.models import (
    ClusterAssignment,
    CourseModule,
    CourseSection,
    PredictionSelection,
    ScoreSource,
    WeightedEdge,
)
from psg.core import activity_styles
from psg.core.style_vector import StyleVector

COURSE = 1
USER = 5


@pytest.fixture
def course(store, catalog, analytics):
    """Course with an assignment and a quiz in section 1, a choice in section 2."""
    catalog.modules[COURSE] = [CourseModule(11, "quiz"), CourseModule(12, "assign"), CourseModule(13, "choice")]
    catalog.sections[COURSE] = [CourseSection(0, []), CourseSection(1, [11, 12]), CourseSection(2, [13])]
    store.module_styles[COURSE] = {
        11: activity_styles.lookup("quiz"),
        12: activity_styles.lookup("assign"),
        13: activity_styles.lookup("choice"),
        99: StyleVector(global_=1),  # stale record of a removed module
    }
    analytics.enabled.add(COURSE)
    return COURSE


def _service(store, catalog, analytics, settings, **overrides):
    return LearnerProfileService(store, catalog, analytics, analytics, settings.model_copy(update=overrides))


class TestProfile:
    """Tests for choosing the learner style."""

    def test_personalisation_turned_off(self, course, store, catalog, analytics, settings):
        analytics.responses[(course, USER)] = [1, 0, 0, 1]
        analytics.toggled_off.add((course, USER))

        profile = _service(store, catalog, analytics, settings).profile(course, USER)

        assert profile.style is None
        assert profile.personalised is False

    def test_survey_style(self, course, store, catalog, analytics, settings):
        analytics.responses[(course, USER)] = [1, 0, 0, 1]

        profile = _service(store, catalog, analytics, settings, use_ils=True).profile(course, USER)

        assert profile.style == StyleVector(reflective=1, sensing=1, visual=1, global_=1)
        assert profile.source == ScoreSource.SURVEY
        assert profile.personalised is True

    def test_survey_without_responses(self, course, store, catalog, analytics, settings):
        profile = _service(store, catalog, analytics, settings, use_ils=True).profile(course, USER)
        assert profile.style is None
        assert profile.source is None
        assert not profile.needs_prediction_notice

    def test_graph_style(self, course, store, catalog, analytics, settings):
        analytics.predictions[course] = PredictionSelection(1, 2, 3)
        analytics.clusters[(course, USER)] = ClusterAssignment(cluster_number=0, iteration=0)
        analytics.links[(course, 0)] = [WeightedEdge(13, 13, 2), WeightedEdge(13, 99, 50)]

        profile = _service(store, catalog, analytics, settings, use_ils=False).profile(course, USER)

        assert profile.style == StyleVector(active=2)
        assert profile.source == ScoreSource.GRAPH

    def test_graph_learner_not_clustered(self, course, store, catalog, analytics, settings):
        analytics.predictions[course] = PredictionSelection(1, 2, 3)

        profile = _service(store, catalog, analytics, settings, use_ils=False).profile(course, USER)

        assert profile.style is None
        assert profile.personalised is False
        assert not profile.needs_prediction_notice

    def test_graph_without_prediction_shows_notice(self, course, store, catalog, analytics, settings):
        profile = _service(store, catalog, analytics, settings, use_ils=False).profile(course, USER)

        assert profile.style is None
        assert profile.needs_prediction_notice


class TestCoursePage:
    """Tests for the personalised page ordering."""

    @pytest.fixture
    def reflective_sensing_learner(self, course, analytics):
        analytics.responses[(course, USER)] = [1, 0, 0, 1]

    def test_within_section_ordering(self, course, store, catalog, analytics, settings, reflective_sensing_learner):
        page = _service(store, catalog, analytics, settings, within_section=True, by_section=False).course_page(
            course, USER
        )

        assert [s.number for s in page.sections] == [0, 1, 2]
        assert page.module_order == [12, 11, 13]

    def test_by_section_ordering(self, course, store, catalog, analytics, settings, reflective_sensing_learner):
        page = _service(store, catalog, analytics, settings, within_section=True, by_section=True).course_page(
            course, USER
        )

        # Section 1 averages 0.5; the choice and the empty section both score 0
        assert [s.number for s in page.sections] == [1, 0, 2]
        assert page.sections[0].score == 0.5

    def test_ordering_disabled(self, course, store, catalog, analytics, settings, reflective_sensing_learner):
        page = _service(store, catalog, analytics, settings, within_section=False, by_section=False).course_page(
            course, USER
        )
        assert page.module_order == [11, 12, 13]

    def test_no_style_keeps_course_order(self, course, store, catalog, analytics, settings):
        page = _service(store, catalog, analytics, settings, by_section=True).course_page(course, USER)

        assert page.profile.style is None
        assert page.module_order == [11, 12, 13]
        assert [s.number for s in page.sections] == [0, 1, 2]
