"""
Survey Style Estimator.

Derives a learner style from the 44-item Index of Learning Styles
questionnaire. Questions cycle through the four axis pairs in order, so
the position of a response (mod 4) picks its axis; an answer of 0 votes
for the first pole and 1 for the second.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from psg.adaptive.collaborators import SurveySource
from psg.core.style_vector import AxisPair, StyleVector

ILS_ITEM_COUNT = 44

# Cycle offset -> axis pair
CYCLE: tuple[AxisPair, ...] = (
    AxisPair.ACTIVE_REFLECTIVE,
    AxisPair.SENSING_INTUITIVE,
    AxisPair.VISUAL_VERBAL,
    AxisPair.SEQUENTIAL_GLOBAL,
)


def estimate(responses: Sequence[int], max_items: int = ILS_ITEM_COUNT) -> StyleVector | None:
    """
    Tally questionnaire responses into a dominance-reduced style.

    Args:
        responses: Binary answers in question order
        max_items: Number of leading answers considered

    Returns:
        StyleVector with at most one non-zero pole per axis, or None when
        the learner gave no responses
    """
    if not responses:
        return None

    tally = {name: 0 for axis in CYCLE for name in axis.poles}
    for position, response in enumerate(responses[:max_items]):
        first, second = CYCLE[position % len(CYCLE)].poles
        tally[second if int(response) else first] += 1

    return StyleVector(**tally).reduce_to_dominant()


class SurveyStyleEstimator:
    """Looks up a learner's ILS responses and estimates their style."""

    def __init__(self, source: SurveySource, max_items: int = ILS_ITEM_COUNT) -> None:
        self._source = source
        self._max_items = max_items

    def estimate_for_learner(self, course_id: int, user_id: int) -> StyleVector | None:
        if not self._source.analytics_enabled(course_id):
            logger.debug("Behaviour analytics not enabled in course {}", course_id)
            return None

        responses = self._source.survey_responses(course_id, user_id)
        style = estimate(responses, self._max_items)
        if style is None:
            logger.debug("No ILS responses for user {} in course {}", user_id, course_id)
        return style
