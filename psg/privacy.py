"""
Privacy provider.

Learner/module relevance scores are the only personal data psg stores.
Module learning styles describe course content and are left alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from psg.db.store import RecordStore

# Describes stored personal data for privacy registries
METADATA: dict[str, dict[str, str]] = {
    "psg_learner_module_scores": {
        "course_id": "The course the score belongs to",
        "module_id": "The course module that was scored",
        "user_id": "The learner the score was computed for",
        "score": "Number of learning style dimensions shared by learner and module",
        "score_type": "Whether the learner style came from the ILS survey or common links",
    },
    "psg_module_styles": {
        "course_id": "The course of the module",
        "module_id": "The course module",
        "lsc": "Learning style values of the module",
    },
}


def export_user_data(store: RecordStore, user_id: int) -> dict[str, Any]:
    """All stored scores of a learner, grouped by course."""
    courses: dict[int, list[dict[str, int]]] = {}
    for score in store.learner_scores(user_id):
        courses.setdefault(score.course_id, []).append(score.to_dict())
    return {"user_id": user_id, "courses": courses}


def delete_user_data(store: RecordStore, user_id: int, course_id: int | None = None) -> int:
    """Remove a learner's scores, everywhere or in one course."""
    removed = store.delete_learner_scores(user_id=user_id, course_id=course_id)
    logger.info("Deleted {} learner scores for user {}", removed, user_id)
    return removed


def delete_course_data(store: RecordStore, course_id: int) -> int:
    """Remove every learner's scores in a course."""
    removed = store.delete_learner_scores(course_id=course_id)
    logger.info("Deleted {} learner scores in course {}", removed, course_id)
    return removed


def users_in_course(store: RecordStore, course_id: int) -> list[int]:
    return store.learners_with_scores(course_id)
