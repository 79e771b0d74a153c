"""
Record store for module styles and learner scores.

The engine depends on the RecordStore protocol only; SqlRecordStore is the
SQLAlchemy implementation used by the CLI and scheduled refresh.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Protocol

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from psg.adaptive.models import LearnerModuleScore
from psg.core.style_vector import StyleVector
from psg.db.database import session_scope
from psg.db.models import LearnerScoreRecord, ModuleStyleRecord


class RecordStore(Protocol):
    def load_module_styles(self, course_id: int) -> dict[int, StyleVector]:
        ...

    def get_module_style(self, course_id: int, module_id: int) -> StyleVector | None:
        ...

    def insert_module_styles(self, course_id: int, styles: Mapping[int, StyleVector]) -> None:
        ...

    def delete_module_styles(self, course_id: int, module_ids: Iterable[int]) -> None:
        ...

    def replace_learner_scores(self, course_id: int, scores: Iterable[LearnerModuleScore]) -> None:
        """Delete every score of the course and insert ``scores`` atomically."""
        ...

    def learner_scores(self, user_id: int, course_id: int | None = None) -> list[LearnerModuleScore]:
        ...

    def delete_learner_scores(self, user_id: int | None = None, course_id: int | None = None) -> int:
        ...

    def learners_with_scores(self, course_id: int) -> list[int]:
        ...


class SqlRecordStore:
    """RecordStore backed by the psg tables."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory

    def _scope(self):
        return session_scope(self._session_factory)

    # ========================================
    # Module styles
    # ========================================

    def load_module_styles(self, course_id: int) -> dict[int, StyleVector]:
        with self._scope() as session:
            records = session.scalars(
                select(ModuleStyleRecord).where(ModuleStyleRecord.course_id == course_id)
            ).all()
            return {record.module_id: record.style for record in records}

    def get_module_style(self, course_id: int, module_id: int) -> StyleVector | None:
        with self._scope() as session:
            lsc = session.scalar(
                select(ModuleStyleRecord.lsc).where(
                    ModuleStyleRecord.course_id == course_id,
                    ModuleStyleRecord.module_id == module_id,
                )
            )
            return StyleVector.from_csv(lsc) if lsc is not None else None

    def insert_module_styles(self, course_id: int, styles: Mapping[int, StyleVector]) -> None:
        if not styles:
            return
        with self._scope() as session:
            session.add_all(
                ModuleStyleRecord.from_style(course_id, module_id, style)
                for module_id, style in styles.items()
            )
        logger.debug("Inserted {} module styles for course {}", len(styles), course_id)

    def delete_module_styles(self, course_id: int, module_ids: Iterable[int]) -> None:
        module_ids = list(module_ids)
        if not module_ids:
            return
        with self._scope() as session:
            session.execute(
                delete(ModuleStyleRecord).where(
                    ModuleStyleRecord.course_id == course_id,
                    ModuleStyleRecord.module_id.in_(module_ids),
                )
            )
        logger.debug("Deleted {} stale module styles for course {}", len(module_ids), course_id)

    # ========================================
    # Learner scores
    # ========================================

    def replace_learner_scores(self, course_id: int, scores: Iterable[LearnerModuleScore]) -> None:
        records = [LearnerScoreRecord.from_score(score) for score in scores]
        with self._scope() as session:
            session.execute(delete(LearnerScoreRecord).where(LearnerScoreRecord.course_id == course_id))
            session.add_all(records)
        logger.debug("Stored {} learner scores for course {}", len(records), course_id)

    def learner_scores(self, user_id: int, course_id: int | None = None) -> list[LearnerModuleScore]:
        query = select(LearnerScoreRecord).where(LearnerScoreRecord.user_id == user_id)
        if course_id is not None:
            query = query.where(LearnerScoreRecord.course_id == course_id)
        query = query.order_by(LearnerScoreRecord.course_id, LearnerScoreRecord.id)
        with self._scope() as session:
            return [record.to_score() for record in session.scalars(query).all()]

    def delete_learner_scores(self, user_id: int | None = None, course_id: int | None = None) -> int:
        if user_id is None and course_id is None:
            raise ValueError("delete_learner_scores needs a user_id or a course_id")
        statement = delete(LearnerScoreRecord)
        if user_id is not None:
            statement = statement.where(LearnerScoreRecord.user_id == user_id)
        if course_id is not None:
            statement = statement.where(LearnerScoreRecord.course_id == course_id)
        with self._scope() as session:
            result = session.execute(statement)
            return result.rowcount or 0

    def learners_with_scores(self, course_id: int) -> list[int]:
        with self._scope() as session:
            return list(
                session.scalars(
                    select(LearnerScoreRecord.user_id)
                    .where(LearnerScoreRecord.course_id == course_id)
                    .distinct()
                    .order_by(LearnerScoreRecord.user_id)
                ).all()
            )
