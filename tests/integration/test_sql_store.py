"""
Integration tests for the SQLAlchemy record store.

Runs against an in-memory SQLite database.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from psg.adaptive.models import LearnerModuleScore, ScoreSource
from psg.core.style_vector import StyleVector
from psg.db.database import session_scope
from psg.db.models import ModuleStyleRecord
from psg.db.store import SqlRecordStore


@pytest.fixture
def sql_store(session_factory):
    return SqlRecordStore(session_factory)


class TestModuleStyles:
    """Tests for persisted module styles."""

    def test_insert_and_load(self, sql_store):
        styles = {1: StyleVector(active=0.35, global_=0.05), 2: StyleVector(verbal=0.8)}
        sql_store.insert_module_styles(10, styles)

        assert sql_store.load_module_styles(10) == styles
        assert sql_store.load_module_styles(11) == {}

    def test_stored_as_csv(self, sql_store, session_factory):
        sql_store.insert_module_styles(10, {1: StyleVector(active=1)})
        with session_scope(session_factory) as session:
            record = session.query(ModuleStyleRecord).one()
            assert record.lsc == "1,0,0,0,0,0,0,0"

    def test_get_module_style(self, sql_store):
        sql_store.insert_module_styles(10, {1: StyleVector(sensing=0.2)})
        assert sql_store.get_module_style(10, 1) == StyleVector(sensing=0.2)
        assert sql_store.get_module_style(10, 2) is None

    def test_delete(self, sql_store):
        sql_store.insert_module_styles(10, {1: StyleVector(), 2: StyleVector(), 3: StyleVector()})
        sql_store.delete_module_styles(10, [1, 3])
        assert list(sql_store.load_module_styles(10)) == [2]

    def test_duplicate_module_rejected(self, sql_store):
        sql_store.insert_module_styles(10, {1: StyleVector()})
        with pytest.raises(Exception):
            sql_store.insert_module_styles(10, {1: StyleVector(active=1)})
        assert sql_store.load_module_styles(10) == {1: StyleVector()}


class TestLearnerScores:
    """Tests for persisted learner/module scores."""

    @pytest.fixture
    def scores(self):
        return [
            LearnerModuleScore(10, 1, 5, 3, ScoreSource.SURVEY),
            LearnerModuleScore(10, 2, 5, 1, ScoreSource.GRAPH),
            LearnerModuleScore(10, 1, 6, 4, ScoreSource.SURVEY),
            LearnerModuleScore(20, 7, 5, 2, ScoreSource.SURVEY),
        ]

    def test_replace_and_read(self, sql_store, scores):
        sql_store.replace_learner_scores(10, scores[:3])
        sql_store.replace_learner_scores(20, scores[3:])

        assert sql_store.learner_scores(5) == [scores[0], scores[1], scores[3]]
        assert sql_store.learner_scores(5, course_id=20) == [scores[3]]

    def test_replace_removes_previous_course_scores(self, sql_store, scores):
        sql_store.replace_learner_scores(10, scores[:3])
        sql_store.replace_learner_scores(20, scores[3:])

        sql_store.replace_learner_scores(10, [LearnerModuleScore(10, 9, 6, 0, ScoreSource.GRAPH)])

        assert sql_store.learner_scores(5, course_id=10) == []
        assert sql_store.learner_scores(6) == [LearnerModuleScore(10, 9, 6, 0, ScoreSource.GRAPH)]
        assert sql_store.learner_scores(5, course_id=20) == [scores[3]]

    def test_failed_replace_keeps_previous_scores(self, sql_store, scores):
        sql_store.replace_learner_scores(10, scores[:3])
        broken = [
            LearnerModuleScore(10, 1, 5, 2, ScoreSource.SURVEY),
            LearnerModuleScore(10, 2, 5, None, ScoreSource.GRAPH),
        ]

        with pytest.raises(IntegrityError):
            sql_store.replace_learner_scores(10, broken)

        assert sql_store.learner_scores(5, course_id=10) == scores[:2]
        assert sql_store.learners_with_scores(10) == [5, 6]

    def test_delete_by_user(self, sql_store, scores):
        sql_store.replace_learner_scores(10, scores[:3])
        sql_store.replace_learner_scores(20, scores[3:])

        assert sql_store.delete_learner_scores(user_id=5) == 3
        assert sql_store.learners_with_scores(10) == [6]

    def test_delete_by_course(self, sql_store, scores):
        sql_store.replace_learner_scores(10, scores[:3])
        assert sql_store.delete_learner_scores(course_id=10) == 3
        assert sql_store.learners_with_scores(10) == []

    def test_delete_needs_a_filter(self, sql_store):
        with pytest.raises(ValueError):
            sql_store.delete_learner_scores()

    def test_learners_with_scores(self, sql_store, scores):
        sql_store.replace_learner_scores(10, scores[:3])
        assert sql_store.learners_with_scores(10) == [5, 6]
