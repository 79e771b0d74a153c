"""
Learning Style Models.

SQLAlchemy models for the persisted outputs of the refresh job:
- Module learning styles (computed once per course module)
- Learner/module relevance scores (rebuilt per course on every refresh)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, SmallInteger, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from psg.adaptive.models import LearnerModuleScore, ScoreSource
from psg.core.style_vector import StyleVector

from .base import Base


class ModuleStyleRecord(Base):
    """
    Learning style of one course module.

    ``lsc`` holds the eight scores as a comma-separated string in the order
    active, reflective, sensing, intuitive, visual, verbal, sequential, global.
    """

    __tablename__ = "psg_module_styles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    module_id: Mapped[int] = mapped_column(Integer, nullable=False)
    lsc: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint("course_id", "module_id", name="uq_psg_module_style"),
    )

    def __repr__(self) -> str:
        return f"<ModuleStyleRecord course={self.course_id} module={self.module_id} lsc={self.lsc}>"

    @property
    def style(self) -> StyleVector:
        return StyleVector.from_csv(self.lsc)

    @classmethod
    def from_style(cls, course_id: int, module_id: int, style: StyleVector) -> ModuleStyleRecord:
        return cls(course_id=course_id, module_id=module_id, lsc=style.to_csv())


class LearnerScoreRecord(Base):
    """
    Relevance of a module to a learner (0-4 aligned axis pairs).

    score_type: 0 = ILS survey, 1 = common links graph.
    """

    __tablename__ = "psg_learner_module_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(Integer, nullable=False)
    module_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    score_type: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    __table_args__ = (
        Index("idx_psg_scores_course", "course_id"),
        Index("idx_psg_scores_user", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<LearnerScoreRecord course={self.course_id} module={self.module_id} "
            f"user={self.user_id} score={self.score} type={self.score_type}>"
        )

    @classmethod
    def from_score(cls, score: LearnerModuleScore) -> LearnerScoreRecord:
        return cls(**score.to_dict())

    def to_score(self) -> LearnerModuleScore:
        return LearnerModuleScore(
            course_id=self.course_id,
            module_id=self.module_id,
            user_id=self.user_id,
            score=self.score,
            source=ScoreSource(self.score_type),
        )
