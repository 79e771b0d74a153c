"""
Adaptive Ordering Models.

Plain data carried between the style estimators, the scorer and the
refresh job. Persisted forms live in psg.db.models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from psg.core.style_vector import StyleVector


class ScoreSource(IntEnum):
    """Which learner style produced a stored score (persisted as score_type)."""

    SURVEY = 0
    GRAPH = 1


@dataclass(frozen=True)
class CourseModule:
    """A clickable, visible course module."""

    id: int
    activity_type: str  # Moodle module name: 'assign', 'page', 'url', ...
    instance: int | None = None
    section: int = 0


@dataclass
class CourseSection:
    """A course section and its modules in display order."""

    number: int
    module_ids: list[int] = field(default_factory=list)
    name: str = ""


@dataclass(frozen=True)
class LearnerModuleScore:
    course_id: int
    module_id: int
    user_id: int
    score: int
    source: ScoreSource

    def to_dict(self) -> dict[str, int]:
        return {
            "course_id": self.course_id,
            "module_id": self.module_id,
            "user_id": self.user_id,
            "score": self.score,
            "score_type": int(self.source),
        }


@dataclass(frozen=True)
class PredictionSelection:
    """
    The clustering chosen for a course's predictions.

    Stored by Behaviour Analytics as ``"<analysis>_<coords>_<cluster>"``.
    """

    analysis_id: int
    coords_id: int
    cluster_algorithm_id: int

    @classmethod
    def parse(cls, value: str | None) -> PredictionSelection | None:
        if not value:
            return None
        parts = value.split("_")
        if len(parts) != 3:
            return None
        try:
            return cls(*(int(part) for part in parts))
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"{self.analysis_id}_{self.coords_id}_{self.cluster_algorithm_id}"


@dataclass(frozen=True)
class ClusterAssignment:
    """A learner's cluster within the selected clustering."""

    cluster_number: int
    iteration: int
    manual: bool = False


@dataclass(frozen=True)
class WeightedEdge:
    """A common link between two modules with its observed frequency."""

    source: int
    target: int
    weight: float

    @classmethod
    def from_link(cls, link: str, weight: float) -> WeightedEdge:
        """Parse the ``"<from>_<to>"`` link key used by Behaviour Analytics."""
        source, target = link.split("_", 1)
        return cls(int(source), int(target), float(weight))

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass
class InteractionGraph:
    """Common links graph of one cluster."""

    cluster: ClusterAssignment
    edges: list[WeightedEdge] = field(default_factory=list)


@dataclass(frozen=True)
class GraphEstimate:
    """
    Result of a common-links estimate.

    ``prediction`` is set whenever the course has a clustering selected, so
    a missing ``style`` can be told apart from "no prediction configured".
    """

    style: StyleVector | None
    prediction: PredictionSelection | None = None


@dataclass(frozen=True)
class RankedModule:
    module_id: int
    score: int


@dataclass(frozen=True)
class RankedSection:
    number: int
    score: float
    modules: tuple[RankedModule, ...] = ()
