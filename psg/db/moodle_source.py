"""
Moodle collaborators backed by raw SQL.

Implements the CourseCatalog, ModuleContentSource, SurveySource and
AnalyticsSource protocols against a Moodle database with the Behaviour
Analytics block installed.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import Engine, text

from config import Settings, get_settings
from psg.adaptive.models import (
    ClusterAssignment,
    CourseModule,
    CourseSection,
    PredictionSelection,
    WeightedEdge,
)
from psg.db.database import get_engine
from psg.db.queries import (
    AUTOMATIC_TABLES,
    CONTEXT_COURSE,
    MANUAL_TABLES,
    NO_VIEW_MODULES,
    QUERIES,
)


def _as_int(value: Any) -> int:
    """Leading-integer conversion; anything unparsable counts as 0."""
    try:
        return int(str(value).strip() or 0)
    except ValueError:
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0


def _parse_sequence(sequence: str | None) -> list[int]:
    return [int(part) for part in (sequence or "").split(",") if part.strip().isdigit()]


class MoodleSource:
    """Shared SQL plumbing for the Moodle collaborators."""

    def __init__(self, engine: Engine | None = None, settings: Settings | None = None) -> None:
        self._engine = engine
        self._settings = settings or get_settings()

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = get_engine()
        return self._engine

    def _sql(self, name: str, **placeholders: str) -> Any:
        return text(QUERIES[name].format(prefix=self._settings.table_prefix, **placeholders))

    def _all(self, name: str, params: dict[str, Any], **placeholders: str) -> list[Any]:
        with self.engine.connect() as conn:
            return list(conn.execute(self._sql(name, **placeholders), params).fetchall())

    def _scalar(self, name: str, params: dict[str, Any], **placeholders: str) -> Any:
        with self.engine.connect() as conn:
            return conn.execute(self._sql(name, **placeholders), params).scalar()


class MoodleCourseCatalog(MoodleSource):
    """Course, section, module and learner enumeration."""

    def course_ids(self) -> list[int]:
        rows = self._all("format_courses", {"format": self._settings.course_format})
        return [row.id for row in rows]

    def course_sections(self, course_id: int) -> list[CourseSection]:
        visible = {module.id for module in self.course_modules(course_id)}
        return [
            CourseSection(
                number=row.section,
                name=row.name or "",
                module_ids=[cmid for cmid in _parse_sequence(row.sequence) if cmid in visible],
            )
            for row in self._all("course_sections", {"course_id": course_id})
        ]

    def course_modules(self, course_id: int) -> list[CourseModule]:
        """Clickable, visible modules in section sequence order."""
        rows = {
            row.id: row
            for row in self._all("course_modules", {"course_id": course_id})
            if row.modname not in NO_VIEW_MODULES
        }
        modules: list[CourseModule] = []
        for section in self._all("course_sections", {"course_id": course_id}):
            for cmid in _parse_sequence(section.sequence):
                row = rows.get(cmid)
                if row is None:
                    continue
                modules.append(
                    CourseModule(id=row.id, activity_type=row.modname, instance=row.instance, section=section.section)
                )
        return modules

    def learner_ids(self, course_id: int) -> list[int]:
        rows = self._all("course_learners", {"course_id": course_id, "context_level": CONTEXT_COURSE})
        return sorted({row[0] for row in rows})


class MoodleContentSource(MoodleSource):
    """HTML of page activities and targets of url activities."""

    def page_html(self, module: CourseModule) -> str | None:
        if module.instance is None:
            return None
        return self._scalar("page_content", {"instance": module.instance})

    def link_url(self, module: CourseModule) -> str | None:
        if module.instance is None:
            return None
        return self._scalar("url_external", {"instance": module.instance})


class BehaviourAnalyticsSource(MoodleSource):
    """Survey responses, clustering and personalisation toggles."""

    def analytics_enabled(self, course_id: int) -> bool:
        count = self._scalar("analytics_blocks", {"course_id": course_id, "context_level": CONTEXT_COURSE})
        return bool(count)

    # ========================================
    # ILS survey
    # ========================================

    def survey_responses(self, course_id: int, user_id: int) -> list[int]:
        survey_id = self._scalar("survey_id", {"title": self._settings.ils_survey_title})
        if survey_id is None:
            logger.debug("ILS survey {!r} not found", self._settings.ils_survey_title)
            return []
        rows = self._all(
            "survey_responses",
            {"course_id": course_id, "user_id": user_id, "survey_id": survey_id},
        )
        return [_as_int(row.response) for row in rows]

    # ========================================
    # Clustering
    # ========================================

    def prediction_selection(self, course_id: int) -> PredictionSelection | None:
        if not self.analytics_enabled(course_id):
            return None
        return PredictionSelection.parse(self._scalar("prediction", {"course_id": course_id}))

    def cluster_assignment(
        self, course_id: int, user_id: int, selection: PredictionSelection
    ) -> ClusterAssignment | None:
        params = {
            "course_id": course_id,
            "analysis_id": selection.analysis_id,
            "coords_id": selection.coords_id,
            "cluster_id": selection.cluster_algorithm_id,
            "user_id": user_id,
        }
        for manual, (members_table, _) in ((True, MANUAL_TABLES), (False, AUTOMATIC_TABLES)):
            iteration = self._scalar("min_member_iteration", params, table=members_table)
            if iteration is None:
                continue
            cluster_number = self._scalar(
                "member_cluster", {**params, "iteration": iteration}, table=members_table
            )
            if cluster_number is None:
                continue
            return ClusterAssignment(cluster_number=int(cluster_number), iteration=int(iteration), manual=manual)
        return None

    def common_links(
        self, course_id: int, selection: PredictionSelection, cluster: ClusterAssignment
    ) -> list[WeightedEdge]:
        links_table = MANUAL_TABLES[1] if cluster.manual else AUTOMATIC_TABLES[1]
        rows = self._all(
            "common_links",
            {
                "course_id": course_id,
                "analysis_id": selection.analysis_id,
                "coords_id": selection.coords_id,
                "cluster_id": selection.cluster_algorithm_id,
                "cluster_number": cluster.cluster_number,
            },
            table=links_table,
        )
        edges: list[WeightedEdge] = []
        for row in rows:
            try:
                edges.append(WeightedEdge.from_link(row.link, row.weight))
            except (TypeError, ValueError):
                logger.debug("Skipping malformed common link {!r}", row.link)
        return edges

    # ========================================
    # Personalisation toggle
    # ========================================

    def personalisation_enabled(self, course_id: int, user_id: int) -> bool:
        latest = self._scalar("latest_psg_toggle", {"course_id": course_id, "user_id": user_id})
        return latest is None or bool(_as_int(latest))
