"""
Alignment Scorer.

Scores how well a module suits a learner: one point for each axis pair on
which learner and module lean the same way (both first pole, both second
pole, or both balanced). Scores range 0-4; no learner style means 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from psg.adaptive.models import CourseSection, RankedModule, RankedSection
from psg.core.style_vector import StyleVector


def _lean(first: float, second: float) -> int:
    return (first > second) - (first < second)


def score(learner: StyleVector | None, module: StyleVector) -> int:
    """Number of axis pairs on which ``learner`` and ``module`` agree."""
    if learner is None:
        return 0

    total = 0
    for axis, first, second in learner.pairs():
        if _lean(first, second) == _lean(*module.pair(axis)):
            total += 1
    return total


def rank_modules(
    learner: StyleVector | None,
    module_ids: Iterable[int],
    module_styles: Mapping[int, StyleVector],
) -> list[RankedModule]:
    """
    Order modules by relevance, most relevant first.

    The sort is stable, so equally scored modules keep their course order.
    Without a learner style every module scores 0 and the order is unchanged.
    A module with no known style is scored against the zero vector.
    """
    ranked = [
        RankedModule(module_id, score(learner, module_styles.get(module_id, StyleVector.zero())))
        for module_id in module_ids
    ]
    if learner is None:
        return ranked
    return sorted(ranked, key=lambda m: m.score, reverse=True)


def rank_sections(
    learner: StyleVector | None,
    sections: Iterable[CourseSection],
    module_styles: Mapping[int, StyleVector],
    sort_sections: bool = True,
    sort_modules: bool = True,
) -> list[RankedSection]:
    """
    Order sections by the average relevance of their modules.

    Empty sections score 0. Sections are left in course order when there is
    no learner style or ``sort_sections`` is off.
    """
    ranked: list[RankedSection] = []
    for section in sections:
        modules = [
            RankedModule(module_id, score(learner, module_styles.get(module_id, StyleVector.zero())))
            for module_id in section.module_ids
        ]
        average = sum(m.score for m in modules) / len(modules) if modules and learner is not None else 0
        if sort_modules and learner is not None:
            modules.sort(key=lambda m: m.score, reverse=True)
        ranked.append(RankedSection(number=section.number, score=average, modules=tuple(modules)))

    if learner is None or not sort_sections:
        return ranked
    return sorted(ranked, key=lambda s: s.score, reverse=True)
