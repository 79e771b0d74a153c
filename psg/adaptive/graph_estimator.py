"""
Graph Style Estimator.

Predicts a learner style from the common links graph of the learner's
behavioural cluster. Every module touched by a link gains the link weight
(once for a self-link), and the learner style is the sum of module styles
scaled by those weights.

Unlike the survey estimate, no dominance reduction is applied.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from psg.adaptive.collaborators import AnalyticsSource
from psg.adaptive.models import (
    ClusterAssignment,
    GraphEstimate,
    InteractionGraph,
    PredictionSelection,
    WeightedEdge,
)
from psg.core.style_vector import StyleVector


def accumulate_weights(edges: Iterable[WeightedEdge], module_ids: Iterable[int]) -> dict[int, float]:
    """
    Sum link weights per module.

    Links with an endpoint outside ``module_ids`` are ignored. The target
    always receives the weight; the source only when it differs from the
    target.
    """
    weights: dict[int, float] = {module_id: 0.0 for module_id in module_ids}
    for edge in edges:
        if edge.source not in weights or edge.target not in weights:
            continue
        if not edge.is_self_loop:
            weights[edge.source] += edge.weight
        weights[edge.target] += edge.weight
    return weights


def estimate(
    graph: InteractionGraph | None,
    module_styles: Mapping[int, StyleVector],
) -> StyleVector | None:
    """
    Weighted sum of module styles over a cluster's common links.

    Args:
        graph: Common links of the learner's cluster, or None when unclustered
        module_styles: Resolved styles of the course's current modules

    Returns:
        Summed StyleVector, or None when there is no graph or it has no links
    """
    if graph is None or not graph.edges:
        return None

    weights = accumulate_weights(graph.edges, module_styles)
    style = StyleVector.zero()
    for module_id, weight in weights.items():
        if not weight:
            continue
        module_style = module_styles.get(module_id)
        if module_style is None:
            continue
        style = style + module_style.scale(weight)
    return style


class GraphStyleEstimator:
    """Resolves a learner's cluster and estimates their style from its links."""

    def __init__(self, source: AnalyticsSource) -> None:
        self._source = source

    def resolve_cluster(
        self, course_id: int, user_id: int
    ) -> tuple[PredictionSelection | None, ClusterAssignment | None]:
        """
        Find the course's prediction clustering and the learner's cluster in it.

        Returns (None, None) when analytics are off or no clustering is
        selected, and (selection, None) when the learner is not clustered.
        """
        if not self._source.analytics_enabled(course_id):
            logger.debug("Behaviour analytics not enabled in course {}", course_id)
            return None, None

        selection = self._source.prediction_selection(course_id)
        if selection is None:
            logger.debug("No prediction clustering selected for course {}", course_id)
            return None, None

        cluster = self._source.cluster_assignment(course_id, user_id, selection)
        if cluster is None:
            logger.debug("User {} not clustered in course {} ({})", user_id, course_id, selection)
        return selection, cluster

    def interaction_graph(
        self, course_id: int, user_id: int
    ) -> tuple[InteractionGraph | None, PredictionSelection | None]:
        """Load the common links graph of the learner's cluster, if any."""
        selection, cluster = self.resolve_cluster(course_id, user_id)
        if selection is None or cluster is None:
            return None, selection

        edges = self._source.common_links(course_id, selection, cluster)
        return InteractionGraph(cluster=cluster, edges=edges), selection

    def estimate_for_learner(
        self,
        course_id: int,
        user_id: int,
        module_styles: Mapping[int, StyleVector],
    ) -> GraphEstimate:
        graph, selection = self.interaction_graph(course_id, user_id)
        return GraphEstimate(style=estimate(graph, module_styles), prediction=selection)
