"""
Adaptive Ordering Engine.

Components:
- ModuleStyleResolver: Module learning styles, computed once per module
- SurveyStyleEstimator: Learner style from the ILS questionnaire
- GraphStyleEstimator: Learner style from cluster common links
- alignment: Learner/module relevance scores and page ordering
- LearnerProfileService: Render-time learner style selection
"""
from psg.adaptive.alignment import rank_modules, rank_sections, score
from psg.adaptive.graph_estimator import GraphStyleEstimator
from psg.adaptive.learner_profile import CoursePage, LearnerProfile, LearnerProfileService
from psg.adaptive.models import (
    ClusterAssignment,
    CourseModule,
    CourseSection,
    GraphEstimate,
    InteractionGraph,
    LearnerModuleScore,
    PredictionSelection,
    RankedModule,
    RankedSection,
    ScoreSource,
    WeightedEdge,
)
from psg.adaptive.module_styles import ModuleRefreshResult, ModuleStyleResolver
from psg.adaptive.survey_estimator import SurveyStyleEstimator

__all__ = [
    # Services
    "GraphStyleEstimator",
    "LearnerProfileService",
    "ModuleStyleResolver",
    "SurveyStyleEstimator",
    # Scoring
    "rank_modules",
    "rank_sections",
    "score",
    # Data models
    "ClusterAssignment",
    "CourseModule",
    "CoursePage",
    "CourseSection",
    "GraphEstimate",
    "InteractionGraph",
    "LearnerModuleScore",
    "LearnerProfile",
    "ModuleRefreshResult",
    "PredictionSelection",
    "RankedModule",
    "RankedSection",
    "WeightedEdge",
    # Enums
    "ScoreSource",
]
