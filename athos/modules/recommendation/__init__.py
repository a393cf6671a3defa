"""Recommendation Module - Ranked content and reasoned suggestions.

Usage:
    from athos.modules.recommendation import RecommendationEngine

    engine = RecommendationEngine(catalog, curriculum)
    result = await engine.generate(user_id, progress, style, difficulty, module_id, section_id)
"""

from athos.modules.recommendation.interface import (
    LearningEvaluation,
    Milestone,
    NextSteps,
    RecommendationResult,
    ResolvedRecommendations,
    StyleWeights,
    SuggestionCandidate,
)
from athos.modules.recommendation.engine import RecommendationEngine
from athos.modules.recommendation.advisor import LearningAdvisor

__all__ = [
    # Interface types
    "LearningEvaluation",
    "Milestone",
    "NextSteps",
    "RecommendationResult",
    "ResolvedRecommendations",
    "StyleWeights",
    "SuggestionCandidate",
    # Implementations
    "LearningAdvisor",
    "RecommendationEngine",
]
