"""Learning Path Module - Current pointer and cached recommendations.

Usage:
    from athos.modules.learning_path import LearningPath

    # The tracker lives in its submodule
    from athos.modules.learning_path.service import LearningPathTracker
"""

from athos.modules.learning_path.interface import (
    AdaptiveSuggestion,
    ILearningPathTracker,
    LearningPath,
)

__all__ = [
    "AdaptiveSuggestion",
    "ILearningPathTracker",
    "LearningPath",
]
