"""Learners Module - Learning preferences owned by the auth service."""

from athos.modules.learners.interface import ILearnerDirectory, LearnerPreferences
from athos.modules.learners.service import InMemoryLearnerDirectory
from athos.modules.learners.db_service import DatabaseLearnerDirectory

__all__ = [
    # Interface types
    "ILearnerDirectory",
    "LearnerPreferences",
    # Implementations
    "DatabaseLearnerDirectory",
    "InMemoryLearnerDirectory",
]
