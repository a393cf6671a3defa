"""Progress Module - Per-learner progress aggregate and completion math.

Usage:
    from athos.modules.progress import Progress, recalculate_section

    # Services and stores live in their submodules
    from athos.modules.progress.service import ProgressService
    from athos.modules.progress.store import InMemoryLearnerStateStore
    from athos.modules.progress.db_store import DatabaseLearnerStateStore
"""

from athos.modules.progress.interface import (
    Achievement,
    ActivityUpdate,
    ContentProgress,
    IProgressService,
    ModuleProgress,
    Progress,
    ProgressStatus,
    QuizProgress,
    SectionProgress,
    SectionStatus,
)
from athos.modules.progress.completion import (
    content_completion,
    module_completion,
    overall_completion,
    progress_status,
    quiz_completion,
    recalculate,
    recalculate_section,
)

__all__ = [
    # Interface types
    "Achievement",
    "ActivityUpdate",
    "ContentProgress",
    "IProgressService",
    "ModuleProgress",
    "Progress",
    "ProgressStatus",
    "QuizProgress",
    "SectionProgress",
    "SectionStatus",
    # Completion calculator
    "content_completion",
    "module_completion",
    "overall_completion",
    "progress_status",
    "quiz_completion",
    "recalculate",
    "recalculate_section",
]
