"""Section, module and overall completion calculation.

Everything here is pure: functions take a Progress aggregate plus whatever
catalog data they need and mutate or read the aggregate in memory. Callers
load the catalog data and persist the result.
"""

from datetime import datetime

from athos.modules.catalog.interface import ContentItem, Quiz
from athos.modules.progress.interface import (
    ModuleProgress,
    Progress,
    ProgressStatus,
    SectionProgress,
    SectionStatus,
)
from athos.shared.constants import (
    CONTENT_COMPLETION_WEIGHT,
    MAX_COMPLETION,
    MIN_COMPLETION,
    QUIZ_COMPLETION_WEIGHT,
)
from athos.shared.curriculum import Curriculum
from athos.shared.datetime_utils import utc_now
from athos.shared.math_utils import clamp, mean, round_half_up


def content_completion(progress: Progress, content_items: list[ContentItem]) -> int:
    """Content half of a section's completion.

    Args:
        progress: Learner progress
        content_items: Published content of the section

    Returns:
        0-50 based on the share of items marked completed
    """
    if not content_items:
        return 0
    completed_ids = progress.completed_content_ids()
    completed = sum(1 for item in content_items if item.id in completed_ids)
    return round_half_up(CONTENT_COMPLETION_WEIGHT * completed / len(content_items))


def quiz_completion(progress: Progress, quiz: Quiz | None, content_part: int) -> int:
    """Quiz half of a section's completion.

    A section without a quiz mirrors its content half so that finishing all
    content reaches 100%.
    """
    if quiz is None:
        return content_part
    entry = progress.find_quiz(quiz.id)
    if entry is None:
        return 0
    if entry.completed:
        return QUIZ_COMPLETION_WEIGHT
    return round_half_up(entry.score * QUIZ_COMPLETION_WEIGHT / 100)


def module_completion(module: ModuleProgress) -> int:
    """Rounded mean of a module's section completions, 0 without sections."""
    if not module.sections:
        return 0
    return round_half_up(mean([section.completion for section in module.sections.values()]))


def overall_completion(progress: Progress) -> int:
    """Rounded mean of module completions, 0 without modules."""
    if not progress.modules:
        return 0
    return round_half_up(mean([module.completion for module in progress.modules.values()]))


def recalculate_section(
    progress: Progress,
    module_id: str,
    section_id: str,
    content_items: list[ContentItem],
    quiz: Quiz | None,
) -> int:
    """Recompute one section and roll the result up to its module.

    Mutates ``progress`` in place; the section and module entries are
    created if missing.

    Args:
        progress: Learner progress
        module_id: Module of the section
        section_id: Section to recompute
        content_items: Published content of the section
        quiz: Published quiz of the section, if any

    Returns:
        The new section completion, 0-100
    """
    content_part = content_completion(progress, content_items)
    quiz_part = quiz_completion(progress, quiz, content_part)

    module = progress.modules.setdefault(module_id, ModuleProgress())
    section = module.sections.setdefault(section_id, SectionProgress())
    section.completion = clamp(content_part + quiz_part, MIN_COMPLETION, MAX_COMPLETION)
    module.completion = module_completion(module)
    return section.completion


def recalculate(progress: Progress, now: datetime | None = None) -> Progress:
    """Refresh every derived field of the aggregate.

    Module completions are rebuilt from stored section values, then the
    overall completion, total time and update timestamp. Running it twice
    gives the same numbers.
    """
    for module in progress.modules.values():
        module.completion = module_completion(module)
    progress.overall_completion = overall_completion(progress)
    progress.total_time_spent = sum(cp.time_spent for cp in progress.content_progress)
    progress.last_updated = now or utc_now()
    return progress


def progress_status(progress: Progress, curriculum: Curriculum) -> ProgressStatus:
    """Group every curriculum section by completion state.

    The current location is the most recently accessed section.
    """
    completed: list[SectionStatus] = []
    in_progress: list[SectionStatus] = []
    not_started: list[SectionStatus] = []
    latest: SectionStatus | None = None

    for ref in curriculum.all_sections():
        module = progress.modules.get(ref.module_id)
        section = module.sections.get(ref.section_id) if module else None
        status = SectionStatus(
            module_id=ref.module_id,
            section_id=ref.section_id,
            completion=section.completion if section else 0,
            last_accessed=section.last_accessed if section else None,
        )
        if section is None:
            not_started.append(status)
        elif status.completion >= MAX_COMPLETION:
            completed.append(status)
        else:
            in_progress.append(status)

        if status.last_accessed and (latest is None or status.last_accessed > latest.last_accessed):
            latest = status

    return ProgressStatus(
        completed_sections=completed,
        in_progress_sections=in_progress,
        not_started_sections=not_started,
        module_completion={
            module_id: progress.modules[module_id].completion if module_id in progress.modules else 0
            for module_id in curriculum.modules
        },
        overall_completion=progress.overall_completion,
        total_time_spent=progress.total_time_spent,
        current_module=latest.module_id if latest else None,
        current_section=latest.section_id if latest else None,
    )
