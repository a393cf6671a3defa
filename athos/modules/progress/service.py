"""Progress Service - Records learner activity and keeps completion current.

This service provides:
- Activity validation (all field problems reported at once, nothing written)
- Content and quiz activity recording inside one learner transaction
- Section/module/overall completion recomputation
- Achievements, reset, status and overview reads
"""

import logging
from datetime import datetime
from uuid import UUID

from athos.modules.analytics.service import AnalyticsService
from athos.modules.catalog.interface import ContentOrder, ContentQuery, ICatalog
from athos.modules.learning_path.interface import ILearningPathTracker
from athos.modules.progress.completion import progress_status, recalculate, recalculate_section
from athos.modules.progress.interface import (
    Achievement,
    ActivityUpdate,
    ContentProgress,
    ModuleProgressDetail,
    Progress,
    ProgressOverview,
    ProgressStatus,
    QuizProgress,
)
from athos.modules.progress.store import ILearnerStateStore
from athos.shared.constants import CONTENT_COMPLETE_PROGRESS, MAX_COMPLETION, MIN_COMPLETION
from athos.shared.curriculum import Curriculum
from athos.shared.datetime_utils import utc_now
from athos.shared.exceptions import (
    ActivityValidationError,
    AthosError,
    ContentNotFoundError,
    QuizNotFoundError,
    SectionNotFoundError,
    TransactionAbortedError,
)
from athos.shared.models import ActivityType, AnalyticsEventType

logger = logging.getLogger(__name__)

# Activity types that carry a content id
CONTENT_ACTIVITIES = frozenset({ActivityType.CONTENT, ActivityType.INTERACTIVE, ActivityType.VIDEO})


async def refresh_section_completion(
    progress: Progress,
    catalog: ICatalog,
    module_id: str,
    section_id: str,
) -> int:
    """Load a section's published content and quiz, then recompute it.

    Returns:
        The new section completion
    """
    content_items = await catalog.find_content(ContentQuery(
        module_id=module_id,
        section_id=section_id,
        order_by=ContentOrder.ORDER,
    ))
    quiz = await catalog.find_section_quiz(module_id, section_id)
    return recalculate_section(progress, module_id, section_id, content_items, quiz)


def validate_activity(activity: ActivityUpdate) -> ActivityUpdate:
    """Check an activity's fields and normalize its type.

    Raises:
        ActivityValidationError: With one entry per invalid field
    """
    errors: list[dict[str, str]] = []

    if not activity.module_id:
        errors.append({"field": "module_id", "message": "Module ID is required"})
    if not activity.section_id:
        errors.append({"field": "section_id", "message": "Section ID is required"})

    activity_type: ActivityType | None = None
    if not activity.activity_type:
        errors.append({"field": "activity_type", "message": "Activity type is required"})
    else:
        try:
            activity_type = ActivityType(activity.activity_type)
        except ValueError:
            allowed = ", ".join(t.value for t in ActivityType)
            errors.append({"field": "activity_type", "message": f"Activity type must be one of: {allowed}"})

    if activity.progress is not None and not MIN_COMPLETION <= activity.progress <= MAX_COMPLETION:
        errors.append({"field": "progress", "message": "Progress must be between 0 and 100"})
    if activity.time_spent < 0:
        errors.append({"field": "time_spent", "message": "Time spent cannot be negative"})

    if activity_type in CONTENT_ACTIVITIES and not activity.content_id:
        errors.append({"field": "content_id", "message": "Content ID is required for content activities"})
    if activity_type == ActivityType.QUIZ and not activity.quiz_id:
        errors.append({"field": "quiz_id", "message": "Quiz ID is required for quiz activities"})

    if errors:
        raise ActivityValidationError(errors)

    activity.activity_type = activity_type
    return activity


class ProgressService:
    """Service for tracking learner progress.

    Writes go through the learner state store; the learning path refresh
    and analytics that follow a write are best-effort and never undo it.
    """

    def __init__(
        self,
        store: ILearnerStateStore,
        catalog: ICatalog,
        curriculum: Curriculum,
        learning_paths: ILearningPathTracker,
        analytics: AnalyticsService,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._curriculum = curriculum
        self._learning_paths = learning_paths
        self._analytics = analytics

    async def get_progress(self, user_id: UUID) -> Progress:
        """Get the learner's progress, or a fresh default when none exists."""
        progress = await self._store.load_progress(user_id)
        return progress or Progress.new(user_id, self._curriculum.modules)

    async def update_progress(self, user_id: UUID, activity: ActivityUpdate) -> Progress:
        """Record a learner activity.

        Args:
            user_id: Learner
            activity: What the learner did

        Returns:
            The committed progress snapshot

        Raises:
            ActivityValidationError: If any field is invalid or the content
                or quiz belongs to another section
            SectionNotFoundError: If the module/section is not in the curriculum
            ContentNotFoundError: If the content id is unknown
            QuizNotFoundError: If the quiz id is unknown
            TransactionAbortedError: If the write failed and was rolled back
        """
        activity = validate_activity(activity)
        module_id, section_id = activity.module_id, activity.section_id

        if not self._curriculum.has_section(module_id, section_id):
            raise SectionNotFoundError(module_id, section_id)
        if activity.activity_type == ActivityType.QUIZ:
            target = await self._catalog.get_quiz(activity.quiz_id)
            if target is None:
                raise QuizNotFoundError(activity.quiz_id)
            field = "quiz_id"
        else:
            target = await self._catalog.get_content(activity.content_id)
            if target is None:
                raise ContentNotFoundError(activity.content_id)
            field = "content_id"
        if (target.module_id, target.section_id) != (module_id, section_id):
            raise ActivityValidationError([{
                "field": field,
                "message": f"Belongs to {target.module_id}/{target.section_id}, not {module_id}/{section_id}",
            }])

        earned: list[Achievement] = []
        try:
            async with self._store.transaction(user_id) as state:
                progress = state.progress or Progress.new(user_id, self._curriculum.modules)
                now = utc_now()
                progress.touch_section(module_id, section_id, now)

                if activity.activity_type == ActivityType.QUIZ:
                    self._register_quiz_activity(progress, activity)
                else:
                    self._record_content_activity(progress, activity, now)

                await refresh_section_completion(progress, self._catalog, module_id, section_id)
                earned = self._award_module_completion(progress, module_id, now)
                state.progress = recalculate(progress, now)
        except AthosError:
            raise
        except Exception as e:
            logger.error(f"Progress update failed for {user_id}: {e}")
            raise TransactionAbortedError("Progress update", str(e)) from e

        await self._refresh_learning_path(user_id, module_id, section_id)
        await self._analytics.track(user_id, AnalyticsEventType.PROGRESS_UPDATE, {
            "module_id": module_id,
            "section_id": section_id,
            "activity_type": activity.activity_type.value,
            "content_id": activity.content_id,
            "quiz_id": activity.quiz_id,
            "progress": activity.progress,
            "time_spent": activity.time_spent,
        })
        for achievement in earned:
            await self._analytics.track(user_id, AnalyticsEventType.ACHIEVEMENT_EARNED, {
                "achievement_id": achievement.id,
                "module_id": achievement.module_id,
            })
        return progress

    async def get_module_progress(self, user_id: UUID, module_id: str) -> ModuleProgressDetail:
        """Get one module's entry with its content and quiz records.

        Raises:
            SectionNotFoundError: If the module is not in the curriculum
        """
        if not self._curriculum.has_module(module_id):
            raise SectionNotFoundError(module_id)
        progress = await self.get_progress(user_id)
        module = progress.modules.get(module_id)
        if module is None:
            module = Progress.new(user_id, [module_id]).modules[module_id]
        return ModuleProgressDetail(
            module_id=module_id,
            module=module,
            content_progress=[cp for cp in progress.content_progress if cp.module_id == module_id],
            quiz_progress=[qp for qp in progress.quiz_progress if qp.module_id == module_id],
        )

    async def get_achievements(self, user_id: UUID) -> list[Achievement]:
        progress = await self.get_progress(user_id)
        return progress.achievements

    async def award_achievement(
        self,
        user_id: UUID,
        achievement: Achievement,
    ) -> tuple[Achievement, bool]:
        """Add an achievement unless one with the same id exists.

        Returns:
            The stored achievement and whether it was newly added
        """
        async with self._store.transaction(user_id) as state:
            progress = state.progress or Progress.new(user_id, self._curriculum.modules)
            existing = next((a for a in progress.achievements if a.id == achievement.id), None)
            if existing is not None:
                return existing, False
            progress.achievements.append(achievement)
            progress.last_updated = utc_now()
            state.progress = progress

        logger.info(f"Achievement {achievement.id} earned by {user_id}")
        await self._analytics.track(user_id, AnalyticsEventType.ACHIEVEMENT_EARNED, {
            "achievement_id": achievement.id,
            "module_id": achievement.module_id,
        })
        return achievement, True

    async def reset_progress(self, user_id: UUID) -> Progress:
        """Recreate progress and learning path as fresh defaults."""
        path = await self._learning_paths.new_path(user_id)
        progress = Progress.new(user_id, self._curriculum.modules)

        async with self._store.transaction(user_id) as state:
            state.progress = progress
            state.learning_path = path

        logger.info(f"Progress reset for {user_id}")
        await self._refresh_learning_path(user_id)
        await self._analytics.track(user_id, AnalyticsEventType.PROGRESS_RESET, {})
        return progress

    async def get_status(self, user_id: UUID) -> ProgressStatus:
        progress = await self.get_progress(user_id)
        return progress_status(progress, self._curriculum)

    async def get_overview(self, user_id: UUID) -> ProgressOverview:
        """Status plus the section after the learner's most recent one."""
        progress = await self.get_progress(user_id)
        status = progress_status(progress, self._curriculum)
        if status.current_module and status.current_section:
            next_section = self._curriculum.next_section(status.current_module, status.current_section)
        else:
            next_section = self._curriculum.first_section
        return ProgressOverview(
            status=status,
            next_section=next_section,
            achievements=progress.achievements,
        )

    async def _refresh_learning_path(
        self,
        user_id: UUID,
        module_id: str | None = None,
        section_id: str | None = None,
    ) -> None:
        """Regenerate the learning path; failures are logged, not raised."""
        try:
            await self._learning_paths.refresh(user_id, module_id, section_id)
        except Exception as e:
            logger.warning(
                f"Learning path refresh failed for {user_id}: {e}",
                extra={"user_id": str(user_id), "module_id": module_id, "section_id": section_id},
            )

    @staticmethod
    def _record_content_activity(progress: Progress, activity: ActivityUpdate, now: datetime) -> None:
        """Upsert the content entry.

        Progress only moves forward, completion is sticky and time
        accumulates across activities.
        """
        entry = progress.find_content(activity.content_id)
        if entry is None:
            entry = ContentProgress(
                content_id=activity.content_id,
                module_id=activity.module_id,
                section_id=activity.section_id,
            )
            progress.content_progress.append(entry)

        reported = CONTENT_COMPLETE_PROGRESS if activity.completed else (activity.progress or 0)
        entry.progress = max(entry.progress, reported)
        entry.completed = entry.completed or entry.progress >= CONTENT_COMPLETE_PROGRESS
        entry.time_spent += activity.time_spent
        entry.last_accessed = now

    @staticmethod
    def _register_quiz_activity(progress: Progress, activity: ActivityUpdate) -> None:
        """Make sure a quiz entry exists; scores only change on submission."""
        if progress.find_quiz(activity.quiz_id) is None:
            progress.quiz_progress.append(QuizProgress(
                quiz_id=activity.quiz_id,
                module_id=activity.module_id,
                section_id=activity.section_id,
            ))

    def _award_module_completion(self, progress: Progress, module_id: str, now: datetime) -> list[Achievement]:
        """Award the module badge once every curriculum section is at 100%."""
        achievement_id = f"complete-{module_id}"
        module = progress.modules.get(module_id)
        if module is None or progress.has_achievement(achievement_id):
            return []
        sections = self._curriculum.sections(module_id)
        if not sections or any(
            module.sections.get(section_id) is None or module.sections[section_id].completion < MAX_COMPLETION
            for section_id in sections
        ):
            return []
        achievement = Achievement(
            id=achievement_id,
            title=f"Completed {module_id}",
            description=f"Finished every section of {module_id}",
            module_id=module_id,
            earned_at=now,
        )
        progress.achievements.append(achievement)
        return [achievement]
