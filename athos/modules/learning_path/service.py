"""Learning Path Service - Keeps each learner's pointer and recommendations current.

This service provides:
- Lazy creation of a default path from the learner's stored preferences
- Regeneration of cached recommendations after every progress change
- Pointer and preference updates (written through to the learner directory)
- Suggestion click/complete tracking and on-demand pruning
- Section guidance (next steps, evaluation, style weights, milestones)
"""

import logging
from uuid import UUID

from athos.modules.analytics.service import AnalyticsService
from athos.modules.catalog.interface import ContentItem, ICatalog
from athos.modules.learners.interface import ILearnerDirectory
from athos.modules.learning_path.interface import AdaptiveSuggestion, LearningPath
from athos.modules.progress.interface import Progress
from athos.modules.progress.store import ILearnerStateStore
from athos.modules.recommendation.advisor import LearningAdvisor
from athos.modules.recommendation.engine import RecommendationEngine
from athos.modules.recommendation.interface import (
    LearningEvaluation,
    Milestone,
    NextSteps,
    ResolvedRecommendations,
    StyleWeights,
    SuggestionCandidate,
)
from athos.shared.constants import MAX_COMPLETION
from athos.shared.curriculum import Curriculum, SectionRef
from athos.shared.datetime_utils import is_older_than, utc_now
from athos.shared.exceptions import (
    InvalidPreferenceError,
    LearningPathNotFoundError,
    SectionNotFoundError,
    SuggestionNotFoundError,
)
from athos.shared.models import AnalyticsEventType, Difficulty, LearningStyle

logger = logging.getLogger(__name__)


def parse_learning_style(value: LearningStyle | str | None) -> LearningStyle | None:
    """Validate a learning style coming from a client.

    Raises:
        InvalidPreferenceError: If the value is not a known style
    """
    if value is None or isinstance(value, LearningStyle):
        return value
    try:
        return LearningStyle(value)
    except ValueError:
        raise InvalidPreferenceError("learning_style", value, [s.value for s in LearningStyle])


def parse_difficulty(value: Difficulty | str | None) -> Difficulty | None:
    """Validate a difficulty level coming from a client.

    Raises:
        InvalidPreferenceError: If the value is not a known level
    """
    if value is None or isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(value)
    except ValueError:
        raise InvalidPreferenceError("difficulty", value, [d.value for d in Difficulty])


def merge_suggestions(
    existing: list[AdaptiveSuggestion],
    candidates: list[SuggestionCandidate],
) -> list[AdaptiveSuggestion]:
    """Combine a fresh engine run with the suggestions already shown.

    A candidate matching an existing suggestion (same content and reason)
    keeps the existing entry so its id and timestamps survive. Existing
    suggestions the learner clicked or completed are kept even when the
    engine no longer produces them. Everything else is replaced.
    """
    by_key = {(s.content_id, s.reason): s for s in existing}
    merged: list[AdaptiveSuggestion] = []
    seen: set[str] = set()

    for candidate in candidates:
        suggestion = by_key.get((candidate.content_id, candidate.reason))
        if suggestion is None:
            suggestion = AdaptiveSuggestion(
                content_id=candidate.content_id,
                reason=candidate.reason,
                priority=candidate.priority,
            )
        else:
            suggestion.priority = candidate.priority
        if suggestion.id not in seen:
            merged.append(suggestion)
            seen.add(suggestion.id)

    merged.extend(s for s in existing if s.interacted and s.id not in seen)
    return merged


class LearningPathTracker:
    """Service for maintaining learning paths.

    Paths are read and written through the learner state store, so a
    refresh sees the progress committed by the write that triggered it.
    """

    def __init__(
        self,
        store: ILearnerStateStore,
        catalog: ICatalog,
        engine: RecommendationEngine,
        advisor: LearningAdvisor,
        learners: ILearnerDirectory,
        curriculum: Curriculum,
        analytics: AnalyticsService,
        suggestion_retention_days: int = 30,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._engine = engine
        self._advisor = advisor
        self._learners = learners
        self._curriculum = curriculum
        self._analytics = analytics
        self._retention_days = suggestion_retention_days

    async def new_path(self, user_id: UUID) -> LearningPath:
        """Build an unsaved default path from the learner's stored preferences."""
        preferences = await self._learners.get_preferences(user_id)
        start = self._curriculum.first_section
        path = LearningPath(
            user_id=user_id,
            current_module=start.module_id,
            current_section=start.section_id,
        )
        if preferences is not None:
            path.learning_style = preferences.learning_style
            path.difficulty = preferences.difficulty
        return path

    async def get_learning_path(self, user_id: UUID) -> LearningPath:
        """Get the learner's path, creating and persisting a default one."""
        path = await self._store.load_learning_path(user_id)
        if path is not None:
            return path
        logger.info(f"Creating learning path for {user_id}")
        return await self.refresh(user_id)

    async def refresh(
        self,
        user_id: UUID,
        module_id: str | None = None,
        section_id: str | None = None,
    ) -> LearningPath:
        """Move the pointer and regenerate recommendations from fresh progress.

        Args:
            user_id: Learner
            module_id: New current module, or keep the stored one
            section_id: New current section, or keep the stored one

        Returns:
            The persisted path
        """
        return await self._regenerate(user_id, module_id, section_id)

    async def update_path(
        self,
        user_id: UUID,
        current_module: str | None = None,
        current_section: str | None = None,
        learning_style: LearningStyle | str | None = None,
        difficulty: Difficulty | str | None = None,
    ) -> LearningPath:
        """Change the pointer and/or preferences, then regenerate.

        Raises:
            SectionNotFoundError: If the new pointer is not in the curriculum
            InvalidPreferenceError: If a preference value is unknown
        """
        style = parse_learning_style(learning_style)
        level = parse_difficulty(difficulty)

        if current_module is not None or current_section is not None:
            path = await self._store.load_learning_path(user_id)
            module_id = current_module or (path.current_module if path else self._curriculum.first_section.module_id)
            if current_section is None:
                sections = self._curriculum.sections(module_id)
                if not sections:
                    raise SectionNotFoundError(module_id)
                section_id = sections[0]
            else:
                section_id = current_section
            if not self._curriculum.has_section(module_id, section_id):
                raise SectionNotFoundError(module_id, section_id)
        else:
            module_id = section_id = None

        if style is not None or level is not None:
            await self._learners.update_preferences(user_id, learning_style=style, difficulty=level)

        return await self._regenerate(
            user_id, module_id, section_id, learning_style=style, difficulty=level,
        )

    async def update_preferences(
        self,
        user_id: UUID,
        learning_style: LearningStyle | str | None = None,
        difficulty: Difficulty | str | None = None,
    ) -> LearningPath:
        """Change learning style and/or difficulty and regenerate the path."""
        return await self.update_path(user_id, learning_style=learning_style, difficulty=difficulty)

    async def get_recommendations(
        self,
        user_id: UUID,
        module_id: str | None = None,
        section_id: str | None = None,
        learning_style: LearningStyle | str | None = None,
        difficulty: Difficulty | str | None = None,
    ) -> ResolvedRecommendations:
        """Run the engine with optional overrides and resolve content details.

        Nothing is persisted; the stored path is only read for defaults.
        """
        style = parse_learning_style(learning_style)
        level = parse_difficulty(difficulty)
        if module_id is not None and section_id is not None:
            if not self._curriculum.has_section(module_id, section_id):
                raise SectionNotFoundError(module_id, section_id)

        path = await self._store.load_learning_path(user_id) or await self.new_path(user_id)
        progress = await self._store.load_progress(user_id)

        result = await self._engine.generate(
            user_id,
            progress,
            style or path.learning_style,
            level or path.difficulty,
            module_id or path.current_module,
            section_id or path.current_section,
        )

        content_by_id: dict[str, ContentItem] = {}
        for content_id in [*result.recommended_content, *(s.content_id for s in result.adaptive_suggestions)]:
            if content_id in content_by_id:
                continue
            item = await self._catalog.get_content(content_id)
            if item is not None:
                content_by_id[content_id] = item

        return ResolvedRecommendations(
            content=[content_by_id[cid] for cid in result.recommended_content if cid in content_by_id],
            suggestions=result.adaptive_suggestions,
            content_by_id=content_by_id,
        )

    async def mark_suggestion_clicked(self, user_id: UUID, suggestion_id: str) -> AdaptiveSuggestion:
        """Record that the learner opened a suggestion.

        Raises:
            LearningPathNotFoundError: If the learner has no path yet
            SuggestionNotFoundError: If the suggestion id is unknown
        """
        async with self._store.transaction(user_id) as state:
            suggestion = self._find_suggestion(state.learning_path, user_id, suggestion_id)
            if suggestion.clicked_at is None:
                suggestion.clicked_at = utc_now()
            state.learning_path.last_updated = utc_now()

        await self._analytics.track(user_id, AnalyticsEventType.RECOMMENDATION_CLICK, {
            "suggestion_id": suggestion.id,
            "content_id": suggestion.content_id,
            "reason": suggestion.reason,
        })
        return suggestion

    async def mark_suggestion_completed(self, user_id: UUID, suggestion_id: str) -> AdaptiveSuggestion:
        """Record that the learner finished a suggestion."""
        async with self._store.transaction(user_id) as state:
            suggestion = self._find_suggestion(state.learning_path, user_id, suggestion_id)
            suggestion.completed = True
            state.learning_path.last_updated = utc_now()

        await self._analytics.track(user_id, AnalyticsEventType.SUGGESTION_COMPLETE, {
            "suggestion_id": suggestion.id,
            "content_id": suggestion.content_id,
        })
        return suggestion

    async def prune_suggestions(self, user_id: UUID, max_days: int | None = None) -> int:
        """Remove old suggestions the learner never clicked or completed.

        Args:
            user_id: Learner
            max_days: Age limit, defaults to the configured retention

        Returns:
            Number of suggestions removed
        """
        days = self._retention_days if max_days is None else max_days
        now = utc_now()

        async with self._store.transaction(user_id) as state:
            path = state.learning_path
            if path is None:
                return 0
            kept = [
                s for s in path.adaptive_suggestions
                if s.interacted or not is_older_than(s.suggested_at, days, now=now)
            ]
            removed = len(path.adaptive_suggestions) - len(kept)
            if removed:
                path.adaptive_suggestions = kept
                path.last_updated = now

        if removed:
            logger.info(f"Pruned {removed} suggestions older than {days} days for {user_id}")
        return removed

    async def next_steps(
        self,
        user_id: UUID,
        module_id: str | None = None,
        section_id: str | None = None,
    ) -> NextSteps:
        """What to do in a section, defaulting to the learner's pointer."""
        module_id, section_id = await self._resolve_section(user_id, module_id, section_id)
        progress = await self._load_progress(user_id)
        return await self._advisor.determine_next_steps(progress, module_id, section_id)

    async def evaluate(
        self,
        user_id: UUID,
        module_id: str | None = None,
        section_id: str | None = None,
    ) -> LearningEvaluation:
        """Difficulty advice for a section, defaulting to the learner's pointer."""
        module_id, section_id = await self._resolve_section(user_id, module_id, section_id)
        progress = await self._store.load_progress(user_id)
        return await self._advisor.evaluate_learning_progress(progress, module_id, section_id)

    async def style_weights(self, user_id: UUID) -> StyleWeights:
        return await self._advisor.learning_style_weights(await self._store.load_progress(user_id))

    async def milestones(self, user_id: UUID) -> list[Milestone]:
        return await self._advisor.milestones(await self._load_progress(user_id))

    async def _regenerate(
        self,
        user_id: UUID,
        module_id: str | None,
        section_id: str | None,
        learning_style: LearningStyle | None = None,
        difficulty: Difficulty | None = None,
    ) -> LearningPath:
        default_path = await self.new_path(user_id)

        async with self._store.transaction(user_id) as state:
            path = state.learning_path or default_path
            if module_id is not None:
                path.current_module = module_id
            if section_id is not None:
                path.current_section = section_id
            if learning_style is not None:
                path.learning_style = learning_style
            if difficulty is not None:
                path.difficulty = difficulty

            result = await self._engine.generate(
                user_id,
                state.progress,
                path.learning_style,
                path.difficulty,
                path.current_module,
                path.current_section,
            )
            now = utc_now()
            path.recommended_content = result.recommended_content
            path.adaptive_suggestions = merge_suggestions(path.adaptive_suggestions, result.adaptive_suggestions)
            path.completed_sections, path.completed_modules = self._completed(state.progress)
            path.next_milestones = await self._advisor.milestones(state.progress)
            path.last_generated = now
            path.last_updated = now
            state.learning_path = path

        await self._analytics.track(user_id, AnalyticsEventType.LEARNING_PATH_UPDATE, {
            "module_id": path.current_module,
            "section_id": path.current_section,
            "recommendations": len(path.recommended_content),
            "suggestions": len(path.adaptive_suggestions),
        })
        return path

    def _completed(self, progress: Progress | None) -> tuple[list[SectionRef], list[str]]:
        """Finished sections and modules, in curriculum order."""
        if progress is None:
            return [], []
        sections: list[SectionRef] = []
        for ref in self._curriculum.all_sections():
            module = progress.modules.get(ref.module_id)
            section = module.sections.get(ref.section_id) if module else None
            if section is not None and section.completion >= MAX_COMPLETION:
                sections.append(ref)
        modules = [
            module_id for module_id in self._curriculum.modules
            if module_id in progress.modules and progress.modules[module_id].completion >= MAX_COMPLETION
        ]
        return sections, modules

    async def _resolve_section(
        self,
        user_id: UUID,
        module_id: str | None,
        section_id: str | None,
    ) -> tuple[str, str]:
        if module_id is None or section_id is None:
            path = await self._store.load_learning_path(user_id) or await self.new_path(user_id)
            module_id = module_id or path.current_module
            section_id = section_id or path.current_section
        if not self._curriculum.has_section(module_id, section_id):
            raise SectionNotFoundError(module_id, section_id)
        return module_id, section_id

    async def _load_progress(self, user_id: UUID) -> Progress:
        progress = await self._store.load_progress(user_id)
        return progress or Progress.new(user_id, self._curriculum.modules)

    @staticmethod
    def _find_suggestion(
        path: LearningPath | None,
        user_id: UUID,
        suggestion_id: str,
    ) -> AdaptiveSuggestion:
        if path is None:
            raise LearningPathNotFoundError(user_id)
        suggestion = path.find_suggestion(suggestion_id)
        if suggestion is None:
            raise SuggestionNotFoundError(suggestion_id)
        return suggestion
