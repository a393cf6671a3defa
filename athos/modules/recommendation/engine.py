"""Recommendation engine.

Five heuristic passes run in fixed priority order over the catalog:

1. Unfinished content in the current section (priority 5)
2. The current section's quiz, if not passed yet (priority 4)
3. A preview of the next section (priority 3)
4. Content matching the learner's style from other modules (priority 2)
5. The most viewed content not already picked (priority 1)

Every pass applies the same base filter: published content, the learner's
difficulty, and their learning style unless it is "balanced". Results are
deduplicated keeping first occurrence, so the list reads in priority order.
"""

import logging
from uuid import UUID

from athos.modules.catalog.interface import ContentItem, ContentOrder, ContentQuery, ICatalog
from athos.modules.progress.interface import Progress
from athos.modules.recommendation.interface import RecommendationResult, SuggestionCandidate
from athos.shared.constants import (
    CURRENT_SECTION_SUGGESTIONS,
    LEARNING_STYLE_LIMIT,
    NEXT_SECTION_LIMIT,
    POPULAR_LIMIT,
    PRIORITY_CURRENT_SECTION,
    PRIORITY_LEARNING_STYLE,
    PRIORITY_NEXT_SECTION,
    PRIORITY_PENDING_QUIZ,
    PRIORITY_POPULAR,
    REASON_CURRENT_SECTION,
    REASON_LEARNING_STYLE,
    REASON_NEXT_SECTION,
    REASON_PENDING_QUIZ,
    REASON_POPULAR,
)
from athos.shared.curriculum import Curriculum
from athos.shared.models import Difficulty, LearningStyle

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """Builds ranked content recommendations for one learner."""

    def __init__(
        self,
        catalog: ICatalog,
        curriculum: Curriculum,
        max_recommendations: int = 10,
    ) -> None:
        self._catalog = catalog
        self._curriculum = curriculum
        self._max_recommendations = max_recommendations

    async def generate(
        self,
        user_id: UUID,
        progress: Progress | None,
        learning_style: LearningStyle,
        difficulty: Difficulty,
        current_module: str,
        current_section: str,
    ) -> RecommendationResult:
        """Run every pass and merge the results.

        Never raises: a failing catalog query yields an empty result so the
        caller's progress write is unaffected.

        Args:
            user_id: Learner, for logging only
            progress: Current progress, or None for a learner with no activity
            learning_style: Learner's preferred style
            difficulty: Learner's level
            current_module: Pointer module
            current_section: Pointer section

        Returns:
            Deduplicated content ids (at most ``max_recommendations``) and
            the reasoned suggestions in pass order
        """
        try:
            return await self._generate(
                progress or Progress(user_id=user_id),
                learning_style,
                difficulty,
                current_module,
                current_section,
            )
        except Exception as e:
            logger.error(
                f"Error generating recommendations for {user_id}: {e}",
                extra={"user_id": str(user_id), "module_id": current_module, "section_id": current_section},
            )
            return RecommendationResult.empty()

    async def _generate(
        self,
        progress: Progress,
        learning_style: LearningStyle,
        difficulty: Difficulty,
        current_module: str,
        current_section: str,
    ) -> RecommendationResult:
        style_filter = None if learning_style == LearningStyle.BALANCED else learning_style
        pool: list[str] = []
        suggestions: list[SuggestionCandidate] = []

        # 1. Current section continuation
        section_content = await self._catalog.find_content(ContentQuery(
            module_id=current_module,
            section_id=current_section,
            learning_style=style_filter,
            difficulty=difficulty,
            order_by=ContentOrder.ORDER,
        ))
        completed_ids = progress.completed_content_ids()
        incomplete = [item for item in section_content if item.id not in completed_ids]
        pool.extend(item.id for item in incomplete)
        suggestions.extend(
            SuggestionCandidate(item.id, REASON_CURRENT_SECTION, PRIORITY_CURRENT_SECTION)
            for item in incomplete[:CURRENT_SECTION_SUGGESTIONS]
        )

        # 2. Pending quiz, linked to the section's first content item
        quiz = await self._catalog.find_section_quiz(current_module, current_section)
        if quiz is not None:
            entry = progress.find_quiz(quiz.id)
            if not (entry and entry.completed) and section_content:
                suggestions.append(SuggestionCandidate(
                    section_content[0].id, REASON_PENDING_QUIZ, PRIORITY_PENDING_QUIZ,
                ))

        # 3. Next section preview
        next_ref = self._curriculum.next_section(current_module, current_section)
        if next_ref is not None:
            preview = await self._catalog.find_content(ContentQuery(
                module_id=next_ref.module_id,
                section_id=next_ref.section_id,
                learning_style=style_filter,
                difficulty=difficulty,
                order_by=ContentOrder.ORDER,
                limit=NEXT_SECTION_LIMIT,
            ))
            self._add_pass(
                pool, suggestions, preview,
                REASON_NEXT_SECTION.format(section_id=next_ref.section_id),
                PRIORITY_NEXT_SECTION,
            )

        # 4. Learning style affinity outside the current module
        if style_filter is not None:
            styled = await self._catalog.find_content(ContentQuery(
                learning_style=style_filter,
                difficulty=difficulty,
                exclude_module_id=current_module,
                order_by=ContentOrder.RECENT,
                limit=LEARNING_STYLE_LIMIT,
            ))
            self._add_pass(
                pool, suggestions, styled,
                REASON_LEARNING_STYLE.format(learning_style=style_filter.value),
                PRIORITY_LEARNING_STYLE,
            )

        # 5. Popularity fallback
        popular = await self._catalog.find_content(ContentQuery(
            learning_style=style_filter,
            difficulty=difficulty,
            exclude_ids=frozenset(pool),
            order_by=ContentOrder.VIEWS,
            limit=POPULAR_LIMIT,
        ))
        self._add_pass(pool, suggestions, popular, REASON_POPULAR, PRIORITY_POPULAR)

        recommended = list(dict.fromkeys(pool))[: self._max_recommendations]
        logger.debug(
            f"Generated {len(recommended)} recommendations and {len(suggestions)} suggestions",
            extra={"module_id": current_module, "section_id": current_section},
        )
        return RecommendationResult(recommended_content=recommended, adaptive_suggestions=suggestions)

    @staticmethod
    def _add_pass(
        pool: list[str],
        suggestions: list[SuggestionCandidate],
        items: list[ContentItem],
        reason: str,
        priority: int,
    ) -> None:
        """Add a pass's items to the pool and its first item as a suggestion."""
        if not items:
            return
        pool.extend(item.id for item in items)
        suggestions.append(SuggestionCandidate(items[0].id, reason, priority))
