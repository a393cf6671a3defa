"""Section-level guidance built on progress and the catalog.

Next steps, performance evaluation, learning style weights and milestones.
Like the engine these are advisory: catalog failures are logged and a
neutral answer is returned.
"""

import logging

from athos.modules.catalog.interface import ContentOrder, ContentQuery, ICatalog
from athos.modules.progress.interface import Progress
from athos.modules.recommendation.interface import (
    LearningEvaluation,
    Milestone,
    NextSteps,
    StyleWeights,
    SuggestionCandidate,
)
from athos.shared.constants import (
    ADVANCED_CONTENT_LIMIT,
    INTERMEDIATE_SCORE_THRESHOLD,
    MAX_COMPLETION,
    PRIORITY_CURRENT_SECTION,
    PRIORITY_NEXT_SECTION,
    PRIORITY_PENDING_QUIZ,
    REASON_ADVANCED,
    REASON_REMEDIAL,
    REMEDIAL_CONTENT_LIMIT,
    STYLE_COMPLETION_SHARE,
    STYLE_TIME_SHARE,
)
from athos.shared.curriculum import Curriculum
from athos.shared.models import CompletionStatus, Difficulty, LearningStyle, MilestoneType, QuizStatus

logger = logging.getLogger(__name__)

UNIFORM_STYLE_WEIGHT = 1 / len(LearningStyle)


class LearningAdvisor:
    """Answers "where am I and what next" questions for a learner."""

    def __init__(
        self,
        catalog: ICatalog,
        curriculum: Curriculum,
        quiz_score_threshold: int = 70,
        low_performance_threshold: int = 40,
    ) -> None:
        self._catalog = catalog
        self._curriculum = curriculum
        self._quiz_score_threshold = quiz_score_threshold
        self._low_performance_threshold = low_performance_threshold

    async def determine_next_steps(
        self,
        progress: Progress,
        module_id: str,
        section_id: str,
    ) -> NextSteps:
        """Summarize a section and point to what follows it.

        The next section is only filled in once the section is complete,
        and is resolved through the shared curriculum table.
        """
        module = progress.modules.get(module_id)
        section = module.sections.get(section_id) if module else None
        section_completion = section.completion if section else 0

        if section_completion >= MAX_COMPLETION:
            status = CompletionStatus.COMPLETED
        elif section_completion > 0:
            status = CompletionStatus.IN_PROGRESS
        else:
            status = CompletionStatus.NOT_STARTED

        steps = NextSteps(
            module_id=module_id,
            section_id=section_id,
            completion_status=status,
            module_completion=module.completion if module else 0,
            section_completion=section_completion,
        )

        try:
            completed_ids = progress.completed_content_ids()
            content = await self._catalog.find_content(ContentQuery(
                module_id=module_id,
                section_id=section_id,
                order_by=ContentOrder.ORDER,
            ))
            steps.incomplete_content = [item.id for item in content if item.id not in completed_ids]

            quiz = await self._catalog.find_section_quiz(module_id, section_id)
        except Exception as e:
            logger.error(f"Error determining next steps for {module_id}/{section_id}: {e}")
            return steps

        if quiz is not None:
            entry = progress.find_quiz(quiz.id)
            steps.quiz_id = quiz.id
            steps.quiz_title = quiz.title
            steps.quiz_status = QuizStatus.NOT_STARTED
            if entry is not None:
                steps.quiz_attempts = entry.attempts
                steps.quiz_score = entry.score
                if entry.completed:
                    steps.quiz_status = QuizStatus.COMPLETED
                elif entry.attempts > 0:
                    steps.quiz_status = QuizStatus.ATTEMPTED

        if status == CompletionStatus.COMPLETED:
            steps.next_section = self._curriculum.next_section(module_id, section_id)
        return steps

    async def evaluate_learning_progress(
        self,
        progress: Progress | None,
        module_id: str,
        section_id: str,
    ) -> LearningEvaluation:
        """Recommend a difficulty from the section's quiz performance.

        Low scorers get unseen beginner material from the section; high
        scorers get advanced material from the module.
        """
        evaluation = LearningEvaluation(
            module_id=module_id,
            section_id=section_id,
            average_score=None,
            recommended_difficulty=Difficulty.BEGINNER,
        )
        if progress is None:
            return evaluation

        try:
            quiz = await self._catalog.find_section_quiz(module_id, section_id)
            entry = progress.find_quiz(quiz.id) if quiz else None
            if entry is None or entry.attempts == 0:
                return evaluation

            score = entry.score
            evaluation.average_score = score
            if score >= self._quiz_score_threshold:
                evaluation.recommended_difficulty = Difficulty.ADVANCED
                advanced = await self._catalog.find_content(ContentQuery(
                    module_id=module_id,
                    difficulty=Difficulty.ADVANCED,
                    order_by=ContentOrder.ORDER,
                    limit=ADVANCED_CONTENT_LIMIT,
                ))
                evaluation.suggestions = [
                    SuggestionCandidate(item.id, REASON_ADVANCED, PRIORITY_PENDING_QUIZ)
                    for item in advanced
                ]
            elif score >= INTERMEDIATE_SCORE_THRESHOLD:
                evaluation.recommended_difficulty = Difficulty.INTERMEDIATE
            elif score < self._low_performance_threshold:
                viewed = frozenset(
                    cp.content_id for cp in progress.content_progress
                    if cp.module_id == module_id and cp.section_id == section_id
                )
                remedial = await self._catalog.find_content(ContentQuery(
                    module_id=module_id,
                    section_id=section_id,
                    difficulty=Difficulty.BEGINNER,
                    exclude_ids=viewed,
                    order_by=ContentOrder.ORDER,
                    limit=REMEDIAL_CONTENT_LIMIT,
                ))
                evaluation.suggestions = [
                    SuggestionCandidate(item.id, REASON_REMEDIAL, PRIORITY_CURRENT_SECTION)
                    for item in remedial
                ]
        except Exception as e:
            logger.error(f"Error evaluating learning progress for {module_id}/{section_id}: {e}")
            evaluation.suggestions = []
        return evaluation

    async def learning_style_weights(self, progress: Progress | None) -> StyleWeights:
        """Estimate style affinity from completed content and time spent.

        Each style's weight is 70% its share of completed items plus 30%
        its share of time. Items without styles count as balanced. With no
        completed content every style weighs the same.
        """
        uniform = StyleWeights({style: UNIFORM_STYLE_WEIGHT for style in LearningStyle})
        if progress is None or not progress.content_progress:
            return uniform

        counts = {style: 0 for style in LearningStyle}
        time_spent = {style: 0 for style in LearningStyle}
        try:
            for entry in progress.content_progress:
                item = await self._catalog.get_content(entry.content_id)
                if item is None:
                    continue
                for style in item.learning_styles or {LearningStyle.BALANCED}:
                    if entry.completed:
                        counts[style] += 1
                    time_spent[style] += entry.time_spent
        except Exception as e:
            logger.error(f"Error calculating learning style weights: {e}")
            return uniform

        total_completed = sum(counts.values())
        if total_completed == 0:
            return uniform
        total_time = sum(time_spent.values())

        return StyleWeights({
            style: STYLE_COMPLETION_SHARE * counts[style] / total_completed
            + (STYLE_TIME_SHARE * time_spent[style] / total_time if total_time else 0.0)
            for style in LearningStyle
        })

    async def milestones(self, progress: Progress | None) -> list[Milestone]:
        """Next goal per curriculum module.

        Untouched modules get a "start" milestone on their first lesson.
        Modules in progress get the next lesson and, if unpassed, the quiz
        of their first incomplete section. Finished modules get nothing.
        """
        if progress is None:
            return []

        milestones: list[Milestone] = []
        completed_ids = frozenset(progress.completed_content_ids())
        try:
            for module_id in self._curriculum.modules:
                sections = self._curriculum.sections(module_id)
                if not sections:
                    continue
                module = progress.modules.get(module_id)
                module_completion = module.completion if module else 0

                if module_completion == 0:
                    first = await self._catalog.find_content(ContentQuery(
                        module_id=module_id,
                        section_id=sections[0],
                        order_by=ContentOrder.ORDER,
                        limit=1,
                    ))
                    if first:
                        milestones.append(Milestone(
                            type=MilestoneType.START_MODULE,
                            module_id=module_id,
                            section_id=sections[0],
                            item_id=first[0].id,
                            title=f"Start {module_id}: {first[0].title}",
                            priority=PRIORITY_CURRENT_SECTION,
                        ))
                    continue

                if module_completion >= MAX_COMPLETION:
                    continue

                for section_id in sections:
                    section = module.sections.get(section_id) if module else None
                    if section is not None and section.completion >= MAX_COMPLETION:
                        continue

                    next_content = await self._catalog.find_content(ContentQuery(
                        module_id=module_id,
                        section_id=section_id,
                        exclude_ids=completed_ids,
                        order_by=ContentOrder.ORDER,
                        limit=1,
                    ))
                    if next_content:
                        milestones.append(Milestone(
                            type=MilestoneType.CONTINUE_SECTION,
                            module_id=module_id,
                            section_id=section_id,
                            item_id=next_content[0].id,
                            title=f"Continue {section_id}: {next_content[0].title}",
                            priority=PRIORITY_PENDING_QUIZ,
                        ))

                    quiz = await self._catalog.find_section_quiz(module_id, section_id)
                    if quiz is not None:
                        entry = progress.find_quiz(quiz.id)
                        if not (entry and entry.completed):
                            milestones.append(Milestone(
                                type=MilestoneType.COMPLETE_QUIZ,
                                module_id=module_id,
                                section_id=section_id,
                                item_id=quiz.id,
                                title=f"Complete quiz: {quiz.title}",
                                priority=PRIORITY_NEXT_SECTION,
                            ))
                    # Only the first incomplete section of a module
                    break
        except Exception as e:
            logger.error(f"Error building milestones: {e}")
            return []
        return milestones
