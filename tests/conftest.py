"""Test configuration and fixtures."""

import os

# In-process backends unless a test opts in; set before settings are cached
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("FF_USE_DATABASE_PERSISTENCE", "false")
os.environ.setdefault("FF_ENABLE_REDIS_ANALYTICS", "false")

from datetime import datetime, timezone
from uuid import UUID

import pytest

from athos.modules.catalog.interface import ContentItem, Question, Quiz
from athos.modules.catalog.service import InMemoryCatalog
from athos.modules.learners.service import InMemoryLearnerDirectory
from athos.shared.config import Settings
from athos.shared.curriculum import Curriculum, get_curriculum
from athos.shared.feature_flags import FeatureFlagManager, FeatureFlags
from athos.shared.models import ContentType, Difficulty, LearningStyle, QuestionType
from athos.shared.service_registry import ServiceContainer, build_services


def _at(day: int) -> datetime:
    return datetime(2024, 1, day, tzinfo=timezone.utc)


def make_content() -> list[ContentItem]:
    """A small catalog spanning two modules.

    module1/origins: o1 (textual), o2 (visual), o3 (visual+interactive), an
    unpublished draft; module1/monastic-republic: r1, r2; module1/through-ages:
    one advanced item; module2: a1, a2 (visual, most viewed).
    """
    return [
        ContentItem("o1", "module1", "origins", "The Holy Mountain", order=1,
                    learning_styles=frozenset({LearningStyle.TEXTUAL}), views=5, created_at=_at(1)),
        ContentItem("o2", "module1", "origins", "Mapping the Peninsula", type=ContentType.INTERACTIVE, order=2,
                    learning_styles=frozenset({LearningStyle.VISUAL}), views=50, created_at=_at(2)),
        ContentItem("o3", "module1", "origins", "Founding Legends", type=ContentType.VIDEO, order=3,
                    learning_styles=frozenset({LearningStyle.VISUAL, LearningStyle.INTERACTIVE}),
                    views=1, created_at=_at(3)),
        ContentItem("draft", "module1", "origins", "Unfinished", order=4,
                    learning_styles=frozenset({LearningStyle.VISUAL}), views=999, is_published=False,
                    created_at=_at(4)),
        ContentItem("r1", "module1", "monastic-republic", "The Typikon", order=1,
                    learning_styles=frozenset({LearningStyle.TEXTUAL}), views=10, created_at=_at(5)),
        ContentItem("r2", "module1", "monastic-republic", "The Holy Community", order=2,
                    learning_styles=frozenset({LearningStyle.VISUAL}), views=3, created_at=_at(6)),
        ContentItem("adv1", "module1", "through-ages", "Under Ottoman Rule", order=1,
                    difficulty=Difficulty.ADVANCED, learning_styles=frozenset({LearningStyle.TEXTUAL}),
                    created_at=_at(7)),
        ContentItem("a1", "module2", "overview", "The Twenty Monasteries", order=1,
                    learning_styles=frozenset({LearningStyle.VISUAL}), views=100, created_at=_at(8)),
        ContentItem("a2", "module2", "architecture", "The Katholikon", type=ContentType.MODEL_3D, order=1,
                    learning_styles=frozenset({LearningStyle.VISUAL}), views=80, created_at=_at(9)),
    ]


def make_origins_quiz() -> Quiz:
    """Five questions worth 10, 10, 10, 15 and 20 points (65 total)."""
    return Quiz(
        id="quiz-origins",
        module_id="module1",
        section_id="origins",
        title="Origins of Athos",
        questions=[
            Question("q1", QuestionType.MULTIPLE_CHOICE, "Which sea?", "Aegean",
                     options=["Aegean", "Ionian"], points=10),
            Question("q2", QuestionType.TRUE_FALSE, "Easternmost leg of Chalkidiki?", "true", points=10),
            Question("q3", QuestionType.MULTIPLE_CHOICE, "Oldest monastery?", "Great Lavra",
                     options=["Great Lavra", "Vatopedi"], points=10),
            Question("q4", QuestionType.MULTIPLE_SELECT, "Athonite monasteries?",
                     frozenset({"Great Lavra", "Vatopedi"}),
                     options=["Great Lavra", "Vatopedi", "Meteora"], points=15),
            Question("q5", QuestionType.MULTIPLE_CHOICE, "Seat of the Holy Community?", "Karyes",
                     options=["Karyes", "Dafni"], points=20, explanation="Karyes is the capital."),
        ],
    )


ALL_CORRECT = {
    "q1": "Aegean",
    "q2": True,
    "q3": "Great Lavra",
    "q4": ["Vatopedi", "Great Lavra"],
    "q5": "Karyes",
}


def make_republic_quiz() -> Quiz:
    return Quiz(
        id="quiz-republic",
        module_id="module1",
        section_id="monastic-republic",
        title="The Monastic Republic",
        questions=[Question("q1", QuestionType.MULTIPLE_CHOICE, "Where?", "Karyes", points=10)],
    )


@pytest.fixture
def user_id() -> UUID:
    return UUID("12345678-1234-5678-1234-567812345678")


@pytest.fixture
def curriculum() -> Curriculum:
    return get_curriculum()


@pytest.fixture
def origins_quiz() -> Quiz:
    return make_origins_quiz()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog(content=make_content(), quizzes=[make_origins_quiz(), make_republic_quiz()])


@pytest.fixture
def flags() -> FeatureFlagManager:
    """Flags forced to in-process backends regardless of the environment."""
    manager = FeatureFlagManager()
    manager.disable(FeatureFlags.USE_DATABASE_PERSISTENCE)
    manager.disable(FeatureFlags.ENABLE_REDIS_ANALYTICS)
    return manager


@pytest.fixture
def settings() -> Settings:
    return Settings(analytics_batch_size=100, catalog_path=None)


@pytest.fixture
def learners() -> InMemoryLearnerDirectory:
    return InMemoryLearnerDirectory()


@pytest.fixture
def services(
    settings: Settings,
    flags: FeatureFlagManager,
    catalog: InMemoryCatalog,
    learners: InMemoryLearnerDirectory,
) -> ServiceContainer:
    return build_services(settings=settings, flags=flags, catalog=catalog, learners=learners)


@pytest.fixture
def all_correct_answers() -> dict:
    return dict(ALL_CORRECT)


@pytest.fixture
def origins_content() -> list[ContentItem]:
    """Published content of module1/origins in lesson order."""
    return [item for item in make_content() if item.section_id == "origins" and item.is_published]
