"""Service construction for the API and CLI.

This module wires every service once, choosing implementations from
feature flags:

- FF_USE_DATABASE_PERSISTENCE=true: PostgreSQL store, catalog and learner
  directory; otherwise in-process ones
- FF_ENABLE_REDIS_ANALYTICS=true: analytics go to a Redis list; otherwise
  they are kept in process

Usage:
    from athos.shared.service_registry import build_services

    services = build_services()
    progress = await services.progress.get_progress(user_id)
"""

import logging
from dataclasses import dataclass

from athos.modules.analytics.interface import IEventSink
from athos.modules.analytics.service import AnalyticsService
from athos.modules.analytics.sinks import InMemoryEventSink, RedisEventSink
from athos.modules.catalog.interface import ICatalog
from athos.modules.catalog.service import InMemoryCatalog, load_catalog_document
from athos.modules.learners.interface import ILearnerDirectory
from athos.modules.learners.service import InMemoryLearnerDirectory
from athos.modules.learning_path.service import LearningPathTracker
from athos.modules.progress.service import ProgressService
from athos.modules.progress.store import ILearnerStateStore, InMemoryLearnerStateStore
from athos.modules.quiz.service import QuizService
from athos.modules.recommendation.advisor import LearningAdvisor
from athos.modules.recommendation.engine import RecommendationEngine
from athos.shared.config import Settings, get_settings
from athos.shared.curriculum import Curriculum, get_curriculum
from athos.shared.feature_flags import FeatureFlagManager, FeatureFlags, get_feature_flags

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Every service the application exposes, sharing one store and catalog."""

    settings: Settings
    curriculum: Curriculum
    catalog: ICatalog
    store: ILearnerStateStore
    learners: ILearnerDirectory
    analytics: AnalyticsService
    engine: RecommendationEngine
    advisor: LearningAdvisor
    learning_paths: LearningPathTracker
    progress: ProgressService
    quizzes: QuizService

    @property
    def uses_database(self) -> bool:
        return not isinstance(self.store, InMemoryLearnerStateStore)

    @property
    def uses_redis(self) -> bool:
        return isinstance(self.analytics.sink, RedisEventSink)


def _create_persistence(
    flags: FeatureFlagManager,
    settings: Settings,
) -> tuple[ILearnerStateStore, ICatalog, ILearnerDirectory]:
    """Create store, catalog and learner directory based on feature flags."""
    if flags.is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE):
        from athos.modules.catalog.db_service import DatabaseCatalog
        from athos.modules.learners.db_service import DatabaseLearnerDirectory
        from athos.modules.progress.db_store import DatabaseLearnerStateStore

        logger.info("Creating database-backed store, catalog and learner directory")
        return DatabaseLearnerStateStore(), DatabaseCatalog(), DatabaseLearnerDirectory()

    logger.info("Creating in-memory store, catalog and learner directory")
    catalog = InMemoryCatalog()
    if settings.catalog_path:
        content, quizzes = load_catalog_document(settings.catalog_path)
        catalog = InMemoryCatalog(content=content, quizzes=quizzes)
        logger.info(f"Loaded {len(content)} content items and {len(quizzes)} quizzes from {settings.catalog_path}")
    return InMemoryLearnerStateStore(), catalog, InMemoryLearnerDirectory()


def _create_event_sink(flags: FeatureFlagManager, settings: Settings) -> IEventSink:
    """Create the analytics sink based on feature flags."""
    if flags.is_enabled(FeatureFlags.ENABLE_REDIS_ANALYTICS):
        logger.info(f"Creating Redis analytics sink on {settings.analytics_queue_key}")
        return RedisEventSink(settings.analytics_queue_key)
    logger.info("Creating in-memory analytics sink")
    return InMemoryEventSink()


def build_services(
    settings: Settings | None = None,
    flags: FeatureFlagManager | None = None,
    catalog: ICatalog | None = None,
    learners: ILearnerDirectory | None = None,
) -> ServiceContainer:
    """Wire all services.

    Args:
        settings: Configuration, defaults to the cached settings
        flags: Feature flags, defaults to the process-wide manager
        catalog: Use this catalog instead of the flag-selected one
        learners: Use this learner directory instead of the flag-selected one

    Returns:
        A container holding one instance of each service
    """
    settings = settings or get_settings()
    flags = flags or get_feature_flags()
    curriculum = get_curriculum()

    store, default_catalog, default_learners = _create_persistence(flags, settings)
    catalog = catalog or default_catalog
    learners = learners or default_learners
    analytics = AnalyticsService(_create_event_sink(flags, settings), batch_size=settings.analytics_batch_size)

    engine = RecommendationEngine(catalog, curriculum, max_recommendations=settings.max_recommendations)
    advisor = LearningAdvisor(
        catalog,
        curriculum,
        quiz_score_threshold=settings.quiz_score_threshold,
        low_performance_threshold=settings.low_performance_threshold,
    )
    learning_paths = LearningPathTracker(
        store=store,
        catalog=catalog,
        engine=engine,
        advisor=advisor,
        learners=learners,
        curriculum=curriculum,
        analytics=analytics,
        suggestion_retention_days=settings.suggestion_retention_days,
    )

    return ServiceContainer(
        settings=settings,
        curriculum=curriculum,
        catalog=catalog,
        store=store,
        learners=learners,
        analytics=analytics,
        engine=engine,
        advisor=advisor,
        learning_paths=learning_paths,
        progress=ProgressService(store, catalog, curriculum, learning_paths, analytics),
        quizzes=QuizService(
            store, catalog, curriculum, learning_paths, analytics,
            passing_score=settings.passing_score,
        ),
    )
