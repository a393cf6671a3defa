"""Unit tests for service construction."""

import json

import pytest

from athos.modules.analytics.sinks import InMemoryEventSink, RedisEventSink
from athos.modules.catalog.service import InMemoryCatalog
from athos.modules.learners.service import InMemoryLearnerDirectory
from athos.modules.progress.store import InMemoryLearnerStateStore
from athos.shared.config import Settings
from athos.shared.feature_flags import FeatureFlagManager, FeatureFlags
from athos.shared.service_registry import build_services


class TestBuildServices:
    """Tests for build_services."""

    def test_in_memory_by_default(self, settings, flags):
        """Test that in-process backends are used when flags are off."""
        container = build_services(settings=settings, flags=flags)

        assert isinstance(container.store, InMemoryLearnerStateStore)
        assert isinstance(container.catalog, InMemoryCatalog)
        assert isinstance(container.learners, InMemoryLearnerDirectory)
        assert isinstance(container.analytics.sink, InMemoryEventSink)
        assert container.uses_database is False
        assert container.uses_redis is False

    def test_services_share_store_and_catalog(self, services):
        """Test that every service sees the same state."""
        assert services.progress._store is services.store
        assert services.quizzes._store is services.store
        assert services.learning_paths._store is services.store
        assert services.progress._catalog is services.catalog
        assert services.progress._learning_paths is services.learning_paths

    def test_injected_catalog_and_learners(self, settings, flags, catalog, learners):
        """Test that explicit collaborators replace flag-selected ones."""
        container = build_services(settings=settings, flags=flags, catalog=catalog, learners=learners)
        assert container.catalog is catalog
        assert container.learners is learners

    def test_redis_sink_when_enabled(self, settings):
        """Test that the Redis flag selects the Redis sink."""
        flags = FeatureFlagManager()
        flags.disable(FeatureFlags.USE_DATABASE_PERSISTENCE)
        flags.enable(FeatureFlags.ENABLE_REDIS_ANALYTICS)

        container = build_services(settings=settings, flags=flags)
        assert isinstance(container.analytics.sink, RedisEventSink)
        assert container.uses_redis is True

    @pytest.mark.asyncio
    async def test_catalog_seeded_from_file(self, tmp_path, flags):
        """Test that catalog_path seeds the in-process catalog."""
        document = {
            "content": [
                {"id": "c1", "module_id": "module1", "section_id": "origins", "title": "Intro"},
            ],
            "quizzes": [],
        }
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(document))

        container = build_services(settings=Settings(catalog_path=str(path)), flags=flags)

        item = await container.catalog.get_content("c1")
        assert item is not None
        assert item.title == "Intro"
