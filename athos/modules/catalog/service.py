"""In-process catalog implementation."""

import json
import logging
from pathlib import Path

from athos.modules.catalog.interface import ContentItem, ContentQuery, ICatalog, Quiz
from athos.shared.exceptions import CatalogFormatError

logger = logging.getLogger(__name__)


class InMemoryCatalog:
    """Catalog backed by dictionaries.

    Used when database persistence is disabled and in tests.
    """

    def __init__(
        self,
        content: list[ContentItem] | None = None,
        quizzes: list[Quiz] | None = None,
    ) -> None:
        self._content: dict[str, ContentItem] = {item.id: item for item in content or []}
        self._quizzes: dict[str, Quiz] = {quiz.id: quiz for quiz in quizzes or []}

    async def find_content(self, query: ContentQuery) -> list[ContentItem]:
        matches = sorted(
            (item for item in self._content.values() if query.matches(item)),
            key=query.sort_key,
        )
        if query.limit is not None:
            matches = matches[: query.limit]
        return matches

    async def get_content(self, content_id: str) -> ContentItem | None:
        return self._content.get(content_id)

    async def increment_views(self, content_id: str) -> None:
        item = self._content.get(content_id)
        if item is not None:
            item.views += 1

    async def get_quiz(self, quiz_id: str) -> Quiz | None:
        return self._quizzes.get(quiz_id)

    async def find_section_quiz(self, module_id: str, section_id: str) -> Quiz | None:
        candidates = sorted(
            (
                quiz for quiz in self._quizzes.values()
                if quiz.is_published
                and quiz.module_id == module_id
                and quiz.section_id == section_id
            ),
            key=lambda quiz: quiz.id,
        )
        if len(candidates) > 1:
            logger.warning(
                f"Section {module_id}/{section_id} has {len(candidates)} published quizzes, "
                f"using {candidates[0].id}"
            )
        return candidates[0] if candidates else None

    async def add_content(self, item: ContentItem) -> None:
        self._content[item.id] = item

    async def add_quiz(self, quiz: Quiz) -> None:
        self._quizzes[quiz.id] = quiz


def load_catalog_document(path: str | Path) -> tuple[list[ContentItem], list[Quiz]]:
    """Parse a JSON catalog seed file.

    The document has two top-level lists, ``content`` and ``quizzes``, whose
    entries use the same field names as ``ContentItem.to_dict`` and
    ``Quiz.to_dict``.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed content items and quizzes

    Raises:
        CatalogFormatError: If the file is not valid JSON or an entry is malformed
    """
    source = str(path)
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogFormatError(source, str(e)) from e
    if not isinstance(document, dict):
        raise CatalogFormatError(source, f"expected a JSON object, got {type(document).__name__}")

    try:
        content = [ContentItem.from_dict(entry) for entry in document.get("content", [])]
        quizzes = [Quiz.from_dict(entry) for entry in document.get("quizzes", [])]
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogFormatError(source, f"{type(e).__name__}: {e}") from e

    logger.info(f"Loaded catalog document {source}: {len(content)} content items, {len(quizzes)} quizzes")
    return content, quizzes


async def seed_catalog(catalog: ICatalog, content: list[ContentItem], quizzes: list[Quiz]) -> None:
    """Write parsed catalog entries into any catalog implementation."""
    for item in content:
        await catalog.add_content(item)
    for quiz in quizzes:
        await catalog.add_quiz(quiz)
