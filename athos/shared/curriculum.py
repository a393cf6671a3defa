"""Ordered module/section table for the explorer curriculum.

Every component that needs to know "what comes next" goes through the
Curriculum class below, so the recommendation engine, the next-steps
calculator and the progress overview always agree on ordering.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Sequence

DEFAULT_MODULE_STRUCTURE: dict[str, tuple[str, ...]] = {
    "module1": ("origins", "monastic-republic", "through-ages", "religious-life"),
    "module2": ("overview", "architecture", "treasures", "preservation"),
    "module3": ("geography", "flora-fauna", "paths", "conservation"),
}


@dataclass(frozen=True)
class SectionRef:
    """A (module, section) coordinate in the curriculum."""

    module_id: str
    section_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"module_id": self.module_id, "section_id": self.section_id}


class Curriculum:
    """Immutable ordered view over modules and their sections."""

    def __init__(self, structure: Mapping[str, Sequence[str]]) -> None:
        self._structure: dict[str, tuple[str, ...]] = {
            module_id: tuple(sections) for module_id, sections in structure.items()
        }

    @property
    def modules(self) -> list[str]:
        """Module ids in curriculum order."""
        return list(self._structure)

    @property
    def first_section(self) -> SectionRef:
        """Starting pointer for a new learner."""
        module_id = self.modules[0]
        return SectionRef(module_id, self._structure[module_id][0])

    def sections(self, module_id: str) -> list[str]:
        """Section ids of a module in order, empty for unknown modules."""
        return list(self._structure.get(module_id, ()))

    def has_module(self, module_id: str) -> bool:
        return module_id in self._structure

    def has_section(self, module_id: str, section_id: str) -> bool:
        return section_id in self._structure.get(module_id, ())

    def all_sections(self) -> list[SectionRef]:
        """Every section in curriculum order."""
        return [
            SectionRef(module_id, section_id)
            for module_id, sections in self._structure.items()
            for section_id in sections
        ]

    def next_section(self, module_id: str, section_id: str) -> SectionRef | None:
        """Resolve the section that follows the given one.

        Walks the sections of the current module first, then moves to the
        first section of the next module.

        Args:
            module_id: Current module
            section_id: Current section

        Returns:
            The next section, or None at the end of the curriculum or when
            the given pair is unknown
        """
        if not self.has_section(module_id, section_id):
            return None

        sections = self._structure[module_id]
        index = sections.index(section_id)
        if index + 1 < len(sections):
            return SectionRef(module_id, sections[index + 1])

        modules = self.modules
        module_index = modules.index(module_id)
        for next_module in modules[module_index + 1:]:
            next_sections = self._structure[next_module]
            if next_sections:
                return SectionRef(next_module, next_sections[0])
        return None


@lru_cache
def get_curriculum() -> Curriculum:
    """Get the default curriculum instance."""
    return Curriculum(DEFAULT_MODULE_STRUCTURE)
