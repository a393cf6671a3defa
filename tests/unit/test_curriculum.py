"""Unit tests for the curriculum table."""

from athos.shared.curriculum import Curriculum, SectionRef


class TestNextSection:
    """Tests for Curriculum.next_section."""

    def test_next_within_module(self, curriculum):
        """Test moving to the following section of the same module."""
        assert curriculum.next_section("module1", "origins") == SectionRef("module1", "monastic-republic")

    def test_next_crosses_module_boundary(self, curriculum):
        """Test that the last section of a module leads to the next module."""
        assert curriculum.next_section("module1", "religious-life") == SectionRef("module2", "overview")
        assert curriculum.next_section("module2", "preservation") == SectionRef("module3", "geography")

    def test_end_of_curriculum(self, curriculum):
        """Test that the final section has no successor."""
        assert curriculum.next_section("module3", "conservation") is None

    def test_unknown_pair(self, curriculum):
        """Test that unknown modules and sections have no successor."""
        assert curriculum.next_section("module9", "origins") is None
        assert curriculum.next_section("module1", "nowhere") is None

    def test_skips_empty_modules(self):
        """Test that modules without sections are skipped."""
        curriculum = Curriculum({"a": ["one"], "b": [], "c": ["two"]})
        assert curriculum.next_section("a", "one") == SectionRef("c", "two")


class TestCurriculumStructure:
    """Tests for ordering helpers."""

    def test_first_section(self, curriculum):
        """Test the starting pointer."""
        assert curriculum.first_section == SectionRef("module1", "origins")

    def test_all_sections_in_order(self, curriculum):
        """Test that sections are listed module by module."""
        refs = curriculum.all_sections()
        assert len(refs) == 12
        assert refs[0] == SectionRef("module1", "origins")
        assert refs[4] == SectionRef("module2", "overview")
        assert refs[-1] == SectionRef("module3", "conservation")

    def test_membership(self, curriculum):
        """Test module and section lookups."""
        assert curriculum.has_module("module2")
        assert not curriculum.has_module("module4")
        assert curriculum.has_section("module3", "paths")
        assert not curriculum.has_section("module3", "origins")
        assert curriculum.sections("unknown") == []
