"""Tests for the command line interface."""

import json
from uuid import uuid4

from typer.testing import CliRunner

from athos.cli.main import app
from athos.shared.tokens import decode_access_token

runner = CliRunner()


class TestCLI:
    """Tests for athos commands run against in-process backends."""

    def test_help(self):
        """Test that the command groups are listed."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for group in ("catalog", "progress", "path", "token", "serve"):
            assert group in result.stdout

    def test_token_round_trip(self):
        """Test that an issued token verifies to the same learner."""
        learner = uuid4()
        result = runner.invoke(app, ["token", str(learner)])

        assert result.exit_code == 0
        assert decode_access_token(result.stdout.strip()) == learner

    def test_invalid_user_id(self):
        """Test that a malformed learner id exits with an error."""
        result = runner.invoke(app, ["token", "not-a-uuid"])
        assert result.exit_code == 1
        assert "Invalid user id" in result.stdout

    def test_seed_without_database(self, tmp_path):
        """Test that seeding validates the document when persistence is off."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "content": [{"id": "c1", "module_id": "module1", "section_id": "origins", "title": "Intro"}],
            "quizzes": [],
        }))

        result = runner.invoke(app, ["catalog", "seed", str(path)])

        assert result.exit_code == 0
        assert "validated but not stored" in result.stdout
        assert "Seeded 1 content items and 0 quizzes" in result.stdout

    def test_seed_rejects_bad_document(self, tmp_path):
        """Test that a malformed document exits with an error."""
        path = tmp_path / "broken.json"
        path.write_text("{")
        result = runner.invoke(app, ["catalog", "seed", str(path)])
        assert result.exit_code == 1

    def test_progress_show_new_learner(self):
        """Test the progress table for a learner with no activity."""
        result = runner.invoke(app, ["progress", "show", str(uuid4())])

        assert result.exit_code == 0
        assert "Overall: 0%" in result.stdout
        assert "origins" in result.stdout
        assert "Next: module1/origins" in result.stdout

    def test_prune_without_path(self):
        """Test pruning a learner who has no path yet."""
        result = runner.invoke(app, ["path", "prune", str(uuid4()), "--days", "0"])
        assert result.exit_code == 0
        assert "Removed 0 suggestions" in result.stdout
