"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from lifestyle_tracker.cli import main


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("LIFESTYLE_TRACKER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LIFESTYLE_TRACKER_ACCOUNT", "cli")
    return CliRunner()


@pytest.fixture
def initialized(runner):
    result = runner.invoke(main, ["init"])
    assert result.exit_code == 0, result.output
    return runner


class TestCli:
    """Tests for CLI commands."""

    def test_requires_init(self, runner):
        """Test that commands refuse to run before init."""
        result = runner.invoke(main, ["week", "show"])
        assert result.exit_code == 1
        assert "not initialized" in result.output

    def test_toggle_and_show(self, initialized):
        """Test checking a box and viewing the grid."""
        result = initialized.invoke(
            main, ["week", "toggle", "mon", "Bike", "--date", "2024-01-03"]
        )
        assert result.exit_code == 0, result.output
        assert "Bike checked on 2024-01-01" in result.output

        shown = initialized.invoke(main, ["week", "show", "--date", "2024-01-03"])
        assert shown.exit_code == 0, shown.output
        assert "Week 1 (2024-01-01)" in shown.output

    def test_toggle_unknown_day(self, initialized):
        """Test that a date outside the week is reported."""
        result = initialized.invoke(
            main, ["week", "toggle", "2024-02-01", "Bike", "--date", "2024-01-03"]
        )
        assert result.exit_code == 1
        assert "not a day of week" in result.output

    def test_complete_session(self, initialized):
        """Test logging a workout and listing the log."""
        result = initialized.invoke(
            main,
            ["session", "complete", "-n", "Leg day", "-t", "Rings", "--date", "2024-01-02"],
        )
        assert result.exit_code == 0, result.output
        assert "Saved Leg day" in result.output

        listed = initialized.invoke(main, ["session", "list", "--date", "2024-01-02"])
        assert "Leg day" in listed.output

    def test_types(self, initialized):
        """Test adding a type to the catalog."""
        result = initialized.invoke(main, ["types", "add", "Swim", "-c", "Cardio"])
        assert result.exit_code == 0, result.output

        listed = initialized.invoke(main, ["types", "list"])
        assert "Swim" in listed.output

    def test_favorites(self, initialized):
        """Test favoriting a routine."""
        result = initialized.invoke(main, ["favorites", "toggle", "routine", "r1"])
        assert result.exit_code == 0, result.output
        assert "Favorited" in result.output

        listed = initialized.invoke(main, ["favorites", "list"])
        assert "r1" in listed.output
