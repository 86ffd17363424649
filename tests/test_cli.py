"""Tests for the command-line interface."""

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from gitscope import __version__
from gitscope.cli import cli
from gitscope.config import DEFAULT_PAGE_SIZE, ViewerConfig


@pytest.fixture
def runner():
    return CliRunner()


class TestViewerConfig:
    """Test configuration from CLI arguments."""

    def test_defaults(self):
        """Test the current directory is the default repository."""
        config = ViewerConfig.from_cli_args()

        assert config.repositories == (Path('.').resolve(),)
        assert config.page_size == DEFAULT_PAGE_SIZE
        assert not config.express

    def test_path_separator_lists(self, tmp_path):
        """Test env-style lists are split and de-duplicated."""
        a, b = tmp_path / "a", tmp_path / "b"
        joined = f"{a}{os.pathsep}{b}"

        config = ViewerConfig.from_cli_args(repos=[joined, str(a)], page_size=50)

        assert config.repositories == (a.resolve(), b.resolve())
        assert config.page_size == 50

    def test_negative_page_size(self):
        """Test a negative page size is rejected."""
        with pytest.raises(ValueError):
            ViewerConfig.from_cli_args(page_size=-1)


class TestCli:
    """Test the click commands end to end."""

    def test_version(self, runner):
        """Test --version."""
        result = runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_commands_listing(self, runner):
        """Test the command list names every command."""
        result = runner.invoke(cli, ['commands'])

        assert result.exit_code == 0
        assert 'diff-branches' in result.output
        assert 'toggle-express-mode' in result.output

    def test_unknown_command(self, runner, git_repo):
        """Test an unknown command is a usage error."""
        result = runner.invoke(cli, ['run', 'nope', '--repo', git_repo.root])

        assert result.exit_code == 2
        assert 'Unknown command: nope' in result.output

    def test_view_history(self, runner, git_repo):
        """Test a single repository is listed without prompting."""
        result = runner.invoke(cli, ['run', 'view-history', '--repo', git_repo.root])

        assert result.exit_code == 0, result.output
        assert 'Extend a' in result.output
        assert 'Add a' in result.output
        assert 'Linus' in result.output

    def test_express_from_environment(self, runner, git_repo):
        """Test GITSCOPE_EXPRESS drops the author column."""
        result = runner.invoke(cli, ['run', 'view-history', '--repo', git_repo.root],
                               env={'GITSCOPE_EXPRESS': '1'})

        assert result.exit_code == 0, result.output
        assert 'Add b' in result.output
        assert 'Linus' not in result.output

    def test_view_file_history(self, runner, git_repo):
        """Test the file argument narrows the history."""
        result = runner.invoke(cli, ['run', 'view-file-history', f"{git_repo.root}/b.txt",
                                     '--repo', git_repo.root])

        assert result.exit_code == 0, result.output
        assert 'Add b' in result.output
        assert 'Extend a' not in result.output

    def test_missing_context_reported(self, runner, git_repo):
        """Test a command failure is printed, not raised."""
        result = runner.invoke(cli, ['run', 'view-author-history', '--repo', git_repo.root])

        assert result.exit_code == 0
        assert 'history view context should exist' in result.output

    def test_missing_line_diff_file(self, runner, git_repo, tmp_path):
        """Test an unreadable diff file is an error message, not a traceback."""
        missing = tmp_path / "nope.diff"

        result = runner.invoke(cli, ['run', 'open-line-diff', str(missing), '--repo', git_repo.root])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert 'No such file' in result.output
