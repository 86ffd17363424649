"""Tests for pick-list building."""

import pytest

from gitscope.models import Reference, RefType
from gitscope.picks import (
    CURRENT_MARKER,
    ManualEntry,
    NoRepositoryError,
    RealChoice,
    RepoChoice,
    UNMARKED_PADDING,
    build_author_choices,
    build_ref_choices,
    build_repo_choices,
    describe_reference,
)


class TestBuildRefChoices:
    """Test reference pick lists."""

    def test_descriptions_encode_kind(self, catalog, repo):
        """Test head, tag and remote descriptions."""
        items = build_ref_choices(catalog, repo)

        assert [item.label for item in items] == ["main", "v1", "origin/main"]
        assert [item.description for item in items] == [
            "aaa", "Tag at bbb", "Remote branch at ccc",
        ]

    def test_mark_current_scenario(self, catalog, repo):
        """Test the main/v1 scenario with the current branch marked."""
        catalog.refs[repo.root] = catalog.refs[repo.root][:2]

        items = build_ref_choices(catalog, repo, mark_current=True)

        assert len(items) == 2
        main, v1 = items
        assert main.description == "aaa"
        assert main.label.startswith(CURRENT_MARKER)
        assert main.current
        assert v1.description == "Tag at bbb"
        assert v1.label.startswith(UNMARKED_PADDING)
        assert not v1.current

    def test_marked_labels_stay_aligned(self, catalog, repo):
        """Test marker and padding have the same width."""
        items = build_ref_choices(catalog, repo, mark_current=True)

        assert len(CURRENT_MARKER) == len(UNMARKED_PADDING)
        assert items[0].label == f"{CURRENT_MARKER} main"
        assert items[1].label == f"{UNMARKED_PADDING} v1"

    def test_marked_items_resolve_to_bare_name(self, catalog, repo):
        """Test the marker never leaks into the resolved value."""
        items = build_ref_choices(catalog, repo, mark_current=True)

        assert [item.resolved_value for item in items] == ["main", "v1", "origin/main"]

    def test_detached_head_marks_nothing(self, catalog, repo):
        """Test no item is marked when there is no current branch."""
        catalog.current[repo.root] = None

        items = build_ref_choices(catalog, repo, mark_current=True)

        assert not any(item.current for item in items)
        assert all(item.label.startswith(UNMARKED_PADDING) for item in items)

    def test_only_first_match_is_marked(self, make_catalog, repo):
        """Test a duplicate name is marked once."""
        catalog = make_catalog([repo])
        catalog.refs[repo.root] = [
            Reference(type=RefType.HEAD, commit="aaa", name="main"),
            Reference(type=RefType.TAG, commit="aaa", name="main"),
        ]
        catalog.current[repo.root] = "main"

        items = build_ref_choices(catalog, repo, mark_current=True)

        assert [item.current for item in items] == [True, False]

    def test_without_mark_current_labels_are_plain(self, catalog, repo):
        """Test labels are untouched when marking is off."""
        items = build_ref_choices(catalog, repo)

        assert not any(item.current for item in items)
        assert items[0].label == "main"

    def test_manual_entry_prepended(self, catalog, repo):
        """Test the manual entry sentinel comes first."""
        items = build_ref_choices(catalog, repo, allow_manual_entry=True)

        assert isinstance(items[0], ManualEntry)
        assert items[0].label == "Enter commit SHA"
        assert len(items) == 4

    def test_anonymous_ref_uses_commit_as_label(self, make_catalog, repo):
        """Test a reference without a name is labelled by its hash."""
        catalog = make_catalog([repo])
        catalog.refs[repo.root] = [Reference(type=RefType.HEAD, commit="deadbee")]

        items = build_ref_choices(catalog, repo)

        assert items[0].label == "deadbee"

    def test_describe_reference(self):
        """Test description helper."""
        assert describe_reference(RefType.HEAD, "abc") == "abc"
        assert describe_reference(RefType.TAG, "abc") == "Tag at abc"
        assert describe_reference(RefType.REMOTE_HEAD, "abc") == "Remote branch at abc"


class TestBuildRepoChoices:
    """Test repository pick lists."""

    def test_no_repository(self):
        """Test an empty list signals no repository."""
        with pytest.raises(NoRepositoryError):
            build_repo_choices([])

    def test_single_repository(self, repo):
        """Test one repository short-circuits."""
        choices = build_repo_choices([repo])

        assert choices == [RepoChoice(repo)]

    def test_several_repositories(self, repo, other_repo):
        """Test labels are base names and descriptions are roots."""
        choices = build_repo_choices([repo, other_repo])

        assert [c.label for c in choices] == ["project", "library"]
        assert [c.description for c in choices] == ["/work/project", "/work/library"]
        assert [c.repo for c in choices] == [repo, other_repo]


class TestBuildAuthorChoices:
    """Test author pick lists."""

    def test_all_author_first(self, catalog, repo):
        """Test the synthetic All author is prepended."""
        items = build_author_choices(catalog, repo)

        assert [item.label for item in items] == ["All", "Ada", "Linus"]
        assert [item.description for item in items] == ["", "ada@example.com", "linus@example.com"]

    def test_authors_resolve_to_email(self, catalog, repo):
        """Test the resolved value is the email address."""
        items = build_author_choices(catalog, repo)

        assert items[0].resolved_value == ""
        assert items[1].resolved_value == "ada@example.com"

    def test_no_authors(self, make_catalog, repo):
        """Test a repository without commits still offers All."""
        items = build_author_choices(make_catalog([repo]), repo)

        assert items == [RealChoice(label="All", description="", value="")]
