"""Pick-list items and the builders that turn catalog data into them."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .catalog import ReferenceCatalog
from .models import ALL_AUTHORS, RefType, Repository

NBSP = '\u00a0'
CHECK_MARK = '\u2713'

# Marker and padding have the same width so labels stay aligned.
CURRENT_MARKER = f"{CHECK_MARK}{NBSP}"
UNMARKED_PADDING = NBSP * 2


class NoRepositoryError(Exception):
    """Raised when there is no repository to pick from."""
    pass


@dataclass(frozen=True)
class RealChoice:
    """A concrete value the user can pick.

    ``value`` is what the pick resolves to when it differs from the label
    (marked labels, author emails).
    """
    label: str
    description: str = ""
    value: Optional[str] = None
    current: bool = False

    @property
    def resolved_value(self) -> str:
        return self.value if self.value is not None else self.label


@dataclass(frozen=True)
class ManualEntry:
    """Sentinel that asks for free text instead of resolving to a value."""
    label: str = "Enter commit SHA"
    description: str = ""


@dataclass(frozen=True)
class RepoChoice:
    """A repository the user can pick."""
    repo: Repository

    @property
    def label(self) -> str:
        return self.repo.name

    @property
    def description(self) -> str:
        return self.repo.root


PickItem = Union[RealChoice, ManualEntry, RepoChoice]


def describe_reference(ref_type: RefType, commit: str) -> str:
    """Pick-list description for a reference of the given kind."""
    if ref_type == RefType.TAG:
        return f"Tag at {commit}"
    if ref_type == RefType.REMOTE_HEAD:
        return f"Remote branch at {commit}"
    return commit


def build_ref_choices(
    catalog: ReferenceCatalog,
    repo: Repository,
    allow_manual_entry: bool = False,
    mark_current: bool = False,
) -> List[PickItem]:
    """Build the reference pick list for a repository.

    Args:
        catalog: Reference catalog to query
        repo: Repository whose references are listed
        allow_manual_entry: Prepend the "Enter commit SHA" sentinel
        mark_current: Mark the checked-out branch and pad the others

    Returns:
        Pick items in catalog order
    """
    refs = catalog.list_references(repo)
    current_branch = catalog.current_branch_name(repo)

    items: List[PickItem] = []
    marked = False
    for ref in refs:
        name = ref.display_name
        description = describe_reference(ref.type, ref.commit)
        if not mark_current:
            items.append(RealChoice(label=name, description=description))
            continue

        # Detached HEAD: nothing matches, nothing is marked
        is_current = not marked and current_branch is not None and name == current_branch
        marked = marked or is_current
        prefix = CURRENT_MARKER if is_current else UNMARKED_PADDING
        items.append(RealChoice(
            label=f"{prefix} {name}",
            description=description,
            value=name,
            current=is_current,
        ))

    if allow_manual_entry:
        items.insert(0, ManualEntry())
    return items


def build_repo_choices(repos: Sequence[Repository]) -> List[RepoChoice]:
    """Build the repository pick list.

    Raises:
        NoRepositoryError: If there are no repositories
    """
    if not repos:
        raise NoRepositoryError("No git repository available")
    if len(repos) == 1:
        return [RepoChoice(repos[0])]
    return [RepoChoice(repo) for repo in repos]


def build_author_choices(catalog: ReferenceCatalog, repo: Repository) -> List[RealChoice]:
    """Authors of a repository, with the synthetic "All" author first."""
    authors = [ALL_AUTHORS] + list(catalog.list_authors(repo))
    return [
        RealChoice(label=author.name, description=author.email, value=author.email)
        for author in authors
    ]
