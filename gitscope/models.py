"""Core data models for the history browser.

Repositories, references and authors come from the reference catalog.
View contexts are what the command layer publishes for the views to render;
they are frozen and replaced as a whole, never edited in place.
"""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Repository:
    """A git work tree known to the session."""
    root: str

    @property
    def name(self) -> str:
        """Base directory name, used as the pick-list label."""
        return Path(self.root).name or self.root


class RefType(Enum):
    """Kinds of references the catalog reports."""
    HEAD = "head"                # Local branch
    TAG = "tag"
    REMOTE_HEAD = "remote_head"  # Remote tracking branch


@dataclass(frozen=True)
class Reference:
    """A named (or anonymous) pointer to a commit."""
    type: RefType
    commit: str
    name: Optional[str] = None
    repo: Optional[Repository] = None

    @property
    def display_name(self) -> str:
        return self.name or self.commit


@dataclass(frozen=True)
class Author:
    """Commit author as reported by the catalog."""
    name: str
    email: str


# Synthetic author meaning "no author filter"
ALL_AUTHORS = Author(name="All", email="")


@dataclass(frozen=True)
class CommittedFile:
    """A file touched between the two sides of a files context."""
    repo: Repository
    git_relative_path: str
    status: str = "M"

    @property
    def base_name(self) -> str:
        return Path(self.git_relative_path).name


@dataclass(frozen=True)
class CommitInfo:
    """One row of a history listing."""
    hexsha: str
    summary: str
    author_name: str
    author_email: str
    date: str

    @property
    def short_sha(self) -> str:
        return self.hexsha[:7]


@dataclass(frozen=True)
class HistoryViewContext:
    """What the history view should list.

    Only ``repo`` is required. ``author`` holds an email address; ``None``
    (or the empty string of the synthetic "All" author) means no filter.
    """
    repo: Repository
    specified_path: Optional[str] = None
    branch: Optional[str] = None
    author: Optional[str] = None
    line: Optional[int] = None

    def with_changes(self, **changes) -> 'HistoryViewContext':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class FilesViewContext:
    """What the committed-files view should diff.

    A context with only ``right_ref`` shows the files of that single commit,
    compared against its parent (``right_ref + '~'``).
    """
    repo: Optional[Repository] = None
    left_ref: Optional[str] = None
    right_ref: Optional[str] = None
    specified_path: Optional[str] = None

    @classmethod
    def empty(cls) -> 'FilesViewContext':
        """The context that tells the view to show nothing."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.repo is None and self.left_ref is None and self.right_ref is None

    @property
    def effective_left_ref(self) -> Optional[str]:
        if self.left_ref:
            return self.left_ref
        if self.right_ref:
            return self.right_ref + "~"
        return None
