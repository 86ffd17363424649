"""
Reference catalog: read-only queries against git repositories.

The command layer only talks to the ``ReferenceCatalog`` interface. The
GitPython-backed ``GitCatalog`` is what the console host plugs in; tests use
an in-memory catalog instead.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from git import Repo, InvalidGitRepositoryError, NoSuchPathError
from git.refs import RemoteReference, TagReference

from .models import (
    Author,
    CommitInfo,
    CommittedFile,
    HistoryViewContext,
    Reference,
    RefType,
    Repository,
)

SHORT_SHA_LENGTH = 7


class ReferenceCatalog(ABC):
    """Query interface over the repositories of a session."""

    @abstractmethod
    def list_references(self, repo: Repository) -> List[Reference]:
        pass

    @abstractmethod
    def current_branch_name(self, repo: Repository) -> Optional[str]:
        """Name of the checked-out branch, or None when HEAD is detached."""
        pass

    @abstractmethod
    def list_authors(self, repo: Repository) -> List[Author]:
        pass

    @abstractmethod
    def repository_for_path(self, path: str) -> Optional[Repository]:
        pass

    @abstractmethod
    def known_repositories(self) -> List[Repository]:
        pass

    # The queries below feed the console views, not the command layer.

    def list_commits(self, context: HistoryViewContext,
                     max_count: Optional[int] = None) -> List[CommitInfo]:
        raise NotImplementedError

    def list_committed_files(self, repo: Repository, left_ref: str, right_ref: str,
                             path: Optional[str] = None) -> List[CommittedFile]:
        raise NotImplementedError

    def diff_text(self, repo: Repository, left_ref: str, right_ref: str, path: str) -> str:
        raise NotImplementedError


class GitCatalog(ReferenceCatalog):
    """Catalog backed by GitPython.

    Args:
        roots: Paths the session was started with. Each one may point
            anywhere inside a work tree; it is resolved to the work tree root.
    """

    def __init__(self, roots: Iterable[str] = ()):
        self.roots = [str(root) for root in roots]
        self._repos: Dict[str, Repo] = {}

    def _open(self, repo: Repository) -> Repo:
        if repo.root not in self._repos:
            self._repos[repo.root] = Repo(repo.root)
        return self._repos[repo.root]

    def list_references(self, repo: Repository) -> List[Reference]:
        git_repo = self._open(repo)
        refs = []
        for ref in git_repo.references:
            if isinstance(ref, RemoteReference):
                # Skip the symbolic origin/HEAD
                if ref.remote_head == 'HEAD':
                    continue
                ref_type = RefType.REMOTE_HEAD
            elif isinstance(ref, TagReference):
                ref_type = RefType.TAG
            else:
                ref_type = RefType.HEAD
            refs.append(Reference(
                type=ref_type,
                commit=ref.commit.hexsha[:SHORT_SHA_LENGTH],
                name=ref.name,
                repo=repo,
            ))
        return refs

    def current_branch_name(self, repo: Repository) -> Optional[str]:
        git_repo = self._open(repo)
        if git_repo.head.is_detached:
            return None
        return git_repo.active_branch.name

    def list_authors(self, repo: Repository) -> List[Author]:
        git_repo = self._open(repo)
        if not git_repo.head.is_valid():
            return []

        seen = {}
        for commit in git_repo.iter_commits('HEAD'):
            key = (commit.author.name, commit.author.email)
            if key not in seen:
                seen[key] = Author(name=commit.author.name, email=commit.author.email)
        return sorted(seen.values(), key=lambda a: (a.name.lower(), a.email))

    def repository_for_path(self, path: str) -> Optional[Repository]:
        start = Path(path)
        if start.is_file():
            start = start.parent
        try:
            git_repo = Repo(str(start), search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return None
        if git_repo.working_tree_dir is None:
            return None
        repo = Repository(root=str(git_repo.working_tree_dir))
        self._repos.setdefault(repo.root, git_repo)
        return repo

    def known_repositories(self) -> List[Repository]:
        repos = []
        for root in self.roots:
            repo = self.repository_for_path(root)
            if repo and repo not in repos:
                repos.append(repo)
        return repos

    def list_commits(self, context: HistoryViewContext,
                     max_count: Optional[int] = None) -> List[CommitInfo]:
        git_repo = self._open(context.repo)
        rev = context.branch or 'HEAD'
        kwargs = {}
        if context.author:
            # Literal match on the whole "<email>"
            kwargs['author'] = f'<{context.author}>'
            kwargs['fixed_strings'] = True
        if max_count:
            kwargs['max_count'] = max_count

        if context.line and context.specified_path:
            rel_path = self._relative(context.repo, context.specified_path)
            log = git_repo.git.log(
                f'-L{context.line},{context.line}:{rel_path}', '--format=%H', '-s', rev, **kwargs
            )
            commits = [git_repo.commit(sha) for sha in log.split() if len(sha) == 40]
        else:
            paths = self._relative(context.repo, context.specified_path) if context.specified_path else ''
            commits = git_repo.iter_commits(rev, paths=paths, **kwargs)

        return [
            CommitInfo(
                hexsha=commit.hexsha,
                summary=commit.summary,
                author_name=commit.author.name,
                author_email=commit.author.email,
                date=commit.authored_datetime.isoformat(),
            )
            for commit in commits
        ]

    def list_committed_files(self, repo: Repository, left_ref: str, right_ref: str,
                             path: Optional[str] = None) -> List[CommittedFile]:
        git_repo = self._open(repo)
        paths = self._relative(repo, path) if path else None
        diffs = git_repo.commit(left_ref).diff(git_repo.commit(right_ref), paths=paths)
        return [
            CommittedFile(
                repo=repo,
                git_relative_path=diff.b_path or diff.a_path,
                status=diff.change_type or 'M',
            )
            for diff in diffs
        ]

    def diff_text(self, repo: Repository, left_ref: str, right_ref: str, path: str) -> str:
        git_repo = self._open(repo)
        return git_repo.git.diff(left_ref, right_ref, '--', self._relative(repo, path))

    @staticmethod
    def _relative(repo: Repository, path: str) -> str:
        if os.path.isabs(path):
            return Path(os.path.relpath(path, repo.root)).as_posix()
        return Path(path).as_posix()
