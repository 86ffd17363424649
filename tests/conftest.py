"""Shared test fixtures for gitscope."""

from types import SimpleNamespace
from typing import Dict, List, Optional, Sequence

import pytest
from git import Actor, Repo

from gitscope.catalog import ReferenceCatalog
from gitscope.commands import CommandCenter, Editor
from gitscope.context import ContextDispatcher, ViewContextStore
from gitscope.models import Author, Reference, RefType, Repository
from gitscope.picks import PickItem
from gitscope.registry import LocalDispatcher
from gitscope.resolver import InteractiveResolver, Prompter


class FakeCatalog(ReferenceCatalog):
    """In-memory catalog keyed by repository root."""

    def __init__(self, repos: Sequence[Repository] = ()):
        self.repos = list(repos)
        self.refs: Dict[str, List[Reference]] = {}
        self.current: Dict[str, Optional[str]] = {}
        self.authors: Dict[str, List[Author]] = {}

    def list_references(self, repo):
        return list(self.refs.get(repo.root, []))

    def current_branch_name(self, repo):
        return self.current.get(repo.root)

    def list_authors(self, repo):
        return list(self.authors.get(repo.root, []))

    def repository_for_path(self, path):
        for repo in self.repos:
            if str(path).startswith(repo.root):
                return repo
        return None

    def known_repositories(self):
        return list(self.repos)


class ScriptedPrompter(Prompter):
    """Answers prompts from scripted queues and records what was asked.

    Pick answers are None (dismiss), an int index, or a label / resolved
    value to look up. Text answers are returned as given.
    """

    def __init__(self, picks=(), texts=()):
        self.picks = list(picks)
        self.texts = list(texts)
        self.pick_calls = []
        self.text_calls = []
        self.errors = []
        self.infos = []

    async def pick(self, items: Sequence[PickItem], placeholder: str):
        self.pick_calls.append((list(items), placeholder))
        answer = self.picks.pop(0)
        if answer is None:
            return None
        if isinstance(answer, int):
            return items[answer]
        for item in items:
            if answer in (item.label, getattr(item, 'value', None)):
                return item
        raise AssertionError(f"No pick item matches {answer!r}")

    async def input_text(self, prompt, placeholder=None):
        self.text_calls.append((prompt, placeholder))
        return self.texts.pop(0)

    def show_error(self, message):
        self.errors.append(message)

    def show_info(self, message):
        self.infos.append(message)


class RecordingEditor(Editor):
    """Editor that records what it was asked to show."""

    def __init__(self, active_file=None, active_line=None):
        self._active_file = active_file
        self._active_line = active_line
        self.diffs = []
        self.line_diffs = []

    @property
    def active_file(self):
        return self._active_file

    @property
    def active_line(self):
        return self._active_line

    def show_diff(self, repo, path, left_ref, right_ref, title):
        self.diffs.append((repo, path, left_ref, right_ref, title))

    def show_line_diff(self, content):
        self.line_diffs.append(content)


@pytest.fixture
def repo():
    return Repository(root="/work/project")


@pytest.fixture
def other_repo():
    return Repository(root="/work/library")


@pytest.fixture
def make_catalog():
    return FakeCatalog


@pytest.fixture
def catalog(repo):
    """Catalog with one repository holding main, v1 and origin/main."""
    catalog = FakeCatalog([repo])
    catalog.refs[repo.root] = [
        Reference(type=RefType.HEAD, commit="aaa", name="main", repo=repo),
        Reference(type=RefType.TAG, commit="bbb", name="v1", repo=repo),
        Reference(type=RefType.REMOTE_HEAD, commit="ccc", name="origin/main", repo=repo),
    ]
    catalog.current[repo.root] = "main"
    catalog.authors[repo.root] = [
        Author(name="Ada", email="ada@example.com"),
        Author(name="Linus", email="linus@example.com"),
    ]
    return catalog


@pytest.fixture
def prompter():
    return ScriptedPrompter()


@pytest.fixture
def editor():
    return RecordingEditor()


@pytest.fixture
def store():
    return ViewContextStore()


@pytest.fixture
def host():
    return LocalDispatcher()


@pytest.fixture
def center(catalog, store, prompter, editor, host):
    """Command center bound to a local host; unbound again after the test."""
    errors = []
    center = CommandCenter(
        catalog=catalog,
        dispatcher=ContextDispatcher(store),
        resolver=InteractiveResolver(prompter),
        editor=editor,
        host=host,
        on_error=lambda command_id, error: errors.append((command_id, error)),
    )
    center.errors = errors
    yield center
    center.dispose()


ADA = Actor("Ada", "ada@example.com")
LINUS = Actor("Linus", "linus@example.com")


def _commit(repo: Repo, name: str, content: str, message: str, actor: Actor) -> str:
    path = f"{repo.working_tree_dir}/{name}"
    with open(path, 'w') as f:
        f.write(content)
    repo.index.add([name])
    return repo.index.commit(message, author=actor, committer=actor).hexsha


@pytest.fixture
def git_repo(tmp_path):
    """Repository with three commits on main, a tag, and a remote branch."""
    repo = Repo.init(str(tmp_path / "project"))
    first = _commit(repo, "a.txt", "one\n", "Add a", ADA)
    repo.active_branch.rename("main", force=True)
    second = _commit(repo, "b.txt", "two\n", "Add b", LINUS)
    _commit(repo, "a.txt", "one\nmore\n", "Extend a", ADA)
    repo.create_tag("v1", ref=first)
    repo.git.update_ref("refs/remotes/origin/main", second)
    repo.git.symbolic_ref("refs/remotes/origin/HEAD", "refs/remotes/origin/main")
    return SimpleNamespace(repo=repo, root=repo.working_tree_dir, first_sha=first, second_sha=second)
