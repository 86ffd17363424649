"""Shared plumbing for command handlers."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..catalog import ReferenceCatalog
from ..context import ContextDispatcher
from ..models import HistoryViewContext, Repository
from ..picks import NoRepositoryError
from ..registry import CommandRegistry
from ..resolver import InteractiveResolver

# Process-wide command table, filled by the handler modules on import.
COMMANDS = CommandRegistry()


class MissingContextError(Exception):
    """Raised when a command runs before the context it works on exists."""
    pass


class Editor(ABC):
    """Editor integration the commands hand documents to."""

    @property
    def active_file(self) -> Optional[str]:
        """Path of the file being edited, if any."""
        return None

    @property
    def active_line(self) -> Optional[int]:
        """1-based cursor line in the active file, if any."""
        return None

    @abstractmethod
    def show_diff(self, repo: Repository, path: str, left_ref: str, right_ref: str, title: str) -> None:
        pass

    @abstractmethod
    def show_line_diff(self, content: str) -> None:
        pass


class BaseCommands:
    """Collaborators and helpers shared by every handler group.

    Args:
        catalog: Reference catalog to query
        dispatcher: Publishes view contexts
        resolver: Runs the interactive rounds
        editor: Editor integration
        logger: Optional logging function
    """

    def __init__(
        self,
        catalog: ReferenceCatalog,
        dispatcher: ContextDispatcher,
        resolver: InteractiveResolver,
        editor: Editor,
        logger: Optional[Callable[[str], None]] = None,
    ):
        self.catalog = catalog
        self.dispatcher = dispatcher
        self.resolver = resolver
        self.editor = editor
        self.logger = logger or (lambda msg: None)

    @property
    def store(self):
        return self.dispatcher.store

    async def _select_repo(self, placeholder: str = "Select the git repo") -> Optional[Repository]:
        """Pick a known repository; None when there is none or the user cancels."""
        try:
            return await self.resolver.select_repository(self.catalog.known_repositories(), placeholder)
        except NoRepositoryError as e:
            self.resolver.prompter.show_info(str(e))
            return None

    def _repo_for_path(self, path: str) -> Optional[Repository]:
        repo = self.catalog.repository_for_path(path)
        if repo is None:
            self.logger(f"Not inside a git repository: {path}")
        return repo

    def _view_history(self, context: HistoryViewContext, load_all: bool = False) -> None:
        self.dispatcher.publish_history(context, load_all)
