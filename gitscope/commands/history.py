"""History view commands."""

from pathlib import Path
from typing import Optional

from .base import BaseCommands, COMMANDS, MissingContextError
from ..models import HistoryViewContext
from ..picks import build_author_choices, build_ref_choices


class HistoryCommands(BaseCommands):
    """Commands that publish a history context."""

    async def view_history(self) -> None:
        repo = await self._select_repo()
        if repo:
            self._view_history(HistoryViewContext(repo=repo))

    async def view_file_history(self, specified_path: Optional[str] = None) -> None:
        """History of a file or folder (the active file by default)."""
        specified_path = specified_path or self.editor.active_file
        if not specified_path:
            return

        repo = self._repo_for_path(specified_path)
        if repo:
            self._view_history(HistoryViewContext(repo=repo, specified_path=str(specified_path)))

    async def view_folder_history(self, specified_path: str) -> None:
        return await self.view_file_history(specified_path)

    async def view_line_history(self, file: Optional[str] = None, line: Optional[int] = None) -> None:
        """History of a single line (the cursor line of the active file by default)."""
        file = file or self.editor.active_file
        if not file:
            return
        line = line or self.editor.active_line
        if not line:
            return

        repo = self._repo_for_path(file)
        if repo:
            self._view_history(HistoryViewContext(repo=repo, specified_path=str(file), line=int(line)))

    async def view_all_history(self) -> None:
        """Reload the current history without paging."""
        context = self.store.history_context
        if context is None:
            repos = self.catalog.known_repositories()
            if not repos:
                self.logger("No git repository available")
                return
            context = HistoryViewContext(repo=repos[0])
        self._view_history(context, load_all=True)

    async def view_branch_history(self, context: Optional[HistoryViewContext] = None) -> None:
        """Pick a ref and show its history.

        With a context (invoked from the history view) the repository and
        filters are kept and only the branch changes.
        """
        placeholder = "Select a ref to see its history"
        if context:
            repo = context.repo
            if context.specified_path:
                placeholder += f" of {Path(context.specified_path).name}"
        else:
            repo = await self._select_repo()
            if not repo:
                return
        placeholder += f" ({repo.root})"

        items = build_ref_choices(self.catalog, repo, mark_current=True)
        resolution = await self.resolver.resolve(items, placeholder)
        if not resolution.resolved:
            return

        if context:
            self._view_history(context.with_changes(branch=resolution.value))
        else:
            self._view_history(HistoryViewContext(repo=repo, branch=resolution.value))

    async def view_author_history(self) -> None:
        """Filter the current history by author ("All" clears the filter)."""
        context = self.store.history_context
        if context is None:
            raise MissingContextError("history view context should exist")

        items = build_author_choices(self.catalog, context.repo)
        resolution = await self.resolver.resolve(items, "Select an author to see their commits")
        if not resolution.resolved:
            return

        # The context may have been replaced while the list was open
        current = self.store.history_context or context
        self._view_history(current.with_changes(author=resolution.value or None))

    async def toggle_express_mode(self) -> None:
        express = self.dispatcher.toggle_express()
        self.logger(f"express mode {'on' if express else 'off'}")


COMMANDS.register('view-history', HistoryCommands.view_history)
COMMANDS.register('view-file-history', HistoryCommands.view_file_history)
COMMANDS.register('view-folder-history', HistoryCommands.view_folder_history)
COMMANDS.register('view-line-history', HistoryCommands.view_line_history)
COMMANDS.register('view-all-history', HistoryCommands.view_all_history)
COMMANDS.register('view-branch-history', HistoryCommands.view_branch_history)
COMMANDS.register('view-author-history', HistoryCommands.view_author_history)
COMMANDS.register('toggle-express-mode', HistoryCommands.toggle_express_mode)
