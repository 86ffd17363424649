"""Console renderings of the published contexts."""

from typing import List, Optional

from git.exc import BadName, BadObject, GitCommandError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .catalog import ReferenceCatalog
from .context import ViewContextStore
from .models import CommittedFile, FilesViewContext, HistoryViewContext

GIT_ERRORS = (GitCommandError, BadName, BadObject, ValueError)


class HistoryView:
    """Lists commits for the current history context."""

    def __init__(self, catalog: ReferenceCatalog, store: ViewContextStore,
                 console: Optional[Console] = None, page_size: int = 200):
        self.catalog = catalog
        self.store = store
        self.console = console or Console()
        self.page_size = page_size
        self._subscriptions = [
            store.on_history_changed(self.render),
            store.on_express_changed(lambda express: self.refresh()),
        ]

    def refresh(self) -> None:
        if self.store.history_context is not None:
            self.render(self.store.history_context, self.store.load_all)

    def render(self, context: HistoryViewContext, load_all: bool = False) -> None:
        max_count = None if load_all else self.page_size
        try:
            commits = self.catalog.list_commits(context, max_count=max_count)
        except GIT_ERRORS as e:
            self.console.print(f"[red]Cannot load history: {escape(str(e))}[/red]")
            return

        table = Table(title=escape(self._title(context)), show_header=True, header_style="bold cyan")
        table.add_column("Commit", style="yellow")
        table.add_column("Summary")
        if not self.store.express:
            table.add_column("Author", style="green")
            table.add_column("Date", style="dim")

        for commit in commits:
            if self.store.express:
                table.add_row(commit.short_sha, escape(commit.summary))
            else:
                table.add_row(commit.short_sha, escape(commit.summary),
                              escape(commit.author_name), commit.date[:19])

        self.console.print(table)
        if max_count and len(commits) >= max_count:
            self.console.print("[dim]More commits available: run view-all-history[/dim]")

    @staticmethod
    def _title(context: HistoryViewContext) -> str:
        parts = [context.repo.name, context.branch or "HEAD"]
        if context.specified_path:
            parts.append(context.specified_path)
        if context.line:
            parts.append(f"line {context.line}")
        if context.author:
            parts.append(f"by {context.author}")
        return " | ".join(parts)

    def dispose(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()


class FilesView:
    """Lists the files changed between the two sides of the files context."""

    def __init__(self, catalog: ReferenceCatalog, store: ViewContextStore,
                 console: Optional[Console] = None):
        self.catalog = catalog
        self.store = store
        self.console = console or Console()
        self.files: List[CommittedFile] = []
        self._subscription = store.on_files_changed(self.render)

    def render(self, context: FilesViewContext) -> None:
        self.files = []
        if context.is_empty:
            self.console.print("[dim]Committed files cleared[/dim]")
            return

        try:
            self.files = self.catalog.list_committed_files(
                context.repo, context.effective_left_ref, context.right_ref, context.specified_path
            )
        except GIT_ERRORS as e:
            self.console.print(f"[red]Cannot load committed files: {escape(str(e))}[/red]")
            return

        title = f"{context.left_ref} .. {context.right_ref}" if context.left_ref else context.right_ref
        table = Table(title=escape(title), show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Status", style="yellow")
        table.add_column("File")
        for index, file in enumerate(self.files, 1):
            table.add_row(str(index), file.status, escape(file.git_relative_path))
        self.console.print(table)

    def file_at(self, index: int) -> Optional[CommittedFile]:
        """1-based lookup used by the shell's ``open-committed-file N``."""
        if 1 <= index <= len(self.files):
            return self.files[index - 1]
        return None

    def dispose(self) -> None:
        self._subscription.dispose()
