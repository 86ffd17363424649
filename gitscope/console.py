"""Terminal implementations of the prompter and editor seams."""

import asyncio
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.syntax import Syntax
from rich.table import Table

from .catalog import ReferenceCatalog
from .commands import Editor
from .models import Repository
from .picks import ManualEntry, PickItem
from .resolver import Prompter


def _ask(console: Console, prompt: str) -> Optional[str]:
    try:
        return Prompt.ask(prompt, console=console, default="", show_default=False)
    except EOFError:
        return None


class RichPrompter(Prompter):
    """Numbered pick lists and text prompts on a rich console.

    Blank or out-of-range answers dismiss the list.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    async def pick(self, items: Sequence[PickItem], placeholder: str) -> Optional[PickItem]:
        if not items:
            self.print_warning("Nothing to pick from")
            return None

        table = Table(title=escape(placeholder), show_header=False, title_justify="left")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Label")
        table.add_column("Description", style="dim")
        for index, item in enumerate(items, 1):
            label = escape(item.label)
            if isinstance(item, ManualEntry):
                label = f"[italic]{label}[/italic]"
            table.add_row(str(index), label, escape(item.description))
        self.console.print(table)

        answer = await asyncio.to_thread(_ask, self.console, "[bold]Pick a number[/bold] (blank to cancel)")
        if not answer or not answer.strip().isdigit():
            return None
        index = int(answer.strip())
        if 1 <= index <= len(items):
            return items[index - 1]
        return None

    async def input_text(self, prompt: str, placeholder: Optional[str] = None) -> Optional[str]:
        question = f"[bold]{escape(prompt)}[/bold]"
        if placeholder:
            question += f" [dim]({escape(placeholder)})[/dim]"
        return await asyncio.to_thread(_ask, self.console, question)

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def show_info(self, message: str) -> None:
        self.console.print(f"[cyan]{escape(message)}[/cyan]")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")


class ConsoleEditor(Editor):
    """Prints diffs to the console.

    The shell's ``open`` builtin sets the active file and line that the
    file and line history commands fall back to.
    """

    def __init__(self, catalog: ReferenceCatalog, console: Optional[Console] = None):
        self.catalog = catalog
        self.console = console or Console()
        self._active_file: Optional[str] = None
        self._active_line: Optional[int] = None

    @property
    def active_file(self) -> Optional[str]:
        return self._active_file

    @property
    def active_line(self) -> Optional[int]:
        return self._active_line

    def open(self, path: Optional[str], line: Optional[int] = None) -> None:
        self._active_file = path
        self._active_line = line

    def show_diff(self, repo: Repository, path: str, left_ref: str, right_ref: str, title: str) -> None:
        text = self.catalog.diff_text(repo, left_ref, right_ref, path)
        self.console.rule(f"[bold cyan]{escape(title)}[/bold cyan]")
        if text:
            self.console.print(Syntax(text, "diff", theme="ansi_dark"))
        else:
            self.console.print("[dim]No differences[/dim]")

    def show_line_diff(self, content: str) -> None:
        self.console.rule("[bold cyan]Line diff[/bold cyan]")
        self.console.print(Syntax(content, "diff", theme="ansi_dark"))
