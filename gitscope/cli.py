"""Command-line interface for gitscope."""

import asyncio
import os
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .catalog import GitCatalog
from .commands import COMMANDS, CommandCenter
from .config import ViewerConfig, DEFAULT_PAGE_SIZE
from .console import ConsoleEditor, RichPrompter, _ask
from .context import ContextDispatcher, ViewContextStore
from .models import CommittedFile
from .registry import LocalDispatcher
from .resolver import InteractiveResolver
from .views import FilesView, HistoryView

console = Console()

# Commands whose first argument is a path on disk
PATH_COMMANDS = {
    'view-file-history',
    'view-folder-history',
    'view-line-history',
    'diff-file',
    'diff-folder',
}

SHELL_HELP = """\b
Shell builtins:
  open FILE [LINE]   set the active file (and line) for file/line history
  commands           list the bound commands
  help               show this text
  quit               leave the shell
"""


@dataclass
class Session:
    """Everything one gitscope session wires together."""
    config: ViewerConfig
    catalog: GitCatalog
    store: ViewContextStore
    dispatcher: ContextDispatcher
    prompter: RichPrompter
    editor: ConsoleEditor
    host: LocalDispatcher
    center: CommandCenter
    history_view: HistoryView
    files_view: FilesView

    def close(self) -> None:
        self.history_view.dispose()
        self.files_view.dispose()
        self.center.dispose()


def _make_logger(verbose: bool):
    if not verbose:
        return None
    return lambda msg: console.print(f"[dim]{escape(msg)}[/dim]")


def _report_failure(command_id: str, error: BaseException) -> None:
    console.print(f"[red]Error in {command_id}: {escape(str(error))}[/red]")


def build_session(config: ViewerConfig) -> Session:
    """Wire catalog, store, prompter, editor and views into a bound command center."""
    logger = _make_logger(config.verbose)
    catalog = GitCatalog(str(path) for path in config.repositories)
    store = ViewContextStore(express=config.express)
    dispatcher = ContextDispatcher(store, logger=logger)
    prompter = RichPrompter(console)
    editor = ConsoleEditor(catalog, console)
    host = LocalDispatcher()
    center = CommandCenter(
        catalog=catalog,
        dispatcher=dispatcher,
        resolver=InteractiveResolver(prompter, logger=logger),
        editor=editor,
        host=host,
        logger=logger,
        on_error=_report_failure,
    )
    return Session(
        config=config,
        catalog=catalog,
        store=store,
        dispatcher=dispatcher,
        prompter=prompter,
        editor=editor,
        host=host,
        center=center,
        history_view=HistoryView(catalog, store, console, page_size=config.page_size),
        files_view=FilesView(catalog, store, console),
    )


def coerce_args(session: Session, command_id: str, args: Sequence[str]) -> List[Any]:
    """Turn shell words into the positional arguments a handler expects.

    Raises:
        click.UsageError: If an argument cannot be converted
    """
    values: List[Any] = list(args)
    if command_id in PATH_COMMANDS and values:
        values[0] = os.path.abspath(values[0])
    if command_id == 'view-line-history' and len(values) > 1:
        if not str(values[1]).isdigit():
            raise click.UsageError(f"Line must be a number: {values[1]}")
        values[1] = int(values[1])
    if command_id == 'view-branch-history' and values:
        # Any argument means "keep the current history context"
        values = [session.store.history_context] if session.store.history_context else []
    if command_id == 'open-committed-file':
        if not values:
            raise click.UsageError("open-committed-file needs a file number or path")
        values = [_committed_file(session, values[0])]
    if command_id == 'open-line-diff':
        if not values:
            raise click.UsageError("open-line-diff needs a file with the diff content")
        values = [Path(values[0]).read_text(encoding='utf-8')]
    return values


def _committed_file(session: Session, word: str) -> CommittedFile:
    if word.isdigit():
        file = session.files_view.file_at(int(word))
        if file is None:
            raise click.UsageError(f"No committed file #{word}")
        return file
    repo = session.store.files_context.repo
    if repo is None:
        raise click.UsageError("No files context: run diff-branches, diff-file or input-ref first")
    return CommittedFile(repo=repo, git_relative_path=word)


async def run_command(session: Session, command_id: str, args: Sequence[str]) -> None:
    """Invoke one command and wait for its interactive flow to finish."""
    if not session.host.has_command(command_id):
        raise click.UsageError(f"Unknown command: {command_id}")
    session.host.execute(command_id, *coerce_args(session, command_id, args))
    await session.center.join()


def _print_commands() -> None:
    table = Table(title="Commands", show_header=True, header_style="bold cyan")
    table.add_column("Command", style="green")
    table.add_column("Description")
    for command_id in COMMANDS.command_ids():
        doc = COMMANDS.handler_for(command_id).__doc__ or ""
        table.add_row(command_id, doc.strip().split('\n')[0])
    console.print(table)


async def _shell(session: Session) -> None:
    console.print(f"\n[bold blue]gitscope {__version__}[/bold blue] "
                  f"[dim]({escape(', '.join(str(p) for p in session.config.repositories))})[/dim]")
    console.print("[dim]Type 'commands' for the command list, 'quit' to leave.[/dim]\n")

    while True:
        line = await asyncio.to_thread(_ask, console, "[bold green]gitscope[/bold green]")
        if line is None:
            break
        try:
            words = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            continue
        if not words:
            continue

        name, args = words[0], words[1:]
        if name in ('quit', 'exit'):
            break
        if name == 'help':
            console.print(SHELL_HELP)
        elif name == 'commands':
            _print_commands()
        elif name == 'open':
            if not args:
                console.print("[yellow]Usage: open FILE [LINE][/yellow]")
                continue
            line_no = int(args[1]) if len(args) > 1 and args[1].isdigit() else None
            session.editor.open(os.path.abspath(args[0]), line_no)
            console.print(f"[cyan]Active file:[/cyan] {escape(args[0])}" + (f":{line_no}" if line_no else ""))
        else:
            try:
                await run_command(session, name, args)
            except (click.UsageError, OSError) as e:
                console.print(f"[red]{escape(str(e))}[/red]")


def session_options(func):
    """Options shared by the session commands."""
    func = click.option('--verbose', '-v', is_flag=True,
                        help="Print diagnostic messages")(func)
    func = click.option('--page-size', type=int, default=DEFAULT_PAGE_SIZE, envvar='GITSCOPE_PAGE_SIZE',
                        show_default=True,
                        help="Commits per history page. Can also be set via GITSCOPE_PAGE_SIZE.")(func)
    func = click.option('--express', is_flag=True, envvar='GITSCOPE_EXPRESS',
                        help="Start with the compact history listing. "
                             "Can also be set via GITSCOPE_EXPRESS.")(func)
    func = click.option('--repo', '-r', 'repos', multiple=True, envvar='GITSCOPE_REPOS',
                        help="Repository path (repeatable). Can also be set via GITSCOPE_REPOS, "
                             "separated by the OS path separator. Defaults to the current directory.")(func)
    return func


def _config(repos, express, page_size, verbose) -> ViewerConfig:
    try:
        return ViewerConfig.from_cli_args(repos=repos, express=express, page_size=page_size, verbose=verbose)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.version_option(version=__version__)
def cli():
    """gitscope - Interactive git history browser.

    \b
    Browse the history of a repository, a file, a line, a branch or an
    author, and diff branches, commits and files, by answering a few
    pick-list questions.

    \b
    Quick Start:
      gitscope shell --repo /path/to/repo
      gitscope run diff-branches
    """
    pass


@cli.command()
@session_options
def shell(repos, express, page_size, verbose):
    """Start an interactive gitscope shell."""
    session = build_session(_config(repos, express, page_size, verbose))
    try:
        asyncio.run(_shell(session))
    except KeyboardInterrupt:
        console.print()
    finally:
        session.close()


@cli.command()
@click.argument('command_id')
@click.argument('args', nargs=-1)
@session_options
def run(command_id, args, repos, express, page_size, verbose):
    """Run a single command, e.g. `gitscope run view-file-history README.md`."""
    session = build_session(_config(repos, express, page_size, verbose))
    try:
        asyncio.run(run_command(session, command_id, args))
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    finally:
        session.close()


@cli.command('commands')
def list_commands():
    """List the available commands."""
    _print_commands()


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
