"""gitscope command handlers.

Importing this package fills the process-wide command table; constructing a
``CommandCenter`` binds that table to a host dispatcher.
"""

from typing import Callable, Optional

from .base import BaseCommands, COMMANDS, Editor, MissingContextError
from .history import HistoryCommands
from .diff import DiffCommands, INVALID_BRANCH
from ..catalog import ReferenceCatalog
from ..context import ContextDispatcher
from ..registry import CommandDispatcher, DuplicateCommandError
from ..resolver import InteractiveResolver


class CommandCenter(HistoryCommands, DiffCommands):
    """All command handlers, bound to a host for the lifetime of the object.

    Args:
        catalog: Reference catalog to query
        dispatcher: Publishes view contexts
        resolver: Runs the interactive rounds
        editor: Editor integration
        host: Host dispatcher the commands are bound to
        logger: Optional logging function
        on_error: Called with the command id and exception when a handler fails
    """

    def __init__(
        self,
        catalog: ReferenceCatalog,
        dispatcher: ContextDispatcher,
        resolver: InteractiveResolver,
        editor: Editor,
        host: CommandDispatcher,
        logger: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[str, BaseException], None]] = None,
    ):
        super().__init__(catalog, dispatcher, resolver, editor, logger)
        if COMMANDS.is_bound:
            raise DuplicateCommandError("Commands are already bound; dispose first")
        COMMANDS.logger = self.logger
        COMMANDS.on_error = on_error
        COMMANDS.bind_all(host, self)

    async def join(self) -> None:
        """Wait for every command still in flight."""
        await COMMANDS.join()

    def dispose(self) -> None:
        COMMANDS.dispose()


__all__ = [
    'BaseCommands',
    'COMMANDS',
    'CommandCenter',
    'DiffCommands',
    'Editor',
    'HistoryCommands',
    'INVALID_BRANCH',
    'MissingContextError',
]
