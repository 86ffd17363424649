"""Command registration and binding to a host dispatcher.

Handlers are recorded in a ``CommandRegistry`` with ordinary ``register``
calls when their module is imported. The command center binds the whole
table to the host once, at construction. Invoking a bound command never
blocks the host: the handler coroutine is scheduled and its result ignored.
"""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Set


class DuplicateCommandError(Exception):
    """Raised when a command id is registered or bound twice."""
    pass


class Disposable:
    """Handle that undoes a registration when disposed."""

    def __init__(self, on_dispose: Optional[Callable[[], None]] = None):
        self._on_dispose = on_dispose

    def dispose(self) -> None:
        if self._on_dispose is not None:
            self._on_dispose()
            self._on_dispose = None


class CommandDispatcher(ABC):
    """Host side of command invocation."""

    @abstractmethod
    def register_command(self, command_id: str, callback: Callable[..., Any]) -> Disposable:
        pass


class LocalDispatcher(CommandDispatcher):
    """In-process host that invokes commands by id."""

    def __init__(self):
        self._commands: Dict[str, Callable[..., Any]] = {}

    def register_command(self, command_id: str, callback: Callable[..., Any]) -> Disposable:
        if command_id in self._commands:
            raise DuplicateCommandError(f"Command already bound: {command_id}")
        self._commands[command_id] = callback
        return Disposable(lambda: self._commands.pop(command_id, None))

    def has_command(self, command_id: str) -> bool:
        return command_id in self._commands

    def command_ids(self) -> List[str]:
        return sorted(self._commands)

    def execute(self, command_id: str, *args: Any) -> Any:
        """Invoke a bound command.

        Raises:
            KeyError: If no command is bound under ``command_id``
        """
        if command_id not in self._commands:
            raise KeyError(f"Unknown command: {command_id}")
        return self._commands[command_id](*args)


class CommandRegistry:
    """Table of command ids and their handler functions.

    Args:
        logger: Optional logging function, also used to report failed handlers
    """

    def __init__(self, logger: Optional[Callable[[str], None]] = None):
        self._handlers: Dict[str, Callable[..., Any]] = {}
        self._bindings: List[Disposable] = []
        self._tasks: Set[asyncio.Future] = set()
        self.logger = logger or (lambda msg: None)
        self.on_error: Optional[Callable[[str, BaseException], None]] = None

    def register(self, command_id: str, handler: Callable[..., Any]) -> None:
        """Add a handler to the table.

        Raises:
            DuplicateCommandError: If ``command_id`` is already registered
        """
        if command_id in self._handlers:
            raise DuplicateCommandError(f"Command already registered: {command_id}")
        self._handlers[command_id] = handler

    def command_ids(self) -> List[str]:
        return list(self._handlers)

    def handler_for(self, command_id: str) -> Callable[..., Any]:
        return self._handlers[command_id]

    @property
    def is_bound(self) -> bool:
        return bool(self._bindings)

    def bind_all(self, dispatcher: CommandDispatcher, target: Any = None) -> None:
        """Install one listener per registered command on ``dispatcher``.

        Args:
            dispatcher: Host to bind to
            target: Passed as the first argument to every handler (the
                command center for method handlers)

        Raises:
            DuplicateCommandError: If already bound and not disposed
        """
        if self._bindings:
            raise DuplicateCommandError("Commands are already bound; dispose first")

        try:
            for command_id, handler in self._handlers.items():
                listener = self._make_listener(command_id, handler, target)
                self._bindings.append(dispatcher.register_command(command_id, listener))
        except DuplicateCommandError:
            self.dispose()
            raise
        self.logger(f"Bound {len(self._bindings)} commands")

    def _make_listener(self, command_id: str, handler: Callable[..., Any], target: Any):
        def listener(*args: Any) -> None:
            call_args = (target,) + args if target is not None else args
            result = handler(*call_args)
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(lambda t: self._finished(command_id, t))
        return listener

    def _finished(self, command_id: str, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        if self.on_error is not None:
            self.on_error(command_id, error)
        else:
            self.logger(f"Command '{command_id}' failed: {error}")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def join(self) -> None:
        """Wait until every scheduled handler has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def dispose(self) -> None:
        """Remove every listener installed by ``bind_all``."""
        for binding in self._bindings:
            binding.dispose()
        self._bindings = []
