"""View-context store and the dispatcher that publishes into it.

The store owns the single "current" history context and files context.
Nothing outside this module assigns them; commands go through
``ContextDispatcher``, which swaps in a whole new value and then notifies the
views. Concurrent flows are not serialized: the last publish wins.
"""

from typing import Callable, List, Optional

from .models import FilesViewContext, HistoryViewContext
from .registry import Disposable

HistoryListener = Callable[[HistoryViewContext, bool], None]
FilesListener = Callable[[FilesViewContext], None]
ExpressListener = Callable[[bool], None]


class InvalidContextError(ValueError):
    """Raised when a context cannot be published."""
    pass


class ViewContextStore:
    """Holds the contexts the views render."""

    def __init__(self, express: bool = False):
        self._history_context: Optional[HistoryViewContext] = None
        self._files_context: FilesViewContext = FilesViewContext.empty()
        self._load_all = False
        self._express = express
        self._history_listeners: List[HistoryListener] = []
        self._files_listeners: List[FilesListener] = []
        self._express_listeners: List[ExpressListener] = []

    @property
    def history_context(self) -> Optional[HistoryViewContext]:
        return self._history_context

    @property
    def files_context(self) -> FilesViewContext:
        return self._files_context

    @property
    def load_all(self) -> bool:
        """Whether the last history publish asked for a full reload."""
        return self._load_all

    @property
    def express(self) -> bool:
        return self._express

    def on_history_changed(self, listener: HistoryListener) -> Disposable:
        return self._subscribe(self._history_listeners, listener)

    def on_files_changed(self, listener: FilesListener) -> Disposable:
        return self._subscribe(self._files_listeners, listener)

    def on_express_changed(self, listener: ExpressListener) -> Disposable:
        return self._subscribe(self._express_listeners, listener)

    @staticmethod
    def _subscribe(listeners: list, listener) -> Disposable:
        listeners.append(listener)
        return Disposable(lambda: listeners.remove(listener) if listener in listeners else None)

    def _replace_history(self, context: HistoryViewContext, load_all: bool) -> None:
        self._history_context = context
        self._load_all = load_all
        for listener in list(self._history_listeners):
            listener(context, load_all)

    def _replace_files(self, context: FilesViewContext) -> None:
        self._files_context = context
        for listener in list(self._files_listeners):
            listener(context)

    def _set_express(self, express: bool) -> None:
        self._express = express
        for listener in list(self._express_listeners):
            listener(express)


class ContextDispatcher:
    """Publishes new contexts into a store.

    Args:
        store: The store that owns the current contexts
        logger: Optional logging function
    """

    def __init__(self, store: ViewContextStore, logger: Optional[Callable[[str], None]] = None):
        self.store = store
        self.logger = logger or (lambda msg: None)

    def publish_history(self, context: HistoryViewContext, load_all: bool = False) -> None:
        """Replace the history context.

        Args:
            context: New context
            load_all: Ask the view for a full reload instead of paging
        """
        if context is None or context.repo is None:
            raise InvalidContextError("A history context needs a repository")
        self.logger(f"history context -> {context}")
        self.store._replace_history(context, load_all)

    def publish_files(self, context: FilesViewContext) -> None:
        """Replace the files context.

        A missing ``left_ref`` is fine (the view compares against the parent
        of ``right_ref``); a missing ``right_ref`` is not.

        Raises:
            InvalidContextError: If ``right_ref`` is absent
        """
        if not context.right_ref:
            raise InvalidContextError("A files context needs a right reference")
        self.logger(f"files context -> {context}")
        self.store._replace_files(context)

    def clear(self) -> None:
        """Publish the empty files context."""
        self.logger("files context cleared")
        self.store._replace_files(FilesViewContext.empty())

    def toggle_express(self) -> bool:
        """Flip express mode and return the new value."""
        express = not self.store.express
        self.store._set_express(express)
        return express
