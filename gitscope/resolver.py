"""Interactive resolution of user intent.

A resolution round presents a pick list, waits for the user, and interprets
the answer:

    PRESENT --cancel--------------------------> ABORTED
    PRESENT --real choice---------------------> RESOLVED(choice value)
    PRESENT --manual entry--> FREE_TEXT --text--> RESOLVED(trimmed text)
                                        --empty/cancel--> ABORTED

Rounds never touch the catalog; they only see pre-built pick items. Commands
that need several values run several rounds and inspect each outcome.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Set

from .models import Repository
from .picks import ManualEntry, PickItem, RealChoice, RepoChoice, build_repo_choices


class InvalidSelectionError(Exception):
    """Raised when a mandatory round did not resolve to a value."""
    pass


class Prompter(ABC):
    """The user-facing side of a resolution round."""

    @abstractmethod
    async def pick(self, items: Sequence[PickItem], placeholder: str) -> Optional[PickItem]:
        """Show a pick list. Returns None when the user dismisses it."""
        pass

    @abstractmethod
    async def input_text(self, prompt: str, placeholder: Optional[str] = None) -> Optional[str]:
        """Ask for free text. Returns None when the user dismisses it."""
        pass

    @abstractmethod
    def show_error(self, message: str) -> None:
        pass

    def show_info(self, message: str) -> None:
        pass


class ResolutionState(Enum):
    """States of a resolution round."""
    PRESENT = "present"
    FREE_TEXT = "free_text"
    RESOLVED = "resolved"
    ABORTED = "aborted"


TRANSITIONS: Dict[ResolutionState, Set[ResolutionState]] = {
    ResolutionState.PRESENT: {
        ResolutionState.FREE_TEXT,
        ResolutionState.RESOLVED,
        ResolutionState.ABORTED,
    },
    ResolutionState.FREE_TEXT: {
        ResolutionState.RESOLVED,
        ResolutionState.ABORTED,
    },
    ResolutionState.RESOLVED: set(),  # Terminal state
    ResolutionState.ABORTED: set(),   # Terminal state
}


@dataclass(frozen=True)
class Resolution:
    """Outcome of one round."""
    state: ResolutionState
    value: Optional[str] = None
    item: Optional[PickItem] = None

    @classmethod
    def aborted(cls) -> 'Resolution':
        return cls(ResolutionState.ABORTED)

    @classmethod
    def of(cls, value: str, item: Optional[PickItem] = None) -> 'Resolution':
        return cls(ResolutionState.RESOLVED, value=value, item=item)

    @property
    def resolved(self) -> bool:
        return self.state == ResolutionState.RESOLVED


class InteractiveResolver:
    """Runs resolution rounds against a prompter.

    Args:
        prompter: UI seam used to present lists and text boxes
        logger: Optional logging function
    """

    def __init__(self, prompter: Prompter, logger: Optional[Callable[[str], None]] = None):
        self.prompter = prompter
        self.logger = logger or (lambda msg: None)

    def _advance(self, state: ResolutionState, to_state: ResolutionState) -> ResolutionState:
        if to_state not in TRANSITIONS[state]:
            raise RuntimeError(f"Invalid resolution transition {state.value} -> {to_state.value}")
        self.logger(f"resolution: {state.value} -> {to_state.value}")
        return to_state

    async def resolve(
        self,
        items: Sequence[PickItem],
        placeholder: str,
        input_title: Optional[str] = None,
    ) -> Resolution:
        """Run one round over ``items``.

        Args:
            items: Pick items to present
            placeholder: Text shown with the pick list
            input_title: Prompt of the free-text box opened by the
                manual entry sentinel

        Returns:
            RESOLVED with the picked or typed value, or ABORTED
        """
        state = ResolutionState.PRESENT
        item = await self.prompter.pick(items, placeholder)

        if item is None:
            self._advance(state, ResolutionState.ABORTED)
            return Resolution.aborted()

        if isinstance(item, ManualEntry):
            state = self._advance(state, ResolutionState.FREE_TEXT)
            return await self._free_text(state, input_title or item.label, None, item)

        self._advance(state, ResolutionState.RESOLVED)
        if isinstance(item, RealChoice):
            return Resolution.of(item.resolved_value, item)
        return Resolution.of(item.label, item)

    async def resolve_text(self, prompt: str, placeholder: Optional[str] = None) -> Resolution:
        """Run a round that goes straight to the free-text box."""
        state = self._advance(ResolutionState.PRESENT, ResolutionState.FREE_TEXT)
        return await self._free_text(state, prompt, placeholder, None)

    async def _free_text(
        self,
        state: ResolutionState,
        prompt: str,
        placeholder: Optional[str],
        item: Optional[PickItem],
    ) -> Resolution:
        text = await self.prompter.input_text(prompt, placeholder)
        value = text.strip() if text else ""
        if not value:
            self._advance(state, ResolutionState.ABORTED)
            return Resolution.aborted()
        self._advance(state, ResolutionState.RESOLVED)
        return Resolution.of(value, item)

    async def select_repository(
        self,
        repos: Sequence[Repository],
        placeholder: str = "Select the git repo",
    ) -> Optional[Repository]:
        """Pick one repository.

        A single repository is returned without prompting.

        Raises:
            NoRepositoryError: If ``repos`` is empty (nothing is shown)
        """
        choices = build_repo_choices(repos)
        if len(choices) == 1:
            return choices[0].repo

        item = await self.prompter.pick(choices, placeholder)
        if isinstance(item, RepoChoice):
            return item.repo
        return None

    def require(self, resolution: Resolution, message: str) -> str:
        """Value of a mandatory round.

        Raises:
            InvalidSelectionError: After showing ``message``, if the round aborted
        """
        if not resolution.resolved:
            self.prompter.show_error(message)
            raise InvalidSelectionError(message)
        return resolution.value
