"""Configuration for a gitscope session."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

DEFAULT_PAGE_SIZE = 200


@dataclass(frozen=True)
class ViewerConfig:
    """Immutable settings for one session.

    Built from CLI options; click resolves the matching ``GITSCOPE_*``
    environment variables before they get here.
    """

    repositories: Tuple[Path, ...] = (Path('.'),)
    express: bool = False
    page_size: int = DEFAULT_PAGE_SIZE
    verbose: bool = False

    @classmethod
    def from_cli_args(
        cls,
        repos: Iterable[str] = (),
        express: bool = False,
        page_size: Optional[int] = None,
        verbose: bool = False,
    ) -> 'ViewerConfig':
        """Factory method to create config from CLI arguments.

        Args:
            repos: Repository paths; each entry may itself hold several
                paths joined with the OS path separator (as
                ``GITSCOPE_REPOS`` does)
            express: Start the history view in express mode
            page_size: Commits per history page (0 or None for the default)
            verbose: Print diagnostic messages

        Returns:
            Configured ViewerConfig instance

        Raises:
            ValueError: If page_size is negative
        """
        paths = []
        for entry in repos or ():
            for part in str(entry).split(os.pathsep):
                if part and Path(part).resolve() not in paths:
                    paths.append(Path(part).resolve())
        if page_size is not None and page_size < 0:
            raise ValueError("page size must not be negative")

        return cls(
            repositories=tuple(paths) or (Path('.').resolve(),),
            express=express,
            page_size=page_size or DEFAULT_PAGE_SIZE,
            verbose=verbose,
        )
