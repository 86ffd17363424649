"""Committed-files and diff commands."""

from pathlib import Path

from .base import BaseCommands, COMMANDS, MissingContextError
from ..models import CommittedFile, FilesViewContext
from ..picks import build_ref_choices
from ..resolver import InvalidSelectionError

INVALID_BRANCH = "Invalid Branch"


class DiffCommands(BaseCommands):
    """Commands that publish a files context or open diffs."""

    async def clear_context(self) -> None:
        self.dispatcher.clear()

    async def diff_branches(self) -> None:
        """Pick a source then a target ref and diff them.

        Both rounds are mandatory: an abort in either one shows
        "Invalid Branch" and publishes nothing.
        """
        repo = await self._select_repo()
        if not repo:
            return

        try:
            source = await self.resolver.resolve(
                build_ref_choices(self.catalog, repo, allow_manual_entry=True, mark_current=True),
                f"Select source branch to compare ({repo.root})",
                "Input a ref(sha1) as a source branch",
            )
            left_ref = self.resolver.require(source, INVALID_BRANCH)

            target = await self.resolver.resolve(
                build_ref_choices(self.catalog, repo, allow_manual_entry=True),
                f"Select target branch to compare with {left_ref} ({repo.root})",
                "Input a ref(sha1) as a target branch",
            )
            right_ref = self.resolver.require(target, INVALID_BRANCH)
        except InvalidSelectionError:
            return

        self.dispatcher.publish_files(FilesViewContext(repo=repo, left_ref=left_ref, right_ref=right_ref))

    async def diff_file(self, specified_path: str) -> None:
        """Diff a file or folder between a picked ref and the current branch."""
        if not specified_path:
            return
        repo = self._repo_for_path(specified_path)
        if not repo:
            return

        # Detached HEAD has no branch name; compare against HEAD itself
        current_ref = self.catalog.current_branch_name(repo) or "HEAD"
        resolution = await self.resolver.resolve(
            build_ref_choices(self.catalog, repo, allow_manual_entry=True),
            f"Select a ref to see the diff of {Path(specified_path).name}",
            f"Input a ref(sha1) to compare with {current_ref}",
        )
        if not resolution.resolved:
            return

        self.dispatcher.publish_files(FilesViewContext(
            repo=repo,
            left_ref=resolution.value,
            right_ref=current_ref,
            specified_path=str(specified_path),
        ))

    async def diff_folder(self, specified_path: str) -> None:
        return await self.diff_file(specified_path)

    async def input_ref(self) -> None:
        """Show the files committed by a typed ref."""
        repo = await self._select_repo()
        if not repo:
            return

        resolution = await self.resolver.resolve_text(
            "Input a ref(sha1) to see its committed files",
            placeholder="sha1, branch or tag",
        )
        if resolution.resolved:
            self.dispatcher.publish_files(FilesViewContext(repo=repo, right_ref=resolution.value))

    async def open_committed_file(self, file: CommittedFile) -> None:
        """Open the diff of one committed file from the files view."""
        context = self.store.files_context
        if not context.right_ref:
            raise MissingContextError("files view context should exist")

        right_ref = context.right_ref
        left_ref = context.effective_left_ref
        title = f"{left_ref} .. {right_ref}" if context.left_ref else right_ref
        self.editor.show_diff(file.repo, file.git_relative_path, left_ref, right_ref,
                              f"{title} | {file.base_name}")

    async def open_line_diff(self, content: str) -> None:
        self.editor.show_line_diff(content)


COMMANDS.register('clear-context', DiffCommands.clear_context)
COMMANDS.register('diff-branches', DiffCommands.diff_branches)
COMMANDS.register('diff-file', DiffCommands.diff_file)
COMMANDS.register('diff-folder', DiffCommands.diff_folder)
COMMANDS.register('input-ref', DiffCommands.input_ref)
COMMANDS.register('open-committed-file', DiffCommands.open_committed_file)
COMMANDS.register('open-line-diff', DiffCommands.open_line_diff)
