"""Parsing of ``git branch`` listings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .errors import BranchStateError

CURRENT_MARKER = "* "
NO_BRANCH = "(no branch)"


@dataclass(frozen=True)
class BranchListing:
    """The lines of a ``git branch`` listing and the one marked current."""

    lines: list[str]
    current: str

    @property
    def detached(self) -> bool:
        # Older git prints "(no branch)", newer "(HEAD detached at <sha>)".
        return self.current == NO_BRANCH or self.current.startswith("(HEAD detached")


def parse_branch_listing(output: str, module: str) -> BranchListing:
    """Parse ``git branch`` output.

    Raises:
        BranchStateError: If zero or several lines are marked current.
    """
    lines = [line for line in output.split("\n") if line]
    current = [line for line in lines if line.startswith(CURRENT_MARKER)]
    if len(current) != 1:
        raise BranchStateError(f"Unable to determine branch of {module}", module)
    return BranchListing(lines, current[0][len(CURRENT_MARKER):])


def choose_target_branch(
    module: str,
    listing: BranchListing,
    preferred: Mapping[str, str],
) -> str:
    """Pick the branch to switch a detached module to.

    A preferred branch configured for the module wins; otherwise the
    entry following the detached marker is used, which normally is the
    default branch.
    """
    if module in preferred:
        return preferred[module]
    if len(listing.lines) < 2:
        raise BranchStateError(f"Unable to determine suitable branch for {module}", module)
    return listing.lines[1][2:]
