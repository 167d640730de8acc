"""Unified diffs between the on-disk and re-serialized form of a document"""

import difflib


def unified_diff(
    old: str,
    new: str,
    from_label: str = "original",
    to_label: str = "serialized",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Lines keep their newlines; join with '' for display.
    """
    return list(difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=from_label,
        tofile=to_label,
        n=context,
    ))


def changed_lines(old: str, new: str) -> int:
    """Count of added plus deleted lines."""
    # The first two lines are the ---/+++ file headers
    return sum(1 for line in unified_diff(old, new, context=0)[2:] if line[:1] in ("+", "-"))
