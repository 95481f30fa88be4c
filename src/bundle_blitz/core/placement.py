from collections.abc import Sequence

from bundle_blitz.models import LintIssue, PlacedIssue

DEFAULT_LINE_HEIGHT_PX = 24


def place(issues: Sequence[LintIssue], line_height_px: int = DEFAULT_LINE_HEIGHT_PX) -> list[PlacedIssue]:
    """Compute overlay offsets for line-addressed issues.

    Issues without a line keep ``top_offset_px=None``. Offsets are not clamped
    to the document height.
    """
    placed: list[PlacedIssue] = []
    for issue in issues:
        offset = None if issue.line is None else (issue.line - 1) * line_height_px
        placed.append(PlacedIssue(issue=issue, top_offset_px=offset))
    return placed
