from __future__ import annotations

from better_search.services.metadata_cache import Loc, Position


def loc_from_offset(content: str, offset: int) -> Loc:
    offset = max(0, min(int(offset), len(content)))
    line = content.count("\n", 0, offset)
    line_start = content.rfind("\n", 0, offset) + 1
    return Loc(line=line, col=offset - line_start, offset=offset)


def offsets_to_position(content: str, start: int, end: int) -> Position:
    """Line/column position of the ``[start, end)`` range in ``content``."""
    text = str(content or "")
    return Position(start=loc_from_offset(text, start), end=loc_from_offset(text, end))
