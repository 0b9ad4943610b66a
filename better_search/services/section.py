from __future__ import annotations

from typing import Sequence

from better_search.services.metadata_cache import Position, Section


def section_containing(position: Position, sections: Sequence[Section] | None) -> Section | None:
    if not sections:
        return None
    line = position.start.line
    for section in sections:
        if section.position.start.line <= line <= section.position.end.line:
            return section
    return None
