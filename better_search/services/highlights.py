from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from better_search.core.host_adapter import Match

WIKI_LINK_BRACKETS_RE = re.compile(r"\[\[|\]\]")


def extract_highlight(match: Match) -> str:
    # TODO: use every range of the match once multi-range highlighting is decided on.
    if match.range is None:
        return ""
    start, end = match.range
    return WIKI_LINK_BRACKETS_RE.sub("", match.content[start:end].lower())


def dedupe(highlights: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(highlights))


def highlights_for(matches: Iterable[Match]) -> list[str]:
    return dedupe(extract_highlight(match) for match in matches)
