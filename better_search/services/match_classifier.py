from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Sequence

from better_search.services.position import offsets_to_position
from better_search.services.section import section_containing

if TYPE_CHECKING:
    from better_search.core.host_adapter import Match


class MatchKind(str, Enum):
    CODE = "code"
    PROPERTY = "property"
    NORMAL = "normal"


def classify(
    match: Match,
    *,
    to_position: Callable = offsets_to_position,
    find_section: Callable = section_containing,
) -> MatchKind:
    if match.is_property_match:
        return MatchKind.PROPERTY
    structure = match.structure
    if structure is None or not structure.sections or match.range is None:
        return MatchKind.NORMAL

    start, end = match.range
    section = find_section(to_position(match.content, start, end), structure.sections)
    if section is not None and section.type == "code":
        return MatchKind.CODE
    return MatchKind.NORMAL


@dataclass(slots=True)
class Partition:
    code: list[Match] = field(default_factory=list)
    non_code: list[Match] = field(default_factory=list)

    @property
    def all_code(self) -> bool:
        return not self.non_code

    @property
    def has_property_match(self) -> bool:
        return any(match.is_property_match for match in self.non_code)


def partition_matches(
    matches: Sequence[Match],
    *,
    to_position: Callable = offsets_to_position,
    find_section: Callable = section_containing,
) -> Partition:
    out = Partition()
    for match in matches:
        kind = classify(match, to_position=to_position, find_section=find_section)
        if kind is MatchKind.CODE:
            out.code.append(match)
        else:
            out.non_code.append(match)
    return out
