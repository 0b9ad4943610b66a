"""Typed views over the structural metadata the host attaches to a document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Loc:
    line: int
    col: int
    offset: int


@dataclass(frozen=True, slots=True)
class Position:
    start: Loc
    end: Loc


@dataclass(frozen=True, slots=True)
class Section:
    type: str
    position: Position


@dataclass(frozen=True, slots=True)
class Heading:
    heading: str
    level: int
    position: Position


@dataclass(frozen=True, slots=True)
class ListItem:
    parent: int
    position: Position


@dataclass(frozen=True, slots=True)
class StructureInfo:
    sections: tuple[Section, ...] = ()
    headings: tuple[Heading, ...] = ()
    list_items: tuple[ListItem, ...] = ()

    def as_metadata(self) -> dict[str, Any]:
        return {
            "sections": self.sections,
            "headings": self.headings,
            "list_items": self.list_items,
        }


def loc_from_mapping(raw: Mapping[str, Any]) -> Loc:
    return Loc(line=int(raw["line"]), col=int(raw.get("col", 0)), offset=int(raw["offset"]))


def position_from_mapping(raw: Any) -> Position:
    if isinstance(raw, Position):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"Position must be a mapping, found {type(raw).__name__}.")
    return Position(start=loc_from_mapping(raw["start"]), end=loc_from_mapping(raw["end"]))


def structure_from_cache(cache: Any) -> StructureInfo | None:
    """Convert a host metadata mapping into ``StructureInfo``.

    Returns ``None`` when the host attached no metadata at all.
    """
    if cache is None:
        return None
    if isinstance(cache, StructureInfo):
        return cache
    if not isinstance(cache, Mapping):
        raise ValueError(f"Structure cache must be a mapping, found {type(cache).__name__}.")

    sections = tuple(
        Section(type=str(item.get("type") or ""), position=position_from_mapping(item["position"]))
        for item in cache.get("sections") or ()
    )
    headings = tuple(
        Heading(
            heading=str(item.get("heading") or ""),
            level=max(1, int(item.get("level") or 1)),
            position=position_from_mapping(item["position"]),
        )
        for item in cache.get("headings") or ()
    )
    list_items = tuple(
        ListItem(parent=int(item.get("parent", -1)), position=position_from_mapping(item["position"]))
        for item in cache.get("list_items") or ()
    )
    return StructureInfo(sections=sections, headings=headings, list_items=list_items)
