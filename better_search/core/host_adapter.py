"""Translation between loosely shaped host objects and typed match data.

All knowledge of host attribute names lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from better_search.core.errors import HostShapeError
from better_search.services.metadata_cache import StructureInfo, structure_from_cache

SEARCH_VIEW_MARKER = "search_query"
RESULT_DOM_ATTR = "dom"
BACKLINK_DOM_ATTR = "backlink_dom"
PROPERTY_KEY_MARKER = "key"


@dataclass(slots=True, eq=False)
class Match:
    content: str
    range: tuple[int, int] | None
    is_property_match: bool
    structure: StructureInfo | None
    source: Any = field(repr=False)


@dataclass(frozen=True, slots=True)
class HostFile:
    path: str
    extension: str
    stat: Any = None


def is_search_view(component: Any) -> bool:
    own = getattr(component, "__dict__", None)
    return isinstance(own, dict) and SEARCH_VIEW_MARKER in own


def has_backlinks(child: Any) -> bool:
    return getattr(child, BACKLINK_DOM_ATTR, None) is not None


def result_dom_of(child: Any) -> Any:
    dom = getattr(child, RESULT_DOM_ATTR, None) or getattr(child, BACKLINK_DOM_ATTR, None)
    if dom is None:
        raise HostShapeError(f"{type(child).__name__} carries no result set.")
    return dom


def match_children(item: Any) -> list[Any] | None:
    v_children = getattr(item, "v_children", None)
    children = getattr(v_children, "children", None)
    return children if isinstance(children, list) else None


def set_match_children(item: Any, children: list[Any]) -> None:
    item.v_children.children = list(children)


def owning_result_set(item: Any) -> Any:
    parent = getattr(item, "parent", None)
    if parent is None:
        raise HostShapeError(f"{type(item).__name__} has no owning result set.")
    return parent


def infinity_scroll_of(item: Any) -> Any:
    return getattr(getattr(item, "parent", None), "infinity_scroll", None)


def file_of(item: Any) -> HostFile:
    file = getattr(item, "file", None)
    path = getattr(file, "path", None)
    if not isinstance(path, str):
        raise HostShapeError(f"{type(item).__name__} has no file path.")
    extension = str(getattr(file, "extension", "") or "")
    return HostFile(path=path, extension=extension, stat=getattr(file, "stat", None))


def file_path_of(item: Any) -> str:
    path = getattr(getattr(item, "file", None), "path", None)
    return path if isinstance(path, str) else "<unknown>"


def match_element(child: Any) -> Any:
    el = getattr(child, "el", None)
    if el is None:
        raise HostShapeError(f"{type(child).__name__} has no element to mount into.")
    return el


def is_property_descriptor(descriptor: Any) -> bool:
    if isinstance(descriptor, Mapping):
        return PROPERTY_KEY_MARKER in descriptor
    return hasattr(descriptor, PROPERTY_KEY_MARKER)


def match_from_child(child: Any) -> Match:
    content = getattr(child, "content", None)
    if not isinstance(content, str):
        raise HostShapeError(f"{type(child).__name__} has no text content.")
    ranges = getattr(child, "matches", None)
    if not ranges:
        raise HostShapeError(f"{type(child).__name__} has no match ranges.")

    try:
        structure = structure_from_cache(getattr(child, "cache", None))
    except (KeyError, TypeError, ValueError) as exc:
        raise HostShapeError(f"Unreadable structure metadata: {exc}") from exc

    # Only the first range of a child is used, matching how the host reports
    # one occurrence per rendered match.
    first = ranges[0]
    if is_property_descriptor(first):
        return Match(content=content, range=None, is_property_match=True, structure=structure, source=child)

    try:
        start, end = (int(value) for value in first)
    except (TypeError, ValueError) as exc:
        raise HostShapeError(f"Invalid match range {first!r}.") from exc
    if content == "":
        # The hit is in the file name; the range points into the name, not the body.
        start, end = 0, 0
    elif not 0 <= start <= end <= len(content):
        raise HostShapeError(f"Match range {first!r} is outside the content.")
    return Match(content=content, range=(start, end), is_property_match=False, structure=structure, source=child)
