"""Heading/list hierarchy around match positions in a markdown document."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from better_search.services.metadata_cache import Heading, ListItem, Position, Section
from better_search.services.section import section_containing

NodeType = Literal["file", "heading", "list"]


@dataclass(slots=True)
class SectionWithMatch:
    cache: Section
    text: str


@dataclass(slots=True)
class ContextTreeNode:
    text: str
    type: NodeType
    position: Position | None = None
    file_path: str = ""
    stat: Any = None
    child_headings: list["ContextTreeNode"] = field(default_factory=list)
    child_lists: list["ContextTreeNode"] = field(default_factory=list)
    sections_with_matches: list[SectionWithMatch] = field(default_factory=list)

    def children(self) -> list["ContextTreeNode"]:
        return [*self.child_headings, *self.child_lists]


def heading_breadcrumbs(headings: Sequence[Heading], position: Position) -> list[Heading]:
    """Enclosing headings, outermost first."""
    line = position.start.line
    crumbs: list[Heading] = []
    ceiling = None
    for heading in reversed([h for h in headings if h.position.start.line <= line]):
        if ceiling is None or heading.level < ceiling:
            crumbs.append(heading)
            ceiling = heading.level
        if ceiling == 1:
            break
    crumbs.reverse()
    return crumbs


def list_item_containing(list_items: Sequence[ListItem], position: Position) -> ListItem | None:
    line = position.start.line
    found = None
    for item in list_items:
        if item.position.start.line <= line <= item.position.end.line:
            if found is None or item.position.start.line >= found.position.start.line:
                found = item
    return found


def list_breadcrumbs(list_items: Sequence[ListItem], item: ListItem) -> list[ListItem]:
    """Ancestors of ``item``, outermost first. A negative parent marks a root item."""
    by_line = {li.position.start.line: li for li in list_items}
    crumbs: list[ListItem] = []
    seen = {item.position.start.line}
    parent_line = item.parent
    while parent_line >= 0 and parent_line in by_line and parent_line not in seen:
        parent = by_line[parent_line]
        crumbs.append(parent)
        seen.add(parent_line)
        parent_line = parent.parent
    crumbs.reverse()
    return crumbs


def _text_at(file_contents: str, position: Position) -> str:
    return file_contents[position.start.offset:position.end.offset]


def _first_line(text: str) -> str:
    return text.strip().splitlines()[0] if text.strip() else ""


def _child_node(
    siblings: list[ContextTreeNode],
    *,
    text: str,
    node_type: NodeType,
    position: Position,
    file_path: str,
    stat: Any,
) -> ContextTreeNode:
    for node in siblings:
        if node.position == position:
            return node
    node = ContextTreeNode(text=text, type=node_type, position=position, file_path=file_path, stat=stat)
    siblings.append(node)
    return node


def build_context_tree(
    *,
    positions: Sequence[Position],
    file_contents: str,
    stat: Any = None,
    file_path: str = "",
    sections: Sequence[Section] = (),
    headings: Sequence[Heading] = (),
    list_items: Sequence[ListItem] = (),
    **_metadata: Any,
) -> ContextTreeNode:
    root = ContextTreeNode(
        text=os.path.basename(file_path) or file_path,
        type="file",
        file_path=file_path,
        stat=stat,
    )

    for position in positions:
        node = root
        for heading in heading_breadcrumbs(headings, position):
            node = _child_node(
                node.child_headings,
                text=heading.heading,
                node_type="heading",
                position=heading.position,
                file_path=file_path,
                stat=stat,
            )

        list_item = list_item_containing(list_items, position)
        if list_item is not None:
            for ancestor in list_breadcrumbs(list_items, list_item):
                node = _child_node(
                    node.child_lists,
                    text=_first_line(_text_at(file_contents, ancestor.position)),
                    node_type="list",
                    position=ancestor.position,
                    file_path=file_path,
                    stat=stat,
                )
            matched = Section(type="list", position=list_item.position)
        else:
            matched = section_containing(position, sections)

        if matched is not None:
            node.sections_with_matches.append(
                SectionWithMatch(cache=matched, text=_text_at(file_contents, matched.position))
            )

    return root
