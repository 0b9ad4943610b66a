from __future__ import annotations

from better_search.services.context_tree import ContextTreeNode, SectionWithMatch


def _range_of(section: SectionWithMatch) -> tuple[int, int]:
    position = section.cache.position
    return position.start.offset, position.end.offset


def dedupe_context_tree(tree: ContextTreeNode) -> ContextTreeNode:
    """Copy of ``tree`` where no node repeats a section or restates a child list."""
    shown_as_lists = {
        (child.position.start.offset, child.position.end.offset)
        for child in tree.child_lists
        if child.position is not None
    }
    seen: set[tuple[int, int]] = set()
    sections: list[SectionWithMatch] = []
    for section in tree.sections_with_matches:
        key = _range_of(section)
        if key in seen or key in shown_as_lists:
            continue
        seen.add(key)
        sections.append(section)

    return ContextTreeNode(
        text=tree.text,
        type=tree.type,
        position=tree.position,
        file_path=tree.file_path,
        stat=tree.stat,
        child_headings=[dedupe_context_tree(child) for child in tree.child_headings],
        child_lists=[dedupe_context_tree(child) for child in tree.child_lists],
        sections_with_matches=sections,
    )
