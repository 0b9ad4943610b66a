from __future__ import annotations

import weakref
from enum import Enum
from typing import Any


class ExtensionPoint(str, Enum):
    CONTAINER_ATTACH = "container-attach"
    RESULT_ADD = "result-add"
    ITEM_RENDER = "item-render"


class PatchGuard:
    """Remembers which extension point kinds were already claimed for wrapping."""

    def __init__(self) -> None:
        self._claimed: set[ExtensionPoint] = set()

    def mark_patched(self, kind: ExtensionPoint) -> bool:
        if kind in self._claimed:
            return False
        self._claimed.add(kind)
        return True

    def is_patched(self, kind: ExtensionPoint) -> bool:
        return kind in self._claimed


class IdentityWeakSet:
    """Membership by object identity that does not keep members alive.

    ``weakref.WeakSet`` compares with ``__eq__``/``__hash__``; host objects may
    define value equality, so entries are keyed by ``id()`` and dropped from a
    weakref callback when the object is collected.
    """

    def __init__(self) -> None:
        self._refs: dict[int, weakref.ref] = {}

    def _discard_ref(self, key: int, ref: weakref.ref) -> None:
        if self._refs.get(key) is ref:
            del self._refs[key]

    def add(self, obj: Any) -> None:
        key = id(obj)
        current = self._refs.get(key)
        if current is not None and current() is obj:
            return
        self._refs[key] = weakref.ref(obj, lambda ref, k=key: self._discard_ref(k, ref))

    def has(self, obj: Any) -> bool:
        ref = self._refs.get(id(obj))
        return ref is not None and ref() is obj

    __contains__ = has

    def __len__(self) -> int:
        return sum(1 for ref in self._refs.values() if ref() is not None)


class AugmentationTracker:
    """Per-instance "already augmented" flags for result items."""

    def __init__(self) -> None:
        self._items = IdentityWeakSet()

    def has_augmented(self, item: Any) -> bool:
        return self._items.has(item)

    def mark_augmented(self, item: Any) -> None:
        self._items.add(item)
