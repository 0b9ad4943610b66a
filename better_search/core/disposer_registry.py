from __future__ import annotations

import weakref
from typing import Any, Callable

Disposer = Callable[[], None]


class DisposerRegistry:
    """Cleanup callbacks keyed by the result set that owns the mounted widgets."""

    def __init__(self) -> None:
        self._disposers: dict[int, list[Disposer]] = {}
        self._refs: dict[int, weakref.ref] = {}

    def _key_for(self, result_set: Any) -> int | None:
        key = id(result_set)
        ref = self._refs.get(key)
        if ref is not None and ref() is result_set:
            return key
        return None

    def _forget(self, key: int, ref: weakref.ref) -> None:
        if self._refs.get(key) is ref:
            del self._refs[key]
            self._disposers.pop(key, None)

    def on_result_set_created(self, result_set: Any) -> None:
        if self._key_for(result_set) is not None:
            return
        key = id(result_set)
        self._refs[key] = weakref.ref(result_set, lambda ref, k=key: self._forget(k, ref))
        self._disposers[key] = []

    def register_disposer(self, result_set: Any, disposer: Disposer) -> None:
        self.on_result_set_created(result_set)
        self._disposers[id(result_set)].append(disposer)

    def pending_count(self, result_set: Any) -> int:
        key = self._key_for(result_set)
        return 0 if key is None else len(self._disposers[key])

    def on_result_set_emptied(self, result_set: Any) -> list[BaseException]:
        """Run and clear every disposer of ``result_set``; return the failures."""
        key = self._key_for(result_set)
        if key is None:
            return []
        batch = self._disposers[key]
        self._disposers[key] = []

        failures: list[BaseException] = []
        for dispose in batch:
            try:
                dispose()
            except Exception as exc:
                failures.append(exc)
        return failures

    def tracked_count(self) -> int:
        return sum(1 for ref in self._refs.values() if ref() is not None)
