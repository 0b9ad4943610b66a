"""Class-level method wrapping with safe, order-independent removal."""

from __future__ import annotations

import functools
from typing import Any, Callable

from better_search.core.errors import PatchInstallationError

MethodFactory = Callable[[Callable[..., Any]], Callable[..., Any]]

_MISSING = object()


def around(target: type, **factories: MethodFactory) -> Callable[[], None]:
    """Wrap methods of ``target`` and return a callable that undoes the wrapping.

    Each factory receives the method currently resolved on ``target`` and returns
    its replacement. When another wrapper was installed on top of ours in the
    meantime, uninstalling leaves the attribute alone and turns our wrapper into
    a passthrough instead, so the outer wrapper keeps working.
    """
    if not isinstance(target, type):
        raise PatchInstallationError(f"Cannot wrap methods of non-class {target!r}.")

    installed: list[tuple[str, Any, Callable[..., Any], dict[str, bool]]] = []
    for name, factory in factories.items():
        original = getattr(target, name, _MISSING)
        if original is _MISSING or not callable(original):
            raise PatchInstallationError(f"{target.__name__} has no method {name!r} to wrap.")
        own = target.__dict__.get(name, _MISSING)
        state = {"active": True}
        wrapper = _passthrough_wrapper(original, factory(original), state)
        installed.append((name, own, wrapper, state))

    for name, _own, wrapper, _state in installed:
        setattr(target, name, wrapper)

    done = False

    def uninstall() -> None:
        nonlocal done
        if done:
            return
        done = True
        for name, own, wrapper, state in reversed(installed):
            state["active"] = False
            if target.__dict__.get(name) is not wrapper:
                continue
            if own is _MISSING:
                delattr(target, name)
            else:
                setattr(target, name, own)

    return uninstall


def _passthrough_wrapper(
    original: Callable[..., Any],
    replacement: Callable[..., Any],
    state: dict[str, bool],
) -> Callable[..., Any]:
    @functools.wraps(original)
    def method(self, *args, **kwargs):
        if state["active"]:
            return replacement(self, *args, **kwargs)
        return original(self, *args, **kwargs)

    return method
