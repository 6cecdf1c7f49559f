"""Callbacks that hold their object weakly and do nothing once it is gone."""

from __future__ import annotations

import weakref
from typing import Any, Callable, Generic, Optional, TypeVar

C = TypeVar("C")


class WeakCallback(Generic[C]):
    """Calls ``function(obj, *args)`` while ``obj`` is alive; otherwise does nothing."""

    def __init__(self, obj: C, function: Callable[..., Any]) -> None:
        self._object = weakref.ref(obj)
        self._function = function

    def __call__(self, *args: Any, **kwargs: Any) -> Optional[Any]:
        obj = self._object()
        if obj is None:
            return None
        return self._function(obj, *args, **kwargs)


def make_weak_callback(obj: C, function: Callable[..., Any]) -> WeakCallback[C]:
    """Build a :class:`WeakCallback`; a method bound to ``obj`` is unbound first."""
    if getattr(function, "__self__", None) is obj:
        function = function.__func__  # type: ignore[attr-defined]
    return WeakCallback(obj, function)