"""
Minimal pull-based reactive cells.

The builder only needs three capabilities from a reactive engine: make a reactive
cell, read its current value, and ask whether a value is reactive. Cells cache their
value, record a dependency edge whenever one cell's compute function reads another,
and are marked dirty (transitively) when an upstream source changes. Reads recompute
dirty cells depth first, so a compute function always observes up-to-date inputs.

Evaluation is single-threaded and synchronous: a recomputation runs to completion
before the triggering read returns, and there is no cancellation.

Identity: a derived cell's id fingerprints its compute function (code, constants,
closure and default values). Reactives, scalars, containers and polars expressions
contribute their content; a function already being described contributes only a
back-reference. Any other object is identified by
object identity (type name plus memory address), so two definitions closing over
equal but distinct opaque objects get different ids.

Examples:
    >>> from visgram.reactive import reactive, read, source
    >>> n = source(2, label="n")
    >>> doubled = reactive(lambda: read(n) * 2)
    >>> read(doubled)
    4
    >>> n.set(5)
    >>> read(doubled)
    10
"""

from __future__ import annotations

import itertools
import logging
import types
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import polars as pl

from visgram.core.hashing import fingerprint
from visgram.core.typing import JsonDict, ReactiveId

__all__ = [
    "Broker",
    "ReactiveCell",
    "SourceCell",
    "Reactive",
    "reactive",
    "source",
    "read",
    "is_reactive",
    "isolate",
]

log = logging.getLogger(__name__)

# Stack of cells currently recomputing; None marks an isolated read.
_active: list[ReactiveCell | None] = []

_source_counter = itertools.count(1)


class ReactiveCell:
    """A lazily recomputed value with tracked dependencies."""

    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn
        self._value: Any = None
        self._dirty = True
        self._dependents: set[ReactiveCell] = set()
        self._dependencies: set[ReactiveCell] = set()

    @property
    def dirty(self) -> bool:
        return self._dirty

    def get(self) -> Any:
        caller = _active[-1] if _active else None
        if caller is not None:
            self._dependents.add(caller)
            caller._dependencies.add(self)
        if self._dirty:
            self._recompute()
        return self._value

    def _recompute(self) -> None:
        for dep in self._dependencies:
            dep._dependents.discard(self)
        self._dependencies = set()
        _active.append(self)
        try:
            self._value = self._fn()
        finally:
            _active.pop()
        self._dirty = False
        log.debug("recomputed reactive cell %r", self)

    def invalidate(self) -> None:
        if self._dirty:
            return
        self._dirty = True
        for dep in list(self._dependents):
            dep.invalidate()


class SourceCell(ReactiveCell):
    """An input cell whose value is set from outside (e.g. by a control)."""

    def __init__(self, value: Any) -> None:
        super().__init__(lambda: self._value)
        self._value = value
        self._dirty = False

    def set(self, value: Any) -> None:
        self._value = value
        for dep in list(self._dependents):
            dep.invalidate()


@dataclass(frozen=True)
class Broker:
    """
    Interactive bundle attached to a reactive value.

    Attributes:
        controls (tuple[JsonDict, ...]): Opaque control descriptors rendered by a UI.
        connect (Callable | None): Describes how control changes feed back into data.
        spec (JsonDict | None): Handler spec fragment passed through to the renderer.
    """

    controls: tuple[JsonDict, ...] = ()
    connect: Callable[..., Any] | None = None
    spec: JsonDict | None = None


@dataclass(frozen=True, eq=False)
class Reactive:
    """
    Explicit identity wrapper around a reactive cell.

    Attributes:
        id (ReactiveId): Stable identity derived from a content fingerprint.
        cell (ReactiveCell): The underlying cell.
        label (str | None): Optional human-readable label.
        broker (Broker | None): Optional controls/connector/handler bundle.
    """

    id: ReactiveId
    cell: ReactiveCell = field(repr=False)
    label: str | None = None
    broker: Broker | None = None

    def __call__(self) -> Any:
        return self.cell.get()

    def set(self, value: Any) -> None:
        if not isinstance(self.cell, SourceCell):
            raise TypeError(f"reactive {self.id} is derived and cannot be set")
        self.cell.set(value)


def _describe_code(code: types.CodeType, seen: set[int]) -> JsonDict:
    return {
        "name": code.co_name,
        "code": code.co_code.hex(),
        "names": list(code.co_names),
        "consts": [
            _describe_code(c, seen)
            if isinstance(c, types.CodeType)
            else _describe_value(c, seen)
            for c in code.co_consts
        ],
    }


def _describe_value(v: Any, seen: set[int]) -> Any:
    if isinstance(v, Reactive):
        return v.id
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (list, tuple)):
        return [_describe_value(x, seen) for x in v]
    if isinstance(v, dict):
        return {str(k): _describe_value(x, seen) for k, x in v.items()}
    if isinstance(v, pl.Expr):
        return str(v)
    if isinstance(v, types.FunctionType):
        return _describe_function(v, seen)
    return f"{type(v).__qualname__}@{id(v):x}"


def _describe_cell(cell: types.CellType, seen: set[int]) -> Any:
    try:
        contents = cell.cell_contents
    except ValueError:
        # free variable not assigned yet in the enclosing scope
        return {"empty": True}
    return _describe_value(contents, seen)


def _describe_function(fn: Callable[..., Any], seen: set[int] | None = None) -> JsonDict:
    if not isinstance(fn, types.FunctionType):
        return {"object": f"{type(fn).__qualname__}@{id(fn):x}"}
    seen = set() if seen is None else seen
    if id(fn) in seen:
        # recursive closures refer back to a function already being described
        return {"ref": fn.__qualname__}
    seen.add(id(fn))
    closure = [_describe_cell(c, seen) for c in (fn.__closure__ or ())]
    defaults = [_describe_value(d, seen) for d in (fn.__defaults__ or ())]
    return {"code": _describe_code(fn.__code__, seen), "closure": closure, "defaults": defaults}


def reactive(
    fn: Callable[[], Any], *, label: str | None = None, broker: Broker | None = None
) -> Reactive:
    """
    Create a derived reactive value.

    Args:
        fn (Callable[[], Any]): Zero-argument compute function. Any reactive it reads
            becomes an upstream dependency.
        label (str | None): Optional label, included in the fingerprint.
        broker (Broker | None): Optional interactive bundle.

    Returns:
        Reactive: Wrapper whose id is "reactive_" + fingerprint of the definition, so
        structurally identical definitions share one identity.
    """
    desc = {"kind": "reactive", "label": label, "fn": _describe_function(fn)}
    rid = ReactiveId(f"reactive_{fingerprint(desc)}")
    return Reactive(id=rid, cell=ReactiveCell(fn), label=label, broker=broker)


def source(value: Any, *, label: str | None = None, broker: Broker | None = None) -> Reactive:
    """
    Create a settable input cell.

    Notes:
        Sources without a label get a unique one; sources sharing a label share an id.
    """
    label = label or f"source_{next(_source_counter)}"
    rid = ReactiveId(f"reactive_{fingerprint({'kind': 'source', 'label': label})}")
    return Reactive(id=rid, cell=SourceCell(value), label=label, broker=broker)


def read(x: Any) -> Any:
    """Return the current value of a reactive, or x itself when it is not reactive."""
    if isinstance(x, Reactive):
        return x.cell.get()
    return x


def is_reactive(x: Any) -> bool:
    return isinstance(x, Reactive)


def isolate(fn: Callable[[], Any]) -> Any:
    """Run fn without recording any dependency edges for the calling cell."""
    _active.append(None)
    try:
        return fn()
    finally:
        _active.pop()
