"""
Interactive input controls.

Each control is a settable source cell plus a Broker describing the widget. The
returned Reactive can be used anywhere a value is accepted (a property, a transform
argument, a scale domain); registering it with a visualisation records the widget
descriptor, which a front end renders and wires to ``connect``.

Examples:
    >>> from visgram.controls import input_slider
    >>> from visgram.reactive import read
    >>> size = input_slider(10, 100, value=50, label="Size")
    >>> read(size)
    50
    >>> size.broker.connect(80)
    >>> read(size)
    80
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence
from typing import Any

from visgram.core.errors import InvalidArgumentError
from visgram.core.typing import JsonDict
from visgram.reactive import Broker, Reactive, reactive, read, source

__all__ = ["input_slider", "input_select", "input_checkbox"]


def _control(
    control: JsonDict,
    value: Any,
    id: str | None,
    map: Callable[[Any], Any] | None,
) -> Reactive:
    s = source(value, label=id)
    control = {**control, "id": s.label}
    broker = Broker(controls=(control,), connect=s.set)
    if map is None:
        return dataclasses.replace(s, broker=broker)
    return reactive(lambda: map(read(s)), label=f"{s.label}:map", broker=broker)


def input_slider(
    min: float,
    max: float,
    value: float | None = None,
    step: float | None = None,
    label: str = "",
    id: str | None = None,
    map: Callable[[Any], Any] | None = None,
) -> Reactive:
    """
    A numeric slider.

    Args:
        min, max (float): Slider bounds.
        value (float | None): Initial value; defaults to the midpoint.
        step (float | None): Increment between values.
        label (str): Text shown next to the widget.
        id (str | None): Control id; generated when omitted.
        map (Callable | None): Transform applied to the raw control value.

    Raises:
        InvalidArgumentError: min is not below max, or value falls outside them.
    """
    if not min < max:
        raise InvalidArgumentError(f"slider min ({min}) must be less than max ({max})")
    if value is None:
        value = (min + max) / 2
    if not min <= value <= max:
        raise InvalidArgumentError(f"slider value {value} outside [{min}, {max}]")
    control = {"type": "slider", "label": label, "min": min, "max": max, "value": value}
    if step is not None:
        control["step"] = step
    return _control(control, value, id, map)


def input_select(
    choices: Sequence[Any] | dict[str, Any],
    selected: Any = None,
    label: str = "",
    id: str | None = None,
    map: Callable[[Any], Any] | None = None,
) -> Reactive:
    """
    A drop-down selection.

    choices may be a list of values or a ``{label: value}`` mapping. selected
    defaults to the first choice.
    """
    options = dict(choices) if isinstance(choices, dict) else {str(c): c for c in choices}
    if not options:
        raise InvalidArgumentError("input_select needs at least one choice")
    values = list(options.values())
    if selected is None:
        selected = values[0]
    elif selected not in values:
        raise InvalidArgumentError(f"selected value {selected!r} is not among the choices")
    control = {
        "type": "select",
        "label": label,
        "choices": [{"label": k, "value": v} for k, v in options.items()],
        "value": selected,
    }
    return _control(control, selected, id, map)


def input_checkbox(
    value: bool = False,
    label: str = "",
    id: str | None = None,
    map: Callable[[Any], Any] | None = None,
) -> Reactive:
    """A checkbox producing a bool (or map(bool))."""
    control = {"type": "checkbox", "label": label, "value": bool(value)}
    return _control(control, bool(value), id, map)
