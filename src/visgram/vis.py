"""
The Visualisation builder.

A Visualisation accumulates datasets, property sets, inferred scale information,
marks, explicit scales, axes, legends, interactive controls and options. Every
composition function takes a Visualisation and returns a new one; the argument is
never modified, so a failing call leaves the caller's builder exactly as it was, and
two variants can safely be branched from one base.

## Responsibilities
- Track the "current" dataset and property set that the next mark will use.
- Give every dataset a builder-unique id (name + count, or parent/transform + count).
- Register reactive values once per identity, with their brokers' controls.
- Record scale information whenever a mark is added.

## Examples
```python
import polars as pl
from visgram import visualise, layer_points

df = pl.DataFrame({"wt": [2.6, 3.2, 3.4], "mpg": [21.0, 22.8, 18.7]})
vis = visualise(df, pl.col("wt"), pl.col("mpg"), name="cars").pipe(layer_points)
[m.type.value for m in vis.marks]  # ['point']
```
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from visgram.core.constants import DEFAULT_DATA_NAME
from visgram.core.errors import InvalidArgumentError, MissingDependencyError
from visgram.core.grammar import MarkType, mark_type_from_value
from visgram.core.typing import DatasetId, JsonDict, ReactiveId
from visgram.data import Dataset, constant_producer
from visgram.inference import ScaleInfo, infer_scale_info
from visgram.props import PropertySet, extract_reactives, merge_props, props
from visgram.reactive import Reactive, is_reactive, reactive, read

if TYPE_CHECKING:
    from visgram.guides import Axis, Legend
    from visgram.io.config import VisSettings
    from visgram.scales import Scale
    from visgram.tabular import TabularData

__all__ = [
    "Mark",
    "Visualisation",
    "visualise",
    "add_data",
    "add_props",
    "add_mark",
    "add_scale",
    "add_scale_info",
    "append_axis",
    "append_legend",
    "add_options",
    "set_options",
    "register_computation",
    "register_reactives",
    "register_reactive",
    "register_scale_info",
    "get_reactive",
    "is_visualisation",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mark:
    """
    One visual primitive, frozen at the time it was added.

    Attributes:
        type (MarkType): Primitive type.
        props (PropertySet): Properties in effect when the mark was added.
        data (Dataset | None): Dataset in effect when the mark was added.
    """

    type: MarkType
    props: PropertySet
    data: Dataset | None


class Visualisation:
    """
    Aggregate root of a graphic under construction.

    Attributes:
        marks (list[Mark]): Marks in drawing order.
        data (dict[DatasetId, Dataset]): Every dataset ever attached or derived.
        props (dict[str, PropertySet]): Every property set ever made current.
        scale_info (dict[str, list[ScaleInfo]]): Accumulated domain knowledge per scale.
        reactives (dict[ReactiveId, Reactive]): Registered reactives by identity.
        scales (dict[str, Scale]): Explicit scales by name.
        axes (list[Axis]), legends (list[Legend]): Explicit guides.
        controls (list[JsonDict]), connectors (list[Callable]), handlers (list[JsonDict]):
            Collected from brokers of registered reactives.
        options (dict[str, Any]): Rendering options (width, height, ...).
        cur_data (Dataset | None), cur_props (PropertySet | None): What the next mark uses.
    """

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        self.marks: list[Mark] = []
        self.data: dict[DatasetId, Dataset] = {}
        self.props: dict[str, PropertySet] = {}
        self.scale_info: dict[str, list[ScaleInfo]] = {}
        self.reactives: dict[ReactiveId, Reactive] = {}
        self.scales: dict[str, Scale] = {}
        self.axes: list[Axis] = []
        self.legends: list[Legend] = []
        self.controls: list[JsonDict] = []
        self.connectors: list[Callable[..., Any]] = []
        self.handlers: list[JsonDict] = []
        self.options: dict[str, Any] = dict(options or {})
        self.cur_data: Dataset | None = None
        self.cur_props: PropertySet | None = None

    def _copy(self) -> Visualisation:
        new = copy.copy(self)
        new.marks = list(self.marks)
        new.data = dict(self.data)
        new.props = dict(self.props)
        new.scale_info = {k: list(v) for k, v in self.scale_info.items()}
        new.reactives = dict(self.reactives)
        new.scales = dict(self.scales)
        new.axes = list(self.axes)
        new.legends = list(self.legends)
        new.controls = list(self.controls)
        new.connectors = list(self.connectors)
        new.handlers = list(self.handlers)
        new.options = dict(self.options)
        return new

    def pipe(self, fn: Callable[..., Visualisation], *args: Any, **kwargs: Any) -> Visualisation:
        """Apply fn(self, *args, **kwargs); mirrors DataFrame.pipe for chaining."""
        return fn(self, *args, **kwargs)

    def __repr__(self) -> str:
        return (
            f"<Visualisation marks={len(self.marks)} data={list(self.data)} "
            f"scales={sorted(self.scale_info)}>"
        )


def is_visualisation(x: Any) -> bool:
    return isinstance(x, Visualisation)


def _check_vis(vis: Any) -> None:
    if not isinstance(vis, Visualisation):
        raise InvalidArgumentError(f"expected a Visualisation, got {type(vis).__name__}")


# ---------------------------------------------------------------------------
# In-place helpers; callers must own the instance (i.e. have just copied it).
# ---------------------------------------------------------------------------


def _check_dataset_id(vis: Visualisation, dataset_id: str) -> None:
    if not dataset_id:
        raise InvalidArgumentError("dataset id must be a non-empty string")
    if dataset_id in vis.data:
        raise InvalidArgumentError(f"dataset id {dataset_id!r} is already in use")


def _attach_data(vis: Visualisation, data: Any, name: str, add_suffix: bool) -> None:
    if data is None:
        return
    if add_suffix:
        name = f"{name}{len(vis.data)}"
    _check_dataset_id(vis, name)
    dataset = Dataset.wrap(name, data)
    if is_reactive(data):
        _register_reactive(vis, data)
    vis.data[dataset.id] = dataset
    vis.cur_data = dataset
    log.debug("attached dataset %s (reactive=%s)", dataset.id, dataset.is_reactive)


def _attach_props(vis: Visualisation, new_props: PropertySet) -> None:
    both = merge_props(vis.cur_props, new_props)
    vis.props[f"props{len(vis.props)}"] = both
    vis.cur_props = both
    _register_reactives(vis, extract_reactives(both))


def _register_reactives(vis: Visualisation, reactives: Iterable[Any]) -> None:
    for r in reactives:
        if is_reactive(r):
            _register_reactive(vis, r)


def _register_reactive(vis: Visualisation, r: Reactive) -> None:
    if r.id in vis.reactives:
        return
    vis.reactives[r.id] = r
    log.debug("registered reactive %s", r.id)

    broker = r.broker
    if broker is None:
        return
    if broker.controls:
        vis.controls.extend(broker.controls)
    else:
        log.warning("broker on reactive %s has no controls", r.id)
    if broker.connect is not None:
        vis.connectors.append(broker.connect)
    if broker.spec:
        vis.handlers.append(broker.spec)


def _add_scale_info(vis: Visualisation, scale: str, info: ScaleInfo) -> None:
    vis.scale_info.setdefault(scale, []).append(info)


# ---------------------------------------------------------------------------
# Public composition API
# ---------------------------------------------------------------------------


def visualise(
    data: TabularData | Reactive | None = None,
    *args: Any,
    name: str = DEFAULT_DATA_NAME,
    settings: VisSettings | None = None,
    **kwargs: Any,
) -> Visualisation:
    """
    Start a visualisation from a dataset and default property mappings.

    Args:
        data: A polars DataFrame, GroupedFrame, or a reactive producing one.
        *args: Up to two unnamed properties, taken to be x and y.
        name (str): Dataset name; the dataset id is name + "0".
        settings (VisSettings | None): Option defaults; VisSettings.load() when None.
        **kwargs: Named property mappings.

    Returns:
        Visualisation: Nothing is drawn until a layer is added.
    """
    from visgram.io.config import VisSettings

    settings = settings or VisSettings.load()
    vis = Visualisation(options=settings.options())
    _attach_data(vis, data, name, True)
    _attach_props(vis, props(*args, **kwargs))
    return vis


def add_data(
    vis: Visualisation,
    data: TabularData | Reactive | None,
    name: str = DEFAULT_DATA_NAME,
    add_suffix: bool = True,
) -> Visualisation:
    """
    Attach a dataset and make it current.

    Args:
        vis (Visualisation): Visualisation to extend.
        data: Table or reactive; None leaves vis unchanged.
        name (str): Dataset name.
        add_suffix (bool): Append the dataset count to name. Only disable this when a
            dataset with a specific id is required.

    Raises:
        InvalidArgumentError: The resulting id is empty or already names a dataset.
    """
    _check_vis(vis)
    if data is None:
        return vis
    vis = vis._copy()
    _attach_data(vis, data, name, add_suffix)
    return vis


def add_props(
    vis: Visualisation,
    *args: Any,
    propset: PropertySet | None = None,
    inherit: bool | None = None,
    **kwargs: Any,
) -> Visualisation:
    """
    Merge new property mappings onto the current property set.

    Args:
        vis (Visualisation): Visualisation to extend.
        *args, **kwargs: Property mappings, as for props().
        propset (PropertySet | None): Pre-built properties; merged before args/kwargs.
        inherit (bool | None): Keep current mappings not mentioned here. Defaults to
            propset.inherit when propset is given, else True.
    """
    _check_vis(vis)
    if inherit is None:
        inherit = propset.inherit if propset is not None else True
    new = props(*args, inherit=inherit, **kwargs)
    if propset is not None:
        new = PropertySet([*propset, *new], inherit=inherit)
    vis = vis._copy()
    _attach_props(vis, new)
    return vis


def register_scale_info(vis: Visualisation, propset: PropertySet) -> Visualisation:
    """Record ScaleInfo for every scaled property of propset over the current data."""
    _check_vis(vis)
    infos = infer_scale_info(propset, vis.cur_data)
    vis = vis._copy()
    for scale, info in infos:
        _add_scale_info(vis, scale, info)
    return vis


def add_mark(
    vis: Visualisation,
    type: str | MarkType,
    props: PropertySet | None = None,
    data: TabularData | Reactive | None = None,
    data_name: str = "unnamed_data",
) -> Visualisation:
    """
    Append a mark using the current (or given) data and properties.

    Data and properties passed here apply to this mark only: the previous current
    dataset and property set are restored afterwards.
    """
    _check_vis(vis)
    mark_type = mark_type_from_value(type)
    old_data, old_props = vis.cur_data, vis.cur_props

    vis = vis._copy()
    _attach_data(vis, data, data_name, True)
    _attach_props(vis, props if props is not None else PropertySet())
    for scale, info in infer_scale_info(vis.cur_props, vis.cur_data):
        _add_scale_info(vis, scale, info)

    vis.marks.append(Mark(mark_type, vis.cur_props, vis.cur_data))
    log.debug("added %s mark on %s", mark_type.value, vis.cur_data.id if vis.cur_data else None)

    vis.cur_data, vis.cur_props = old_data, old_props
    return vis


def add_scale_info(vis: Visualisation, scale: str, info: ScaleInfo) -> Visualisation:
    _check_vis(vis)
    vis = vis._copy()
    _add_scale_info(vis, scale, info)
    return vis


def add_scale(vis: Visualisation, scale: Scale) -> Visualisation:
    """
    Add an explicit scale.

    An explicit domain becomes an override ScaleInfo, so every scale domain is
    resolved from scale info; the scale object keeps only its other options.
    """
    _check_vis(vis)
    vis = vis._copy()
    if scale.domain is not None:
        if is_reactive(scale.domain):
            _register_reactive(vis, scale.domain)
        info = ScaleInfo(label=None, type=scale.data_type, domain=scale.domain, override=True)
        _add_scale_info(vis, scale.name, info)
    vis.scales[scale.name] = scale
    return vis


def append_axis(vis: Visualisation, axis: Axis) -> Visualisation:
    _check_vis(vis)
    vis = vis._copy()
    vis.axes.append(axis)
    return vis


def append_legend(vis: Visualisation, legend: Legend) -> Visualisation:
    _check_vis(vis)
    vis = vis._copy()
    vis.legends.append(legend)
    return vis


def add_options(vis: Visualisation, options: dict[str, Any], replace: bool = True) -> Visualisation:
    """Merge rendering options; existing values win when replace is False."""
    _check_vis(vis)
    vis = vis._copy()
    if replace:
        vis.options = {**vis.options, **options}
    else:
        vis.options = {**options, **vis.options}
    return vis


def set_options(vis: Visualisation, replace: bool = True, **options: Any) -> Visualisation:
    """Keyword form of add_options, e.g. ``set_options(vis, width=300, height=200)``."""
    return add_options(vis, options, replace=replace)


def register_reactives(vis: Visualisation, reactives: Iterable[Any] | None = None) -> Visualisation:
    """Register every reactive in reactives; non-reactive entries are skipped."""
    _check_vis(vis)
    vis = vis._copy()
    _register_reactives(vis, reactives or ())
    return vis


def register_reactive(vis: Visualisation, r: Reactive) -> Visualisation:
    """
    Register one reactive under its identity.

    Re-registering an identity is a no-op. A broker's controls, connector and handler
    are recorded the first time its reactive is registered.
    """
    _check_vis(vis)
    if not is_reactive(r):
        raise InvalidArgumentError(f"expected a reactive, got {type(r).__name__}")
    vis = vis._copy()
    _register_reactive(vis, r)
    return vis


def get_reactive(vis: Visualisation, rid: str) -> Reactive:
    """
    Look up a registered reactive.

    Raises:
        MissingDependencyError: If rid was never registered with vis.
    """
    try:
        return vis.reactives[ReactiveId(rid)]
    except KeyError as exc:
        raise MissingDependencyError(f"reactive {rid!r} is not registered") from exc


def register_computation(
    vis: Visualisation,
    args: dict[str, Any],
    name: str,
    transform: Callable[[TabularData, dict[str, Any]], TabularData] | None = None,
) -> Visualisation:
    """
    Register a data transform step over the current dataset.

    Args:
        vis (Visualisation): Visualisation to extend.
        args (dict[str, Any]): Transform arguments; reactive values are registered and
            read afresh on every recomputation.
        name (str): Transform name, used in the new dataset id.
        transform: ``transform(table, args) -> table``. When None, only the reactive
            registration takes place.

    Returns:
        Visualisation: With the derived dataset (id ``<parent>/<name><count>``) current.

    Notes:
        When neither the parent dataset nor any argument is reactive, the transform runs
        once, now, and its result is cached for the builder's lifetime.
    """
    _check_vis(vis)
    vis = vis._copy()
    _register_reactives(vis, args.values())
    if transform is None:
        return vis

    parent = vis.cur_data
    if parent is None:
        raise InvalidArgumentError(f"{name}: no dataset to transform")
    dataset_id = DatasetId(f"{parent.id}/{name}{len(vis.data)}")
    _check_dataset_id(vis, dataset_id)

    if parent.is_reactive or any(is_reactive(a) for a in args.values()):
        producer = reactive(
            lambda: transform(parent.table(), {k: read(v) for k, v in args.items()}),
            label=dataset_id,
        )
        dataset = Dataset(dataset_id, producer, True)
    else:
        cache = transform(parent.table(), dict(args))
        dataset = Dataset(dataset_id, constant_producer(cache), False)

    vis.data[dataset_id] = dataset
    vis.cur_data = dataset
    log.debug("registered computation %s (reactive=%s)", dataset_id, dataset.is_reactive)
    return vis
