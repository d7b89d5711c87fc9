"""Live variables: tunables and pass timings exposed for inspection.

A debug overlay or console can list, read and write these while the
simulation runs. Each World owns its own ``LiveVariableRegistry`` so two
worlds in one process never collide on names.

Two flavours share one namespace:

- tunables wrap a getter and an optional setter, clamped to ``value_range``;
- timing metrics wrap a ``SampleWindow`` and are fed by ``record_time``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Any, NamedTuple

from shambler.types import FloatRange

from .metrics import SampleWindow


class TimingMetric(NamedTuple):
    name: str
    description: str
    capacity: int = 300


@dataclass
class LiveVariable:
    name: str
    description: str
    getter: Callable[[], Any]
    setter: Callable[[Any], None] | None = None
    value_range: FloatRange | None = None
    window: SampleWindow | None = None

    @property
    def is_metric(self) -> bool:
        return self.window is not None

    @property
    def writable(self) -> bool:
        return self.setter is not None

    def get_value(self) -> Any:
        return self.getter()

    def set_value(self, value: Any) -> bool:
        """Write through the setter. Returns ``False`` for read-only variables.

        Numbers outside ``value_range`` are clamped into it.
        """
        if self.setter is None:
            return False
        if self.value_range is not None and isinstance(value, int | float):
            low, high = self.value_range
            value = min(high, max(low, value))
        self.setter(value)
        return True


class LiveVariableRegistry:
    """All live variables of one world, keyed by dotted name.

    With ``strict`` set, timing into an unregistered metric raises
    ``KeyError``; otherwise the sample is dropped.
    """

    def __init__(self, *, strict: bool = True) -> None:
        self._variables: dict[str, LiveVariable] = {}
        self.strict = strict

    def _add(self, variable: LiveVariable) -> LiveVariable:
        if variable.name in self._variables:
            msg = f"Live variable '{variable.name}' already registered"
            raise ValueError(msg)
        self._variables[variable.name] = variable
        return variable

    def register(
        self,
        name: str,
        getter: Callable[[], Any],
        setter: Callable[[Any], None] | None = None,
        *,
        description: str = "",
        value_range: FloatRange | None = None,
    ) -> LiveVariable:
        return self._add(
            LiveVariable(name, description, getter, setter, value_range=value_range)
        )

    def register_metric(
        self, name: str, description: str = "", capacity: int = 300
    ) -> LiveVariable:
        window = SampleWindow(capacity)
        return self._add(
            LiveVariable(name, description, window.summary, window=window)
        )

    def register_metrics(self, metrics: Sequence[TimingMetric]) -> None:
        for metric in metrics:
            self.register_metric(metric.name, metric.description, metric.capacity)

    def get_variable(self, name: str) -> LiveVariable | None:
        return self._variables.get(name)

    def get_all_variables(self) -> list[LiveVariable]:
        """Tunables first, then metrics, each sorted by name."""
        return sorted(self._variables.values(), key=lambda v: (v.is_metric, v.name))

    def record_metric(self, name: str, value: float) -> None:
        variable = self._variables.get(name)
        if variable is None or variable.window is None:
            msg = f"'{name}' is not a registered metric"
            raise KeyError(msg)
        variable.window.record(value)

    @contextmanager
    def record_time(self, metric_name: str) -> Iterator[None]:
        """Time the block and record the elapsed milliseconds."""
        start = perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (perf_counter() - start) * 1000.0
            if self.strict or metric_name in self._variables:
                self.record_metric(metric_name, elapsed_ms)
