# runtime/registries.py
from collections.abc import Callable
from typing import Any

from pathkit.app.protocols import PivotSelector
from pathkit.config.models import (
    PivotSelectorFirstModel,
    PivotSelectorRandomModel,
    PivotSelectorSequenceModel,
    PivotSelectorUnion,
)
from pathkit.domain.index.pivots import (
    FirstPivotSelector,
    RandomPivotSelector,
    SequencePivotSelector,
)
from pathkit.runtime.rng import RNGRegistry

PivotFactory = Callable[[PivotSelectorUnion, dict[str, Any]], PivotSelector]

_pivot_registry: dict[str, PivotFactory] = {}


# ------------------- Pivot selector registry ---------------------------


def register_pivot_selector(kind: str):
    def deco(fn: PivotFactory):
        _pivot_registry[kind] = fn
        return fn

    return deco


def make_pivot_selector(cfg: PivotSelectorUnion, *, deps: dict) -> PivotSelector:
    """
    deps can include:
      - 'rng_registry': RNGRegistry  # source of the default random stream
    """
    try:
        factory = _pivot_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown pivot selector kind {cfg.kind!r}")
    return factory(cfg, deps)


@register_pivot_selector("random")
def _make_random(cfg: PivotSelectorRandomModel, deps):
    if cfg.seed is not None:
        return RandomPivotSelector(RNGRegistry(cfg.seed).stream("pivots"))
    reg: RNGRegistry | None = deps.get("rng_registry")
    return RandomPivotSelector(reg.stream("pivots") if reg is not None else None)


@register_pivot_selector("sequence")
def _make_sequence(cfg: PivotSelectorSequenceModel, deps):
    return SequencePivotSelector(cfg.indices)


@register_pivot_selector("first")
def _make_first(cfg: PivotSelectorFirstModel, deps):
    return FirstPivotSelector()
