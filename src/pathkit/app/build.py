# pathkit/app/build.py
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from pathkit.app.protocols import PivotSelector
from pathkit.config.models import ToolkitModel
from pathkit.domain.entities.geography import Point, Pt
from pathkit.domain.entities.graph import Graph
from pathkit.domain.index.vptree import VPTree, build_vp_tree, search
from pathkit.domain.routing.dijkstra import shortest_path
from pathkit.io.logging import LoggingHooks
from pathkit.runtime.hooks import NoopHooks
from pathkit.runtime.registries import make_pivot_selector
from pathkit.runtime.rng import RNGRegistry


@dataclass
class App:
    config: ToolkitModel
    rng: RNGRegistry
    hooks: LoggingHooks | NoopHooks
    _selector: PivotSelector | None = field(default=None, init=False, repr=False)

    def pivot_selector(self) -> PivotSelector:
        cfg = self.config.index.pivot
        # a sequence is consumed by one build, so each build replays it from the start
        if cfg.kind == "sequence":
            return make_pivot_selector(cfg, deps={"rng_registry": self.rng})
        if self._selector is None:
            self._selector = make_pivot_selector(cfg, deps={"rng_registry": self.rng})
        return self._selector

    def index(self, points: Sequence[Pt]) -> VPTree:
        selector = self.pivot_selector()
        return build_vp_tree(points, selector, hooks=self.hooks)

    def nearest(self, tree: VPTree, query: Pt) -> Point:
        return search(tree, query, hooks=self.hooks)

    def route(self, graph: Graph, source: int, target: int) -> tuple[int, list[int]]:
        return shortest_path(graph, source, target, hooks=self.hooks)


def build(cfg: ToolkitModel | Mapping | None = None, *, use_logging: bool = True) -> App:
    # 0) Validate config
    if cfg is None:
        model = ToolkitModel()
    else:
        model = cfg if isinstance(cfg, ToolkitModel) else ToolkitModel.model_validate(cfg)

    # 1) RNG
    rng_registry = RNGRegistry(model.seed, toolkit=model.name)

    # 2) Hooks
    hooks = (
        LoggingHooks(
            name=model.name,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    return App(config=model, rng=rng_registry, hooks=hooks)
