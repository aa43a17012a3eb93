from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import time

from .config import GraphConfig
from .graph import EntityGraph
from .logging import log, MetricsCollector

@dataclass
class Stage:
    id: str
    name: str
    run: Callable[["Context"], Optional[Dict[str, Any]]] = lambda ctx: None

@dataclass
class Context:
    graph: EntityGraph
    cfg: GraphConfig
    metrics: MetricsCollector
    now: float = field(default_factory=time.time)

    def elapsed_ms(self) -> float:
        return round((time.time() - self.now) * 1000, 1)

class DagRunner:
    """
    Runs stages strictly in order against one graph. Each stage only reads what
    earlier stages finished. The first failing stage aborts the run and its
    exception propagates; no partially built graph is returned.
    """

    def __init__(self, stages: List[Stage], graph: EntityGraph, cfg: GraphConfig,
                 metrics: Optional[MetricsCollector] = None):
        ids = [s.id for s in stages]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate stage ids: {ids}")
        self.stages = stages
        self.graph = graph
        self.cfg = cfg
        self.metrics = metrics or MetricsCollector()
        self.summary: Dict[str, Any] = {"success": False, "stages": [], "built_at": None}

    def run(self) -> Dict[str, Any]:
        self.summary = {"success": True, "stages": [], "built_at": int(time.time())}
        for s in self.stages:
            ctx = Context(self.graph, self.cfg, self.metrics)
            log().debug(f"stage {s.id}: {s.name}...")
            try:
                extra = s.run(ctx) or {}
            except Exception as e:
                self.summary["success"] = False
                self.summary["stages"].append({"id": s.id, "status": "error", "error": str(e),
                                               "duration_ms": ctx.elapsed_ms()})
                log().error(f"stage {s.id} failed: {e}")
                raise
            duration = ctx.elapsed_ms()
            self.metrics.add_timing(f"stage.{s.id}", duration)
            self.summary["stages"].append({"id": s.id, "status": "ok", "duration_ms": duration, **extra})
            log().info(f"✓ {s.name} ({duration:.0f}ms)")
        return self.summary
