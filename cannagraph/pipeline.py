"""
Graph build pipeline.

    strains -> products -> pharmacies/cities -> similarity -> indexability -> stats

Each phase is one stage in a `DagRunner`; the linker owns the graph for the
three registration phases, the later stages only touch derived fields. The
finished graph is frozen before it is returned.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import GraphConfig
from .contracts import verify
from .dag import Context, DagRunner, Stage
from .graph import EntityGraph
from .io import write_json
from .logging import log, MetricsCollector
from .records import PharmacyRecord, ProductRecord, StrainRecord
from .stages.indexability import apply_indexability_gates
from .stages.link import GraphLinker
from .stages.similarity import compute_similar_strains
from .stages.stats import compute_stats

@dataclass
class BuildReport:
    graph: EntityGraph
    summary: Dict[str, Any]
    metrics: Dict[str, Any]
    contract_errors: List[str] = field(default_factory=list)
    config: Optional[GraphConfig] = None

    @property
    def ok(self) -> bool:
        return self.summary.get("success", False) and not self.contract_errors

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "stats": self.graph.stats.as_dict(),
            "stages": self.summary.get("stages", []),
            "built_at": self.summary.get("built_at"),
            "metrics": self.metrics,
            "contract_errors": self.contract_errors,
            "config": self.config.as_dict() if self.config else None,
        }

def build_stages(strains: Sequence[StrainRecord], products: Sequence[ProductRecord],
                 pharmacies: Sequence[PharmacyRecord], linker: GraphLinker) -> List[Stage]:
    def _strains(ctx: Context):
        linker.register_strains(strains)
        return {"strains": len(ctx.graph.strains), "terpenes": len(ctx.graph.terpenes)}

    def _products(ctx: Context):
        linker.register_products(products)
        return {
            "products": len(ctx.graph.products),
            "brands": len(ctx.graph.brands),
            "unlinked": ctx.metrics.get("products.unlinked"),
        }

    def _pharmacies(ctx: Context):
        linker.register_pharmacies(pharmacies)
        return {"pharmacies": len(ctx.graph.pharmacies), "cities": len(ctx.graph.cities)}

    def _similarity(ctx: Context):
        return {"links": compute_similar_strains(ctx.graph, ctx.cfg.similarity)}

    def _indexability(ctx: Context):
        return {"indexable": apply_indexability_gates(ctx.graph, ctx.cfg)}

    def _stats(ctx: Context):
        ctx.graph.stats = compute_stats(ctx.graph)
        return None

    return [
        Stage("strains", "Registering strains and terpenes", _strains),
        Stage("products", "Linking products to strains and brands", _products),
        Stage("pharmacies", "Registering pharmacies and cities", _pharmacies),
        Stage("similarity", "Scoring similar strains", _similarity),
        Stage("indexability", "Applying indexability gates", _indexability),
        Stage("stats", "Computing graph statistics", _stats),
    ]

def run_build(strains: Sequence[StrainRecord], products: Sequence[ProductRecord],
              pharmacies: Sequence[PharmacyRecord], config: Optional[GraphConfig] = None,
              with_contracts: bool = True) -> BuildReport:
    cfg = config or GraphConfig()
    graph = EntityGraph()
    metrics = MetricsCollector()
    linker = GraphLinker(graph, cfg, metrics)
    runner = DagRunner(build_stages(strains, products, pharmacies, linker), graph, cfg, metrics)
    summary = runner.run()
    graph.freeze()

    contract_errors = verify(graph, cfg) if with_contracts else []
    for err in contract_errors:
        log().warning(f"contract: {err}")

    report = BuildReport(graph=graph, summary=summary, metrics=metrics.get_summary(),
                         contract_errors=contract_errors, config=cfg)
    s = graph.stats
    log().info(
        f"graph: {s.total_strains} strains ({s.indexable_strains} indexable), "
        f"{s.total_products} products ({s.indexable_products}), "
        f"{s.total_pharmacies} pharmacies ({s.indexable_pharmacies}), "
        f"{s.total_cities} cities ({s.indexable_cities}), "
        f"{s.total_brands} brands, {s.total_terpenes} terpenes"
    )
    if cfg.report_dir is not None:
        write_report(report, Path(cfg.report_dir))
    return report

def write_report(report: BuildReport, report_dir: Path) -> Path:
    path = report_dir / "run.json"
    write_json(path, report.as_dict())
    log().debug(f"build report written to {path}")
    return path

def build_entity_graph(strains: Sequence[StrainRecord], products: Sequence[ProductRecord],
                       pharmacies: Sequence[PharmacyRecord], config: Optional[GraphConfig] = None) -> EntityGraph:
    """Build the finished, frozen entity graph from the three record sets."""
    return run_build(strains, products, pharmacies, config, with_contracts=False).graph
