from __future__ import annotations

from ..graph import EntityGraph, GraphStats

def compute_stats(graph: EntityGraph) -> GraphStats:
    """Snapshot of totals and indexable counts; taken once, after the gates ran."""
    return GraphStats(
        total_strains=len(graph.strains),
        total_products=len(graph.products),
        total_pharmacies=len(graph.pharmacies),
        total_cities=len(graph.cities),
        total_brands=len(graph.brands),
        total_terpenes=len(graph.terpenes),
        indexable_strains=sum(1 for s in graph.strains.values() if s.is_indexable),
        indexable_products=sum(1 for p in graph.products.values() if p.is_indexable),
        indexable_cities=sum(1 for c in graph.cities.values() if c.is_indexable),
        indexable_pharmacies=sum(1 for p in graph.pharmacies.values() if p.is_indexable),
    )
