"""
Indexability gates: decide, per entity, whether it has enough substance to be
published, and record why. Rules are evaluated in order, first match wins.
The evaluators only read finalized aggregates, so running the gate twice on
the same graph gives the same answer.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from ..config import GraphConfig
from ..graph import EntityGraph
from ..nodes import CityNode, PharmacyNode, ProductNode, StrainNode

@dataclass(frozen=True)
class IndexabilityDecision:
    indexable: bool
    reason: str

def evaluate_strain(strain: StrainNode) -> IndexabilityDecision:
    has_data = strain.has_cannabinoid_data
    if strain.product_count > 0:
        return IndexabilityDecision(True, "Has products")
    if has_data and (strain.similar_strain_slugs or strain.description):
        return IndexabilityDecision(True, "Has data and related content")
    if has_data:
        return IndexabilityDecision(True, "Has cannabinoid data")
    return IndexabilityDecision(False, "Thin content - no products, no data")

def evaluate_product(product: ProductNode) -> IndexabilityDecision:
    if product.in_stock:
        return IndexabilityDecision(True, "In stock")
    if product.price_min is not None:
        return IndexabilityDecision(True, "Has price data")
    return IndexabilityDecision(False, "No stock, no price data")

def evaluate_city(city: CityNode, min_products: int = 10) -> IndexabilityDecision:
    if city.pharmacy_count >= 2:
        return IndexabilityDecision(True, f"Has {city.pharmacy_count} pharmacies")
    if city.pharmacy_count == 1 and city.total_products >= min_products:
        return IndexabilityDecision(True, "Single pharmacy with good product coverage")
    return IndexabilityDecision(False, "Too few pharmacies/products")

def evaluate_pharmacy(pharmacy: PharmacyNode) -> IndexabilityDecision:
    if pharmacy.product_count > 0 or pharmacy.has_prices:
        return IndexabilityDecision(True, "Has products or prices")
    if pharmacy.has_delivery or pharmacy.has_pickup:
        return IndexabilityDecision(True, "Has services")
    return IndexabilityDecision(False, "No products, no services")

def _apply(node, decision: IndexabilityDecision) -> bool:
    node.is_indexable = decision.indexable
    node.indexability_reason = decision.reason
    return decision.indexable

def apply_indexability_gates(graph: EntityGraph, config: Optional[GraphConfig] = None) -> Dict[str, int]:
    """Flag every strain, product, city and pharmacy. Returns indexable counts per type."""
    cfg = config or GraphConfig()
    counts = {"strains": 0, "products": 0, "cities": 0, "pharmacies": 0}
    for strain in graph.strains.values():
        counts["strains"] += _apply(strain, evaluate_strain(strain))
    for product in graph.products.values():
        counts["products"] += _apply(product, evaluate_product(product))
    for city in graph.cities.values():
        counts["cities"] += _apply(city, evaluate_city(city, cfg.city_min_products))
    for pharmacy in graph.pharmacies.values():
        counts["pharmacies"] += _apply(pharmacy, evaluate_pharmacy(pharmacy))
    return counts
