"""
Read-only queries over a finished graph.

Lookups return the node or None; traversals and filters always return a new
list (empty when nothing is related or the slug is unknown).
"""
from __future__ import annotations
from typing import Iterable, List, Mapping, Optional, TypeVar

from .graph import EntityGraph
from .nodes import BrandNode, CityNode, PharmacyNode, ProductNode, StrainNode, TerpeneNode

T = TypeVar("T")

def _resolve(slugs: Iterable[str], nodes: Mapping[str, T]) -> List[T]:
    return [nodes[s] for s in slugs if s in nodes]

# ---- lookups -------------------------------------------------------------------
def get_strain_by_slug(graph: EntityGraph, slug: str) -> Optional[StrainNode]:
    return graph.strains.get(slug)

def get_product_by_slug(graph: EntityGraph, slug: str) -> Optional[ProductNode]:
    return graph.products.get(slug)

def get_pharmacy_by_slug(graph: EntityGraph, slug: str) -> Optional[PharmacyNode]:
    return graph.pharmacies.get(slug)

def get_city_by_slug(graph: EntityGraph, slug: str) -> Optional[CityNode]:
    return graph.cities.get(slug)

def get_brand_by_slug(graph: EntityGraph, slug: str) -> Optional[BrandNode]:
    return graph.brands.get(slug)

def get_terpene_by_slug(graph: EntityGraph, slug: str) -> Optional[TerpeneNode]:
    return graph.terpenes.get(slug)

# ---- traversals ----------------------------------------------------------------
def get_products_for_strain(graph: EntityGraph, strain_slug: str) -> List[ProductNode]:
    return _resolve(graph.products_by_strain.get(strain_slug, ()), graph.products)

def get_pharmacies_for_city(graph: EntityGraph, city_slug: str) -> List[PharmacyNode]:
    return _resolve(graph.pharmacies_by_city.get(city_slug, ()), graph.pharmacies)

def get_products_for_brand(graph: EntityGraph, brand_slug: str) -> List[ProductNode]:
    return _resolve(graph.products_by_brand.get(brand_slug, ()), graph.products)

def get_similar_strains(graph: EntityGraph, strain_slug: str) -> List[StrainNode]:
    strain = graph.strains.get(strain_slug)
    if strain is None:
        return []
    return _resolve(strain.similar_strain_slugs, graph.strains)

def get_strains_for_terpene(graph: EntityGraph, terpene_slug: str) -> List[StrainNode]:
    terpene = graph.terpenes.get(terpene_slug)
    if terpene is None:
        return []
    return _resolve(terpene.strain_slugs, graph.strains)

# ---- filters -------------------------------------------------------------------
def get_indexable_strains(graph: EntityGraph) -> List[StrainNode]:
    return [s for s in graph.strains.values() if s.is_indexable]

def get_indexable_products(graph: EntityGraph) -> List[ProductNode]:
    return [p for p in graph.products.values() if p.is_indexable]

def get_indexable_cities(graph: EntityGraph) -> List[CityNode]:
    return [c for c in graph.cities.values() if c.is_indexable]

def get_indexable_pharmacies(graph: EntityGraph) -> List[PharmacyNode]:
    return [p for p in graph.pharmacies.values() if p.is_indexable]

def get_publishable_brands(graph: EntityGraph, min_products: int = 3) -> List[BrandNode]:
    """Brands carry no gate of their own; downstream publishes those with enough products."""
    return [b for b in graph.brands.values() if b.product_count >= min_products]

def get_publishable_terpenes(graph: EntityGraph, min_strains: int = 3) -> List[TerpeneNode]:
    return [t for t in graph.terpenes.values() if t.strain_count >= min_strains]
