from __future__ import annotations
from dataclasses import dataclass, field, asdict
from types import MappingProxyType
from typing import Dict, List, Mapping

from .nodes import StrainNode, ProductNode, PharmacyNode, CityNode, BrandNode, TerpeneNode

@dataclass(frozen=True)
class GraphStats:
    total_strains: int = 0
    total_products: int = 0
    total_pharmacies: int = 0
    total_cities: int = 0
    total_brands: int = 0
    total_terpenes: int = 0
    indexable_strains: int = 0
    indexable_products: int = 0
    indexable_cities: int = 0
    indexable_pharmacies: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)

@dataclass
class EntityGraph:
    """
    Slug-keyed node collections plus the lookup indexes built while linking.

    Writable only while the pipeline runs; `freeze()` swaps every collection
    for a read-only view before the graph is handed to readers.
    """
    strains: Mapping[str, StrainNode] = field(default_factory=dict)
    products: Mapping[str, ProductNode] = field(default_factory=dict)
    pharmacies: Mapping[str, PharmacyNode] = field(default_factory=dict)
    cities: Mapping[str, CityNode] = field(default_factory=dict)
    brands: Mapping[str, BrandNode] = field(default_factory=dict)
    terpenes: Mapping[str, TerpeneNode] = field(default_factory=dict)

    strains_by_name: Mapping[str, str] = field(default_factory=dict)        # lowercased name/identifier -> strain slug
    products_by_strain: Mapping[str, List[str]] = field(default_factory=dict)
    pharmacies_by_city: Mapping[str, List[str]] = field(default_factory=dict)
    products_by_brand: Mapping[str, List[str]] = field(default_factory=dict)

    stats: GraphStats = field(default_factory=GraphStats)
    frozen: bool = False

    _COLLECTIONS = (
        "strains", "products", "pharmacies", "cities", "brands", "terpenes",
        "strains_by_name", "products_by_strain", "pharmacies_by_city", "products_by_brand",
    )

    def freeze(self) -> "EntityGraph":
        if self.frozen:
            return self
        for name in self._COLLECTIONS:
            value = getattr(self, name)
            if name in ("products_by_strain", "pharmacies_by_city", "products_by_brand"):
                value = {k: tuple(v) for k, v in value.items()}
            setattr(self, name, MappingProxyType(dict(value)))
        self.frozen = True
        return self
