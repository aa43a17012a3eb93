"""
Relationship linking: registers strain, product and pharmacy nodes and wires
up the relationships that are only implicit in the provider feeds.

`GraphLinker` is the only writer of the graph's collections. Derived Brand,
Terpene and City nodes are created on first reference (get-or-create keyed by
slug) and every link updates the list and its counter in the same step.
"""
from __future__ import annotations
from typing import Iterable, MutableMapping, Optional, Set

from ..config import GraphConfig
from ..graph import EntityGraph
from ..logging import log, MetricsCollector
from ..nodes import (
    BrandNode, CityNode, PharmacyNode, ProductNode, StrainNode, TerpeneNode,
    build_pharmacy_node, build_product_node, build_strain_node,
)
from ..records import PharmacyRecord, ProductRecord, StrainRecord
from ..shared.normalize import lookup_key, slugify

class GraphLinker:
    def __init__(self, graph: EntityGraph, config: Optional[GraphConfig] = None,
                 metrics: Optional[MetricsCollector] = None):
        if graph.frozen:
            raise ValueError("cannot link into a frozen graph")
        self.graph = graph
        self.config = config or GraphConfig()
        self.metrics = metrics or MetricsCollector()
        self._display_names: Set[str] = set()

    # ---- phase 1: strains + terpenes ---------------------------------------------
    def register_strains(self, records: Iterable[StrainRecord]) -> None:
        g = self.graph
        for rec in records:
            node = build_strain_node(rec)
            if not self._claim(g.strains, node.slug, "strains", rec.id):
                continue
            g.strains[node.slug] = node
            self.metrics.increment("strains.registered")

            # later registrations win; an identifier never shadows a display name
            name_key = lookup_key(rec.name)
            g.strains_by_name[name_key] = node.slug
            self._display_names.add(name_key)
            if rec.identifier:
                alias = lookup_key(rec.identifier)
                if alias not in self._display_names:
                    g.strains_by_name[alias] = node.slug

            seen: Set[str] = set()
            for label in node.terpenes:
                terpene = self._terpene(label)
                if terpene is None or terpene.slug in seen:
                    continue
                seen.add(terpene.slug)
                terpene.strain_slugs.append(node.slug)
                terpene.strain_count += 1

    # ---- phase 2: products + brands ----------------------------------------------
    def register_products(self, records: Iterable[ProductRecord]) -> None:
        g = self.graph
        for rec in records:
            node = build_product_node(rec, g.strains_by_name, g.strains)
            if not self._claim(g.products, node.slug, "products", rec.id):
                continue
            g.products[node.slug] = node
            self.metrics.increment("products.registered")

            if node.strain_slug is not None:
                by_name = rec.strain_name and g.strains_by_name.get(lookup_key(rec.strain_name)) == node.strain_slug
                self.metrics.increment("products.linked_by_name" if by_name else "products.linked_by_source_id")
                self._link_product_to_strain(node, g.strains[node.strain_slug])
            else:
                self.metrics.increment("products.unlinked")
                if rec.strain_name or rec.strain_ids:
                    log().debug(f"product {node.slug}: no strain for {rec.strain_name!r} / {rec.strain_ids}")

            if node.brand_slug is not None:
                brand = self._brand(node)
                brand.product_slugs.append(node.slug)
                brand.product_count += 1
                g.products_by_brand[brand.slug].append(node.slug)

    def _link_product_to_strain(self, product: ProductNode, strain: StrainNode) -> None:
        strain.product_slugs.append(product.slug)
        strain.product_count += 1
        self.graph.products_by_strain.setdefault(strain.slug, []).append(product.slug)

        if product.price_min is not None:
            if strain.price_min is None or product.price_min < strain.price_min:
                strain.price_min = product.price_min
        if product.price_max is not None:
            if strain.price_max is None or product.price_max > strain.price_max:
                strain.price_max = product.price_max

    # ---- phase 3: pharmacies + cities --------------------------------------------
    def register_pharmacies(self, records: Iterable[PharmacyRecord]) -> None:
        g = self.graph
        for rec in records:
            node = build_pharmacy_node(rec, unknown_city=self.config.unknown_city)
            if not self._claim(g.pharmacies, node.slug, "pharmacies", rec.id):
                continue
            g.pharmacies[node.slug] = node
            self.metrics.increment("pharmacies.registered")

            city = self._city(node)
            city.pharmacy_slugs.append(node.slug)
            city.pharmacy_count += 1
            city.total_products += node.product_count
            if node.has_delivery:
                city.has_delivery_pharmacy = True
            g.pharmacies_by_city[city.slug].append(node.slug)

    # ---- get-or-create -----------------------------------------------------------
    def _terpene(self, label: str) -> Optional[TerpeneNode]:
        slug = slugify(label)
        if not slug:
            return None
        terpene = self.graph.terpenes.get(slug)
        if terpene is None:
            terpene = TerpeneNode(slug=slug, name=label)
            self.graph.terpenes[slug] = terpene
            self.metrics.increment("terpenes.created")
        return terpene

    def _brand(self, product: ProductNode) -> BrandNode:
        brand = self.graph.brands.get(product.brand_slug)
        if brand is None:
            brand = BrandNode(slug=product.brand_slug, name=product.brand_name or product.brand_slug)
            self.graph.brands[brand.slug] = brand
            self.graph.products_by_brand[brand.slug] = []
            self.metrics.increment("brands.created")
        return brand

    def _city(self, pharmacy: PharmacyNode) -> CityNode:
        city = self.graph.cities.get(pharmacy.city_slug)
        if city is None:
            city = CityNode(slug=pharmacy.city_slug, name=pharmacy.city_name, state=pharmacy.state)
            self.graph.cities[city.slug] = city
            self.graph.pharmacies_by_city[city.slug] = []
            self.metrics.increment("cities.created")
        return city

    def _claim(self, collection: MutableMapping, slug: str, kind: str, source_id: str) -> bool:
        if not slug:
            log().warning(f"{kind}: record {source_id} has no usable name/slug, skipped")
            self.metrics.increment(f"{kind}.empty_slug")
            return False
        if slug in collection:
            log().warning(f"{kind}: duplicate slug '{slug}' (source {source_id}), keeping first")
            self.metrics.increment(f"{kind}.duplicate_slug")
            return False
        return True
