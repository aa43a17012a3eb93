# -*- coding: utf-8 -*-
"""
cannagraph: builds the cross-referenced strain/product/pharmacy entity graph
behind the cannabis marketplace pages.
"""

from .accessors import (
    get_brand_by_slug, get_city_by_slug, get_indexable_cities, get_indexable_pharmacies,
    get_indexable_products, get_indexable_strains, get_pharmacies_for_city, get_pharmacy_by_slug,
    get_product_by_slug, get_products_for_brand, get_products_for_strain, get_publishable_brands,
    get_publishable_terpenes, get_similar_strains, get_strain_by_slug, get_strains_for_terpene,
    get_terpene_by_slug,
)
from .config import GraphConfig, SimilarityConfig
from .graph import EntityGraph, GraphStats
from .pipeline import BuildReport, build_entity_graph, run_build
from .records import CannabinoidMeasure, PharmacyRecord, ProductRecord, StrainRecord
from .shared.normalize import slugify

__all__ = [
    "build_entity_graph", "run_build", "BuildReport",
    "EntityGraph", "GraphStats", "GraphConfig", "SimilarityConfig",
    "StrainRecord", "ProductRecord", "PharmacyRecord", "CannabinoidMeasure",
    "slugify",
    "get_strain_by_slug", "get_product_by_slug", "get_pharmacy_by_slug", "get_city_by_slug",
    "get_brand_by_slug", "get_terpene_by_slug",
    "get_products_for_strain", "get_pharmacies_for_city", "get_products_for_brand",
    "get_similar_strains", "get_strains_for_terpene",
    "get_indexable_strains", "get_indexable_products", "get_indexable_cities", "get_indexable_pharmacies",
    "get_publishable_brands", "get_publishable_terpenes",
]
