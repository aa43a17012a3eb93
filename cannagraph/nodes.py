"""
Graph node types and the builders that turn one input record into one node.

Builders leave every derived field (links, counts, extrema, indexability) at
its zero value; the linker and the later stages fill them in.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from .records import StrainRecord, ProductRecord, PharmacyRecord
from .shared.normalize import slugify, lookup_key

GENETIC_TYPES = ("indica", "sativa", "hybrid")

@dataclass
class StrainNode:
    slug: str
    name: str
    synonyms: List[str]
    thc_min: Optional[float]
    thc_max: Optional[float]
    cbd_min: Optional[float]
    cbd_max: Optional[float]
    genetic_type: Optional[str]
    genetic_details: Optional[str]
    effects: List[str]
    tastes: List[str]
    terpenes: List[str]
    description: Optional[str]
    source_id: str
    image_url: Optional[str] = None
    product_slugs: List[str] = field(default_factory=list)
    similar_strain_slugs: List[str] = field(default_factory=list)
    product_count: int = 0
    pharmacy_count: int = 0
    price_min: Optional[int] = None
    price_max: Optional[int] = None
    is_indexable: bool = False
    indexability_reason: str = ""

    @property
    def has_cannabinoid_data(self) -> bool:
        return self.thc_max is not None or self.cbd_max is not None

@dataclass
class ProductNode:
    slug: str
    name: str
    pzn: Optional[str]
    type: str
    genetics: Optional[str]
    brand_slug: Optional[str]
    brand_name: Optional[str]
    thc_percent: Optional[float]
    cbd_percent: Optional[float]
    price_min: Optional[int]
    price_max: Optional[int]
    stock_status: int
    strain_slug: Optional[str]
    strain_name: Optional[str]
    terpenes: List[str]
    effects: List[str]
    tastes: List[str]
    origin_country: Optional[str]
    source_id: str
    image_url: Optional[str] = None
    is_indexable: bool = False
    indexability_reason: str = ""

    @property
    def in_stock(self) -> bool:
        return self.stock_status > 0

@dataclass
class PharmacyNode:
    slug: str
    name: str
    city_slug: str
    city_name: str
    state: Optional[str]
    street: Optional[str]
    zip: Optional[str]
    lat: Optional[float]
    lng: Optional[float]
    has_delivery: bool
    has_pickup: bool
    has_prices: bool
    website: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    product_count: int
    rating: float
    rating_count: int
    source_id: str
    image_url: Optional[str] = None
    is_indexable: bool = False
    indexability_reason: str = ""

@dataclass
class CityNode:
    slug: str
    name: str
    state: Optional[str]
    pharmacy_slugs: List[str] = field(default_factory=list)
    pharmacy_count: int = 0
    total_products: int = 0
    has_delivery_pharmacy: bool = False
    is_indexable: bool = False
    indexability_reason: str = ""

@dataclass
class BrandNode:
    slug: str
    name: str
    product_count: int = 0
    product_slugs: List[str] = field(default_factory=list)

@dataclass
class TerpeneNode:
    slug: str
    name: str
    strain_count: int = 0
    strain_slugs: List[str] = field(default_factory=list)

def node_slug(record_slug: Optional[str], name: str) -> str:
    return slugify(record_slug or name)

def build_strain_node(record: StrainRecord) -> StrainNode:
    thc_min, thc_max = _bounds(record.thc)
    cbd_min, cbd_max = _bounds(record.cbd)
    genetic_type = record.genetic_type if record.genetic_type in GENETIC_TYPES else None
    return StrainNode(
        slug=node_slug(record.slug, record.name),
        name=record.name,
        synonyms=[record.identifier] if record.identifier else [],
        thc_min=thc_min,
        thc_max=thc_max,
        cbd_min=cbd_min,
        cbd_max=cbd_max,
        genetic_type=genetic_type,
        genetic_details=record.genetic_details,
        effects=list(record.effects),
        tastes=list(record.tastes),
        terpenes=list(record.terpenes),
        description=record.description_de,
        source_id=record.id,
        image_url=record.image_url,
    )

def resolve_strain_slug(
    record: ProductRecord,
    strains_by_name: Mapping[str, str],
    strains: Mapping[str, StrainNode],
) -> Optional[str]:
    """
    Preliminary strain match for a product: case-insensitive name first, then
    the first registered strain whose source id the product lists.
    """
    if record.strain_name:
        slug = strains_by_name.get(lookup_key(record.strain_name))
        if slug is not None:
            return slug
    if record.strain_ids:
        wanted = set(record.strain_ids)
        # registration order decides between several candidates
        for strain in strains.values():
            if strain.source_id in wanted:
                return strain.slug
    return None

def build_product_node(
    record: ProductRecord,
    strains_by_name: Mapping[str, str],
    strains: Mapping[str, StrainNode],
) -> ProductNode:
    strain_slug = resolve_strain_slug(record, strains_by_name, strains)
    brand_slug = slugify(record.manufacturer) or None
    return ProductNode(
        slug=node_slug(record.slug, record.name),
        name=record.name,
        pzn=record.pzn,
        type=record.type,
        genetics=record.genetics,
        brand_slug=brand_slug,
        brand_name=record.manufacturer if brand_slug else None,
        thc_percent=record.thc_percent,
        cbd_percent=record.cbd_percent,
        price_min=record.price_min,
        price_max=record.price_max,
        stock_status=record.stock_status,
        strain_slug=strain_slug,
        strain_name=record.strain_name,
        terpenes=list(record.strain_terpenes),
        effects=list(record.strain_effects),
        tastes=list(record.strain_tastes),
        origin_country=record.origin_country,
        source_id=record.id,
        image_url=record.image_url,
    )

def build_pharmacy_node(record: PharmacyRecord, unknown_city: str = "Unknown") -> PharmacyNode:
    city_name = (record.city or "").strip()
    if not slugify(city_name):
        city_name = unknown_city
    return PharmacyNode(
        slug=node_slug(record.slug, record.name),
        name=record.name,
        city_slug=slugify(city_name),
        city_name=city_name,
        state=record.state,
        street=record.street,
        zip=record.zip,
        lat=record.lat,
        lng=record.lng,
        has_delivery=record.has_delivery,
        has_pickup=record.has_pickup,
        has_prices=record.prices_available,
        website=record.website,
        phone=record.phone,
        email=record.email,
        product_count=record.product_count,
        rating=record.rating,
        rating_count=record.rating_count,
        source_id=record.id,
        image_url=record.image_url,
    )

def _bounds(measure) -> Tuple[Optional[float], Optional[float]]:
    if measure is None:
        return None, None
    return measure.low, measure.high
