"""
Typed input records handed to the graph builder.

These are the already-parsed shapes of the three provider feeds; turning raw
provider rows into them is `cannagraph.sources`' job.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(frozen=True)
class CannabinoidMeasure:
    """A single value, a range, or both, in percent."""
    value: Optional[float] = None
    range_low: Optional[float] = None
    range_high: Optional[float] = None
    equality: Optional[str] = None

    @property
    def low(self) -> Optional[float]:
        return self.range_low if self.range_low is not None else self.value

    @property
    def high(self) -> Optional[float]:
        return self.range_high if self.range_high is not None else self.value

@dataclass
class StrainRecord:
    id: str
    name: str
    slug: Optional[str] = None
    identifier: Optional[str] = None
    thc: Optional[CannabinoidMeasure] = None
    cbd: Optional[CannabinoidMeasure] = None
    genetic_type: Optional[str] = None  # indica | sativa | hybrid
    genetic_details: Optional[str] = None
    effects: List[str] = field(default_factory=list)
    tastes: List[str] = field(default_factory=list)
    terpenes: List[str] = field(default_factory=list)
    description_de: Optional[str] = None
    image_url: Optional[str] = None

@dataclass
class ProductRecord:
    id: str
    name: str
    slug: Optional[str] = None
    pzn: Optional[str] = None
    type: str = "other"
    genetics: Optional[str] = None
    manufacturer: Optional[str] = None
    thc_percent: Optional[float] = None
    cbd_percent: Optional[float] = None
    price_min: Optional[int] = None  # cents
    price_max: Optional[int] = None  # cents
    stock_status: int = 0
    strain_name: Optional[str] = None
    strain_ids: List[str] = field(default_factory=list)
    strain_terpenes: List[str] = field(default_factory=list)
    strain_effects: List[str] = field(default_factory=list)
    strain_tastes: List[str] = field(default_factory=list)
    origin_country: Optional[str] = None
    image_url: Optional[str] = None

@dataclass
class PharmacyRecord:
    id: str
    name: str
    slug: Optional[str] = None
    street: Optional[str] = None
    zip: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    has_delivery: bool = False
    has_pickup: bool = False
    prices_available: bool = False
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    product_count: int = 0
    rating: float = 0.0
    rating_count: int = 0
    image_url: Optional[str] = None
