# -*- coding: utf-8 -*-
"""
Provider rows -> typed records.

The provider exports flat JSON objects whose nested values are flattened into
"Parent: Child" keys (e.g. "Thc: Value", "Address: City"). Parsing is total:
missing or malformed optional fields become None/empty defaults. Only rows
without an ID or Name are rejected.
"""
from __future__ import annotations
import json
import math
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import RecordParseError
from .io import read_json, read_jsonl
from .records import CannabinoidMeasure, PharmacyRecord, ProductRecord, StrainRecord
from .shared.normalize import blank_to_none, clean_labels

PRODUCT_TYPES = ("flower", "extract", "oil", "capsule", "vape")

def _required(raw: Dict[str, Any], kind: str) -> Tuple[str, str]:
    rid = blank_to_none(raw.get("ID"))
    name = blank_to_none(raw.get("Name"))
    if rid is None:
        raise RecordParseError(kind, "missing ID")
    if name is None:
        raise RecordParseError(kind, "missing Name", rid)
    return rid, name

def _number(value: Any) -> Optional[float]:
    """Finite float or None; NaN and infinities count as missing."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            n = float(value)
        else:
            n = float(str(value).replace(",", "."))
    except (ValueError, OverflowError):
        return None
    return n if math.isfinite(n) else None

def _int(value: Any, default: int = 0) -> int:
    n = _number(value)
    return int(n) if n is not None else default

def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return isinstance(value, str) and value.strip().lower() in ("true", "1", "yes")

def _image(path: Any, base_url: str) -> Optional[str]:
    path = blank_to_none(path)
    if path is None:
        return None
    if path.startswith("http://") or path.startswith("https://"):
        return path
    return f"{base_url}{path}"

def _embedded_value(raw: Dict[str, Any], key: str) -> Optional[float]:
    """Flat "<key>: Value" first, then the embedded JSON string under "<key>"."""
    flat = _number(raw.get(f"{key}: Value"))
    if flat is not None:
        return flat
    blob = raw.get(key)
    if isinstance(blob, str) and blob.strip():
        try:
            parsed = json.loads(blob)
        except json.JSONDecodeError:
            return None
        if isinstance(parsed, dict):
            return _number(parsed.get("value"))
    return None

# ---- strains ---------------------------------------------------------------------
def parse_measure(raw: Dict[str, Any], key: str) -> Optional[CannabinoidMeasure]:
    value = _number(raw.get(f"{key}: Value"))
    low = _number(raw.get(f"{key}: RangeLow"))
    high = _number(raw.get(f"{key}: RangeHigh"))
    if value is None and low is None and high is None:
        return None
    return CannabinoidMeasure(value=value, range_low=low, range_high=high,
                              equality=blank_to_none(raw.get(f"{key}: Equality")))

def parse_genetic_type(genetics: List[str]) -> Optional[str]:
    text = " ".join(genetics).lower()
    for kind in ("hybrid", "indica", "sativa"):
        if kind in text:
            return kind
    return None

def parse_strain_raw(raw: Dict[str, Any], image_base_url: str = "https://weed.de") -> StrainRecord:
    rid, name = _required(raw, "strain")
    genetics = clean_labels(raw.get("Genetics"))
    return StrainRecord(
        id=rid,
        name=name,
        slug=blank_to_none(raw.get("Slug")),
        identifier=blank_to_none(raw.get("Identifier")),
        thc=parse_measure(raw, "Thc"),
        cbd=parse_measure(raw, "Cbd"),
        genetic_type=parse_genetic_type(genetics),
        genetic_details=", ".join(genetics) if genetics else None,
        effects=clean_labels(raw.get("Effect")),
        tastes=clean_labels(raw.get("Taste")),
        terpenes=clean_labels(raw.get("Terpenes")),
        description_de=blank_to_none(raw.get("Description: De")),
        image_url=_image(raw.get("Image"), image_base_url),
    )

# ---- products --------------------------------------------------------------------
def parse_product_type(value: Any) -> str:
    normalized = (blank_to_none(value) or "").lower()
    return normalized if normalized in PRODUCT_TYPES else "other"

def parse_product_genetics(value: Any) -> Optional[str]:
    normalized = (blank_to_none(value) or "").lower()
    if not normalized:
        return None
    if normalized in ("indica", "sativa", "hybrid"):
        return normalized
    if "indica-dominant" in normalized or "indica dominant" in normalized:
        return "hybrid_indica"
    if "sativa-dominant" in normalized or "sativa dominant" in normalized:
        return "hybrid_sativa"
    if "hybrid" in normalized:
        return "hybrid"
    return None

def _cents(value: Any) -> Optional[int]:
    euros = _number(value)
    if euros is None or not math.isfinite(euros * 100):
        return None
    return int(round(euros * 100))

def parse_product_raw(raw: Dict[str, Any], image_base_url: str = "https://weed.de") -> ProductRecord:
    rid, name = _required(raw, "product")
    return ProductRecord(
        id=rid,
        name=name,
        slug=blank_to_none(raw.get("Slug")),
        pzn=blank_to_none(raw.get("Pzn")),
        type=parse_product_type(raw.get("Type")),
        genetics=parse_product_genetics(raw.get("Genetics")),
        manufacturer=blank_to_none(raw.get("Manufacturer")),
        thc_percent=_embedded_value(raw, "Thc"),
        cbd_percent=_embedded_value(raw, "Cbd"),
        price_min=_cents(raw.get("MinPrice")),
        price_max=_cents(raw.get("MaxPrice")),
        stock_status=_int(raw.get("StockStatus")),
        strain_name=blank_to_none(raw.get("StrainName")),
        strain_ids=clean_labels(raw.get("Strains")),
        strain_terpenes=clean_labels(raw.get("StrainTerpenes")),
        strain_effects=clean_labels(raw.get("StrainEffects")),
        strain_tastes=clean_labels(raw.get("StrainTastes")),
        origin_country=blank_to_none(raw.get("CountryOfOrigin: GermanName")),
        image_url=_image(raw.get("ImageUrl"), image_base_url),
    )

# ---- pharmacies ------------------------------------------------------------------
def parse_pharmacy_raw(raw: Dict[str, Any], image_base_url: str = "https://weed.de") -> PharmacyRecord:
    rid, name = _required(raw, "pharmacy")
    lat = lng = None
    coords = raw.get("Location: Coordinates")
    if isinstance(coords, (list, tuple)) and len(coords) == 2:
        # GeoJSON order: [lng, lat]
        lng, lat = _number(coords[0]), _number(coords[1])
        if lat is None or lng is None:
            lat = lng = None
    return PharmacyRecord(
        id=rid,
        name=name,
        slug=blank_to_none(raw.get("Slug")),
        street=blank_to_none(raw.get("Address: Street")),
        zip=blank_to_none(raw.get("Address: Zip")),
        city=blank_to_none(raw.get("Address: City")),
        state=blank_to_none(raw.get("Address: State")),
        lat=lat,
        lng=lng,
        has_delivery=_bool(raw.get("DeliveryPossibility")),
        has_pickup=_bool(raw.get("PickupPossibility")),
        prices_available=_bool(raw.get("PricesAvailable")),
        website=blank_to_none(raw.get("ContactInfo: Website")),
        phone=blank_to_none(raw.get("ContactInfo: PhoneNumber")),
        email=blank_to_none(raw.get("ContactInfo: Email")),
        product_count=_int(raw.get("NumberOfProducts")),
        rating=_number(raw.get("AverageRating")) or 0.0,
        rating_count=_int(raw.get("TotalRatings")),
        image_url=_image(raw.get("Image"), image_base_url),
    )

PARSERS: Dict[str, Callable[..., Any]] = {
    "strains": parse_strain_raw,
    "products": parse_product_raw,
    "pharmacies": parse_pharmacy_raw,
}

def parse_records(kind: str, rows: List[Dict[str, Any]],
                  image_base_url: str = "https://weed.de") -> Tuple[List[Any], Dict[str, Any]]:
    """
    Parse a whole feed. Rows that cannot become records are skipped and
    reported in the lint dict ({"errors": [...], "warnings": [...], "stats": {...}})
    instead of aborting the feed.
    """
    if kind not in PARSERS:
        raise ValueError(f"unknown record kind: {kind}")
    parse = PARSERS[kind]
    lint: Dict[str, Any] = {"errors": [], "warnings": [], "stats": {"input": len(rows), "output": 0}}
    out: List[Any] = []
    for i, raw in enumerate(rows, 1):
        if not isinstance(raw, dict):
            lint["errors"].append(f"{kind}[{i}]: expected an object, got {type(raw).__name__}")
            continue
        try:
            out.append(parse(raw, image_base_url))
        except RecordParseError as e:
            lint["errors"].append(f"{kind}[{i}]: {e}")
    lint["stats"]["output"] = len(out)
    skipped = lint["stats"]["input"] - lint["stats"]["output"]
    if skipped:
        lint["warnings"].append(f"{kind}: skipped {skipped} row(s)")
    return out, lint

def load_records(path: Path) -> List[Dict[str, Any]]:
    """Read a feed dump: a JSON array, an object with a "data" array, or JSONL."""
    path = Path(path)
    if path.suffix == ".jsonl":
        return read_jsonl(path)
    data = read_json(path)
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of records")
    return data
