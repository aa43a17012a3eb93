# -*- coding: utf-8 -*-
from __future__ import annotations
import re
from typing import Any, List, Optional

_TRANSLIT = (("ä", "ae"), ("ö", "oe"), ("ü", "ue"), ("ß", "ss"))
_NON_SLUG = re.compile(r"[^a-z0-9]+")

def slugify(name: Optional[str]) -> str:
    """
    Canonical URL-safe identifier for a display name.
    Lowercases, transliterates German umlauts/eszett, collapses every run of
    characters outside [a-z0-9] into one hyphen and trims hyphens at the ends.
    Not unique: callers decide what a collision means.
    """
    s = (name or "").lower()
    for src, dst in _TRANSLIT:
        s = s.replace(src, dst)
    return _NON_SLUG.sub("-", s).strip("-")

def lookup_key(name: Optional[str]) -> str:
    """Case-insensitive key for the strain name index."""
    return (name or "").strip().lower()

def clean_labels(values: Any) -> List[str]:
    """Drop empty/non-string labels, strip whitespace, keep order. A bare string is one label."""
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, (list, tuple)):
        values = []
    out: List[str] = []
    for v in values:
        if isinstance(v, str) and v.strip():
            out.append(v.strip())
    return out

def blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None
