"""
Strain-to-strain similarity.

Every strain scores every other strain (O(n^2), no pre-filtering: catalogs
are a few thousand strains). Only symmetric features are read, so
score(a, b) == score(b, a).
"""
from __future__ import annotations
from typing import List, Optional, Tuple

from ..config import SimilarityConfig
from ..graph import EntityGraph
from ..nodes import StrainNode

def _shared(ours: List[str], theirs: List[str]) -> int:
    lookup = set(theirs)
    return sum(1 for label in ours if label in lookup)

def score_strain_pair(strain: StrainNode, other: StrainNode, config: Optional[SimilarityConfig] = None) -> float:
    cfg = config or SimilarityConfig()
    score = 0.0
    if strain.genetic_type is not None and strain.genetic_type == other.genetic_type:
        score += cfg.genetic_weight
    score += _shared(strain.terpenes, other.terpenes) * cfg.terpene_weight
    score += _shared(strain.effects, other.effects) * cfg.effect_weight
    if strain.thc_max is not None and other.thc_max is not None:
        if abs(strain.thc_max - other.thc_max) <= cfg.thc_tolerance:
            score += cfg.thc_weight
    return score

def rank_similar(strain: StrainNode, candidates: List[StrainNode],
                 config: Optional[SimilarityConfig] = None) -> List[Tuple[str, float]]:
    """(slug, score) pairs above the cutoff, best first; ties keep candidate order."""
    cfg = config or SimilarityConfig()
    scored: List[Tuple[str, float]] = []
    for other in candidates:
        if other.slug == strain.slug:
            continue
        score = score_strain_pair(strain, other, cfg)
        if score >= cfg.min_score:
            scored.append((other.slug, score))
    scored.sort(key=lambda pair: -pair[1])  # stable
    return scored[:cfg.top_n]

def compute_similar_strains(graph: EntityGraph, config: Optional[SimilarityConfig] = None) -> int:
    """Fill `similar_strain_slugs` on every strain. Returns the number of links written."""
    strains = list(graph.strains.values())
    links = 0
    for strain in strains:
        strain.similar_strain_slugs = [slug for slug, _ in rank_similar(strain, strains, config)]
        links += len(strain.similar_strain_slugs)
    return links
