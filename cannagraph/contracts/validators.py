from __future__ import annotations
from typing import Any, Dict, List

from ..graph import EntityGraph

def run_validators(spec: Dict[str, Any], graph: EntityGraph, top_n: int = 5) -> List[str]:
    """Run every check declared in a contract spec against a graph."""
    errs: List[str] = []
    for check in spec.get("checks", []):
        kind = check.get("kind")
        if kind == "count_matches_list":
            errs.extend(_validate_count_matches_list(graph, check))
        elif kind == "backlink":
            errs.extend(_validate_backlink(graph, check))
        elif kind == "no_dangling":
            errs.extend(_validate_no_dangling(graph, check))
        elif kind == "similar_bounds":
            errs.extend(_validate_similar_bounds(graph, int(check.get("max", top_n))))
        elif kind == "reason_present":
            errs.extend(_validate_reason_present(graph, check))
        else:
            errs.append(f"unknown check kind: {kind}")
    return errs

def _collection(graph: EntityGraph, name: str):
    coll = getattr(graph, name, None)
    if coll is None:
        raise ValueError(f"unknown collection: {name}")
    return coll

def _validate_count_matches_list(graph: EntityGraph, check: Dict[str, Any]) -> List[str]:
    """A node's counter equals the length of the slug list it tracks."""
    errs: List[str] = []
    name, count_field, list_field = check["collection"], check["count"], check["list"]
    for slug, node in _collection(graph, name).items():
        count = getattr(node, count_field)
        items = getattr(node, list_field)
        if count != len(items):
            errs.append(f"{name}/{slug}: {count_field}={count} but {len(items)} {list_field}")
    return errs

def _validate_backlink(graph: EntityGraph, check: Dict[str, Any]) -> List[str]:
    """Every slug listed on a node resolves to a target that points back at it."""
    errs: List[str] = []
    name, list_field = check["collection"], check["list"]
    target_name, back_field = check["target"], check["field"]
    targets = _collection(graph, target_name)
    for slug, node in _collection(graph, name).items():
        for ref in getattr(node, list_field):
            target = targets.get(ref)
            if target is None:
                errs.append(f"{name}/{slug}: {list_field} references missing {target_name}/{ref}")
            elif getattr(target, back_field) != slug:
                errs.append(f"{name}/{slug}: {target_name}/{ref}.{back_field} is {getattr(target, back_field)!r}")
    return errs

def _validate_no_dangling(graph: EntityGraph, check: Dict[str, Any]) -> List[str]:
    errs: List[str] = []
    name, ref_field, target_name = check["collection"], check["field"], check["target"]
    targets = _collection(graph, target_name)
    for slug, node in _collection(graph, name).items():
        ref = getattr(node, ref_field)
        if ref is not None and ref not in targets:
            errs.append(f"{name}/{slug}: {ref_field} -> missing {target_name}/{ref}")
    return errs

def _validate_similar_bounds(graph: EntityGraph, max_similar: int) -> List[str]:
    errs: List[str] = []
    for slug, strain in graph.strains.items():
        similar = strain.similar_strain_slugs
        if len(similar) > max_similar:
            errs.append(f"strains/{slug}: {len(similar)} similar strains (max {max_similar})")
        if slug in similar:
            errs.append(f"strains/{slug}: lists itself as similar")
        for ref in similar:
            if ref not in graph.strains:
                errs.append(f"strains/{slug}: similar strain {ref} does not exist")
    return errs

def _validate_reason_present(graph: EntityGraph, check: Dict[str, Any]) -> List[str]:
    errs: List[str] = []
    for name in check.get("collections", []):
        for slug, node in _collection(graph, name).items():
            if not node.indexability_reason:
                errs.append(f"{name}/{slug}: no indexability reason")
    return errs
