from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import yaml

from ..config import GraphConfig
from ..errors import ContractError
from ..graph import EntityGraph
from .validators import run_validators

DEFAULT_CONTRACT = Path(__file__).resolve().parent / "graph.yml"

def load_contract(path: Optional[Path] = None) -> dict:
    contract_path = Path(path) if path else DEFAULT_CONTRACT
    if not contract_path.exists():
        raise ContractError(f"contract file not found: {contract_path}")
    try:
        spec = yaml.safe_load(contract_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ContractError(f"contract {contract_path} is not valid YAML: {e}")
    return spec or {}

def verify(graph: EntityGraph, config: Optional[GraphConfig] = None, contract: Optional[Path] = None) -> List[str]:
    """Check a finished graph against its contract. Returns error strings; empty means OK."""
    cfg = config or GraphConfig()
    spec = load_contract(contract)
    try:
        return run_validators(spec, graph, top_n=cfg.similarity.top_n)
    except (KeyError, ValueError) as e:
        raise ContractError(f"malformed contract check: {e}")
