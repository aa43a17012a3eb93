from .engine import load_contract, verify

__all__ = ["load_contract", "verify"]
